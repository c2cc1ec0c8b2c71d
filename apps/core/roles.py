from .enums import Roles

def is_admin(user):
    return bool(user and user.is_authenticated) and (user.is_superuser or getattr(user, "is_staff", False)
            or getattr(user, "role", "") == Roles.ADMIN)

def is_renter(user):
    return bool(user and user.is_authenticated) and getattr(user, "role", "") == Roles.RENTER

def is_owner(user):
    return bool(user and user.is_authenticated) and getattr(user, "role", "") == Roles.OWNER

def is_approved_owner(user):
    return is_owner(user) and bool(getattr(user, "is_approved", False))
