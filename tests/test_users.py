import pytest
from django.core.management import call_command
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from apps.core.enums import Roles
from rental_api import DEFAULT_PASSWORD as PASSWORD, RentalApi, results

pytestmark = pytest.mark.django_db

User = get_user_model()


@pytest.fixture
def client_api():
    return RentalApi(client=APIClient())


def test_register_renter_sets_cookies(client_api):
    resp = client_api.register(Roles.RENTER.value, PASSWORD)

    assert resp.status_code == 201, resp.content
    assert resp.json()["user"]["is_approved"] is True
    assert {"access_token", "refresh_token"} <= set(resp.cookies)

    me = client_api.me()
    assert me.status_code == 200, me.content
    assert me.json()["role"] == Roles.RENTER


def test_register_owner_needs_approval(client_api, api_as, admin_user):
    resp = client_api.register(Roles.OWNER.value, PASSWORD)
    assert resp.status_code == 201, resp.content
    user_id = resp.json()["user"]["id"]
    assert resp.json()["user"]["is_approved"] is False

    assert client_api.create_listing().status_code == 403

    admin = api_as(admin_user)
    pending = results(admin.list_users(pending="true"))
    assert [user["id"] for user in pending] == [user_id]
    resp = admin.approve_owner(user_id)
    assert resp.status_code == 200, resp.content
    assert resp.json()["is_approved"] is True

    assert client_api.create_listing().status_code == 201


def test_register_as_admin_is_refused(client_api):
    resp = client_api.register(Roles.ADMIN.value, PASSWORD)
    assert resp.status_code == 400, resp.content
    assert not User.objects.exists()


def test_register_password_mismatch(client_api):
    resp = client_api.post("user/register/", {
        "email": "someone@example.com", "username": "someone", "first_name": "Some", "last_name": "One",
        "password": PASSWORD, "password2": PASSWORD + "x", "role": Roles.RENTER.value,
    })
    assert resp.status_code == 400, resp.content


def test_login_logout(client_api, renter):
    assert client_api.login(renter.email, "wrong-password").status_code == 401

    resp = client_api.login(renter.email, PASSWORD)
    assert resp.status_code == 200, resp.content
    assert resp.json() == {"id": renter.pk, "role": Roles.RENTER}
    assert client_api.me().json()["email"] == renter.email

    assert client_api.logout().status_code == 204
    assert client_api.me().status_code == 401


def test_me_update(api_as, renter):
    api = api_as(renter)
    resp = api.patch("user/me/", {"phone": "+49 30 1234567", "role": Roles.ADMIN.value})

    assert resp.status_code == 200, resp.content
    renter.refresh_from_db()
    assert renter.phone == "+49 30 1234567"
    assert renter.role == Roles.RENTER


def test_admin_user_list(api_as, admin_user, owner, renter, make_listing):
    make_listing(owner)
    make_listing(owner)

    assert api_as(owner).list_users().status_code == 403
    users = {user["id"]: user for user in results(api_as(admin_user).list_users(role=Roles.OWNER.value))}
    assert set(users) == {owner.pk}
    assert users[owner.pk]["listings_count"] == 2


def test_approve_owner_rejects_renter(api_as, admin_user, renter):
    assert api_as(admin_user).approve_owner(renter.pk).status_code == 400


def test_seed_users_command():
    call_command("seed_users")
    call_command("seed_users")

    assert User.objects.count() == 5
    admin = User.objects.get(email="admin@example.com")
    assert admin.is_superuser and admin.role == Roles.ADMIN
    assert all(User.objects.filter(role=Roles.OWNER).values_list("is_approved", flat=True))
