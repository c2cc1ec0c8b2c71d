from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password

from .models import User
from ..core.enums import Roles


class RegisterUserSerializer(serializers.ModelSerializer):
    """
    Register user serializer.

    Password is accepted separately and validated.
    Owners start unapproved, an admin has to approve them.
    """
    password = serializers.CharField(write_only=True, min_length=8)
    password2 = serializers.CharField(write_only=True)
    role = serializers.ChoiceField(choices=Roles.choices, required=True)

    class Meta:
        model = User
        fields = ("email", "username", "first_name", "last_name", "password", "password2", "role",
                  "nickname", "phone")

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("User with this email already exists.")
        return value

    def validate(self, attrs):
        if attrs["password"] != attrs["password2"]:
            raise serializers.ValidationError({"password": "Passwords do not match."})
        validate_password(attrs["password"])
        # Self-registration: only renters/owners possible
        if attrs["role"] not in {Roles.RENTER, Roles.OWNER}:
            raise serializers.ValidationError({"role": "This role cannot be set during self-registration."})
        return attrs

    def create(self, validated):
        validated.pop("password2")
        pwd = validated.pop("password")
        user = User(**validated)
        user.is_approved = user.role != Roles.OWNER
        user.set_password(pwd)
        user.save()
        return user


class UserLoggedInSerializer(serializers.ModelSerializer):
    """
    Current user profile for /user/me/.
    """
    class Meta:
        model = User
        fields = ("id", "email", "username", "first_name", "last_name", "role", "nickname", "phone",
                  "is_approved")
        read_only_fields = ("id", "email", "role", "is_approved")


class UserAdminSerializer(serializers.ModelSerializer):
    listings_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = User
        fields = ("id", "email", "username", "first_name", "last_name", "role", "is_approved",
                  "is_active", "date_joined", "listings_count")
        read_only_fields = fields
