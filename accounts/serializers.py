"""
Request schemas and public shapes for the auth endpoints.

Wire format follows what the SPA consumes: `_id` for identifiers and
camelCase timestamps. Password hashes are never part of any output shape.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

from core.serializers import StrictFieldsMixin

User = get_user_model()


class UserPublicSerializer(serializers.ModelSerializer):
    """Minimal public shape of a user (also embedded as an issue's `createdBy`)."""
    _id = serializers.IntegerField(source="pk", read_only=True)

    class Meta:
        model = User
        fields = ["_id", "email", "name"]
        read_only_fields = fields


class CurrentUserSerializer(UserPublicSerializer):
    """`/api/auth/me` shape: the public user plus the account creation time."""
    createdAt = serializers.DateTimeField(source="date_joined", read_only=True)

    class Meta(UserPublicSerializer.Meta):
        fields = ["_id", "email", "name", "createdAt"]
        read_only_fields = fields


class AuthResultSerializer(serializers.Serializer):
    """Register/login payload: public user fields flattened next to the token."""
    _id = serializers.IntegerField(source="user.pk")
    email = serializers.EmailField(source="user.email")
    name = serializers.CharField(source="user.name")
    token = serializers.CharField()


class RegisterSerializer(StrictFieldsMixin, serializers.Serializer):
    email = serializers.EmailField(max_length=254)
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    name = serializers.CharField(max_length=100, required=False, allow_blank=True)


class LoginSerializer(StrictFieldsMixin, serializers.Serializer):
    email = serializers.CharField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)
