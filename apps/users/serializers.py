"""Serializers for team account management."""

from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model  # type: ignore
from django.db import IntegrityError, transaction  # type: ignore
from rest_framework import serializers  # type: ignore

from apps.accommodations.models import Accommodation
from shared.domain.exceptions import ConflictError

User = get_user_model()

USERNAME_TAKEN = "Username already exists"


class TeamUserSerializer(serializers.ModelSerializer):
    """Team member as seen by administrators. Passwords are write-only."""

    password = serializers.CharField(write_only=True, required=False, trim_whitespace=False)
    allowed_accommodations = serializers.PrimaryKeyRelatedField(
        many=True,
        queryset=Accommodation.objects.all(),
        required=False,
    )

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "password",
            "name",
            "allowed_accommodations",
            "created_at",
        ]
        read_only_fields = ["id", "created_at"]
        extra_kwargs = {
            # Uniqueness is reported as a conflict, not a validation error.
            "username": {"validators": []},
            "name": {"required": True, "allow_blank": False},
        }

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        if self.instance is None and not attrs.get("password"):
            raise serializers.ValidationError({"password": "This field is required."})
        return attrs

    def _ensure_username_free(self, username: str) -> None:
        qs = User.objects.filter(username=username)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise ConflictError(USERNAME_TAKEN)

    @transaction.atomic
    def create(self, validated_data: dict[str, Any]):  # type: ignore
        accommodations = validated_data.pop("allowed_accommodations", [])
        password = validated_data.pop("password")
        self._ensure_username_free(validated_data["username"])
        user = User(role=User.RoleChoices.TEAM, **validated_data)
        user.set_password(password)
        try:
            with transaction.atomic():
                user.save()
        except IntegrityError as exc:
            raise ConflictError(USERNAME_TAKEN) from exc
        user.allowed_accommodations.set(accommodations)
        return user

    @transaction.atomic
    def update(self, instance, validated_data: dict[str, Any]):  # type: ignore
        accommodations = validated_data.pop("allowed_accommodations", None)
        password = validated_data.pop("password", None)
        if "username" in validated_data:
            self._ensure_username_free(validated_data["username"])
        for field, value in validated_data.items():
            setattr(instance, field, value)
        if password:
            instance.set_password(password)
        try:
            with transaction.atomic():
                instance.save()
        except IntegrityError as exc:
            raise ConflictError(USERNAME_TAKEN) from exc
        if accommodations is not None:
            instance.allowed_accommodations.set(accommodations)
        return instance


class TeamProfileSerializer(serializers.ModelSerializer):
    """What a logged-in team member learns about themselves."""

    allowed_accommodations = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "username", "name", "allowed_accommodations"]

    def get_allowed_accommodations(self, obj) -> list[int]:  # type: ignore
        return obj.allowed_accommodation_ids()
