"""Serializers for the admin and team login flows."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField(trim_whitespace=True)
    password = serializers.CharField(write_only=True, trim_whitespace=False)
