"""Serializers for accommodations, their galleries and blocked periods."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Accommodation, AccommodationImage, BlockedDate


class AccommodationImageSerializer(serializers.ModelSerializer):
    accommodation_id = serializers.ReadOnlyField()

    class Meta:
        model = AccommodationImage
        fields = [
            "id",
            "accommodation_id",
            "image_url",
            "display_order",
            "caption",
            "is_primary",
            "created_at",
        ]
        read_only_fields = ["id", "image_url", "display_order", "caption", "is_primary", "created_at"]


class AccommodationSerializer(serializers.ModelSerializer):
    """Public view of an accommodation with its ordered gallery."""

    images = AccommodationImageSerializer(many=True, read_only=True)
    primary_image = serializers.ReadOnlyField(source="primary_image_url")

    class Meta:
        model = Accommodation
        fields = [
            "id",
            "name",
            "description_pt",
            "description_en",
            "description_fr",
            "description_de",
            "description_es",
            "max_guests",
            "amenities",
            "image_url",
            "primary_image",
            "images",
            "created_at",
            "updated_at",
        ]


class AccommodationUpdateSerializer(serializers.ModelSerializer):
    """Partial update of the descriptive fields."""

    amenities = serializers.ListField(child=serializers.CharField(), required=False)

    class Meta:
        model = Accommodation
        fields = [
            "name",
            "description_pt",
            "description_en",
            "description_fr",
            "description_de",
            "description_es",
            "max_guests",
            "amenities",
        ]

    def validate(self, attrs):  # type: ignore
        if not attrs:
            raise serializers.ValidationError("No fields to update")
        return attrs


class ImageUploadSerializer(serializers.Serializer):
    # Pillow validation happens in the upload service.
    file = serializers.FileField()
    accommodation_id = serializers.PrimaryKeyRelatedField(queryset=Accommodation.objects.all())
    caption = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)


class ImageUpdateSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    display_order = serializers.IntegerField(required=False, min_value=0)
    caption = serializers.CharField(required=False, allow_blank=True, max_length=255)
    is_primary = serializers.BooleanField(required=False)


class ImageReorderItemSerializer(serializers.Serializer):
    id = serializers.IntegerField()


class ImageReorderSerializer(serializers.Serializer):
    reorder = ImageReorderItemSerializer(many=True, allow_empty=False)


class BlockedDateSerializer(serializers.ModelSerializer):
    accommodation_id = serializers.PrimaryKeyRelatedField(
        source="accommodation",
        queryset=Accommodation.objects.all(),
    )
    reason = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)

    class Meta:
        model = BlockedDate
        fields = [
            "id",
            "accommodation_id",
            "start_date",
            "end_date",
            "reason",
            "created_at",
        ]
        read_only_fields = ["id", "created_at"]

    def validate(self, attrs):  # type: ignore
        if attrs["end_date"] <= attrs["start_date"]:
            raise serializers.ValidationError("End date must be after start date.")
        return attrs
