"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.accommodations.models import Accommodation

from .models import Booking


def _money_field():
    return serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        required=False,
        allow_null=True,
        min_value=0,
    )


class BookingSerializer(serializers.ModelSerializer):
    """Full booking including its financial breakdown."""

    accommodation_id = serializers.ReadOnlyField(source="accommodation.id")
    accommodation_name = serializers.ReadOnlyField(source="accommodation.name")
    nights = serializers.ReadOnlyField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "accommodation_id",
            "accommodation_name",
            "check_in",
            "check_out",
            "nights",
            "guests",
            "nationality",
            "primary_name",
            "additional_names",
            "notes",
            "status",
            "gross_value",
            "municipal_tax",
            "commission",
            "bank_fee",
            "vat",
            "platform",
            "value_net_of_commissions",
            "value_net_of_vat",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BookingWriteSerializer(serializers.Serializer):
    """Fields a caller may set. Net values are always derived server-side."""

    check_in = serializers.DateField()
    check_out = serializers.DateField()
    guests = serializers.IntegerField(min_value=1, max_value=100)
    primary_name = serializers.CharField(max_length=255)
    nationality = serializers.CharField(max_length=50, required=False, allow_blank=True)
    additional_names = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=Booking.Status.choices, required=False)
    gross_value = _money_field()
    municipal_tax = _money_field()
    commission = _money_field()
    bank_fee = _money_field()
    vat = _money_field()
    platform = serializers.CharField(max_length=50, required=False, allow_blank=True)

    def validate(self, attrs):  # type: ignore
        check_in = attrs.get("check_in")
        check_out = attrs.get("check_out")
        if check_in and check_out and check_out <= check_in:
            raise serializers.ValidationError("Check-out must be after check-in.")
        return attrs


class BookingCreateSerializer(BookingWriteSerializer):
    accommodation_id = serializers.PrimaryKeyRelatedField(
        source="accommodation",
        queryset=Accommodation.objects.all(),
    )


class BookingRequestSerializer(serializers.Serializer):
    """Public booking form. Always lands as a pending booking."""

    accommodation_id = serializers.PrimaryKeyRelatedField(
        source="accommodation",
        queryset=Accommodation.objects.all(),
    )
    check_in = serializers.DateField()
    check_out = serializers.DateField()
    guests = serializers.IntegerField(min_value=1)
    primary_name = serializers.CharField(max_length=255)
    nationality = serializers.CharField(max_length=50, required=False, allow_blank=True)
    additional_names = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):  # type: ignore
        if attrs["check_out"] <= attrs["check_in"]:
            raise serializers.ValidationError("Check-out must be after check-in.")
        accommodation = attrs["accommodation"]
        if attrs["guests"] > accommodation.max_guests:
            raise serializers.ValidationError(
                {"guests": f"{accommodation.name} hosts at most {accommodation.max_guests} guests."}
            )
        return attrs


class AvailabilityQuerySerializer(serializers.Serializer):
    """Body of the public availability check (camelCase, as the website sends it)."""

    accommodationName = serializers.CharField(required=False, allow_blank=True)
    accommodation = serializers.CharField(required=False, allow_blank=True)
    accommodationId = serializers.IntegerField(required=False)
    checkIn = serializers.DateField(required=False, allow_null=True)
    checkOut = serializers.DateField(required=False, allow_null=True)

    def validate(self, attrs):  # type: ignore
        accommodation = None
        if attrs.get("accommodationId"):
            accommodation = Accommodation.objects.filter(pk=attrs["accommodationId"]).first()
        else:
            name = (attrs.get("accommodationName") or attrs.get("accommodation") or "").strip()
            if name:
                accommodation = Accommodation.objects.filter(name__iexact=name).first()
        if accommodation is None:
            raise serializers.ValidationError("Invalid accommodation")

        check_in = attrs.get("checkIn")
        check_out = attrs.get("checkOut")
        if check_in and check_out and check_out <= check_in:
            raise serializers.ValidationError("checkOut must be after checkIn")
        attrs["accommodation_obj"] = accommodation
        return attrs


class DateRangeSerializer(serializers.Serializer):
    checkIn = serializers.DateField(source="start_date")
    checkOut = serializers.DateField(source="end_date")


class TeamBookingSerializer(serializers.ModelSerializer):
    """Operational view for the team portal, without financial data."""

    accommodation_id = serializers.ReadOnlyField(source="accommodation.id")
    accommodation_name = serializers.ReadOnlyField(source="accommodation.name")

    class Meta:
        model = Booking
        fields = [
            "id",
            "accommodation_id",
            "accommodation_name",
            "check_in",
            "check_out",
            "guests",
            "nationality",
            "primary_name",
            "additional_names",
            "notes",
            "status",
        ]
        read_only_fields = fields
