"""API views for the booking domain."""

from __future__ import annotations

import logging

from django.utils import timezone  # type: ignore
from rest_framework import generics, permissions, status, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import HasAccommodationAccess, IsTeamOrAdmin
from shared.domain.exceptions import AuthorizationError

from . import services
from .filters import BookingFilterSet
from .models import Booking
from .serializers import (
    AvailabilityQuerySerializer,
    BookingCreateSerializer,
    BookingRequestSerializer,
    BookingSerializer,
    BookingWriteSerializer,
    DateRangeSerializer,
    TeamBookingSerializer,
)

logger = logging.getLogger(__name__)


def scope_to_identity(queryset, identity):
    """Limit ``queryset`` to the caller's accommodations. Admins see everything."""

    if identity.is_admin:
        return queryset
    return queryset.filter(accommodation_id__in=identity.allowed_accommodation_ids)


class BookingViewSet(viewsets.ModelViewSet):
    """Create and manage bookings.

    Team members are confined to their accommodations: the scope is applied
    before any caller supplied filter, so asking for another accommodation
    yields an empty list and unknown ids answer 404.
    """

    queryset = Booking.objects.select_related("accommodation").all()
    permission_classes = [IsTeamOrAdmin, HasAccommodationAccess]
    filterset_class = BookingFilterSet

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        if self.action in {"update", "partial_update"}:
            return BookingWriteSerializer
        return BookingSerializer

    def get_queryset(self):  # type: ignore
        qs = scope_to_identity(super().get_queryset(), self.request.user)
        return qs.order_by("-check_in", "-id")

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        if not request.user.can_access(data["accommodation"].pk):
            raise AuthorizationError("No access to this accommodation")
        booking = services.create_booking(**data)
        read_serializer = BookingSerializer(booking, context=self.get_serializer_context())
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    def update(self, request, *args, **kwargs):  # type: ignore
        # PUT and PATCH both carry partial updates.
        booking = self.get_object()
        serializer = self.get_serializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        patch = services.BookingPatch.from_data(serializer.validated_data)
        booking = services.update_booking(booking, patch)
        return Response(BookingSerializer(booking, context=self.get_serializer_context()).data)

    def perform_destroy(self, instance):  # type: ignore
        services.delete_booking(instance)


class TeamBookingsView(generics.ListAPIView):
    """Upcoming confirmed stays for the team portal, soonest first."""

    serializer_class = TeamBookingSerializer
    permission_classes = [IsTeamOrAdmin]
    filterset_class = None
    filter_backends: list = []

    def get_queryset(self):  # type: ignore
        today = timezone.localdate()
        qs = Booking.objects.select_related("accommodation").filter(
            status=Booking.Status.CONFIRMED,
            check_out__gte=today,
        )
        return scope_to_identity(qs, self.request.user).order_by("check_in", "id")

    def list(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return Response({"bookings": serializer.data})


class CheckAvailabilityView(APIView):
    """Public availability check used by the website's booking form.

    ``bookedDates`` always lists every occupied range of the accommodation;
    ``available`` is only meaningful when both dates are sent.
    """

    permission_classes = [permissions.AllowAny]

    def post(self, request):  # type: ignore
        serializer = AvailabilityQuerySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        accommodation = data["accommodation_obj"]
        check_in = data.get("checkIn")
        check_out = data.get("checkOut")

        available = True
        conflicts = []
        if check_in and check_out:
            result = services.check_availability(accommodation.pk, check_in, check_out)
            available = result.available
            conflicts = result.conflicts

        booked = services.occupied_ranges(accommodation.pk)
        return Response(
            {
                "accommodation": accommodation.name,
                "accommodationId": accommodation.pk,
                "checkIn": check_in,
                "checkOut": check_out,
                "available": available,
                "conflicts": DateRangeSerializer(conflicts, many=True).data,
                "bookedDates": DateRangeSerializer(booked, many=True).data,
            }
        )


class BookingRequestView(APIView):
    """Public booking form. Creates a pending booking after the conflict check."""

    permission_classes = [permissions.AllowAny]

    def post(self, request):  # type: ignore
        serializer = BookingRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = services.create_booking(status=Booking.Status.PENDING, **serializer.validated_data)
        return Response(
            {"success": True, "id": booking.pk, "status": booking.status},
            status=status.HTTP_201_CREATED,
        )
