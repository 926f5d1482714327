"""Accommodation, gallery and blocked-period API views."""

from __future__ import annotations

import logging
import mimetypes

from botocore.exceptions import BotoCoreError, ClientError  # type: ignore
from django.http import FileResponse  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.generics import get_object_or_404  # type: ignore
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import IsAdminOrReadOnly, IsAdminOrTeamReadOnly
from shared.domain.exceptions import DependencyError, NotFoundError, ValidationError

from . import services
from .filters import BlockedDateFilterSet
from .models import Accommodation, AccommodationImage, BlockedDate
from .serializers import (
    AccommodationImageSerializer,
    AccommodationSerializer,
    AccommodationUpdateSerializer,
    BlockedDateSerializer,
    ImageReorderSerializer,
    ImageUpdateSerializer,
    ImageUploadSerializer,
)

logger = logging.getLogger(__name__)


class AccommodationView(APIView):
    """Public catalogue; administrators edit descriptions by id in the body."""

    permission_classes = [IsAdminOrReadOnly]

    def get(self, request):  # type: ignore
        accommodations = Accommodation.objects.prefetch_related("images").order_by("id")
        serializer = AccommodationSerializer(accommodations, many=True)
        return Response({"accommodations": serializer.data})

    def put(self, request):  # type: ignore
        accommodation_id = request.data.get("id")
        if not accommodation_id:
            raise ValidationError("Accommodation id is required")
        if not str(accommodation_id).isdigit():
            raise ValidationError("Accommodation id must be a number")
        accommodation = get_object_or_404(Accommodation, pk=accommodation_id)
        serializer = AccommodationUpdateSerializer(accommodation, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info("Updated accommodation %s", accommodation.pk)
        accommodation = Accommodation.objects.prefetch_related("images").get(pk=accommodation.pk)
        return Response({"success": True, "accommodation": AccommodationSerializer(accommodation).data})


class ImageView(APIView):
    """Gallery listing (public) and management (administrators)."""

    permission_classes = [IsAdminOrReadOnly]
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def get(self, request):  # type: ignore
        images = AccommodationImage.objects.order_by("accommodation_id", "display_order", "id")
        accommodation_id = request.query_params.get("accommodation_id")
        if accommodation_id:
            if not accommodation_id.isdigit():
                raise ValidationError("accommodation_id must be a number")
            images = images.filter(accommodation_id=accommodation_id)
        return Response({"images": AccommodationImageSerializer(images, many=True).data})

    def post(self, request):  # type: ignore
        serializer = ImageUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        image = services.upload_image(
            serializer.validated_data["accommodation_id"],
            serializer.validated_data["file"],
            caption=serializer.validated_data["caption"],
        )
        return Response(
            {"success": True, "image": AccommodationImageSerializer(image).data},
            status=status.HTTP_201_CREATED,
        )

    def put(self, request):  # type: ignore
        if "reorder" in request.data:
            serializer = ImageReorderSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            services.reorder_images(item["id"] for item in serializer.validated_data["reorder"])
            return Response({"success": True, "message": "Images reordered"})

        serializer = ImageUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        image = get_object_or_404(AccommodationImage, pk=data.pop("id"))
        image = services.update_image(image, **data)
        return Response({"success": True, "image": AccommodationImageSerializer(image).data})

    def delete(self, request):  # type: ignore
        image_id = request.query_params.get("id")
        if not image_id:
            raise ValidationError("Image id is required")
        if not image_id.isdigit():
            raise ValidationError("Image id must be a number")
        image = AccommodationImage.objects.filter(pk=image_id).first()
        if image is None:
            raise NotFoundError("Image not found")
        services.delete_image(image)
        return Response({"success": True})


class ImageFileView(APIView):
    """Streams a stored gallery blob."""

    permission_classes = [permissions.AllowAny]
    authentication_classes: list = []

    def get(self, request, key: str):  # type: ignore
        if ".." in key.split("/"):
            raise NotFoundError("Image not found")
        storage = services.image_storage()
        try:
            if not storage.exists(key):
                raise NotFoundError("Image not found")
            blob = storage.open(key, "rb")
        except FileNotFoundError as exc:
            raise NotFoundError("Image not found") from exc
        except (BotoCoreError, ClientError) as exc:
            logger.error("Image storage read failed for %s: %s", key, exc)
            raise DependencyError("Image storage is unavailable") from exc
        content_type = mimetypes.guess_type(key)[0] or "application/octet-stream"
        response = FileResponse(blob, content_type=content_type)
        response["Cache-Control"] = "public, max-age=31536000"
        return response


class BlockedDateViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Blocked periods. Team members see their own accommodations; only
    administrators create or remove blocks. Blocks never check bookings."""

    serializer_class = BlockedDateSerializer
    permission_classes = [IsAdminOrTeamReadOnly]
    filterset_class = BlockedDateFilterSet
    queryset = BlockedDate.objects.select_related("accommodation").all()

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        identity = self.request.user
        if not identity.is_admin:
            qs = qs.filter(accommodation_id__in=identity.allowed_accommodation_ids)
        return qs.order_by("start_date", "id")

    def perform_create(self, serializer):  # type: ignore
        blocked = serializer.save()
        logger.info(
            "Blocked accommodation %s from %s to %s",
            blocked.accommodation_id,
            blocked.start_date,
            blocked.end_date,
        )

    def perform_destroy(self, instance):  # type: ignore
        logger.info("Unblocked period %s", instance.pk)
        instance.delete()
