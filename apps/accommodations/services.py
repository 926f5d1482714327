"""Gallery workflows: upload, reorder, primary selection and removal."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Iterable

from botocore.exceptions import BotoCoreError, ClientError  # type: ignore
from django.core.files.storage import storages  # type: ignore
from django.db import transaction  # type: ignore
from django.db.models import Max  # type: ignore

from shared.domain.exceptions import DependencyError, ValidationError

from .models import Accommodation, AccommodationImage
from .storage import image_file_url, validate_image

logger = logging.getLogger(__name__)

UNSET: Any = object()


def image_storage():
    return storages["images"]


def upload_image(accommodation: Accommodation, file_obj, caption: str = "") -> AccommodationImage:
    """Store the blob and append it to the gallery.

    The first image of an accommodation becomes its primary image.
    """

    info = validate_image(file_obj)
    key = f"accommodations/{accommodation.pk}/{uuid.uuid4().hex}.{info.extension}"
    file_obj.content_type = info.content_type

    storage = image_storage()
    try:
        key = storage.save(key, file_obj)
    except (BotoCoreError, ClientError, OSError) as exc:
        raise DependencyError("Image storage is unavailable") from exc

    try:
        with transaction.atomic():
            Accommodation.objects.select_for_update().get(pk=accommodation.pk)
            siblings = AccommodationImage.objects.filter(accommodation=accommodation)
            max_order = siblings.aggregate(max_order=Max("display_order"))["max_order"]
            image = AccommodationImage.objects.create(
                accommodation=accommodation,
                image_url=image_file_url(key),
                storage_key=key,
                display_order=0 if max_order is None else max_order + 1,
                caption=caption,
                is_primary=not siblings.exists(),
            )
    except Exception:
        storage.delete(key)
        raise

    logger.info("Added image %s to accommodation %s", image.pk, accommodation.pk)
    return image


@transaction.atomic
def update_image(
    image: AccommodationImage,
    *,
    display_order: Any = UNSET,
    caption: Any = UNSET,
    is_primary: Any = UNSET,
) -> AccommodationImage:
    """Update one image. Making it primary clears the flag on its siblings."""

    update_fields = []
    if display_order is not UNSET:
        image.display_order = display_order
        update_fields.append("display_order")
    if caption is not UNSET:
        image.caption = caption
        update_fields.append("caption")
    if is_primary is not UNSET:
        if is_primary:
            AccommodationImage.objects.filter(
                accommodation_id=image.accommodation_id,
                is_primary=True,
            ).exclude(pk=image.pk).update(is_primary=False)
        image.is_primary = bool(is_primary)
        update_fields.append("is_primary")

    if not update_fields:
        raise ValidationError("No fields to update")
    image.save(update_fields=update_fields)
    return image


@transaction.atomic
def reorder_images(image_ids: Iterable[int]) -> None:
    """Set display_order to each image's position in ``image_ids``, all or nothing."""

    image_ids = list(image_ids)
    known = set(AccommodationImage.objects.filter(pk__in=image_ids).values_list("pk", flat=True))
    missing = [image_id for image_id in image_ids if image_id not in known]
    if missing:
        raise ValidationError(f"Unknown image ids: {', '.join(str(i) for i in missing)}")

    for index, image_id in enumerate(image_ids):
        AccommodationImage.objects.filter(pk=image_id).update(display_order=index)


def delete_image(image: AccommodationImage) -> None:
    """Remove the image and its blob, promoting the next image if it was primary."""

    key = image.storage_key
    with transaction.atomic():
        accommodation_id = image.accommodation_id
        was_primary = image.is_primary
        image.delete()
        if was_primary:
            successor = (
                AccommodationImage.objects.filter(accommodation_id=accommodation_id)
                .order_by("display_order", "id")
                .first()
            )
            if successor is not None:
                successor.is_primary = True
                successor.save(update_fields=["is_primary"])
        if key:
            transaction.on_commit(lambda: image_storage().delete(key))
    logger.info("Removed image %s from accommodation %s", key or "(external)", accommodation_id)
