"""S3 compatible storage for accommodation gallery images."""

from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass

import boto3  # type: ignore
from botocore.client import Config as BotoConfig  # type: ignore
from botocore.exceptions import BotoCoreError, ClientError  # type: ignore
from PIL import Image, UnidentifiedImageError  # type: ignore

from django.conf import settings  # type: ignore
from django.core.files.base import ContentFile  # type: ignore
from django.core.files.storage import Storage  # type: ignore
from django.urls import reverse  # type: ignore

from shared.domain.exceptions import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_FORMATS = {
    "JPEG": ("jpg", "image/jpeg"),
    "PNG": ("png", "image/png"),
    "WEBP": ("webp", "image/webp"),
}

MISSING_KEY_CODES = ("NoSuchKey", "404", "NotFound")


@dataclass(frozen=True)
class ImageInfo:
    extension: str
    content_type: str
    width: int
    height: int


def validate_image(file_obj, max_size: int | None = None) -> ImageInfo:
    """Reject oversized files and anything Pillow cannot read as JPEG/PNG/WEBP."""

    max_size = max_size or settings.IMAGE_MAX_SIZE
    size = getattr(file_obj, "size", None)
    if size is not None and size > max_size:
        raise ValidationError(f"File too large. Maximum is {max_size / 1024 / 1024:.1f} MB")

    try:
        file_obj.seek(0)
        img = Image.open(file_obj)
        img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise ValidationError(f"Invalid image: {exc}") from exc
    finally:
        file_obj.seek(0)

    if img.format not in ALLOWED_FORMATS:
        raise ValidationError(f"Unsupported image format: {img.format}")
    extension, content_type = ALLOWED_FORMATS[img.format]
    return ImageInfo(extension, content_type, img.width, img.height)


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


def image_file_url(key: str) -> str:
    """Public URL of a stored image, served by the image file endpoint."""

    return reverse("image-file", kwargs={"key": key})


class S3ImageStorage(Storage):
    """Gallery blobs in an S3 compatible bucket (AWS, MinIO, R2)."""

    def __init__(self, **options):
        self.bucket_name = options.get("bucket_name", settings.S3_BUCKET_NAME)
        self.s3_client = boto3.client(
            "s3",
            endpoint_url=options.get("endpoint_url", settings.S3_ENDPOINT_URL) or None,
            aws_access_key_id=options.get("access_key", settings.S3_ACCESS_KEY) or None,
            aws_secret_access_key=options.get("secret_key", settings.S3_SECRET_KEY) or None,
            region_name=options.get("region", settings.S3_REGION),
            config=BotoConfig(
                signature_version="s3v4",
                s3={"addressing_style": options.get("addressing_style", settings.S3_ADDRESSING_STYLE)},
            ),
        )

    def _save(self, name, content):
        content.seek(0)
        content_type = (
            getattr(content, "content_type", None)
            or mimetypes.guess_type(name)[0]
            or "application/octet-stream"
        )
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=name,
                Body=content.read(),
                ContentType=content_type,
                CacheControl="public, max-age=31536000",
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("S3 upload failed for %s: %s", name, e)
            raise
        logger.info("Uploaded image: %s", name)
        return name

    def _open(self, name, mode="rb"):
        try:
            obj = self.s3_client.get_object(Bucket=self.bucket_name, Key=name)
        except ClientError as e:
            if _error_code(e) in MISSING_KEY_CODES:
                raise FileNotFoundError(name) from e
            raise
        return ContentFile(obj["Body"].read(), name=name)

    def delete(self, name):
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=name)
            logger.info("Deleted image: %s", name)
        except (BotoCoreError, ClientError) as e:
            logger.error("Error deleting image %s: %s", name, e)

    def exists(self, name):
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=name)
            return True
        except ClientError as e:
            if _error_code(e) in MISSING_KEY_CODES:
                return False
            raise

    def size(self, name):
        head = self.s3_client.head_object(Bucket=self.bucket_name, Key=name)
        return head["ContentLength"]

    def url(self, name):
        return image_file_url(name)
