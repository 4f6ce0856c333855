"""Course and event image uploads through presigned S3 URLs."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Protocol

from botocore.exceptions import ClientError

from backoffice.models.validation import new_document_id, utc_now_rfc3339
from backoffice.repositories.base import DynamoDbDocumentTable

from backend.http import Request, binary_response, error_response, json_response

logger = logging.getLogger(__name__)

UPLOAD_URL_EXPIRY_SECONDS = 900
MAX_IMAGE_BYTES = 10 * 1024 * 1024
IMAGE_CACHE_CONTROL = "public, max-age=31536000"
_WHITESPACE = re.compile(r"\s+")
_MISSING_OBJECT_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


class ImageUploadError(ValueError):
    """Raised when image upload requests violate API constraints."""


class S3ImageClient(Protocol):
    """The boto3 S3 client methods used by this module."""

    def generate_presigned_url(
        self,
        ClientMethod: str,  # noqa: N803 - boto3 naming
        Params: Dict[str, str],  # noqa: N803 - boto3 naming
        ExpiresIn: int,  # noqa: N803 - boto3 naming
        HttpMethod: str | None = ...,  # noqa: N803 - boto3 naming
    ) -> str: ...

    def get_object(self, Bucket: str, Key: str) -> Dict[str, Any]: ...  # noqa: N803


@dataclass(frozen=True)
class ImageUpload:
    """Validated upload request payload."""

    filename: str
    content_type: str
    content_length_bytes: int | None = None


@dataclass(frozen=True)
class StoredImage:
    content_type: str
    data: bytes


def _require_non_empty_string(payload: Mapping[str, Any], field: str) -> str:
    value = payload.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ImageUploadError(f"'{field}' must be a non-empty string")
    return value.strip()


def parse_image_upload(payload: Mapping[str, Any]) -> ImageUpload:
    filename = _require_non_empty_string(payload, "filename")
    content_type = _require_non_empty_string(payload, "contentType").lower()
    content_length = payload.get("contentLengthBytes")

    if not content_type.startswith("image/"):
        raise ImageUploadError("Only image files are allowed")

    basename = Path(filename).name
    if basename != filename or basename in {"", ".", ".."}:
        raise ImageUploadError("'filename' must be a bare file name")

    if content_length is not None:
        if isinstance(content_length, bool) or not isinstance(content_length, int) or content_length <= 0:
            raise ImageUploadError("'contentLengthBytes' must be a positive integer")
        if content_length > MAX_IMAGE_BYTES:
            raise ImageUploadError("image exceeds 10MB limit")

    return ImageUpload(
        filename=_WHITESPACE.sub("-", basename),
        content_type=content_type,
        content_length_bytes=content_length,
    )


def build_s3_key(upload: ImageUpload, image_id: str) -> str:
    return f"images/{image_id}/{upload.filename}"


def create_default_s3_client() -> S3ImageClient:
    """Create boto3 S3 client lazily to keep test dependencies small."""
    import boto3

    return boto3.client("s3")


class ImageService:
    """Issues presigned uploads and serves stored image bytes by id."""

    def __init__(
        self,
        table: Any,
        *,
        bucket: str | None,
        s3_client: S3ImageClient,
        expires_in_seconds: int = UPLOAD_URL_EXPIRY_SECONDS,
        id_factory: Callable[[], str] = new_document_id,
        clock: Callable[[], str] = utc_now_rfc3339,
    ) -> None:
        self._documents = DynamoDbDocumentTable(table, label="image")
        self._bucket = bucket
        self._s3 = s3_client
        self._expires_in_seconds = expires_in_seconds
        self._id_factory = id_factory
        self._clock = clock

    @property
    def bucket(self) -> str | None:
        return self._bucket

    def create_upload(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """Validate request, record image metadata and produce a presigned S3 URL."""
        if not self._bucket:
            raise ValueError("images bucket is required")

        upload = parse_image_upload(payload)
        image_id = self._id_factory()
        key = build_s3_key(upload, image_id)

        upload_url = self._s3.generate_presigned_url(
            "put_object",
            Params={
                "Bucket": self._bucket,
                "Key": key,
                "ContentType": upload.content_type,
            },
            ExpiresIn=self._expires_in_seconds,
            HttpMethod="PUT",
        )
        self._documents.put(
            {
                "id": image_id,
                "filename": upload.filename,
                "contentType": upload.content_type,
                "key": key,
                "createdAt": self._clock(),
            }
        )
        logger.info("Issued image upload %s", image_id)

        return {
            "imageId": image_id,
            "url": f"/images/{image_id}",
            "key": key,
            "uploadUrl": upload_url,
            "expiresInSeconds": self._expires_in_seconds,
            "contentType": upload.content_type,
        }

    def fetch(self, image_id: str) -> StoredImage | None:
        """Load image bytes; None when the id or the uploaded object is unknown."""
        record = self._documents.get(image_id)
        if record is None or not self._bucket:
            return None

        key = record.get("key")
        if not isinstance(key, str) or not key:
            return None

        try:
            response = self._s3.get_object(Bucket=self._bucket, Key=key)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code")
            if code in _MISSING_OBJECT_CODES:
                return None
            raise

        body = response["Body"].read()
        content_type = response.get("ContentType") or record.get("contentType") or "application/octet-stream"
        return StoredImage(content_type=content_type, data=body)


def handle_upload(app: Any, request: Request) -> Dict[str, Any]:
    if app.images is None or not app.images.bucket:
        return error_response(500, "server misconfiguration: IMAGES_BUCKET missing")
    return json_response(200, app.images.create_upload(request.json_body()))


def handle_image(app: Any, request: Request, image_id: str) -> Dict[str, Any]:
    image = app.images.fetch(image_id) if app.images is not None else None
    if image is None:
        return error_response(404, "Image not found")
    return binary_response(
        200,
        image.data,
        content_type=image.content_type,
        headers={"Cache-Control": IMAGE_CACHE_CONTROL},
    )
