"""Logo storage on S3-compatible object storage, or local disk in development."""

import secrets
import time
import urllib.parse
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

import boto3
import structlog
from botocore.client import BaseClient
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from PIL import Image, UnidentifiedImageError

from invoicehub.app.core.errors import UpstreamFailureError
from invoicehub.app.core.settings import get_settings

LOGGER = structlog.get_logger(__name__)

SVG_CONTENT_TYPE = "image/svg+xml"
EXTENSIONS = {"image/png": "png", "image/jpeg": "jpg", SVG_CONTENT_TYPE: "svg"}


class LogoValidationError(ValueError):
    pass


@dataclass(frozen=True)
class StoredLogo:
    key: str
    url: str


def _is_local_mode() -> bool:
    return get_settings().storage_bucket.lower() == "local"


def _client() -> BaseClient:
    settings = get_settings()
    client_kwargs: dict[str, object] = {
        "config": Config(signature_version="s3v4"),
        "region_name": "auto",
    }
    if settings.storage_endpoint_url:
        client_kwargs["endpoint_url"] = settings.storage_endpoint_url
    if settings.storage_access_key and settings.storage_secret_key:
        client_kwargs["aws_access_key_id"] = settings.storage_access_key
        client_kwargs["aws_secret_access_key"] = settings.storage_secret_key
    return boto3.client("s3", **client_kwargs)


def validate_logo(content: bytes, content_type: str | None) -> None:
    settings = get_settings()
    if content_type not in settings.logo_content_types:
        raise LogoValidationError("Only PNG, JPG, and SVG files are allowed")
    if len(content) > settings.logo_max_bytes:
        raise LogoValidationError("File size must be less than 2MB")
    if not content:
        raise LogoValidationError("No file provided")
    if content_type == SVG_CONTENT_TYPE:
        return

    try:
        with Image.open(BytesIO(content)) as image:
            width, height = image.size
    except (UnidentifiedImageError, OSError) as exc:
        raise LogoValidationError("File is not a valid image") from exc

    if width > settings.logo_max_width or height > settings.logo_max_height:
        raise LogoValidationError(
            f"Image dimensions must be {settings.logo_max_width}x{settings.logo_max_height} pixels or smaller. "
            f"Current: {width}x{height}"
        )


def build_logo_key(owner_id: int, filename: str | None, content_type: str) -> str:
    extension = EXTENSIONS.get(content_type) or Path(filename or "").suffix.lstrip(".") or "bin"
    return f"logos/{owner_id}/{int(time.time() * 1000)}-{secrets.token_hex(8)}.{extension}"


def public_url(key: str) -> str:
    return f"{get_settings().storage_public_url.rstrip('/')}/{key}"


def extract_key_from_url(url: str) -> str | None:
    base = get_settings().storage_public_url.rstrip("/") + "/"
    if url.startswith(base):
        return url[len(base):]
    path = urllib.parse.urlparse(url).path.lstrip("/")
    return path or None


def upload_logo(owner_id: int, content: bytes, content_type: str, filename: str | None = None) -> StoredLogo:
    key = build_logo_key(owner_id, filename, content_type)
    settings = get_settings()

    if _is_local_mode():
        destination = Path(settings.local_storage_path) / key
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(content)
        LOGGER.info("logo_stored_locally", owner_id=owner_id, path=str(destination))
        return StoredLogo(key=key, url=public_url(key))

    try:
        _client().put_object(
            Bucket=settings.storage_bucket,
            Key=key,
            Body=content,
            ContentType=content_type,
            CacheControl="public, max-age=31536000",
        )
    except (BotoCoreError, ClientError) as exc:
        LOGGER.error("logo_upload_failed", owner_id=owner_id, key=key, error=str(exc))
        raise UpstreamFailureError("Failed to upload logo") from exc

    LOGGER.info("logo_uploaded", owner_id=owner_id, key=key)
    return StoredLogo(key=key, url=public_url(key))


def delete_logo(key: str) -> None:
    settings = get_settings()
    if _is_local_mode():
        path = Path(settings.local_storage_path) / key
        path.unlink(missing_ok=True)
        return

    try:
        _client().delete_object(Bucket=settings.storage_bucket, Key=key)
    except (BotoCoreError, ClientError) as exc:
        LOGGER.error("logo_delete_failed", key=key, error=str(exc))
        raise UpstreamFailureError("Failed to delete logo") from exc
