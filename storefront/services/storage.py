from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional
from uuid import uuid4

from fastapi import UploadFile

from storefront.core import config

logger = logging.getLogger(__name__)

_ABSOLUTE_URL = re.compile(r"^https?://", re.IGNORECASE)
PUBLIC_OBJECT_PREFIX = "/storage/v1/object/public/"


def _public_marker(bucket: str) -> str:
    return f"{PUBLIC_OBJECT_PREFIX}{bucket}/"


def _get_storage_client():
    if not (config.STORAGE_ACCESS_KEY_ID and config.STORAGE_SECRET_ACCESS_KEY):
        raise RuntimeError("Object storage credentials are not configured")

    import boto3

    return boto3.client(
        "s3",
        endpoint_url=config.STORAGE_ENDPOINT_URL or None,
        aws_access_key_id=config.STORAGE_ACCESS_KEY_ID,
        aws_secret_access_key=config.STORAGE_SECRET_ACCESS_KEY,
        region_name=config.STORAGE_REGION,
    )


def resolve_public_url(value: Optional[str], bucket: Optional[str] = None) -> Optional[str]:
    """Turn a stored image value into a URL the browser can load.

    Absolute URLs come back unchanged. ``/storage/...`` paths get the
    public base URL prefixed, and anything else is treated as an object
    path inside ``bucket``.
    """
    if not value:
        return None
    trimmed = str(value).strip()
    if not trimmed:
        return None
    if _ABSOLUTE_URL.match(trimmed) or trimmed.startswith("//"):
        return trimmed

    base_url = config.STORAGE_PUBLIC_BASE_URL
    if trimmed.startswith("/storage"):
        return f"{base_url}{trimmed}"

    bucket = bucket or config.STORAGE_BUCKET
    return f"{base_url}{_public_marker(bucket)}{trimmed.lstrip('/')}"


def object_key_from_value(value: Optional[str], bucket: Optional[str] = None) -> Optional[str]:
    if not value:
        return None
    trimmed = str(value).strip()
    if not trimmed:
        return None

    marker = _public_marker(bucket or config.STORAGE_BUCKET)
    if marker in trimmed:
        return trimmed[trimmed.index(marker) + len(marker):] or None
    if _ABSOLUTE_URL.match(trimmed) or trimmed.startswith("//"):
        return None
    return trimmed.lstrip("/") or None


def get_signed_url(
    value: Optional[str],
    bucket: Optional[str] = None,
    expires: Optional[int] = None,
) -> Optional[str]:
    """Time-limited URL used when the public URL does not load.

    External absolute URLs come back unchanged. ``None`` means no signed
    URL could be produced.
    """
    if not value:
        return None
    trimmed = str(value).strip()
    bucket = bucket or config.STORAGE_BUCKET
    if _ABSOLUTE_URL.match(trimmed) and _public_marker(bucket) not in trimmed:
        return trimmed

    key = object_key_from_value(trimmed, bucket)
    if not key:
        return None

    try:
        return _get_storage_client().generate_presigned_url(
            "get_object",
            Params={"Bucket": bucket, "Key": key},
            ExpiresIn=expires or config.SIGNED_URL_TTL_SECONDS,
        )
    except Exception:
        logger.warning("signed url unavailable bucket=%s key=%s", bucket, key, exc_info=True)
        return None


def _sanitize_key_part(part: str) -> str:
    return part.strip().strip("/")


def upload_file(file: UploadFile, folder: str = "uploads", bucket: Optional[str] = None) -> str:
    bucket = bucket or config.STORAGE_BUCKET
    extension = Path(file.filename or "").suffix
    object_key = f"{_sanitize_key_part(folder)}/{uuid4().hex}{extension}"

    file.file.seek(0)
    _get_storage_client().upload_fileobj(
        file.file,
        bucket,
        object_key,
        ExtraArgs={"ContentType": file.content_type or "application/octet-stream"},
    )
    logger.info("file uploaded bucket=%s key=%s", bucket, object_key)
    return resolve_public_url(object_key, bucket) or object_key
