"""
Object storage for card artwork and uploaded photos.

Stores to an S3-compatible bucket (Cloudflare R2) if configured, otherwise to
the local uploads/ directory which main.py serves at /uploads.
"""

import base64
import binascii
import logging
from io import BytesIO

from .config import settings
from .errors import StorageError
from .image_utils import UPLOAD_DIR, UPLOADS_URL_PREFIX, strip_data_url

logger = logging.getLogger(__name__)

_client = None


def storage_configured() -> bool:
    """Check if S3/R2 credentials are set."""
    return bool(
        settings.S3_ENDPOINT_URL
        and settings.S3_ACCESS_KEY
        and settings.S3_SECRET_ACCESS_KEY
        and settings.S3_BUCKET_NAME
    )


def get_client():
    """Lazily build the boto3 S3 client. R2 uses region "auto"."""
    global _client
    if _client is None:
        import boto3

        _client = boto3.client(
            "s3",
            endpoint_url=settings.S3_ENDPOINT_URL,
            aws_access_key_id=settings.S3_ACCESS_KEY,
            aws_secret_access_key=settings.S3_SECRET_ACCESS_KEY,
            region_name="auto",
        )
    return _client


def public_url(key: str) -> str:
    return f"{settings.S3_PUBLIC_URL.rstrip('/')}/{key}"


def _save_locally(data: bytes, key: str) -> str:
    file_path = UPLOAD_DIR / key
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_bytes(data)
    return f"{UPLOADS_URL_PREFIX}{key}"


def upload_bytes(data: bytes, key: str, content_type: str) -> str:
    """Upload raw bytes and return the public URL (or local /uploads path)."""
    if not storage_configured():
        return _save_locally(data, key)

    try:
        get_client().upload_fileobj(
            BytesIO(data),
            settings.S3_BUCKET_NAME,
            key,
            ExtraArgs={"ContentType": content_type},
        )
    except Exception as e:
        logger.error("Error uploading %s to object storage: %s", key, e)
        raise StorageError(f"Failed to upload file to object storage: {e}")
    return public_url(key)


def upload_base64(data: str, key: str, content_type: str) -> str:
    """Decode base64 (data URL prefix allowed) and upload it."""
    try:
        raw = base64.b64decode(strip_data_url(data), validate=False)
    except (binascii.Error, ValueError) as e:
        raise StorageError(f"Invalid base64 payload: {e}")
    return upload_bytes(raw, key, content_type)


def delete_object(key: str) -> bool:
    """Delete an object. Returns False (and logs) on failure."""
    if not storage_configured():
        file_path = UPLOAD_DIR / key
        if file_path.exists():
            file_path.unlink()
            return True
        return False

    try:
        get_client().delete_object(Bucket=settings.S3_BUCKET_NAME, Key=key)
    except Exception as e:
        logger.error("Failed to delete %s from object storage: %s", key, e)
        return False
    logger.info("Deleted %s from object storage", key)
    return True


def key_from_url(url: str):
    """Inverse of public_url()/_save_locally(); None for foreign URLs."""
    if settings.S3_PUBLIC_URL and url.startswith(settings.S3_PUBLIC_URL.rstrip("/") + "/"):
        return url[len(settings.S3_PUBLIC_URL.rstrip("/")) + 1:]
    if url.startswith(UPLOADS_URL_PREFIX):
        return url[len(UPLOADS_URL_PREFIX):]
    return None
