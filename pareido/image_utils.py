"""
Image input handling — data URLs, raw base64, remote URLs, and file paths.

Everything that sends an image to Gemini goes through load_image(), which
returns (base64_data, mime_type). Images that arrive in an API request go
through load_request_image() first, which only allows inline payloads and
images this service stored itself.
"""

import base64
import re
import urllib.request
from pathlib import Path
from urllib.parse import urlparse

from .config import settings
from .errors import ImageInputError

DATA_URL_RE = re.compile(r"^data:([^;]+);base64,")
IMAGE_DATA_URL_RE = re.compile(r"^data:(image/\w+);base64,")
BASE64_RE = re.compile(r"^[A-Za-z0-9+/]*={0,2}$")

IMAGE_MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
    ".heic": "image/heic",
}

DEFAULT_IMAGE_MIME = "image/jpeg"

# Local storage fallback; main.py serves this directory at /uploads
UPLOAD_DIR = Path("uploads")
UPLOADS_URL_PREFIX = "/uploads/"

# Shorter strings are treated as paths even if they happen to be base64-shaped
_RAW_BASE64_MIN_LENGTH = 500


def strip_data_url(data: str) -> str:
    """Remove a leading data:<mime>;base64, prefix if present."""
    return DATA_URL_RE.sub("", data, count=1)


def to_data_url(image_b64: str, mime_type: str) -> str:
    return f"data:{mime_type};base64,{image_b64}"


def get_mime_type(filename: str) -> str:
    """MIME type from a data URL prefix or an image file extension."""
    match = DATA_URL_RE.match(filename)
    if match:
        return match.group(1)
    return IMAGE_MIME_TYPES.get(Path(filename).suffix.lower(), "application/octet-stream")


def _is_raw_base64(image: str) -> bool:
    return len(image) > _RAW_BASE64_MIN_LENGTH and bool(BASE64_RE.match(image))


def _read_remote(url: str) -> bytes:
    req = urllib.request.Request(url)
    with urllib.request.urlopen(req, timeout=30) as response:
        return response.read()


def load_image(image: str) -> tuple[str, str]:
    """
    Resolve an image reference to (base64_data, mime_type).

    Accepts:
      - data:image/png;base64,...   -> payload, MIME from prefix
      - anything containing ;base64, -> payload after the marker, image/jpeg
      - long raw base64 strings     -> as-is, image/jpeg
      - http(s) URLs                -> downloaded (e.g. stored card artwork)
      - local file paths            -> read, MIME by extension

    Raises ImageInputError when nothing usable was supplied.
    Reads the filesystem and the network, so never call it with client input;
    use load_request_image() for that.
    """
    if not image:
        raise ImageInputError("Image is required")

    match = IMAGE_DATA_URL_RE.match(image)
    if match:
        return image[match.end():], match.group(1)

    if ";base64," in image:
        return image.split(";base64,", 1)[1], DEFAULT_IMAGE_MIME

    if _is_raw_base64(image):
        return image, DEFAULT_IMAGE_MIME

    if image.startswith(("http://", "https://")):
        try:
            data = _read_remote(image)
        except Exception as e:
            raise ImageInputError(f"Failed to download image: {e}")
        ext = Path(urlparse(image).path).suffix.lower()
        return base64.b64encode(data).decode("utf-8"), IMAGE_MIME_TYPES.get(ext, DEFAULT_IMAGE_MIME)

    path = Path(image)
    if not path.exists() and image.startswith(UPLOADS_URL_PREFIX):
        # Locally stored uploads are served at /uploads but live under ./uploads
        path = Path(image.lstrip("/"))
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ImageInputError(f"Failed to read image file: {e}")
    if not data:
        raise ImageInputError(f"Image file is empty: {image}")

    mime_type = IMAGE_MIME_TYPES.get(path.suffix.lower(), DEFAULT_IMAGE_MIME)
    return base64.b64encode(data).decode("utf-8"), mime_type


def _uploaded_file(url: str) -> Path:
    """Map an /uploads/... URL onto UPLOAD_DIR, refusing anything that escapes it."""
    root = UPLOAD_DIR.resolve()
    path = (root / url[len(UPLOADS_URL_PREFIX):]).resolve()
    if path == root or not path.is_relative_to(root):
        raise ImageInputError("Invalid upload path")
    return path


def _is_bucket_url(image: str) -> bool:
    public_url = settings.S3_PUBLIC_URL.rstrip("/")
    return bool(public_url) and image.startswith(public_url + "/")


def load_request_image(image: str) -> tuple[str, str]:
    """
    Resolve an image sent by an API client to (base64_data, mime_type).

    Only inline payloads (data URLs, raw base64) and images this service stored
    itself (/uploads/... or a URL under S3_PUBLIC_URL) are accepted. Local file
    paths and other URLs raise ImageInputError.
    """
    if not image:
        raise ImageInputError("Image is required")

    if ";base64," in image or _is_raw_base64(image):
        return load_image(image)

    if image.startswith(UPLOADS_URL_PREFIX):
        return load_image(str(_uploaded_file(image)))

    if _is_bucket_url(image):
        return load_image(image)

    raise ImageInputError("Image must be base64 data or a photo uploaded to this service")
