"""
Failure categories raised by the service layer.

Routers translate these into HTTP responses:
  ImageInputError   -> 400 (caller sent no usable image / names)
  GeminiConfigError -> 500 (server has no API key)
  GeminiError       -> 502 (upstream call failed or returned garbage)
  StorageError      -> 502 (object storage upload failed)
"""


class PareidoError(Exception):
    """Base class for all service errors."""


class ImageInputError(PareidoError, ValueError):
    """Missing or unreadable image input."""


class GeminiError(PareidoError):
    """Gemini call failed or returned an unusable response."""


class GeminiConfigError(GeminiError):
    """GEMINI_API_KEY is not configured."""


class StorageError(PareidoError):
    """Object storage upload failed."""
