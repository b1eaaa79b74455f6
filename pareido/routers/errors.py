"""Map service-layer exceptions onto HTTP status codes."""

import logging

from fastapi import HTTPException

from ..errors import GeminiConfigError, GeminiError, ImageInputError, StorageError

logger = logging.getLogger(__name__)


def to_http_exception(error: Exception) -> HTTPException:
    if isinstance(error, ImageInputError):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, GeminiConfigError):
        return HTTPException(status_code=500, detail="Server configuration error: Missing API Key")
    if isinstance(error, GeminiError):
        logger.warning("Upstream AI error: %s", error)
        return HTTPException(status_code=502, detail=str(error))
    if isinstance(error, StorageError):
        logger.warning("Storage error: %s", error)
        return HTTPException(status_code=502, detail=str(error))
    logger.error("Unhandled service error: %s", error)
    return HTTPException(status_code=500, detail=str(error) or "Internal Server Error")
