"""
Gemini REST client — JSON-mode generation and image generation.

Talks to the Generative Language API directly over HTTPS. Callers build a list
of parts with text_part()/image_part() and get back either parsed JSON or
base64 image data. Every failure surfaces as GeminiError (or
GeminiConfigError when no API key is set) so routers can map it to a status.
"""

import json
import logging
import urllib.error
import urllib.request
from typing import Optional

from .config import settings
from .errors import GeminiConfigError, GeminiError

logger = logging.getLogger(__name__)

API_BASE = "https://generativelanguage.googleapis.com/v1beta/models"


def text_part(text: str) -> dict:
    return {"text": text}


def image_part(image_b64: str, mime_type: str = "image/jpeg") -> dict:
    return {"inline_data": {"mime_type": mime_type, "data": image_b64}}


def _api_key() -> str:
    if not settings.GEMINI_API_KEY:
        raise GeminiConfigError("GEMINI_API_KEY not configured")
    return settings.GEMINI_API_KEY


def _post(model: str, body: dict, timeout: int) -> dict:
    """POST a generateContent request and return the decoded response."""
    url = f"{API_BASE}/{model}:generateContent?key={_api_key()}"
    req = urllib.request.Request(
        url,
        data=json.dumps(body).encode("utf-8"),
        headers={"Content-Type": "application/json"},
        method="POST",
    )

    try:
        with urllib.request.urlopen(req, timeout=timeout) as response:
            return json.loads(response.read())
    except urllib.error.HTTPError as e:
        error_body = e.read().decode(errors="replace")
        raise GeminiError(f"Gemini API error ({e.code}): {error_body}")
    except Exception as e:
        raise GeminiError(f"Gemini call failed: {e}")


def _first_parts(result: dict) -> list:
    try:
        return result["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        raise GeminiError("No content in response from AI model")


def generate_json(parts: list, model: Optional[str] = None,
                  temperature: Optional[float] = None,
                  timeout: Optional[int] = None) -> dict:
    """
    Send parts to Gemini in JSON mode and return the parsed object.

    Non-flash models get a thinkingConfig (GEMINI_THINKING_LEVEL).
    Raises GeminiError if the reply has no text or the text is not a JSON object.
    """
    model = model or settings.GEMINI_MODEL
    generation_config = {"responseMimeType": "application/json"}
    if temperature is not None:
        generation_config["temperature"] = temperature
    if "flash" not in model.lower():
        generation_config["thinkingConfig"] = {"thinkingLevel": settings.GEMINI_THINKING_LEVEL}

    result = _post(
        model,
        {"contents": [{"parts": parts}], "generationConfig": generation_config},
        timeout or settings.GEMINI_TIMEOUT_SECONDS,
    )

    parts_out = _first_parts(result)
    text = parts_out[0].get("text") if parts_out else None
    if not text:
        raise GeminiError("No text in response from AI model")

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        logger.error("Failed to parse Gemini response: %s", text[:500])
        raise GeminiError("Invalid AI response: Failed to parse JSON")

    if not isinstance(parsed, dict):
        raise GeminiError("Invalid AI response: expected a JSON object")
    return parsed


def generate_image(parts: list, model: Optional[str] = None,
                   aspect_ratio: str = "4:5",
                   timeout: Optional[int] = None) -> str:
    """Ask an image model for a picture. Returns the first image as base64."""
    model = model or settings.GEMINI_IMAGE_MODEL
    logger.info("Generating image on model %s", model)

    result = _post(
        model,
        {
            "contents": [{"parts": parts}],
            "generationConfig": {
                "responseModalities": ["IMAGE"],
                "imageConfig": {"aspectRatio": aspect_ratio},
            },
        },
        timeout or settings.GEMINI_IMAGE_TIMEOUT_SECONDS,
    )

    for part in _first_parts(result):
        # REST responses use camelCase; accept snake_case too
        inline = part.get("inlineData") or part.get("inline_data")
        if inline and inline.get("data"):
            return inline["data"]

    raise GeminiError("No image data found in response")
