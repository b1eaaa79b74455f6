"""
Image analysis — photo in, Symbiote description out.

The model's reply is untrusted: name and score get defaults, and materials
always pass through normalize_materials() before anyone else sees them.
"""

import logging
from typing import Optional

from . import gemini
from .config import settings
from .image_utils import load_image
from .materials import normalize_materials
from .prompts import ANALYSIS_PROMPT

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Unknown Symbiote"


def coerce_score(value) -> int:
    """Creativity score as an int in [0, 100]; garbage becomes 0."""
    if isinstance(value, bool):
        return 0
    try:
        score = int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, min(100, score))


def clean_result(data: dict) -> dict:
    """Apply defaults and normalization to a raw analysis/merge reply."""
    result = dict(data)
    name = result.get("name")
    result["name"] = name.strip() if isinstance(name, str) and name.strip() else DEFAULT_NAME
    result["creativityScore"] = coerce_score(result.get("creativityScore"))
    result["materials"] = normalize_materials(result.get("materials") or {})
    return result


def analyze_image(image: str, prompt: str = ANALYSIS_PROMPT,
                  model: Optional[str] = None) -> dict:
    """
    Analyze one image with Gemini.

    image: data URL, raw base64, URL, or file path (see image_utils.load_image).
    Returns {"name", "creativityScore", "materials", ...} with normalized materials.
    Raises ImageInputError, GeminiConfigError, or GeminiError.
    """
    image_b64, mime_type = load_image(image)
    model = model or settings.GEMINI_MODEL

    logger.info("Analyzing image on model %s", model)
    data = gemini.generate_json(
        [gemini.text_part(prompt), gemini.image_part(image_b64, mime_type)],
        model=model,
    )
    return clean_result(data)
