"""
Card artwork generation.

Wraps gemini.generate_image() with the image inputs a card needs: the source
photo and, optionally, a second image (card frame template or the other parent
in a merge).
"""

import base64
import logging
from pathlib import Path
from typing import Optional

from . import gemini
from .image_utils import load_image

logger = logging.getLogger(__name__)


def generate_card_art(prompt: str, image: Optional[str] = None,
                      template_image: Optional[str] = None,
                      model: Optional[str] = None,
                      output_path: Optional[str] = None) -> str:
    """
    Generate card artwork. Returns the image as raw base64 (no data URL prefix).

    If output_path is given the decoded image is also written there.
    """
    parts = [gemini.text_part(prompt)]
    for ref in (image, template_image):
        if ref:
            b64, mime_type = load_image(ref)
            parts.append(gemini.image_part(b64, mime_type))

    image_b64 = gemini.generate_image(parts, model=model)

    if output_path:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(base64.b64decode(image_b64))
        logger.info("Card art saved to %s", path)

    return image_b64
