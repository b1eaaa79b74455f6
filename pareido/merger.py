"""
Merging Symbiotes.

merge_entities() asks Gemini to invent the fused creature from two named images.
merge_cards() builds a merged gallery card locally: materials are the per-key
sum of the parents, the score is bumped past the stronger parent, and new
artwork is generated from both parent images.
"""

import logging
import random
import time
import uuid
from typing import Optional

from . import gemini
from .analyzer import clean_result, coerce_score
from .config import settings
from .errors import ImageInputError
from .image_generator import generate_card_art
from .image_utils import load_image
from .materials import add_materials, normalize_materials
from .prompts import MERGE_PROMPT, build_merge_card_prompt

logger = logging.getLogger(__name__)

# Merged score = max(parent scores) + randint(SCORE_BONUS_MIN, SCORE_BONUS_MAX)
SCORE_BONUS_MIN = 2
SCORE_BONUS_MAX = 11


def merge_entities(image1: str, name1: str, image2: str, name2: str,
                   prompt: str = MERGE_PROMPT, model: Optional[str] = None) -> dict:
    """Fuse two entities with Gemini. Returns a cleaned analysis result."""
    if not image1 or not image2 or not name1 or not name2:
        raise ImageInputError("Two images and two names are required")

    b64_1, mime_1 = load_image(image1)
    b64_2, mime_2 = load_image(image2)
    model = model or settings.GEMINI_MERGE_MODEL

    logger.info("Merging %s and %s on model %s", name1, name2, model)
    data = gemini.generate_json(
        [
            gemini.text_part(prompt),
            gemini.text_part(f"Entity 1: {name1}"),
            gemini.image_part(b64_1, mime_1),
            gemini.text_part(f"Entity 2: {name2}"),
            gemini.image_part(b64_2, mime_2),
        ],
        model=model,
    )
    return clean_result(data)


def merged_name(name1: str, name2: str) -> str:
    first1 = (name1 or "").split(" ")[0] or "Unknown"
    first2 = (name2 or "").split(" ")[0] or "Unknown"
    return f"{first1}-{first2} Symbiote"


def merge_cards(card1: dict, card2: dict, rng=random, renormalize: bool = False,
                model: Optional[str] = None) -> dict:
    """
    Merge two gallery cards into a new card dict.

    Parents' materials are summed key by key. With renormalize=True the sum is
    squeezed back into the normal range. The caller decides what to do with
    the parents.
    """
    image1 = card1.get("image") or card1.get("original_image")
    image2 = card2.get("image") or card2.get("original_image")
    if not image1 or not image2:
        raise ImageInputError("Both cards must have valid images")

    analysis1 = card1.get("analysis") or {}
    analysis2 = card2.get("analysis") or {}
    name1 = analysis1.get("name", "")
    name2 = analysis2.get("name", "")

    score = max(coerce_score(analysis1.get("creativityScore")),
                coerce_score(analysis2.get("creativityScore")))
    score += rng.randint(SCORE_BONUS_MIN, SCORE_BONUS_MAX)

    materials = add_materials(analysis1.get("materials"), analysis2.get("materials"))
    if renormalize:
        materials = normalize_materials(materials)

    art = generate_card_art(
        build_merge_card_prompt(name1, name2, score),
        image=image1,
        template_image=image2,
        model=model or settings.GEMINI_MERGE_MODEL,
    )

    return {
        "id": uuid.uuid4().hex,
        "timestamp": int(time.time() * 1000),
        "image": art,
        "original_image": None,
        "analysis": {
            "name": merged_name(name1, name2),
            "creativityScore": score,
            "materials": materials,
        },
    }
