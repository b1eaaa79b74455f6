"""
Card gallery API.

POST   /api/save                  — Generate card art for an analysis, store it, save the card
GET    /api/cards                 — All saved cards, newest first
GET    /api/cards/{id}            — One card
DELETE /api/cards/{id}            — Delete a card
POST   /api/cards/{id}/destruct   — Delete a card and add its materials to the inventory
POST   /api/cards/merge           — Merge two saved cards into a new one (parents are consumed)
"""

import logging
import time
import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas, storage
from ..analyzer import clean_result
from ..database import get_db
from ..errors import PareidoError
from ..image_generator import generate_card_art
from ..image_utils import get_mime_type, load_request_image, to_data_url
from ..merger import merge_cards
from ..progression import ProgressionStore, SqlBackend
from ..prompts import build_card_prompt
from .errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["cards"])

_EXTENSIONS = {"image/jpeg": "jpg", "image/png": "png", "image/webp": "webp", "image/gif": "gif"}


def _card_to_dict(card: models.Card) -> dict:
    analysis = {
        "name": card.name,
        "creativityScore": card.creativity_score,
        "materials": card.materials,
    }
    if card.prompt_for_image_generation:
        analysis["prompt_for_image_generation"] = card.prompt_for_image_generation
    return {
        "id": card.id,
        "timestamp": card.timestamp,
        "image": card.image,
        "original_image": card.original_image,
        "analysis": analysis,
    }


def _get_card_or_404(db: Session, card_id: str) -> models.Card:
    card = db.query(models.Card).filter(models.Card.id == card_id).first()
    if not card:
        raise HTTPException(status_code=404, detail="Card not found")
    return card


def _stored_keys(card: models.Card) -> list[str]:
    """Storage keys of the artwork we stored for a card."""
    keys = []
    for url in (card.image, card.original_image):
        key = storage.key_from_url(url) if url else None
        if key:
            keys.append(key)
    return keys


def _delete_objects(keys: list[str]) -> None:
    for key in keys:
        storage.delete_object(key)


def _delete_card(db: Session, card: models.Card) -> list[str]:
    """Delete the row. Returns the storage keys to remove once the delete is committed."""
    keys = _stored_keys(card)
    db.delete(card)
    return keys


def _upload_original(image: str, card_id: str) -> str:
    content_type = get_mime_type(image)
    ext = _EXTENSIONS.get(content_type, "jpg")
    return storage.upload_base64(image, f"original-images/{card_id}.{ext}", content_type)


@router.post("/save", response_model=schemas.SaveResponse)
def save_card(request: schemas.SaveRequest, db: Session = Depends(get_db)):
    """
    Turn an analysis result into a saved card.

    - Generates card artwork from the photo + analysis
    - Uploads artwork (and the source photo) to object storage
    - Saves the card and grants XP equal to its creativity score

    If any upload fails, whatever was already uploaded is removed and no card is stored.
    """
    if not request.image:
        raise HTTPException(status_code=400, detail="Image is required")

    analysis = clean_result(request.data or {})
    card_id = uuid.uuid4().hex
    timestamp = int(time.time() * 1000)
    uploaded = []

    try:
        image = to_data_url(*load_request_image(request.image))
        art_b64 = generate_card_art(build_card_prompt(analysis), image=image)
        art_key = f"generated-cards/{card_id}.jpg"
        image_url = storage.upload_base64(art_b64, art_key, "image/jpeg")
        uploaded.append(art_key)
        original_url = _upload_original(image, card_id)
    except PareidoError as e:
        _delete_objects(uploaded)
        raise to_http_exception(e)

    card = models.Card(
        id=card_id,
        timestamp=timestamp,
        image=image_url,
        original_image=original_url,
        name=analysis["name"],
        creativity_score=analysis["creativityScore"],
        materials=analysis["materials"],
        prompt_for_image_generation=analysis.get("prompt_for_image_generation"),
    )
    db.add(card)
    try:
        db.commit()
    except Exception:
        db.rollback()
        _delete_objects(_stored_keys(card))
        raise
    db.refresh(card)

    ProgressionStore(SqlBackend(db)).add_xp(analysis["creativityScore"])

    return {"success": True, "image": image_url, "card": _card_to_dict(card)}


@router.get("/cards", response_model=list[schemas.Card])
def list_cards(db: Session = Depends(get_db)):
    cards = db.query(models.Card).order_by(models.Card.timestamp.desc()).all()
    return [_card_to_dict(c) for c in cards]


@router.post("/cards/merge", response_model=schemas.Card)
def merge_saved_cards(request: schemas.CardMergeRequest, db: Session = Depends(get_db)):
    """
    Merge two saved cards. The merged card replaces both parents in the gallery.
    Materials are the sum of the parents; score is the stronger parent's plus a bonus.
    Parent artwork is removed from storage only after the merge is committed.
    """
    if request.card_id1 == request.card_id2:
        raise HTTPException(status_code=400, detail="Cannot merge a card with itself")

    card1 = _get_card_or_404(db, request.card_id1)
    card2 = _get_card_or_404(db, request.card_id2)

    try:
        merged = merge_cards(_card_to_dict(card1), _card_to_dict(card2))
        image_url = storage.upload_base64(
            merged["image"], f"generated-cards/{merged['id']}.jpg", "image/jpeg"
        )
    except PareidoError as e:
        raise to_http_exception(e)

    analysis = merged["analysis"]
    card = models.Card(
        id=merged["id"],
        timestamp=merged["timestamp"],
        image=image_url,
        original_image=None,
        name=analysis["name"],
        creativity_score=analysis["creativityScore"],
        materials=analysis["materials"],
    )
    db.add(card)
    parent_keys = _delete_card(db, card1) + _delete_card(db, card2)
    try:
        db.commit()
    except Exception:
        db.rollback()
        _delete_objects(_stored_keys(card))
        raise
    _delete_objects(parent_keys)
    db.refresh(card)

    logger.info("Merged cards %s + %s -> %s", request.card_id1, request.card_id2, card.id)
    return _card_to_dict(card)


@router.get("/cards/{card_id}", response_model=schemas.Card)
def get_card(card_id: str, db: Session = Depends(get_db)):
    return _card_to_dict(_get_card_or_404(db, card_id))


@router.delete("/cards/{card_id}")
def delete_card(card_id: str, db: Session = Depends(get_db)):
    card = _get_card_or_404(db, card_id)
    keys = _delete_card(db, card)
    db.commit()
    _delete_objects(keys)
    return {"ok": True}


@router.post("/cards/{card_id}/destruct", response_model=schemas.MaterialInventory)
def destruct_card(card_id: str, db: Session = Depends(get_db)):
    """Break a card down: its materials go into the inventory and the card is deleted."""
    card = _get_card_or_404(db, card_id)
    materials = dict(card.materials or {})
    keys = _delete_card(db, card)
    db.commit()
    _delete_objects(keys)
    return ProgressionStore(SqlBackend(db)).add_materials(materials)
