"""
Player progression API — level/XP and material inventory.

GET  /api/progress            — Level, progress percent, inventory, card count
POST /api/progress/xp         — Grant XP
POST /api/progress/materials  — Add materials to the inventory
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas
from ..database import get_db
from ..progression import ProgressionStore, SqlBackend

router = APIRouter(prefix="/progress", tags=["progress"])


def get_store(db: Session = Depends(get_db)) -> ProgressionStore:
    return ProgressionStore(SqlBackend(db))


@router.get("", response_model=schemas.ProgressState)
def get_progress(store: ProgressionStore = Depends(get_store), db: Session = Depends(get_db)):
    level = store.level_state()
    return {
        "level": level,
        "progress": level.progress,
        "materials": store.inventory(),
        "card_count": db.query(models.Card).count(),
    }


@router.post("/xp", response_model=schemas.LevelState)
def add_xp(request: schemas.XPRequest, store: ProgressionStore = Depends(get_store)):
    if request.amount < 0:
        raise HTTPException(status_code=400, detail="XP amount must be non-negative")
    return store.add_xp(request.amount)


@router.post("/materials", response_model=schemas.MaterialInventory)
def add_materials(delta: schemas.MaterialsDelta, store: ProgressionStore = Depends(get_store)):
    if any(v < 0 for v in delta.model_dump().values()):
        raise HTTPException(status_code=400, detail="Material amounts must be non-negative")
    return store.add_materials(delta)
