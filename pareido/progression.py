"""
Progression store — player level/XP and material inventory.

State lives behind a small key-value backend (in-memory for tests and scripts,
the player_state table for the API). All changes go through ProgressionStore's
typed mutations, and every successful mutation is broadcast to subscribers as
(event, new_state) where event is "level" or "materials".
"""

import logging
import math
from typing import Callable, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from . import models
from .config import settings
from .materials import MATERIAL_KEYS, add_materials, empty_materials
from .schemas import LevelState, MaterialInventory

logger = logging.getLogger(__name__)

LEVEL_KEY = "level_state"
MATERIALS_KEY = "material_state"

LEVEL_EVENT = "level"
MATERIALS_EVENT = "materials"


def xp_for_level(level: int, base_xp: Optional[int] = None,
                 growth_factor: Optional[float] = None) -> int:
    """XP needed to clear `level`. Level 1 needs exactly base_xp."""
    base_xp = settings.LEVEL_BASE_XP if base_xp is None else base_xp
    growth_factor = settings.LEVEL_GROWTH_FACTOR if growth_factor is None else growth_factor
    if level <= 1:
        return base_xp
    return math.floor(base_xp * growth_factor ** (level - 1))


# --- Event broadcast ---

class EventBus:
    """Synchronous observer list. A failing subscriber never blocks the others."""

    def __init__(self):
        self._subscribers: list[Callable] = []

    def subscribe(self, callback: Callable) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: str, state) -> None:
        for callback in list(self._subscribers):
            try:
                callback(event, state)
            except Exception:
                logger.exception("Progression subscriber failed on %s event", event)


# Shared by every store built in this process (one per API request)
progress_events = EventBus()


# --- Backends ---

class MemoryBackend:
    def __init__(self):
        self._data: dict = {}

    def load(self, key: str):
        return self._data.get(key)

    def save(self, key: str, value: dict) -> None:
        self._data[key] = dict(value)


class SqlBackend:
    """player_state table, one JSON row per key."""

    def __init__(self, db: Session):
        self.db = db

    def load(self, key: str):
        row = self.db.query(models.PlayerState).filter(models.PlayerState.key == key).first()
        return row.value if row else None

    def save(self, key: str, value: dict) -> None:
        row = self.db.query(models.PlayerState).filter(models.PlayerState.key == key).first()
        if row:
            row.value = dict(value)
        else:
            self.db.add(models.PlayerState(key=key, value=dict(value)))
        self.db.commit()


# --- Store ---

class ProgressionStore:

    def __init__(self, backend=None, events: Optional[EventBus] = None,
                 base_xp: Optional[int] = None, growth_factor: Optional[float] = None):
        self.backend = backend if backend is not None else MemoryBackend()
        self.events = events if events is not None else progress_events
        self.base_xp = settings.LEVEL_BASE_XP if base_xp is None else base_xp
        self.growth_factor = settings.LEVEL_GROWTH_FACTOR if growth_factor is None else growth_factor

    def subscribe(self, callback: Callable) -> Callable[[], None]:
        return self.events.subscribe(callback)

    def default_level_state(self) -> LevelState:
        return LevelState(level=1, current_xp=0, total_xp=0, next_level_xp=self.base_xp)

    def level_state(self) -> LevelState:
        saved = self.backend.load(LEVEL_KEY)
        if not saved:
            return self.default_level_state()
        try:
            return LevelState.model_validate(saved)
        except ValidationError as e:
            logger.warning("Stored level state is invalid, using defaults: %s", e)
            return self.default_level_state()

    def inventory(self) -> MaterialInventory:
        saved = self.backend.load(MATERIALS_KEY)
        return MaterialInventory(**add_materials(empty_materials(), saved or {}))

    def add_xp(self, amount: int) -> LevelState:
        """Grant XP, rolling over into as many level-ups as it pays for."""
        if amount < 0:
            raise ValueError("XP amount must be non-negative")

        state = self.level_state()
        level = state.level
        current_xp = state.current_xp + amount
        total_xp = state.total_xp + amount
        next_level_xp = state.next_level_xp

        while next_level_xp > 0 and current_xp >= next_level_xp:
            current_xp -= next_level_xp
            level += 1
            next_level_xp = xp_for_level(level, self.base_xp, self.growth_factor)

        new_state = LevelState(
            level=level,
            current_xp=current_xp,
            total_xp=total_xp,
            next_level_xp=next_level_xp,
        )
        self.backend.save(LEVEL_KEY, new_state.model_dump())
        if level > state.level:
            logger.info("Level up: %d -> %d", state.level, level)
        self.events.publish(LEVEL_EVENT, new_state)
        return new_state

    def add_materials(self, delta) -> MaterialInventory:
        """Add material counts (dict or MaterialCounts) to the inventory."""
        if hasattr(delta, "model_dump"):
            delta = delta.model_dump()
        totals = add_materials(self.inventory().model_dump(), delta)
        new_state = MaterialInventory(**totals)
        self.backend.save(MATERIALS_KEY, {k: totals[k] for k in MATERIAL_KEYS})
        self.events.publish(MATERIALS_EVENT, new_state)
        return new_state
