from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
import logging
import os

from .config import settings
from .database import engine, Base
from .progression import LEVEL_EVENT, progress_events
from .routers import analyze, merge, cards, progress, photos

logger = logging.getLogger("pareido")

# Create tables (handles new tables but won't add columns to existing ones)
Base.metadata.create_all(bind=engine)


def _log_progress(event, state):
    if event == LEVEL_EVENT:
        logger.info("Player now level %d (%d/%d XP)", state.level, state.current_xp, state.next_level_xp)


progress_events.subscribe(_log_progress)

app = FastAPI(
    title=settings.APP_NAME,
    description="Turn photos into Symbiote cards: Gemini analysis, card art, merging, and progression",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(analyze.router, prefix="/api")
app.include_router(merge.router, prefix="/api")
app.include_router(cards.router, prefix="/api")
app.include_router(progress.router, prefix="/api")
app.include_router(photos.router, prefix="/api")

# Serve uploaded photos and card art (local fallback when object storage not configured)
uploads_path = os.path.join(os.getcwd(), "uploads")
os.makedirs(uploads_path, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=uploads_path), name="uploads")


@app.get("/health")
def health():
    return {
        "status": "ok",
        "app": "pareido",
        "gemini_configured": bool(settings.GEMINI_API_KEY),
    }
