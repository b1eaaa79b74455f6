"""
Shared test fixtures — SQLite database, test client, image payloads.

Gemini and object storage are never contacted: GEMINI_API_KEY and the S3
settings are blanked, and tests that need AI output patch pareido.gemini.
"""

import base64
import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

TEST_DB_PATH = Path(__file__).parent / "test.db"
TEST_DATABASE_URL = f"sqlite:///{TEST_DB_PATH}"

# Set before importing app modules: Settings() reads the environment once
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["GEMINI_API_KEY"] = ""
os.environ["S3_ENDPOINT_URL"] = ""
os.environ["S3_PUBLIC_URL"] = ""

from pareido.database import Base, get_db
from pareido.main import app


engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def uploads_dir(tmp_path, monkeypatch):
    """Local storage fallback writes to ./uploads, so run each test inside tmp_path."""
    monkeypatch.chdir(tmp_path)
    return tmp_path / "uploads"


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def db():
    """Direct database session for test setup/assertions."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def png_bytes():
    """Smallest valid PNG (1x1 transparent pixel)."""
    return base64.b64decode(
        "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
    )


@pytest.fixture
def png_data_url(png_bytes):
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode()


@pytest.fixture
def fake_art_b64():
    """What a stubbed image model 'returns' — base64 of some JPEG-ish bytes."""
    return base64.b64encode(b"\xff\xd8\xff\xe0fake-jpeg-card-art").decode()


@pytest.fixture
def gemini_key(monkeypatch):
    """Pretend GEMINI_API_KEY is configured."""
    from pareido.config import settings
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "test-key")
    return "test-key"
