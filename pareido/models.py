from sqlalchemy import Column, Integer, String, BigInteger, DateTime, Text, JSON
from datetime import datetime
from .database import Base


class Card(Base):
    """A saved Symbiote card in the gallery."""
    __tablename__ = "cards"

    id = Column(String, primary_key=True, index=True)  # uuid4 hex
    timestamp = Column(BigInteger, nullable=False)  # epoch milliseconds
    image = Column(Text, nullable=True)  # artwork URL
    original_image = Column(Text, nullable=True)
    name = Column(String, nullable=False)
    creativity_score = Column(Integer, default=0)
    materials = Column(JSON, nullable=False)
    prompt_for_image_generation = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class PlayerState(Base):
    """Key-value store for gamification state (level, material inventory)."""
    __tablename__ = "player_state"

    key = Column(String, primary_key=True)
    value = Column(JSON, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
