from pydantic import BaseModel
from typing import Optional


class MaterialCounts(BaseModel):
    metal: int = 0
    synthetic: int = 0
    stone: int = 0
    organic: int = 0
    fabric: int = 0


class AnalysisResult(BaseModel):
    name: str
    creativityScore: int
    materials: MaterialCounts
    prompt_for_image_generation: Optional[str] = None

    class Config:
        extra = "allow"


# --- Requests ---

class AnalyzeRequest(BaseModel):
    image: Optional[str] = None


class MergeRequest(BaseModel):
    image1: Optional[str] = None
    name1: Optional[str] = None
    image2: Optional[str] = None
    name2: Optional[str] = None


class SaveRequest(BaseModel):
    image: Optional[str] = None
    data: dict = {}


class CardMergeRequest(BaseModel):
    card_id1: str
    card_id2: str


class XPRequest(BaseModel):
    amount: int


class MaterialsDelta(BaseModel):
    metal: int = 0
    synthetic: int = 0
    stone: int = 0
    organic: int = 0
    fabric: int = 0


# --- Responses ---

class Card(BaseModel):
    id: str
    timestamp: int
    image: Optional[str] = None
    original_image: Optional[str] = None
    analysis: AnalysisResult


class SaveResponse(BaseModel):
    success: bool
    image: str
    card: Card


class LevelState(BaseModel):
    level: int = 1
    current_xp: int = 0
    total_xp: int = 0
    next_level_xp: int = 100

    @property
    def progress(self) -> float:
        """Percent of the way to the next level."""
        if self.next_level_xp <= 0:
            return 0.0
        return self.current_xp / self.next_level_xp * 100


class MaterialInventory(MaterialCounts):
    pass


class ProgressState(BaseModel):
    level: LevelState
    progress: float
    materials: MaterialInventory
    card_count: int = 0
