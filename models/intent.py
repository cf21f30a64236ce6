"""
Result model for superlative / price-target intent detection.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from models.hints import City, QueryIntent


class IntentDetectionResult(BaseModel):
    """Intent derived purely from the raw query text."""
    model_config = ConfigDict(frozen=True)

    intent: QueryIntent = "normal"
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    matched_phrase: Optional[str] = None
    price_target: Optional[float] = None
    location: Optional[City] = None
