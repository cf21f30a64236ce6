"""
Hotel candidate models used by the ranking stages.
"""
from typing import Any, Dict, Optional, Tuple
from pydantic import BaseModel, ConfigDict, field_validator

# Only these catalog fields ever leave the retriever.
SAFE_HOTEL_FIELDS = (
    "id",
    "name",
    "description",
    "location",
    "price_per_night",
    "tier",
    "amenities",
)


class Candidate(BaseModel):
    """
    A catalog hotel surfaced by retrieval for one query.

    Frozen. Scoring stages return annotated copies instead of mutating.
    """
    model_config = ConfigDict(frozen=True)

    id: Any
    name: str = ""
    description: str = ""
    location: str = ""
    price: float
    tier: Optional[str] = None
    amenities: Tuple[str, ...] = ()
    semantic_score: float = 0.0
    lexical_score: Optional[float] = None
    combined_score: Optional[float] = None

    @field_validator("amenities", mode="before")
    @classmethod
    def coerce_amenities(cls, v):
        if v is None:
            return ()
        return tuple(str(item) for item in v)

    @field_validator("name", "description", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return "" if v is None else v

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], semantic_score: float) -> "Candidate":
        """Build a candidate from a raw catalog row, keeping only the safe field set."""
        safe = {key: payload.get(key) for key in SAFE_HOTEL_FIELDS}
        return cls(
            id=safe["id"],
            name=safe["name"],
            description=safe["description"],
            location=safe["location"] or "",
            price=safe["price_per_night"] if safe["price_per_night"] is not None else 0,
            tier=safe["tier"],
            amenities=safe["amenities"],
            semantic_score=semantic_score,
        )


class ValidationVerdict(BaseModel):
    """Outcome of the data-integrity checks for one candidate."""
    valid: bool
    reason: Optional[str] = None


class RemovedCandidate(BaseModel):
    """A candidate dropped by the context filter, with the rule that removed it."""
    candidate_id: Any
    name: str
    tag: str
    reason: str


class RankedHotel(Candidate):
    """A returned hotel paired with its explanation string."""
    explanation: str = ""

