"""
Structured search hints interpreted from a hotel query.
"""
from typing import Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator

City = Literal["Melbourne", "Sydney", "Brisbane"]
Tier = Literal["Budget", "Mid-tier", "Luxury"]
SortIntent = Literal["relevance", "price_asc", "price_desc"]
QueryIntent = Literal["most_expensive", "cheapest", "price_range", "normal"]

VALID_LOCATIONS: Tuple[str, ...] = ("Melbourne", "Sydney", "Brisbane")
VALID_TIERS: Tuple[str, ...] = ("Budget", "Mid-tier", "Luxury")


class SearchHints(BaseModel):
    """
    Constraints and intent extracted from one query (or one merged follow-up).

    Frozen: stages that need a different value build a copy with
    ``model_copy(update=...)``.
    """
    model_config = ConfigDict(frozen=True)

    location: Optional[City] = None
    min_price: Optional[float] = Field(default=None, ge=0)
    max_price: Optional[float] = Field(default=None, gt=0)
    # Soft signal only: never a retrieval filter. Returned in the response
    # hints and passed to the value re-ranker.
    exact_price: Optional[float] = Field(default=None, gt=0)
    tier: Optional[Tier] = None
    name: Optional[str] = None
    keywords: Tuple[str, ...] = ()
    amenities: Tuple[str, ...] = ()
    sort_intent: SortIntent = "relevance"
    query_intent: QueryIntent = "normal"
    price_target: Optional[float] = None

    @field_validator("keywords")
    @classmethod
    def normalize_keywords(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        """Lowercase, strip and de-duplicate keywords, keeping first-seen order."""
        seen = []
        for keyword in v:
            cleaned = str(keyword).strip().lower()
            if cleaned and cleaned not in seen:
                seen.append(cleaned)
        return tuple(seen)

    @field_validator("amenities")
    @classmethod
    def normalize_amenities(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(sorted(set(v)))

    @property
    def has_location(self) -> bool:
        return self.location is not None
