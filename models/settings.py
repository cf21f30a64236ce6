"""
Immutable ranking configuration passed into the search pipeline.
"""
from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class TierBand(BaseModel):
    """Accepted nightly price band for a tier. A missing max means unbounded."""
    model_config = ConfigDict(frozen=True)

    min_price: float = 0
    max_price: Optional[float] = None

    def contains(self, price: float) -> bool:
        if price < self.min_price:
            return False
        return self.max_price is None or price <= self.max_price

    @property
    def typical_range(self) -> str:
        if self.max_price is None:
            return f"${self.min_price:g}+"
        return f"${self.min_price:g} - ${self.max_price:g}"


def _default_tier_bands() -> Dict[str, TierBand]:
    return {
        "Budget": TierBand(min_price=0, max_price=150),
        "Mid-tier": TierBand(min_price=150, max_price=400),
        "Luxury": TierBand(min_price=300, max_price=None),
    }


class RankingConfig(BaseModel):
    """Weights, thresholds and bounds used by the ranking stages."""
    model_config = ConfigDict(frozen=True)

    # Score combiner
    semantic_weight: float = Field(default=0.5, ge=0.0, le=1.0)

    # Lexical scorer (BM25 term saturation)
    bm25_k1: float = Field(default=1.5, gt=0.0)
    bm25_b: float = Field(default=0.75, ge=0.0, le=1.0)
    avg_doc_length: float = Field(default=200.0, gt=0.0)
    lexical_frequency_weight: float = Field(default=0.6, ge=0.0, le=1.0)
    min_query_word_length: int = Field(default=3, ge=1)
    neutral_lexical_score: float = Field(default=0.5, ge=0.0, le=1.0)

    # Result selector
    min_results: int = Field(default=3, ge=0)
    max_results: int = Field(default=5, ge=1)

    # Retrieval
    retrieval_limit: int = Field(default=10, ge=1)
    retrieval_max_attempts: int = Field(default=3, ge=1)
    retrieval_retry_delay: float = Field(default=1.0, ge=0.0)

    # Intent overrides
    cheapest_price_ceiling: float = Field(default=50.0, gt=0.0)
    cheapest_min_multiplier: float = Field(default=1.2, gt=0.0)
    superlative_floor_ratio: float = Field(default=0.8, gt=0.0, le=1.0)
    price_range_tolerance: float = Field(default=0.2, ge=0.0, lt=1.0)

    # Result validator
    tier_bands: Dict[str, TierBand] = Field(default_factory=_default_tier_bands)

    # Context filter: a budget request rejects hotels above this nightly price
    budget_context_max_price: float = Field(default=300.0, gt=0.0)

    @model_validator(mode="after")
    def check_result_bounds(self):
        if self.min_results > self.max_results:
            raise ValueError("min_results cannot exceed max_results")
        return self

    @property
    def lexical_coverage_weight(self) -> float:
        return 1.0 - self.lexical_frequency_weight
