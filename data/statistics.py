"""
Catalog price statistics used to resolve superlative intents.
"""
import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import numpy as np
from pydantic import BaseModel

from models.hints import VALID_LOCATIONS, VALID_TIERS

logger = logging.getLogger(__name__)


class PriceRange(BaseModel):
    """Recommended price range for a tier."""
    min: float
    max: Optional[float] = None
    typical: str = ""


class PriceStatistics(BaseModel):
    """Price distribution over the active catalog."""
    min_price: float
    max_price: float
    avg_price: float
    median_price: float
    count: int


class LocationStatistics(PriceStatistics):
    """Price distribution for one city."""
    location: str
    active_hotels: int = 0


class CatalogStatistics:
    """
    Read-only view over the catalog statistics file.

    The file is refreshed out of band (see ``vectordb.index``); this class
    never writes to it.
    """

    def __init__(self, data: Dict[str, Any]):
        self._data = data

    @classmethod
    def from_file(cls, path: str) -> "CatalogStatistics":
        """
        Load statistics from a JSON file.

        Args:
            path: Path to the statistics JSON file

        Returns:
            CatalogStatistics instance
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        logger.info(f"Loaded catalog statistics from {path}")
        return cls(data)

    def get_location_statistics(self, location: str) -> Optional[LocationStatistics]:
        stats = self._data.get("prices", {}).get("by_location", {}).get(location)
        if not stats:
            return None
        active = self._data.get("locations", {}).get("active_by_location", {}).get(location, 0)
        return LocationStatistics(
            location=location,
            min_price=stats["min"],
            max_price=stats["max"],
            avg_price=stats["avg"],
            median_price=stats["median"],
            count=stats["count"],
            active_hotels=active,
        )

    def get_active_statistics(self) -> Optional[PriceStatistics]:
        stats = self._data.get("prices", {}).get("active_hotels")
        if not stats:
            return None
        return PriceStatistics(
            min_price=stats["min"],
            max_price=stats["max"],
            avg_price=stats["avg"],
            median_price=stats["median"],
            count=stats["count"],
        )

    def get_recommended_price_range(self, tier: str) -> Optional[PriceRange]:
        recommendation = self._data.get("tier_analysis", {}).get("recommendation", {}).get(tier)
        if not recommendation:
            return None
        return PriceRange(**recommendation)


def _summarize(prices: List[float]) -> Dict[str, Any]:
    values = np.asarray(prices, dtype=float)
    return {
        "min": float(values.min()),
        "max": float(values.max()),
        "avg": round(float(values.mean()), 1),
        "median": float(np.median(values)),
        "count": int(values.size),
    }


def build_statistics(hotels: List[Dict[str, Any]], tier_bands: Dict[str, Any]) -> Dict[str, Any]:
    """
    Compute the statistics document from raw catalog rows.

    Args:
        hotels: Catalog rows with location, price_per_night, tier and is_active
        tier_bands: Mapping of tier name to TierBand, used for recommendations

    Returns:
        Statistics dictionary in the format read by CatalogStatistics
    """
    active = [h for h in hotels if h.get("is_active", True)]
    if not active:
        raise ValueError("Cannot build statistics without active hotels")

    by_location = {}
    active_by_location = {}
    for location in VALID_LOCATIONS:
        prices = [h["price_per_night"] for h in hotels if h.get("location") == location]
        if prices:
            by_location[location] = _summarize(prices)
        active_by_location[location] = sum(1 for h in active if h.get("location") == location)

    by_tier = {}
    for tier in VALID_TIERS:
        prices = [h["price_per_night"] for h in active if h.get("tier") == tier]
        if prices:
            by_tier[tier] = _summarize(prices)

    recommendation = {
        tier: {"min": band.min_price, "max": band.max_price, "typical": band.typical_range}
        for tier, band in tier_bands.items()
    }

    return {
        "generated_at": datetime.now().isoformat(timespec="seconds"),
        "prices": {
            "active_hotels": _summarize([h["price_per_night"] for h in active]),
            "by_location": by_location,
            "by_tier": by_tier,
        },
        "locations": {
            "unique_locations": sorted({h["location"] for h in hotels if h.get("location")}),
            "active_by_location": active_by_location,
        },
        "tier_analysis": {"recommendation": recommendation},
    }
