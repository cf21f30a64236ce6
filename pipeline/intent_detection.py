"""
Superlative and price-target intent detection for hotel queries.

This runs independently of the LLM parser: phrases like "cheapest" or
"mắc nhất" rarely map to a literal price, so they are resolved here against
catalog statistics instead.
"""
import logging
import math
import re
from typing import Optional

from data.statistics import CatalogStatistics
from models.hints import SearchHints, VALID_LOCATIONS
from models.intent import IntentDetectionResult
from models.settings import RankingConfig

logger = logging.getLogger(__name__)

# English + Vietnamese superlative vocabulary, checked in this order
MOST_EXPENSIVE_PATTERNS = [
    re.compile(r"most\s+expensive", re.IGNORECASE),
    re.compile(r"highest\s+price", re.IGNORECASE),
    re.compile(r"priciest", re.IGNORECASE),
    re.compile(r"mắc\s+nhất", re.IGNORECASE),
    re.compile(r"đắt\s+nhất", re.IGNORECASE),
    re.compile(r"giá\s+cao\s+nhất", re.IGNORECASE),
    re.compile(r"đắt\s+tiền\s+nhất", re.IGNORECASE),
]

CHEAPEST_PATTERNS = [
    re.compile(r"cheapest", re.IGNORECASE),
    re.compile(r"lowest\s+price", re.IGNORECASE),
    re.compile(r"most\s+affordable", re.IGNORECASE),
    re.compile(r"rẻ\s+nhất", re.IGNORECASE),
    re.compile(r"giá\s+thấp\s+nhất", re.IGNORECASE),
    re.compile(r"rẻ\s+tiền\s+nhất", re.IGNORECASE),
]

PRICE_TARGET_PATTERNS = [
    re.compile(r"around\s+\$?(\d+(?:\.\d+)?)", re.IGNORECASE),
    re.compile(r"about\s+\$?(\d+(?:\.\d+)?)", re.IGNORECASE),
    re.compile(r"approximately\s+\$?(\d+(?:\.\d+)?)", re.IGNORECASE),
    re.compile(r"~\s*\$?(\d+(?:\.\d+)?)", re.IGNORECASE),
    re.compile(r"khoảng\s+\$?(\d+(?:\.\d+)?)", re.IGNORECASE),
    re.compile(r"tầm\s+\$?(\d+(?:\.\d+)?)", re.IGNORECASE),
]

SUPERLATIVE_CONFIDENCE = 0.9
PRICE_TARGET_CONFIDENCE = 0.85
NORMAL_CONFIDENCE = 1.0


def extract_location(query: str) -> Optional[str]:
    """Find the first known city mentioned in the query."""
    query_lower = query.lower()
    for location in VALID_LOCATIONS:
        if location.lower() in query_lower:
            return location
    return None


def detect_query_intent(query: str) -> IntentDetectionResult:
    """
    Detect superlative or price-target intent from raw query text.

    Args:
        query: The raw user query

    Returns:
        IntentDetectionResult; "normal" with full confidence when nothing matches
    """
    for pattern in MOST_EXPENSIVE_PATTERNS:
        match = pattern.search(query)
        if match:
            return IntentDetectionResult(
                intent="most_expensive",
                confidence=SUPERLATIVE_CONFIDENCE,
                matched_phrase=match.group(0),
                location=extract_location(query),
            )

    for pattern in CHEAPEST_PATTERNS:
        match = pattern.search(query)
        if match:
            return IntentDetectionResult(
                intent="cheapest",
                confidence=SUPERLATIVE_CONFIDENCE,
                matched_phrase=match.group(0),
                location=extract_location(query),
            )

    for pattern in PRICE_TARGET_PATTERNS:
        match = pattern.search(query)
        if match:
            price_target = float(match.group(1))
            if price_target > 0:
                return IntentDetectionResult(
                    intent="price_range",
                    confidence=PRICE_TARGET_CONFIDENCE,
                    matched_phrase=match.group(0),
                    price_target=price_target,
                    location=extract_location(query),
                )

    return IntentDetectionResult(intent="normal", confidence=NORMAL_CONFIDENCE)


def reconcile_location(hints: SearchHints, intent_result: IntentDetectionResult) -> SearchHints:
    """Fill in the detector's location only when the parser found none."""
    if hints.location is None and intent_result.location is not None:
        return hints.model_copy(update={"location": intent_result.location})
    return hints


def apply_intent_overrides(
    hints: SearchHints,
    intent_result: IntentDetectionResult,
    statistics: CatalogStatistics,
    config: RankingConfig,
) -> SearchHints:
    """
    Translate a detected intent into concrete price, tier and sort hints.

    Overrides only apply once the location is known, since the bounds are
    derived from that city's price statistics.

    Args:
        hints: Hints produced by the query interpreter
        intent_result: Output of detect_query_intent
        statistics: Catalog price statistics
        config: Ranking configuration

    Returns:
        A new SearchHints with intent fields set
    """
    hints = reconcile_location(hints, intent_result)
    update = {
        "query_intent": intent_result.intent,
        "price_target": intent_result.price_target,
        "sort_intent": "relevance",
    }

    if hints.location is None:
        logger.info(f"Intent '{intent_result.intent}' detected without a location, skipping overrides")
        return hints.model_copy(update=update)

    active_stats = statistics.get_active_statistics()

    if intent_result.intent == "most_expensive":
        location_stats = statistics.get_location_statistics(hints.location)
        update["tier"] = "Luxury"
        update["sort_intent"] = "price_desc"
        if location_stats:
            floor_price = math.floor(round(location_stats.max_price * config.superlative_floor_ratio, 6))
            active_min = active_stats.min_price if active_stats else 0
            update["min_price"] = max(floor_price, active_min)

    elif intent_result.intent == "cheapest":
        update["tier"] = "Budget"
        update["sort_intent"] = "price_asc"
        ceiling = config.cheapest_price_ceiling
        if active_stats:
            ceiling = max(ceiling, math.ceil(round(active_stats.min_price * config.cheapest_min_multiplier, 6)))
        update["max_price"] = ceiling

    elif intent_result.intent == "price_range" and intent_result.price_target:
        target = intent_result.price_target
        update["min_price"] = math.floor(round(target * (1 - config.price_range_tolerance), 6))
        update["max_price"] = math.ceil(round(target * (1 + config.price_range_tolerance), 6))

    applied = {k: v for k, v in update.items() if v is not None}
    logger.info(f"Applied '{intent_result.intent}' intent overrides: {applied}")
    return hints.model_copy(update=update)
