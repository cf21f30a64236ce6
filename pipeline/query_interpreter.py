"""
Query interpretation component for the search pipeline.
"""
import json
import logging
import math
from typing import Any, Callable, Dict, Optional

from data.hotel_config import (
    TOP_AMENITIES,
    infer_tier_from_keywords,
    map_keywords_to_amenities,
    normalize_tier,
)
from models.hints import SearchHints, VALID_LOCATIONS
from models.state import SearchState
from pipeline.intent_detection import apply_intent_overrides, detect_query_intent
from utils.errors import ParseError
from utils.llm import get_llm, strip_code_fences
from utils.prompts import QUERY_PARSING_PROMPT

logger = logging.getLogger(__name__)

QueryParser = Callable[[str], Dict[str, Any]]


def parse_query_with_llm(query: str) -> Dict[str, Any]:
    """
    Ask the LLM to turn the query into raw (unvalidated) search parameters.

    Args:
        query: The user query

    Returns:
        The parsed JSON object

    Raises:
        ParseError: If the call fails or the content is not a JSON object
    """
    chain = QUERY_PARSING_PROMPT | get_llm()

    try:
        content = chain.invoke({
            "query": query,
            "amenities": ", ".join(TOP_AMENITIES)
        }).content
    except Exception as e:
        logger.error(f"Query parsing call failed: {str(e)}")
        raise ParseError("Query parsing service failed") from e

    if not content or not str(content).strip():
        raise ParseError("Query parsing service returned an empty response")

    logger.debug(f"Raw query parsing result: {content}")

    try:
        parsed = json.loads(strip_code_fences(str(content)))
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse JSON from query parsing: {content}")
        raise ParseError("Query parsing service returned invalid JSON") from e

    if not isinstance(parsed, dict):
        raise ParseError("Query parsing service did not return a JSON object")

    return parsed


def _as_number(value) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return float(value)


def _normalize_location(value) -> Optional[str]:
    if not isinstance(value, str):
        return None
    for location in VALID_LOCATIONS:
        if value.strip().lower() == location.lower():
            return location
    return None


def sanitize_parsed_hints(raw: Dict[str, Any]) -> SearchHints:
    """
    Validate the parser's raw output against the hints schema.

    Out-of-range values are dropped rather than rejected, so one bad field
    does not discard the rest of the request.

    Args:
        raw: JSON object returned by the query parser

    Returns:
        SearchHints without any intent overrides applied
    """
    raw_keywords = raw.get("keywords")
    keywords = []
    if isinstance(raw_keywords, list):
        keywords = [str(k).strip().lower() for k in raw_keywords if str(k).strip()]

    min_price = _as_number(raw.get("minPrice"))
    if min_price is not None and min_price < 0:
        logger.warning(f"Dropping negative minPrice: {min_price}")
        min_price = None

    max_price = _as_number(raw.get("maxPrice"))
    if max_price is not None and max_price <= 0:
        logger.warning(f"Dropping non-positive maxPrice: {max_price}")
        max_price = None

    exact_price = _as_number(raw.get("price"))
    if exact_price is not None and exact_price <= 0:
        exact_price = None

    tier = normalize_tier(raw.get("tier"))
    if raw.get("tier") and tier is None:
        logger.info(f"Unrecognized tier '{raw.get('tier')}', ignoring")
    if tier is None:
        tier = infer_tier_from_keywords(keywords)

    name = raw.get("name")
    name = name.strip() if isinstance(name, str) and name.strip() else None

    return SearchHints(
        location=_normalize_location(raw.get("location")),
        min_price=min_price,
        max_price=max_price,
        exact_price=exact_price,
        tier=tier,
        name=name,
        keywords=tuple(keywords),
        amenities=tuple(map_keywords_to_amenities(keywords)),
    )


def merge_hints(previous: Optional[SearchHints], current: SearchHints) -> SearchHints:
    """
    Merge a follow-up turn into the hints of the pending request.

    Non-null fields of the current turn win; keywords and amenities are unioned.
    """
    if previous is None:
        return current

    update = {}
    for field in ("location", "min_price", "max_price", "exact_price", "tier", "name"):
        value = getattr(current, field)
        update[field] = value if value is not None else getattr(previous, field)
    update["keywords"] = tuple(previous.keywords) + tuple(
        k for k in current.keywords if k not in previous.keywords
    )
    update["amenities"] = tuple(sorted(set(previous.amenities) | set(current.amenities)))

    # Re-validate so the merged value keeps the same invariants as a parsed one
    return SearchHints(**{**current.model_dump(), **update})


def interpret_query(query: str, parser: QueryParser = parse_query_with_llm) -> SearchHints:
    """
    Turn raw query text into sanitized search hints.

    Args:
        query: The user query
        parser: Callable returning the raw JSON parameters for a query

    Returns:
        SearchHints

    Raises:
        ParseError: If the parser fails
    """
    raw = parser(query)
    if not isinstance(raw, dict):
        raise ParseError("Query parser did not return a JSON object")
    return sanitize_parsed_hints(raw)


def extract_hints(state: SearchState, deps) -> SearchState:
    """
    Interprets the query and applies superlative / price-target intent overrides.

    Args:
        state: The current search state
        deps: SearchDependencies bound at graph construction

    Returns:
        Updated state with hints and intent result
    """
    query = state["query"]
    search_text = state.get("search_text") or query
    context = state.get("conversation_context")

    logger.info(f"Interpreting query: '{query}'")

    hints = interpret_query(query, deps.parser)
    if context is not None and context.partial_hints is not None:
        hints = merge_hints(context.partial_hints, hints)
        logger.info("Merged follow-up turn into pending request")

    intent_result = detect_query_intent(search_text)
    logger.info(f"Detected query intent: {intent_result.intent} "
                f"(confidence={intent_result.confidence})")

    hints = apply_intent_overrides(hints, intent_result, deps.statistics, deps.config)

    return {
        **state,
        "hints": hints,
        "intent_result": intent_result,
        "metadata": {
            **(state.get("metadata", {})),
            "query_intent": intent_result.intent,
            "intent_confidence": intent_result.confidence,
            "location_found": hints.location is not None
        }
    }
