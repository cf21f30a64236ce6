"""
Deterministic explanations and summary messages for returned hotels.
"""
from typing import List, Optional

from data.statistics import PriceRange
from models.hints import SearchHints
from models.hotel import Candidate, RankedHotel
from models.response import MatchReason


def format_price(price: float) -> str:
    if float(price).is_integer():
        return f"${int(price)}"
    return f"${price:.2f}"


def build_explanation(candidate: Candidate, hints: SearchHints) -> str:
    """
    Explain why a candidate was returned.

    Args:
        candidate: A scored candidate
        hints: Search hints for the request

    Returns:
        Clauses joined by "; "
    """
    clauses = [f"Located in {candidate.location}"]

    price_text = f"{format_price(candidate.price)}/night"
    if hints.max_price is not None and candidate.price <= hints.max_price:
        price_text += ", within your budget"
    clauses.append(price_text)

    if candidate.tier:
        if hints.tier and candidate.tier == hints.tier:
            clauses.append(f"{candidate.tier} tier, as requested")
        else:
            clauses.append(f"{candidate.tier} tier")

    candidate_amenities = [a.lower() for a in candidate.amenities]
    matched = [
        amenity for amenity in hints.amenities
        if any(amenity.lower() in available for available in candidate_amenities)
    ]
    if matched:
        clauses.append(f"Has {', '.join(matched)}")

    semantic_pct = round((candidate.semantic_score + 1) / 2 * 100)
    lexical_pct = round((candidate.lexical_score or 0.0) * 100)
    clauses.append(f"Semantic {semantic_pct}% / Keyword {lexical_pct}%")

    return "; ".join(clauses)


def rank_hotels(candidates: List[Candidate], hints: SearchHints) -> List[RankedHotel]:
    """Attach an explanation to every selected candidate."""
    return [
        RankedHotel(**candidate.model_dump(), explanation=build_explanation(candidate, hints))
        for candidate in candidates
    ]


def build_match_reasons(hotels: List[RankedHotel], hints: SearchHints) -> List[MatchReason]:
    return [
        MatchReason(
            hotel_id=hotel.id,
            match_score=round(hotel.combined_score or 0.0, 4),
            match_reason=hotel.explanation or build_explanation(hotel, hints),
        )
        for hotel in hotels
    ]


def _describe_request(hints: SearchHints) -> str:
    parts = []
    if hints.location:
        parts.append(f" in {hints.location}")
    if hints.max_price is not None:
        parts.append(f" within your budget of {format_price(hints.max_price)}")
    if hints.tier:
        parts.append(f" in the {hints.tier} category")
    return "".join(parts)


def build_no_results_message(hints: SearchHints, tier_range: Optional[PriceRange] = None) -> str:
    """
    Message for a request with no matching hotels.

    Args:
        hints: Search hints for the request
        tier_range: Recommended price range of the requested tier, if known

    Returns:
        Apology with a hint on how to widen the search
    """
    message = f"Sorry, I could not find matches{_describe_request(hints)}. "
    if hints.tier and tier_range is not None and tier_range.typical:
        message += f"{hints.tier} hotels usually cost {tier_range.typical} per night. "
    return message + "Try widening your budget or relaxing the tier."


def build_results_message(hotels: List[RankedHotel], hints: SearchHints) -> str:
    """
    Summarize the returned hotels in one deterministic message.

    Args:
        hotels: The returned hotels, best first
        hints: Search hints for the request

    Returns:
        Summary message; a "could not find matches" message for an empty list
    """
    if not hotels:
        return build_no_results_message(hints)

    noun = "hotel" if len(hotels) == 1 else "hotels"
    top = hotels[0]
    return (
        f"Found {len(hotels)} {noun}{_describe_request(hints)}. "
        f"The top match is {top.name} at {format_price(top.price)}/night."
    )
