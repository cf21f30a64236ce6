"""
Hotel catalog vocabulary: amenity mapping and keyword-based tier inference.
"""
from typing import Iterable, List, Optional, Tuple

# Most common amenities in the catalog, offered to the query parser as vocabulary
TOP_AMENITIES = [
    "Bar", "Pool", "View", "River", "Garden", "Club", "Train", "Sand", "Ferry", "Beer",
    "Shop", "WiFi", "Desk", "Gym", "Kitchen", "Balcony", "Nature", "Casino", "Beach",
    "History", "Vegan", "Surf", "Cafe", "Market", "Walk", "Climb", "Cinema", "Tea", "Yoga",
]

# User query keyword -> catalog amenities (many-to-many)
AMENITY_MAPPING = {
    # Quiet / peaceful
    "quiet": ["Quiet", "Silence", "Nature", "Library", "No TV"],
    "peaceful": ["Quiet", "Silence", "Nature", "Garden"],
    "silent": ["Quiet", "Silence", "No TV"],
    "tranquil": ["Quiet", "Nature", "Garden"],
    "serene": ["Quiet", "Nature", "Garden"],

    # Family
    "family": ["Pool", "Kids Club", "Kitchen", "Beach", "Games Room"],
    "family-friendly": ["Pool", "Kids Club", "Kitchen", "Beach"],
    "kids": ["Pool", "Kids Club", "Beach", "Games Room"],
    "children": ["Pool", "Kids Club", "Beach"],

    # Business
    "business": ["WiFi", "Desk", "Meeting", "Gym", "Co-working"],
    "corporate": ["WiFi", "Desk", "Meeting", "Gym"],
    "meeting": ["Meeting", "Ballroom", "Desk"],
    "conference": ["Meeting", "Ballroom", "Desk"],

    # Luxury
    "luxury": ["Spa", "Butler", "View", "Pool", "Casino", "Concierge"],
    "spa": ["Spa", "Pool"],
    "butler": ["Butler", "Chauffeur"],
    "exclusive": ["Private", "Butler", "View"],

    # Nature / outdoor
    "nature": ["Nature", "Garden", "Forest", "Hiking"],
    "garden": ["Garden", "Nature"],
    "beach": ["Beach", "Sand", "Pool"],
    "pool": ["Pool", "Beach"],
    "river": ["River", "View", "Walk"],

    # Transport
    "train": ["Train", "Central"],
    "ferry": ["Ferry"],
    "airport": ["Shuttle", "Plane"],
    "transport": ["Train", "Ferry", "Shuttle"],

    # Food and drink
    "restaurant": ["Dining", "Food"],
    "bar": ["Bar", "Club", "Beer"],
    "cafe": ["Cafe", "Coffee"],
    "breakfast": ["Cafe", "Coffee", "Tea"],
    "vegan": ["Vegan"],

    # Entertainment
    "casino": ["Casino", "Gambling"],
    "nightlife": ["Club", "Bar", "Nightlife"],
    "party": ["Club", "Bar", "Beer"],

    # Practical
    "wifi": ["WiFi", "Ethernet"],
    "internet": ["WiFi", "Ethernet"],
    "gym": ["Gym"],
    "parking": ["Parking"],
    "kitchen": ["Kitchen"],

    # Unique experiences
    "view": ["View", "Balcony", "River"],
    "balcony": ["Balcony", "View"],
    "library": ["Library", "Books"],
    "fireplace": ["Fireplace", "Books"],
}

# Keyword fragments that imply a tier, checked in this order; first match wins
TIER_KEYWORD_RULES: List[Tuple[str, Tuple[str, ...]]] = [
    ("Budget", ("budget", "cheap", "affordable")),
    ("Luxury", ("luxury", "premium", "exclusive")),
    ("Mid-tier", ("mid", "moderate")),
]

# Tier spellings accepted from the query parser
TIER_ALIASES = {
    "budget": "Budget",
    "mid-tier": "Mid-tier",
    "mid tier": "Mid-tier",
    "midrange": "Mid-tier",
    "mid-range": "Mid-tier",
    "luxury": "Luxury",
}


def map_keywords_to_amenities(keywords: Iterable[str]) -> List[str]:
    """Map user keywords to catalog amenities, collapsing duplicates."""
    mapped = set()
    for keyword in keywords:
        mapped.update(AMENITY_MAPPING.get(keyword.lower(), []))
    return sorted(mapped)


def infer_tier_from_keywords(keywords: Iterable[str]) -> Optional[str]:
    """Guess a tier from substrings of the joined keywords."""
    keyword_text = " ".join(keywords).lower()
    if not keyword_text:
        return None
    for tier, fragments in TIER_KEYWORD_RULES:
        if any(fragment in keyword_text for fragment in fragments):
            return tier
    return None


def normalize_tier(value) -> Optional[str]:
    """Coerce a parser tier string to its canonical spelling, or None if unrecognized."""
    if not isinstance(value, str):
        return None
    return TIER_ALIASES.get(value.strip().lower())
