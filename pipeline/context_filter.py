"""
Context filter: removes candidates that contradict the atmosphere the user asked for.

A "quiet" request should not surface a party hostel even if its semantic
score is high, so each context tag carries a contradiction rule.
"""
import logging
from typing import Dict, List, NamedTuple, Optional

from models.hints import SearchHints
from models.hotel import Candidate, RemovedCandidate
from models.settings import RankingConfig
from models.state import SearchState

logger = logging.getLogger(__name__)

# Context tag -> terms that activate it (substring match on query + keywords)
CONTEXT_VOCABULARY: Dict[str, List[str]] = {
    "quiet_peaceful": ["quiet", "peaceful", "silent", "tranquil", "serene", "calm", "relaxing", "yên tĩnh"],
    "party_nightlife": ["party", "parties", "nightlife", "nightclub", "club", "bar", "lively"],
    "family_friendly": ["family", "kids", "children", "child", "gia đình"],
    "business": ["business", "corporate", "meeting", "conference", "công tác"],
    "luxury": ["luxury", "luxurious", "premium", "upscale", "five-star", "5-star", "sang trọng"],
    "budget": ["budget", "cheap", "affordable", "inexpensive", "giá rẻ"],
    "beach": ["beach", "seaside", "oceanfront", "biển"],
    "romantic": ["romantic", "honeymoon", "couple", "anniversary", "lãng mạn"],
}

# Context tag -> terms in name/description that contradict it
CONTRADICTION_TERMS: Dict[str, List[str]] = {
    "quiet_peaceful": ["party", "parties", "nightclub", "dj", "loud", "noisy", "nightlife"],
    "party_nightlife": ["silent retreat", "no noise", "adults-only quiet", "meditation retreat"],
    "family_friendly": ["adults only", "adults-only", "party hostel", "nightclub", "18+"],
    "business": ["no wifi", "digital detox", "party hostel"],
    "luxury": ["hostel", "backpacker", "dorm"],
    "budget": [],
    "beach": [],
    "romantic": ["hostel", "dorm", "party", "parties", "backpacker"],
}

# Longer words that contain a term without meaning it
MATCH_EXCEPTIONS: Dict[str, List[str]] = {
    "bar": ["barbecue", "barista", "bargain", "barrier", "embark"],
    "club": ["kids club", "kids' club", "golf club"],
    "dj": ["adjacent", "adjoin", "adjust"],
    "loud": ["cloud"],
    "party": ["third-party", "third party"],
}


class ContextFilterResult(NamedTuple):
    """Candidates kept by the context filter plus a record of what it removed."""
    candidates: List[Candidate]
    removed: List[RemovedCandidate]


def _mentions(term: str, text: str) -> bool:
    """Substring match on lowercase text, ignoring the term's known false friends."""
    for word in MATCH_EXCEPTIONS.get(term, ()):
        text = text.replace(word, " ")
    return term in text


def classify_context_tags(text: str) -> List[str]:
    """
    Detect the context tags mentioned in a text.

    Args:
        text: Query text, optionally joined with hint keywords

    Returns:
        Active tags in a stable order
    """
    text_lower = text.lower()
    return [
        tag for tag, vocabulary in CONTEXT_VOCABULARY.items()
        if any(_mentions(term, text_lower) for term in vocabulary)
    ]


def _contradiction(tag: str, candidate: Candidate, config: RankingConfig) -> Optional[str]:
    """Return a removal reason if the candidate contradicts the tag."""
    text = f"{candidate.name} {candidate.description}".lower()

    if tag == "luxury" and candidate.tier == "Budget":
        return "Budget tier contradicts a luxury request"
    if tag == "budget":
        if candidate.tier == "Luxury":
            return "Luxury tier contradicts a budget request"
        if candidate.price > config.budget_context_max_price:
            return f"${candidate.price:g}/night contradicts a budget request"

    for term in CONTRADICTION_TERMS.get(tag, []):
        if _mentions(term, text):
            return f"Mentions '{term}', contradicting a {tag.replace('_', ' ')} request"
    return None


def apply_context_filter(
    query: str,
    hints: SearchHints,
    candidates: List[Candidate],
    config: Optional[RankingConfig] = None,
) -> ContextFilterResult:
    """
    Remove candidates that contradict the request's context tags.

    Args:
        query: The raw query text
        hints: Search hints (keywords count as context too)
        candidates: Validated candidates
        config: Ranking configuration (budget price threshold)

    Returns:
        ContextFilterResult. If every candidate would be removed the input
        list is returned unchanged with an empty removal record.
    """
    config = config or RankingConfig()
    tags = classify_context_tags(" ".join([query, *hints.keywords]))
    if not tags or not candidates:
        return ContextFilterResult(list(candidates), [])

    kept = []
    removed = []
    for candidate in candidates:
        for tag in tags:
            reason = _contradiction(tag, candidate, config)
            if reason:
                removed.append(RemovedCandidate(
                    candidate_id=candidate.id,
                    name=candidate.name,
                    tag=tag,
                    reason=reason,
                ))
                break
        else:
            kept.append(candidate)

    if not kept:
        logger.warning(f"Context filter {tags} would remove all {len(candidates)} candidates, skipping")
        return ContextFilterResult(list(candidates), [])

    for entry in removed:
        logger.info(f"Context filter removed hotel {entry.candidate_id} ('{entry.name}'): {entry.reason}")

    return ContextFilterResult(kept, removed)


def filter_by_context(state: SearchState, deps) -> SearchState:
    """
    Applies the context filter to the validated candidates.

    Args:
        state: The current search state
        deps: SearchDependencies bound at graph construction

    Returns:
        Updated state with filtered and removed results
    """
    search_text = state.get("search_text") or state["query"]
    result = apply_context_filter(
        search_text, state["hints"], state.get("validated_results", []), deps.config
    )

    return {
        **state,
        "filtered_results": result.candidates,
        "removed_results": result.removed,
        "metadata": {
            **(state.get("metadata", {})),
            "context_tags": classify_context_tags(" ".join([search_text, *state["hints"].keywords])),
            "context_removed_count": len(result.removed)
        }
    }
