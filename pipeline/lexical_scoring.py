"""
Keyword relevance scoring (BM25-style term saturation) for hotel candidates.
"""
import logging
import re
from typing import Iterable, List

from models.hotel import Candidate
from models.settings import RankingConfig

logger = logging.getLogger(__name__)


def candidate_text(candidate: Candidate) -> str:
    """Lowercased text blob the keywords are matched against."""
    parts = [
        candidate.name,
        candidate.description,
        candidate.tier or "",
        " ".join(candidate.amenities),
    ]
    return " ".join(parts).lower()


def query_terms(keywords: Iterable[str], query: str, config: RankingConfig) -> List[str]:
    """
    Terms to score against: the hint keywords, else the longer words of the query.
    """
    terms = [k.lower() for k in keywords if k and k.strip()]
    if terms:
        return terms
    return [w for w in query.lower().split() if len(w) >= config.min_query_word_length]


def count_occurrences(term: str, text: str) -> int:
    """Literal, case-insensitive occurrence count. Regex metacharacters match themselves."""
    return len(re.findall(re.escape(term.lower()), text))


def lexical_score(
    candidate: Candidate,
    keywords: Iterable[str],
    query: str,
    config: RankingConfig,
) -> float:
    """
    Score how well a candidate's text covers the request's keywords.

    Args:
        candidate: The hotel candidate
        keywords: Hint keywords; the query words are used if empty
        query: The raw query text
        config: Ranking configuration (BM25 and blend parameters)

    Returns:
        Score in [0, 1]; the neutral score when there is nothing to match
    """
    terms = query_terms(keywords, query, config)
    if not terms:
        return config.neutral_lexical_score

    text = candidate_text(candidate)
    doc_length = len(text)
    k1 = config.bm25_k1
    b = config.bm25_b
    length_norm = 1 - b + b * doc_length / config.avg_doc_length

    accumulated = 0.0
    matched = 0
    for term in terms:
        tf = count_occurrences(term, text)
        if tf > 0:
            matched += 1
            accumulated += tf * (k1 + 1) / (tf + k1 * length_norm)

    normalized = min(1.0, accumulated / (len(terms) * (k1 + 1)))
    coverage = matched / len(terms)
    score = (config.lexical_frequency_weight * normalized
             + config.lexical_coverage_weight * coverage)

    return max(0.0, min(1.0, score))
