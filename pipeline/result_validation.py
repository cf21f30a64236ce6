"""
Data-integrity checks applied to scored candidates before selection.
"""
import logging
from typing import List

from models.hints import VALID_LOCATIONS
from models.hotel import Candidate, ValidationVerdict
from models.settings import RankingConfig
from models.state import SearchState

logger = logging.getLogger(__name__)


def validate_candidate(candidate: Candidate, config: RankingConfig) -> ValidationVerdict:
    """
    Check one candidate for catalog data problems.

    Args:
        candidate: The candidate to check
        config: Ranking configuration (tier bands)

    Returns:
        ValidationVerdict; invalid verdicts carry the first failing reason
    """
    if candidate.price <= 0:
        return ValidationVerdict(valid=False, reason=f"Invalid price: {candidate.price}")

    if candidate.tier is not None:
        band = config.tier_bands.get(candidate.tier)
        if band is not None and not band.contains(candidate.price):
            return ValidationVerdict(
                valid=False,
                reason=f"Price ${candidate.price:g} outside {candidate.tier} range {band.typical_range}"
            )

    if candidate.location not in VALID_LOCATIONS:
        return ValidationVerdict(valid=False, reason=f"Unknown location: '{candidate.location}'")

    if not -1.0 <= candidate.semantic_score <= 1.0:
        return ValidationVerdict(
            valid=False,
            reason=f"Semantic score out of range: {candidate.semantic_score}"
        )

    if not candidate.name.strip():
        return ValidationVerdict(valid=False, reason="Missing hotel name")

    return ValidationVerdict(valid=True)


def filter_valid_candidates(candidates: List[Candidate], config: RankingConfig) -> List[Candidate]:
    """Drop invalid candidates, logging each, and keep the rest in order."""
    valid = []
    for candidate in candidates:
        verdict = validate_candidate(candidate, config)
        if verdict.valid:
            valid.append(candidate)
        else:
            logger.warning(f"Dropping hotel {candidate.id} ('{candidate.name}'): {verdict.reason}")
    return valid


def validate_results(state: SearchState, deps) -> SearchState:
    """
    Removes candidates with inconsistent catalog data.

    Args:
        state: The current search state
        deps: SearchDependencies bound at graph construction

    Returns:
        Updated state with validated results
    """
    scored_results = state.get("scored_results", [])
    validated_results = filter_valid_candidates(scored_results, deps.config)

    dropped = len(scored_results) - len(validated_results)
    if dropped:
        logger.info(f"Validation dropped {dropped} of {len(scored_results)} candidates")

    return {
        **state,
        "validated_results": validated_results,
        "metadata": {
            **(state.get("metadata", {})),
            "validation_dropped_count": dropped
        }
    }
