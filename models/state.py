"""
State definitions for the hotel search graph.
"""
from typing import Dict, List, Any, Optional, TypedDict

from models.hints import SearchHints
from models.hotel import Candidate, RankedHotel, RemovedCandidate
from models.intent import IntentDetectionResult
from models.response import ConversationContext, MatchReason


class SearchState(TypedDict, total=False):
    """
    Represents the state of our search graph.
    Maintains all information as it flows through the pipeline.
    """
    # Core query information
    query: str  # Original user query
    search_text: str  # Query merged with any pending clarification turn
    conversation_context: Optional[ConversationContext]
    intent_result: Optional[IntentDetectionResult]
    hints: Optional[SearchHints]

    # Retrieval and ranking
    query_vector: Optional[List[float]]
    retrieval_results: List[Candidate]  # Hard-filtered candidates with semantic scores
    scored_results: List[Candidate]  # + lexical and combined scores
    validated_results: List[Candidate]  # Passed the data-integrity checks
    filtered_results: List[Candidate]  # Passed the context filter
    removed_results: List[RemovedCandidate]
    ranked_results: List[RankedHotel]  # Final bounded list with explanations
    match_reasons: List[MatchReason]

    # Response
    response_type: Optional[str]  # "clarification" or "results"
    response: Optional[str]  # Message to return to the user

    # Error handling
    input_validation_error: Optional[str]
    error: Optional[str]

    # Context and metadata
    metadata: Dict[str, Any]
