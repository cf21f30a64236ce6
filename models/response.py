"""
Response models exposed by the search core to its caller.
"""
from typing import Any, List, Literal, Optional
from pydantic import BaseModel, Field

from models.hints import SearchHints
from models.hotel import RankedHotel


class MatchReason(BaseModel):
    """Why a returned hotel matched the request."""
    hotel_id: Any
    match_score: float
    match_reason: str


class ClarificationResponse(BaseModel):
    """Returned when the request cannot be searched until the user answers a follow-up."""
    type: Literal["clarification"] = "clarification"
    message: str
    missing_fields: List[str] = Field(default_factory=lambda: ["location"])
    partial_hints: SearchHints = Field(default_factory=SearchHints)


class ResultsResponse(BaseModel):
    """Ranked hotels for a searchable request. An empty list is a valid outcome."""
    type: Literal["results"] = "results"
    message: str
    hints: SearchHints
    hotels: List[RankedHotel] = Field(default_factory=list)
    match_reasons: List[MatchReason] = Field(default_factory=list)


class ConversationContext(BaseModel):
    """Pending state of a clarification turn, merged into the user's next message."""
    previous_query: Optional[str] = None
    partial_hints: Optional[SearchHints] = None
