"""
FastAPI implementation for the hotel search system.
"""
import logging
import time
import uuid
from typing import Optional, Union

import uvicorn
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from config import APP_CONFIG
from models.response import ClarificationResponse, ResultsResponse
from services.search_service import HotelSearchService
from utils.errors import ParseError, RetrievalError

# Configure logging
logging.basicConfig(
    level=getattr(logging, APP_CONFIG["log_level"], logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

SEARCH_FAILED_DETAIL = "Search failed, please try again"

# Initialize FastAPI
app = FastAPI(
    title="Hotel Search API",
    description="API for conversational hotel search",
    version="1.0.0"
)

# Initialize services
search_service = HotelSearchService()


# API Models
class SearchRequest(BaseModel):
    """Search request model."""
    message: str = Field(default="", max_length=10000)
    session_id: Optional[str] = None


class SearchResponse(BaseModel):
    """Search response envelope."""
    request_id: str
    session_id: str
    result: Union[ClarificationResponse, ResultsResponse] = Field(discriminator="type")


# API Routes
@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Hotel Search API"}


@app.post("/hotel-search", response_model=SearchResponse)
async def hotel_search(request: SearchRequest):
    """
    Run one conversational search turn.

    Args:
        request: Search request object

    Returns:
        Search response with either a clarification or ranked hotels
    """
    request_id = str(uuid.uuid4())
    session_id = request.session_id or str(uuid.uuid4())

    logger.info(f"Search request: ID={request_id}, Session={session_id}, Message='{request.message}'")

    start_time = time.time()
    try:
        result = await search_service.search(request.message, session_id=session_id)
    except ParseError as e:
        logger.error(f"Search request {request_id} failed to parse: {str(e)}")
        raise HTTPException(status_code=502, detail=SEARCH_FAILED_DETAIL)
    except RetrievalError as e:
        logger.error(f"Search request {request_id} failed to retrieve: {str(e)}")
        raise HTTPException(status_code=503, detail=SEARCH_FAILED_DETAIL)

    execution_time = time.time() - start_time
    logger.info(f"Search completed: ID={request_id}, Time={execution_time:.2f}s")

    return SearchResponse(request_id=request_id, session_id=session_id, result=result)


@app.delete("/session/{session_id}")
async def clear_session(session_id: str):
    """
    Clear a conversation session.

    Args:
        session_id: Session identifier

    Returns:
        Success message
    """
    existed = await search_service.conversation_service.clear_session(session_id)
    return {"message": f"Session {session_id} cleared successfully", "existed": existed}


@app.get("/health")
async def health_check():
    """
    Health check endpoint.

    Returns:
        Health status
    """
    health_metrics = search_service.monitor.get_system_health()
    health_metrics["status"] = "healthy"
    health_metrics["active_sessions"] = search_service.conversation_service.active_sessions()
    health_metrics["timestamp"] = time.time()
    return health_metrics


@app.get("/metrics")
async def get_metrics():
    """
    Get system metrics.

    Returns:
        System metrics
    """
    return search_service.monitor.get_performance_report()


if __name__ == "__main__":
    # Run the API using Uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
