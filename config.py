"""
Configuration settings for the hotel search system.
"""
import os
from typing import Dict, Any
from dotenv import load_dotenv

from models.settings import RankingConfig

# Load environment variables
load_dotenv()

# Vector store config (Qdrant)
VECTOR_STORE_CONFIG = {
    "url": os.environ.get("QDRANT_URL", "http://localhost:6333"),
    "api_key": os.environ.get("QDRANT_API_KEY", ""),
    "collection_name": os.environ.get("QDRANT_COLLECTION", "hotels"),
    "dimension": int(os.environ.get("VECTOR_DIMENSION", "384")),
    "timeout": int(os.environ.get("QDRANT_TIMEOUT", "30")),
}

# LLM configuration (query parsing and re-ranking)
LLM_CONFIG = {
    "model": os.environ.get("LLM_MODEL", "gemini-2.0-flash-lite"),
    "temperature": float(os.environ.get("LLM_TEMPERATURE", "0.0")),
    "api_key": os.environ.get("LLM_API_KEY", "")
}

# Embedding configuration
EMBEDDING_CONFIG = {
    "model": os.environ.get("EMBEDDING_MODEL", "sentence-transformers/all-MiniLM-L6-v2"),
    "device": os.environ.get("EMBEDDING_DEVICE", "cpu"),
}

# Application configuration
APP_CONFIG = {
    "debug": os.environ.get("DEBUG", "False").lower() == "true",
    "log_level": os.environ.get("LOG_LEVEL", "INFO"),
    "session_ttl": int(os.environ.get("SESSION_TTL", "3600")),  # in seconds
    "max_query_length": int(os.environ.get("MAX_QUERY_LENGTH", "500")),
    "statistics_path": os.environ.get(
        "HOTEL_STATISTICS_PATH",
        os.path.join(os.path.dirname(os.path.abspath(__file__)), "data", "hotel_statistics.json")
    ),
}

# Search and ranking configuration
SEARCH_CONFIG = {
    "retrieval_limit": int(os.environ.get("SEARCH_RETRIEVAL_LIMIT", "10")),
    "semantic_weight": float(os.environ.get("SEARCH_SEMANTIC_WEIGHT", "0.5")),
    "min_results": int(os.environ.get("SEARCH_MIN_RESULTS", "3")),
    "max_results": int(os.environ.get("SEARCH_MAX_RESULTS", "5")),
    "cheapest_price_ceiling": float(os.environ.get("SEARCH_CHEAPEST_CEILING", "50")),
    "budget_context_max_price": float(os.environ.get("SEARCH_BUDGET_CONTEXT_MAX_PRICE", "300")),
    "retrieval_max_attempts": int(os.environ.get("SEARCH_RETRIEVAL_ATTEMPTS", "3")),
    "retrieval_retry_delay": float(os.environ.get("SEARCH_RETRIEVAL_RETRY_DELAY", "1.0")),
}

# Feature flags
FEATURES = {
    "use_conversation_context": os.environ.get("USE_CONVERSATION", "True").lower() == "true",
    "use_llm_reranking": os.environ.get("USE_LLM_RERANKING", "False").lower() == "true",
    "log_telemetry": os.environ.get("LOG_TELEMETRY", "True").lower() == "true",
}


def get_ranking_config() -> RankingConfig:
    """Build the immutable ranking configuration from SEARCH_CONFIG."""
    return RankingConfig(
        semantic_weight=SEARCH_CONFIG["semantic_weight"],
        min_results=SEARCH_CONFIG["min_results"],
        max_results=SEARCH_CONFIG["max_results"],
        retrieval_limit=SEARCH_CONFIG["retrieval_limit"],
        cheapest_price_ceiling=SEARCH_CONFIG["cheapest_price_ceiling"],
        budget_context_max_price=SEARCH_CONFIG["budget_context_max_price"],
        retrieval_max_attempts=SEARCH_CONFIG["retrieval_max_attempts"],
        retrieval_retry_delay=SEARCH_CONFIG["retrieval_retry_delay"],
    )


def get_config() -> Dict[str, Any]:
    """Return the complete configuration dictionary."""
    return {
        "llm": LLM_CONFIG,
        "embedding": EMBEDDING_CONFIG,
        "vector_store": VECTOR_STORE_CONFIG,
        "app": APP_CONFIG,
        "search": SEARCH_CONFIG,
        "features": FEATURES
    }
