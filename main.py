"""
Main entry point for the hotel search system.
"""
import asyncio
import logging
from typing import List

from config import APP_CONFIG, get_config
from services.search_service import HotelSearchService
from utils.errors import HotelSearchError

# Configure logging
logging.basicConfig(
    level=getattr(logging, APP_CONFIG["log_level"], logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def initialize_system() -> HotelSearchService:
    """Initialize the search system."""
    logger.info("Initializing hotel search system")
    config = get_config()

    logger.info(f"System configured with: LLM={config['llm']['model']}, "
                f"Embeddings={config['embedding']['model']}, Features={config['features']}")

    return HotelSearchService()


async def run_conversation(service: HotelSearchService, turns: List[str], session_id: str):
    """
    Send a sequence of messages through one session and print each response.

    Args:
        service: The search service
        turns: User messages in order
        session_id: Session identifier shared by the turns
    """
    for turn in turns:
        print(f"\nUSER: {turn}")
        try:
            response = await service.search(turn, session_id=session_id)
        except HotelSearchError as e:
            print(f"ERROR: search failed, try again ({e})")
            continue

        print(f"ASSISTANT: {response.message}")
        if response.type == "results":
            for idx, hotel in enumerate(response.hotels, 1):
                print(f"  {idx}. {hotel.name} - ${hotel.price:g}/night")
                print(f"     {hotel.explanation}")
        print("-" * 80)


if __name__ == "__main__":
    service = initialize_system()

    test_queries = [
        "I need a quiet place in Melbourne under $200",
        "cheapest hotel in Melbourne",
        "tôi muốn tìm khách sạn mắc nhất ở Sydney",
        "hotel around $200 in Brisbane",
    ]

    print("\n=== TESTING STANDARD QUERIES ===")
    for idx, query in enumerate(test_queries):
        asyncio.run(run_conversation(service, [query], session_id=f"demo-{idx}"))

    print("\n=== TESTING CLARIFICATION FLOW ===")
    asyncio.run(run_conversation(
        service,
        ["I need a family hotel under $200", "Sydney please"],
        session_id="demo-clarification"
    ))

    print("\n=== SYSTEM HEALTH METRICS ===")
    for metric, value in service.monitor.get_system_health().items():
        print(f"{metric}: {value}")
    print("-" * 80)
