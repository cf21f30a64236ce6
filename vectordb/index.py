"""
Catalog ingestion: index hotels into Qdrant and refresh the price statistics.
"""
import argparse
import json
import logging
from typing import Any, Dict, List, Optional

from config import APP_CONFIG, get_ranking_config
from data.hotel_config import normalize_tier
from data.statistics import build_statistics
from vectordb.embeddings import EmbeddingGenerator
from vectordb.vector_store import HotelVectorStore

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("id", "name", "location", "price_per_night")


def load_catalog(path: str) -> List[Dict[str, Any]]:
    """
    Load catalog rows from a JSON file (a list, or an object with a "hotels" list).

    Rows missing a required field are skipped with a warning.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    rows = data.get("hotels", []) if isinstance(data, dict) else data
    hotels = []
    for row in rows:
        missing = [field for field in REQUIRED_FIELDS if row.get(field) in (None, "")]
        if missing:
            logger.warning(f"Skipping catalog row {row.get('id')}: missing {missing}")
            continue
        hotels.append({
            **row,
            "price_per_night": float(row["price_per_night"]),
            "tier": normalize_tier(row.get("tier")) or row.get("tier"),
            "amenities": list(row.get("amenities") or []),
            "is_active": bool(row.get("is_active", True)),
        })

    logger.info(f"Loaded {len(hotels)} hotels from {path}")
    return hotels


class CatalogIndexer:
    """Loads a hotel catalog into the vector store and rewrites the statistics file."""

    def __init__(
        self,
        vector_store: Optional[HotelVectorStore] = None,
        embedding_generator: Optional[EmbeddingGenerator] = None,
        statistics_path: Optional[str] = None,
    ):
        self.vector_store = vector_store or HotelVectorStore()
        self.embedding_generator = embedding_generator or EmbeddingGenerator()
        self.statistics_path = statistics_path or APP_CONFIG["statistics_path"]

    def index_catalog(self, hotels: List[Dict[str, Any]], batch_size: int = 64) -> Dict[str, Any]:
        """
        Embed and upsert every hotel, then recompute the statistics file.

        Args:
            hotels: Catalog rows
            batch_size: Rows embedded and upserted per request

        Returns:
            The statistics document that was written
        """
        self.vector_store.ensure_collection()

        for start in range(0, len(hotels), batch_size):
            batch = hotels[start:start + batch_size]
            vectors = self.embedding_generator.generate_bulk_embeddings(batch)
            self.vector_store.add_hotels(batch, vectors)

        statistics = build_statistics(hotels, get_ranking_config().tier_bands)
        with open(self.statistics_path, "w", encoding="utf-8") as f:
            json.dump(statistics, f, indent=2)

        logger.info(f"Indexed {len(hotels)} hotels, statistics written to {self.statistics_path}")
        return statistics


def main():
    parser = argparse.ArgumentParser(description="Index a hotel catalog into Qdrant")
    parser.add_argument("catalog", help="Path to the catalog JSON file")
    parser.add_argument("--batch-size", type=int, default=64)
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, APP_CONFIG["log_level"]),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    hotels = load_catalog(args.catalog)
    CatalogIndexer().index_catalog(hotels, batch_size=args.batch_size)


if __name__ == '__main__':
    main()
