"""
Tests for the vector search functionality.
"""
import unittest
import sys
import os
import json
import tempfile
from unittest.mock import MagicMock, patch
import logging

# Add parent directory to path to allow imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from qdrant_client.http.exceptions import ResponseHandlingException

from data.statistics import CatalogStatistics
from pipeline.vector_search import retrieve_results
from models.hints import SearchHints
from models.settings import RankingConfig
from utils.errors import RetrievalError
from vectordb.embeddings import EmbeddingGenerator
from vectordb.index import CatalogIndexer, load_catalog
from vectordb.vector_store import HotelVectorStore, build_filter, is_transient_error, to_point_id

# Disable logging during tests
logging.disable(logging.CRITICAL)


def make_point(payload, score):
    point = MagicMock()
    point.payload = payload
    point.score = score
    return point


def make_payload(hotel_id, **kwargs):
    payload = {
        "id": hotel_id,
        "name": f"Hotel {hotel_id}",
        "description": "Rooms near the river",
        "location": "Melbourne",
        "price_per_night": 120,
        "tier": "Budget",
        "amenities": ["WiFi"],
        "is_active": True,
        "commission_rate": 0.18,
    }
    payload.update(kwargs)
    return payload


class TestHotelVectorStore(unittest.TestCase):
    """Tests for HotelVectorStore class."""

    def setUp(self):
        """Set up test fixtures."""
        self.client = MagicMock()
        self.vector_store = HotelVectorStore(
            client=self.client,
            collection_name="test_hotels",
            max_attempts=3,
            retry_delay=0
        )

    def test_retrieve_returns_safe_candidates(self):
        self.client.query_points.return_value = MagicMock(points=[
            make_point(make_payload(1), 0.42),
            make_point(make_payload(2), 0.87),
        ])

        results = self.vector_store.retrieve([0.1, 0.2], location="Melbourne", max_price=200, limit=5)

        self.assertEqual([c.id for c in results], [2, 1])
        self.assertEqual(results[0].semantic_score, 0.87)
        self.assertEqual(results[0].price, 120)
        self.assertFalse(hasattr(results[0], "commission_rate"))
        kwargs = self.client.query_points.call_args.kwargs
        self.assertEqual(kwargs["collection_name"], "test_hotels")
        self.assertEqual(kwargs["limit"], 5)

    def test_inactive_hotels_skipped(self):
        self.client.query_points.return_value = MagicMock(points=[
            make_point(make_payload(1, is_active=False), 0.9),
            make_point(make_payload(2), 0.5),
        ])

        results = self.vector_store.retrieve([0.1, 0.2])

        self.assertEqual([c.id for c in results], [2])

    def test_empty_result_not_retried(self):
        self.client.query_points.return_value = MagicMock(points=[])

        self.assertEqual(self.vector_store.retrieve([0.1]), [])
        self.assertEqual(self.client.query_points.call_count, 1)

    def test_transient_failure_retried(self):
        self.client.query_points.side_effect = [
            ResponseHandlingException(ConnectionError("connection reset")),
            MagicMock(points=[make_point(make_payload(1), 0.5)]),
        ]

        results = self.vector_store.retrieve([0.1])

        self.assertEqual(len(results), 1)
        self.assertEqual(self.client.query_points.call_count, 2)

    def test_retries_exhausted_raise_retrieval_error(self):
        self.client.query_points.side_effect = TimeoutError("timed out")

        with self.assertRaises(RetrievalError):
            self.vector_store.retrieve([0.1])
        self.assertEqual(self.client.query_points.call_count, 3)

    def test_non_transient_failure_not_retried(self):
        self.client.query_points.side_effect = ValueError("bad filter")

        with self.assertRaises(RetrievalError):
            self.vector_store.retrieve([0.1])
        self.assertEqual(self.client.query_points.call_count, 1)

    def test_ensure_collection_creates_indexes(self):
        self.client.get_collections.return_value = MagicMock(collections=[])

        self.vector_store.ensure_collection()

        self.client.create_collection.assert_called_once()
        indexed = {c.kwargs["field_name"] for c in self.client.create_payload_index.call_args_list}
        self.assertEqual(indexed, {"location", "tier", "price_per_night", "is_active"})

    def test_ensure_collection_existing(self):
        existing = MagicMock()
        existing.name = "test_hotels"
        self.client.get_collections.return_value = MagicMock(collections=[existing])

        self.vector_store.ensure_collection()

        self.client.create_collection.assert_not_called()

    def test_add_hotels(self):
        hotels = [make_payload(1), make_payload("abc")]

        self.vector_store.add_hotels(hotels, [[0.1, 0.2], [0.3, 0.4]])

        points = self.client.upsert.call_args.kwargs["points"]
        self.assertEqual(len(points), 2)
        self.assertEqual(points[0].id, 1)
        self.assertEqual(points[1].id, to_point_id("abc"))


class TestFilterHelpers(unittest.TestCase):
    """Tests for filter and id helpers."""

    def test_filter_always_requires_active(self):
        query_filter = build_filter()

        self.assertEqual(len(query_filter.must), 1)
        self.assertEqual(query_filter.must[0].key, "is_active")

    def test_filter_hard_constraints(self):
        query_filter = build_filter(location="Sydney", min_price=100, max_price=300, tier="Mid-tier")

        keys = [condition.key for condition in query_filter.must]
        self.assertEqual(keys, ["is_active", "location", "price_per_night", "tier"])
        price_range = query_filter.must[2].range
        self.assertEqual(price_range.gte, 100)
        self.assertEqual(price_range.lte, 300)

    def test_is_transient_error(self):
        self.assertTrue(is_transient_error(ConnectionError()))
        self.assertTrue(is_transient_error(TimeoutError()))
        self.assertFalse(is_transient_error(ValueError()))

    def test_point_ids(self):
        self.assertEqual(to_point_id(5), 5)
        self.assertEqual(to_point_id("hotel-5"), to_point_id("hotel-5"))
        self.assertEqual(to_point_id("9a077fe9-5360-4b25-b7bf-1d893f50111c"), "9a077fe9-5360-4b25-b7bf-1d893f50111c")


class TestEmbeddingGenerator(unittest.TestCase):
    """Tests for EmbeddingGenerator class."""

    def setUp(self):
        """Set up test fixtures."""
        self.model = MagicMock()
        self.model.embed_query.return_value = [0.1, 0.2, 0.3]
        self.model.embed_documents.return_value = [[0.1], [0.2]]
        self.generator = EmbeddingGenerator(embedding_model=self.model)

    def test_query_embedding(self):
        self.assertEqual(self.generator.generate_query_embedding("quiet hotel"), [0.1, 0.2, 0.3])

    def test_query_embedding_failure_raises(self):
        self.model.embed_query.side_effect = RuntimeError("model not loaded")

        with self.assertRaises(RetrievalError):
            self.generator.generate_query_embedding("quiet hotel")

    def test_hotel_text(self):
        text = EmbeddingGenerator.create_hotel_text(make_payload(1, amenities=["Pool", "Spa"]))

        self.assertIn("Hotel 1", text)
        self.assertIn("Location: Melbourne", text)
        self.assertIn("Amenities: Pool, Spa", text)

    def test_bulk_embeddings(self):
        embeddings = self.generator.generate_bulk_embeddings([make_payload(1), make_payload(2)])

        self.assertEqual(len(embeddings), 2)
        self.assertEqual(len(self.model.embed_documents.call_args[0][0]), 2)

    @patch('vectordb.embeddings.get_embeddings')
    def test_model_loaded_lazily(self, mock_get_embeddings):
        generator = EmbeddingGenerator()

        mock_get_embeddings.assert_not_called()
        generator.generate_query_embedding("hotel")
        mock_get_embeddings.assert_called_once()


class TestCatalogIndexer(unittest.TestCase):
    """Tests for catalog loading and indexing."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.TemporaryDirectory()
        self.catalog_path = os.path.join(self.temp_dir.name, "hotels.json")
        self.statistics_path = os.path.join(self.temp_dir.name, "hotel_statistics.json")

        hotels = [
            make_payload(1, price_per_night=80, tier="budget"),
            make_payload(2, price_per_night=220, tier="Mid-tier", location="Sydney"),
            make_payload(3, price_per_night=900, tier="Luxury", location="Sydney"),
            make_payload(4, price_per_night=60, is_active=False),
            {"id": 5, "name": "No price", "location": "Brisbane"},
        ]
        with open(self.catalog_path, "w", encoding="utf-8") as f:
            json.dump({"hotels": hotels}, f)

    def tearDown(self):
        """Clean up after tests."""
        self.temp_dir.cleanup()

    def test_load_catalog(self):
        hotels = load_catalog(self.catalog_path)

        self.assertEqual([h["id"] for h in hotels], [1, 2, 3, 4])
        self.assertEqual(hotels[0]["tier"], "Budget")
        self.assertFalse(hotels[3]["is_active"])

    def test_index_catalog_writes_statistics(self):
        vector_store = MagicMock()
        embedder = MagicMock()
        embedder.generate_bulk_embeddings.side_effect = lambda batch: [[0.0]] * len(batch)
        indexer = CatalogIndexer(vector_store, embedder, statistics_path=self.statistics_path)

        indexer.index_catalog(load_catalog(self.catalog_path), batch_size=2)

        vector_store.ensure_collection.assert_called_once()
        self.assertEqual(vector_store.add_hotels.call_count, 2)

        statistics = CatalogStatistics.from_file(self.statistics_path)
        active = statistics.get_active_statistics()
        self.assertEqual(active.min_price, 80)
        self.assertEqual(active.count, 3)
        self.assertEqual(statistics.get_location_statistics("Sydney").max_price, 900)
        self.assertEqual(statistics.get_location_statistics("Melbourne").active_hotels, 1)
        self.assertEqual(statistics.get_recommended_price_range("Budget").max, 150)


class TestRetrieveNode(unittest.TestCase):
    """Tests for the retrieve_results node."""

    def test_passes_hard_constraints(self):
        deps = MagicMock()
        deps.config = RankingConfig(retrieval_limit=7)
        deps.embedder.generate_query_embedding.return_value = [0.5]
        deps.retriever.retrieve.return_value = []
        hints = SearchHints(location="Sydney", min_price=100, max_price=300, tier="Mid-tier", amenities=("Pool",))

        result = retrieve_results({"query": "q", "search_text": "pool hotel", "hints": hints, "metadata": {}}, deps)

        deps.embedder.generate_query_embedding.assert_called_once_with("pool hotel")
        deps.retriever.retrieve.assert_called_once_with(
            [0.5], location="Sydney", min_price=100, max_price=300, tier="Mid-tier",
            amenities=("Pool",), limit=7
        )
        self.assertTrue(result["metadata"]["no_results_found"])


if __name__ == '__main__':
    unittest.main()
