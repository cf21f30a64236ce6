"""
Hotel candidate retrieval backed by a Qdrant collection.
"""
import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional

from qdrant_client import QdrantClient
from qdrant_client.http import models as qdrant_models
from qdrant_client.http.exceptions import ResponseHandlingException, UnexpectedResponse
from tenacity import Retrying, retry_if_exception, stop_after_attempt, wait_exponential

from config import VECTOR_STORE_CONFIG
from models.hotel import Candidate
from utils.errors import RetrievalError

logger = logging.getLogger(__name__)

# Payload fields with a Qdrant index, used by the hard filters
PAYLOAD_INDEXES = {
    "location": qdrant_models.PayloadSchemaType.KEYWORD,
    "tier": qdrant_models.PayloadSchemaType.KEYWORD,
    "price_per_night": qdrant_models.PayloadSchemaType.FLOAT,
    "is_active": qdrant_models.PayloadSchemaType.BOOL,
}

MAX_RETRY_WAIT = 10.0


def is_transient_error(exc: BaseException) -> bool:
    """Connection failures, timeouts and 5xx responses are worth retrying."""
    if isinstance(exc, (ResponseHandlingException, ConnectionError, TimeoutError)):
        return True
    if isinstance(exc, UnexpectedResponse):
        return exc.status_code is not None and exc.status_code >= 500
    return False


def to_point_id(hotel_id: Any):
    """Qdrant accepts unsigned ints and UUIDs; other ids map to a deterministic UUID."""
    if isinstance(hotel_id, int) and hotel_id >= 0:
        return hotel_id
    try:
        return str(uuid.UUID(str(hotel_id)))
    except ValueError:
        return str(uuid.uuid5(uuid.NAMESPACE_DNS, str(hotel_id)))


def build_filter(
    location: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    tier: Optional[str] = None,
) -> qdrant_models.Filter:
    """
    Build the hard-constraint filter. Inactive hotels are always excluded.

    Args:
        location: City to match exactly
        min_price: Inclusive lower price bound
        max_price: Inclusive upper price bound
        tier: Tier to match exactly

    Returns:
        Qdrant filter
    """
    conditions = [
        qdrant_models.FieldCondition(
            key="is_active",
            match=qdrant_models.MatchValue(value=True)
        )
    ]

    if location:
        conditions.append(
            qdrant_models.FieldCondition(
                key="location",
                match=qdrant_models.MatchValue(value=location)
            )
        )

    if min_price is not None or max_price is not None:
        conditions.append(
            qdrant_models.FieldCondition(
                key="price_per_night",
                range=qdrant_models.Range(gte=min_price, lte=max_price)
            )
        )

    if tier:
        conditions.append(
            qdrant_models.FieldCondition(
                key="tier",
                match=qdrant_models.MatchValue(value=tier)
            )
        )

    return qdrant_models.Filter(must=conditions)


class HotelVectorStore:
    """
    Candidate retriever over the hotel catalog collection.
    """

    def __init__(
        self,
        client: Optional[QdrantClient] = None,
        collection_name: Optional[str] = None,
        max_attempts: int = 3,
        retry_delay: float = 1.0,
    ):
        """
        Initialize the hotel vector store.

        Args:
            client: Optional preconfigured Qdrant client
            collection_name: Optional custom collection name
            max_attempts: Attempts per retrieval, including the first
            retry_delay: Base delay in seconds for exponential backoff
        """
        self.collection_name = collection_name or VECTOR_STORE_CONFIG.get("collection_name", "hotels")
        self.dimension = VECTOR_STORE_CONFIG.get("dimension", 384)
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay

        self.client = client or QdrantClient(
            url=VECTOR_STORE_CONFIG.get("url", "http://localhost:6333"),
            api_key=VECTOR_STORE_CONFIG.get("api_key") or None,
            timeout=VECTOR_STORE_CONFIG.get("timeout", 30)
        )

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.retry_delay, max=MAX_RETRY_WAIT),
            retry=retry_if_exception(is_transient_error),
            before_sleep=lambda state: logger.warning(
                f"Retrieval attempt {state.attempt_number} failed, retrying: {state.outcome.exception()}"
            ),
            reraise=True
        )

    def ensure_collection(self):
        """Create the collection and its payload indexes if they do not exist."""
        try:
            collections = self.client.get_collections().collections
            if self.collection_name in [collection.name for collection in collections]:
                logger.info(f"Using existing Qdrant collection: {self.collection_name}")
                return

            logger.info(f"Creating new Qdrant collection: {self.collection_name}")
            self.client.create_collection(
                collection_name=self.collection_name,
                vectors_config=qdrant_models.VectorParams(
                    size=self.dimension,
                    distance=qdrant_models.Distance.COSINE
                )
            )

            for field_name, schema in PAYLOAD_INDEXES.items():
                self.client.create_payload_index(
                    collection_name=self.collection_name,
                    field_name=field_name,
                    field_schema=schema
                )

            logger.info(f"Created Qdrant collection: {self.collection_name}")

        except Exception as e:
            logger.error(f"Error initializing Qdrant collection: {str(e)}")
            raise

    def add_hotels(self, hotels: List[Dict[str, Any]], vectors: Iterable[List[float]]):
        """
        Upsert catalog rows with their embeddings.

        Args:
            hotels: Catalog rows
            vectors: One embedding per row, in the same order
        """
        points = [
            qdrant_models.PointStruct(
                id=to_point_id(hotel["id"]),
                vector=list(vector),
                payload=hotel
            )
            for hotel, vector in zip(hotels, vectors)
        ]

        try:
            self.client.upsert(collection_name=self.collection_name, points=points)
        except Exception as e:
            logger.error(f"Error adding hotels to Qdrant: {str(e)}")
            raise

        logger.info(f"Added {len(points)} hotels to Qdrant collection")

    def retrieve(
        self,
        query_vector: List[float],
        location: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        tier: Optional[str] = None,
        amenities: Iterable[str] = (),
        limit: int = 10,
    ) -> List[Candidate]:
        """
        Fetch active hotels matching every hard constraint, most similar first.

        Amenities are a soft signal scored later and are never filtered on here.

        Args:
            query_vector: Embedded query
            location: City constraint
            min_price: Inclusive lower price bound
            max_price: Inclusive upper price bound
            tier: Tier constraint
            amenities: Requested amenities (unused by the filter)
            limit: Maximum number of candidates

        Returns:
            Candidates with semantic scores, sorted by similarity descending

        Raises:
            RetrievalError: On a non-transient failure or once retries run out
        """
        query_filter = build_filter(location, min_price, max_price, tier)

        try:
            response = self._retrying()(
                self.client.query_points,
                collection_name=self.collection_name,
                query=list(query_vector),
                query_filter=query_filter,
                limit=limit,
                with_payload=True
            )
        except Exception as e:
            logger.error(f"Error searching Qdrant: {str(e)}")
            raise RetrievalError("Hotel retrieval failed") from e

        candidates = []
        for point in response.points:
            payload = point.payload or {}
            if not payload.get("is_active", True):
                continue
            candidates.append(Candidate.from_payload(payload, semantic_score=point.score))

        candidates.sort(key=lambda c: c.semantic_score, reverse=True)
        logger.info(f"Retrieved {len(candidates)} candidates "
                    f"(location={location}, price={min_price}-{max_price}, tier={tier})")
        return candidates

    def get_count(self) -> int:
        """
        Get the number of hotels in the collection.

        Returns:
            Number of indexed hotels
        """
        try:
            return self.client.count(collection_name=self.collection_name, exact=True).count
        except Exception as e:
            logger.error(f"Error getting count from Qdrant: {str(e)}")
            raise RetrievalError("Could not count indexed hotels") from e
