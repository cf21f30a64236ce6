"""
Embedding generation for hotels and search queries.
"""
import logging
from typing import Any, Dict, List

from utils.errors import RetrievalError
from utils.llm import get_embeddings

logger = logging.getLogger(__name__)


class EmbeddingGenerator:
    """Generator for creating embeddings from hotel data and queries."""

    def __init__(self, embedding_model=None):
        """
        Initialize the embedding generator.

        Args:
            embedding_model: Optional LangChain embeddings instance; the configured
                HuggingFace model is loaded on first use otherwise
        """
        self._embedding_model = embedding_model

    @property
    def embedding_model(self):
        if self._embedding_model is None:
            logger.info("Loading embedding model")
            self._embedding_model = get_embeddings()
        return self._embedding_model

    def generate_query_embedding(self, query: str) -> List[float]:
        """
        Generate an embedding for a search query.

        Args:
            query: The search query

        Returns:
            Embedding vector

        Raises:
            RetrievalError: If the embedding model fails
        """
        try:
            return list(self.embedding_model.embed_query(query))
        except Exception as e:
            logger.error(f"Error generating query embedding: {str(e)}")
            raise RetrievalError("Query embedding failed") from e

    def generate_bulk_embeddings(self, hotels: List[Dict[str, Any]]) -> List[List[float]]:
        """
        Generate embeddings for multiple catalog rows.

        Args:
            hotels: Catalog rows

        Returns:
            One embedding per row
        """
        texts = [self.create_hotel_text(hotel) for hotel in hotels]
        embeddings = self.embedding_model.embed_documents(texts)
        logger.info(f"Generated {len(embeddings)} embeddings in bulk")
        return embeddings

    @staticmethod
    def create_hotel_text(hotel: Dict[str, Any]) -> str:
        """
        Create the text representation of a hotel that gets embedded.

        Args:
            hotel: Catalog row

        Returns:
            Text representation
        """
        text = f"{hotel.get('name', '')}. {hotel.get('description', '')} "

        if hotel.get("location"):
            text += f"Location: {hotel['location']}. "

        if hotel.get("tier"):
            text += f"Tier: {hotel['tier']}. "

        if hotel.get("amenities"):
            text += f"Amenities: {', '.join(str(a) for a in hotel['amenities'])}."

        return text.strip()
