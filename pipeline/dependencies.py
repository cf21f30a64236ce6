"""
External collaborators of the search graph, bound to the nodes at construction.
"""
from dataclasses import dataclass
from typing import Any, Optional

from data.statistics import CatalogStatistics
from models.settings import RankingConfig
from pipeline.query_interpreter import QueryParser


@dataclass(frozen=True)
class SearchDependencies:
    """
    Everything a graph run needs besides the query itself.

    Attributes:
        config: Ranking weights and bounds
        parser: Callable mapping query text to raw JSON parameters
        embedder: Object with ``generate_query_embedding(text)``
        retriever: Object with ``retrieve(query_vector, ...)``
        statistics: Catalog price statistics
        ranking_strategy: Relevance ordering; deterministic when None
        max_query_length: Longest accepted query, in characters
    """
    config: RankingConfig
    parser: QueryParser
    embedder: Any
    retriever: Any
    statistics: CatalogStatistics
    ranking_strategy: Optional[Any] = None
    max_query_length: int = 500
