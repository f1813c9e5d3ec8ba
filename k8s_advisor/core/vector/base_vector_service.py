"""
Generic entity store on top of ``VectorDBService``.

Subclasses describe how an entity maps to search text, a point id and a
payload; this class owns embedding, storage and hybrid search.
"""

import asyncio
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar

from qdrant_client.models import Filter

from k8s_advisor.core.embedding.embedding_service import EmbeddingService
from k8s_advisor.core.models.vector import BaseSearchResult, MatchType, SearchResult, VectorDocument
from k8s_advisor.core.vector.vector_db_service import VectorDBService
from k8s_advisor.utils.exceptions import (
    EmbeddingGenerationError,
    EmbeddingServiceUnavailableError,
    SemanticSearchError,
)
from k8s_advisor.utils.logger import ComponentLogger

vector_store_logger = ComponentLogger("K8S_ADVISOR_VECTOR_STORE")

T = TypeVar("T")

HYBRID_BONUS = 0.1
SEMANTIC_THRESHOLD = 0.1
DEFAULT_DIMENSIONS = 1536

STOP_WORDS = frozenset({
    "the", "and", "for", "are", "but", "not", "you", "all", "can", "had", "her",
    "was", "one", "our", "out", "day", "get", "has", "him", "his", "how", "its",
    "may", "new", "now", "old", "see", "two", "who", "boy", "did", "she", "use",
    "way", "with", "that", "this", "from", "they", "have", "will", "want", "need",
    "into", "what", "when", "where", "which", "some", "more", "than", "then",
    "them", "your", "would", "could", "should", "about", "there", "their",
})

_PUNCTUATION = re.compile(r"[^\w\s-]")


class BaseVectorService(ABC, Generic[T]):
    """Embedding-backed store for one entity type."""

    def __init__(
        self,
        collection_name: str,
        vector_db: VectorDBService,
        embedding_service: Optional[EmbeddingService] = None,
    ) -> None:
        self.collection_name = collection_name
        self.vector_db = vector_db
        self.embedding_service = embedding_service or EmbeddingService()

    @abstractmethod
    def create_search_text(self, data: T) -> str:
        pass

    @abstractmethod
    def extract_id(self, data: T) -> str:
        pass

    @abstractmethod
    def create_payload(self, data: T) -> Dict[str, Any]:
        pass

    @abstractmethod
    def payload_to_data(self, payload: Dict[str, Any]) -> T:
        pass

    def extract_keywords(self, query: str) -> List[str]:
        """Lowercase words longer than two characters, punctuation and stop words removed."""
        cleaned = _PUNCTUATION.sub(" ", (query or "").lower())
        return [w for w in cleaned.split() if len(w) > 2 and w not in STOP_WORDS]

    async def initialize(self) -> None:
        dimensions = DEFAULT_DIMENSIONS
        if self.embedding_service.is_available():
            dimensions = self.embedding_service.get_dimensions()
        await self.vector_db.initialize_collection(dimensions)

    async def store_data(self, data: T) -> None:
        if not self.embedding_service.is_available():
            raise EmbeddingServiceUnavailableError(
                "Embedding service not available - cannot store data in vector collection"
            )

        search_text = self.create_search_text(data)
        embedding = await self.embedding_service.generate_embedding(search_text)
        if embedding is None:
            raise EmbeddingGenerationError(
                f"Failed to generate embedding for {self.collection_name} entry '{self.extract_id(data)}'"
            )

        payload = {**self.create_payload(data), "searchText": search_text, "hasEmbedding": True}
        await self.vector_db.upsert_document(
            VectorDocument(id=self.extract_id(data), payload=payload, vector=embedding)
        )

    async def search_data(
        self,
        query: str,
        limit: int = 10,
        score_threshold: float = 0.01,
    ) -> List[BaseSearchResult[T]]:
        """
        Hybrid semantic + keyword search.

        Semantic-only hits keep their similarity, keyword-only hits keep their
        keyword score, and ids found by both get ``max(semantic, keyword) +
        HYBRID_BONUS``. Results below ``score_threshold`` are dropped; the rest
        are sorted by score (ties by semantic rank, then keyword rank).

        Raises:
            EmbeddingServiceUnavailableError: No embedding provider; no backend is queried
            SemanticSearchError: Any other failure
        """
        if not self.embedding_service.is_available():
            raise EmbeddingServiceUnavailableError(
                "Embedding service not available - cannot perform semantic search"
            )

        try:
            keywords = self.extract_keywords(query)
            embedding = await self.embedding_service.generate_embedding(query)
            if embedding is None:
                raise EmbeddingGenerationError("Failed to generate query embedding")

            fetch_limit = limit * 2
            semantic_task = self.vector_db.search_similar(
                embedding, limit=fetch_limit, score_threshold=SEMANTIC_THRESHOLD
            )
            if keywords:
                semantic, keyword = await asyncio.gather(
                    semantic_task,
                    self.vector_db.search_by_keywords(keywords, limit=fetch_limit),
                )
            else:
                semantic, keyword = await semantic_task, []

            return self._merge_results(semantic, keyword, limit, score_threshold)
        except EmbeddingServiceUnavailableError:
            raise
        except Exception as e:
            vector_store_logger.log_structured(
                level="ERROR",
                message="Hybrid search failed",
                extra={"collection": self.collection_name, "error": str(e)}
            )
            raise SemanticSearchError(f"Semantic search failed: {e}") from e

    def _merge_results(
        self,
        semantic: List[SearchResult],
        keyword: List[SearchResult],
        limit: int,
        score_threshold: float,
    ) -> List[BaseSearchResult[T]]:
        # id -> [score, match type, payload, semantic rank, keyword rank]
        merged: Dict[str, List[Any]] = {}
        missing_rank = len(semantic) + len(keyword)

        for rank, hit in enumerate(semantic):
            merged[hit.id] = [hit.score, MatchType.SEMANTIC, hit.payload, rank, missing_rank]

        for rank, hit in enumerate(keyword):
            entry = merged.get(hit.id)
            if entry is None:
                merged[hit.id] = [hit.score, MatchType.KEYWORD, hit.payload, missing_rank, rank]
            else:
                entry[0] = max(entry[0], hit.score) + HYBRID_BONUS
                entry[1] = MatchType.HYBRID
                entry[4] = rank

        ranked = sorted(
            ((doc_id, entry) for doc_id, entry in merged.items() if entry[0] >= score_threshold),
            key=lambda item: (-item[1][0], item[1][3], item[1][4]),
        )

        return [
            BaseSearchResult(data=self._to_data(doc_id, entry[2]), score=entry[0], match_type=entry[1])
            for doc_id, entry in ranked[:limit]
        ]

    def _to_data(self, document_id: str, payload: Dict[str, Any]) -> T:
        data = self.payload_to_data(payload)
        setattr(data, "id", document_id)
        return data

    async def get_data(self, data_id: str) -> Optional[T]:
        document = await self.vector_db.get_document(data_id)
        if document is None:
            return None
        return self._to_data(document.id, document.payload)

    async def get_all_data(self, limit: Optional[int] = None) -> List[T]:
        if limit is None:
            documents = await self.vector_db.get_all_documents()
        else:
            documents = await self.vector_db.get_all_documents(limit=limit)
        return [self._to_data(doc.id, doc.payload) for doc in documents]

    async def query_with_filter(self, query_filter: Filter, limit: int = 100) -> List[T]:
        documents = await self.vector_db.scroll_with_filter(query_filter, limit=limit)
        return [self._to_data(doc.id, doc.payload) for doc in documents]

    async def get_data_count(self) -> int:
        try:
            info = await self.vector_db.get_collection_info()
            return int(info["points_count"])
        except Exception as e:
            vector_store_logger.log_structured(
                level="DEBUG",
                message="Collection info unavailable, counting documents",
                extra={"collection": self.collection_name, "error": str(e)}
            )
            return len(await self.get_all_data())

    async def delete_data(self, data_id: str) -> None:
        await self.vector_db.delete_document(data_id)

    async def delete_all_data(self) -> None:
        await self.vector_db.delete_all_documents()

    async def health_check(self) -> bool:
        return await self.vector_db.health_check()

    async def collection_exists(self) -> bool:
        return await self.vector_db.collection_exists()

    def get_search_mode(self) -> Dict[str, Any]:
        """Describe whether semantic search is active for this store."""
        status = self.embedding_service.get_status()
        return {
            "semantic": bool(status.get("available")),
            "provider": status.get("provider"),
            "reason": status.get("reason"),
        }
