"""
Qdrant access layer shared by every entity store.

One ``VectorDBService`` is bound to one collection. All Qdrant failures are
re-raised as ``VectorDBOperationError`` with the operation name in the
message, so callers never see client-specific exception types.
"""

import os
import re
from typing import Any, Dict, List, Optional

from qdrant_client import AsyncQdrantClient
from qdrant_client.models import (
    Distance,
    Filter,
    OptimizersConfigDiff,
    PointIdsList,
    PointStruct,
    VectorParams,
)

from k8s_advisor.core.models.vector import SearchResult, VectorDocument
from k8s_advisor.utils.exceptions import (
    VectorDBConfigurationError,
    VectorDBNotInitializedError,
    VectorDBOperationError,
)
from k8s_advisor.utils.logger import ComponentLogger

vector_db_logger = ComponentLogger("K8S_ADVISOR_VECTOR_DB")

DEFAULT_QDRANT_URL = "http://localhost:6333"
TEST_URLS = ("test-url", "mock-url")
KEYWORD_SCAN_LIMIT = 1000

_WORD_SPLIT = re.compile(r"\W+")


class VectorDBService:
    """Vector database operations for a single Qdrant collection."""

    def __init__(
        self,
        collection_name: Optional[str] = None,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
        client: Optional[AsyncQdrantClient] = None,
    ) -> None:
        if not collection_name:
            raise VectorDBConfigurationError("Collection name is required for vector DB service")

        self.collection_name = collection_name
        self.url = url if url is not None else os.getenv("QDRANT_URL", DEFAULT_QDRANT_URL)
        self.api_key = api_key if api_key is not None else os.getenv("QDRANT_API_KEY")

        if not self.url:
            raise VectorDBConfigurationError("QDRANT_URL is required for vector DB service")

        self.client: Optional[AsyncQdrantClient] = client
        if self.client is None and self.url not in TEST_URLS:
            self.client = AsyncQdrantClient(url=self.url, api_key=self.api_key or None)

    def _require_client(self) -> AsyncQdrantClient:
        if self.client is None:
            raise VectorDBNotInitializedError("Vector DB client not initialized")
        return self.client

    async def initialize_collection(self, dimensions: int) -> None:
        """
        Create the collection, or recreate it when the stored vector size differs.

        Args:
            dimensions: Expected embedding dimensions
        """
        client = self._require_client()
        try:
            exists = await client.collection_exists(collection_name=self.collection_name)
        except Exception as e:
            raise VectorDBOperationError(f"Failed to initialize collection: {e}") from e

        if not exists:
            await self._create_collection(dimensions)
            return

        try:
            info = await client.get_collection(collection_name=self.collection_name)
            existing_size = info.config.params.vectors.size
        except Exception as e:
            vector_db_logger.log_structured(
                level="WARNING",
                message="Could not inspect collection, recreating",
                extra={"collection": self.collection_name, "error": str(e)}
            )
            await self._recreate_collection(dimensions)
            return

        if existing_size != dimensions:
            vector_db_logger.log_structured(
                level="WARNING",
                message="Collection dimension mismatch, recreating",
                extra={
                    "collection": self.collection_name,
                    "existing_dimensions": existing_size,
                    "expected_dimensions": dimensions,
                }
            )
            await self._recreate_collection(dimensions)

    async def _create_collection(self, dimensions: int) -> None:
        client = self._require_client()
        try:
            await client.create_collection(
                collection_name=self.collection_name,
                vectors_config=VectorParams(size=dimensions, distance=Distance.COSINE, on_disk=True),
                optimizers_config=OptimizersConfigDiff(default_segment_number=2),
            )
            vector_db_logger.log_structured(
                level="INFO",
                message="Created vector collection",
                extra={"collection": self.collection_name, "dimensions": dimensions}
            )
        except Exception as e:
            # a concurrent initializer may have created it first
            text = str(e).lower()
            if "already exists" in text or "conflict" in text:
                return
            raise VectorDBOperationError(f"Failed to create collection: {e}") from e

    async def _recreate_collection(self, dimensions: int) -> None:
        client = self._require_client()
        try:
            await client.delete_collection(collection_name=self.collection_name)
        except Exception as e:
            raise VectorDBOperationError(f"Failed to delete collection: {e}") from e
        await self._create_collection(dimensions)

    async def collection_exists(self) -> bool:
        client = self._require_client()
        try:
            return await client.collection_exists(collection_name=self.collection_name)
        except Exception as e:
            raise VectorDBOperationError(f"Failed to check collection: {e}") from e

    async def upsert_document(self, document: VectorDocument) -> None:
        """Insert or replace a document. The vector must be present."""
        client = self._require_client()
        if not document.vector:
            raise VectorDBOperationError(
                f"Failed to upsert document: document '{document.id}' has no vector"
            )
        try:
            await client.upsert(
                collection_name=self.collection_name,
                points=[PointStruct(id=document.id, vector=document.vector, payload=document.payload)],
                wait=True,
            )
        except Exception as e:
            raise VectorDBOperationError(f"Failed to upsert document: {e}") from e

    async def search_similar(
        self,
        vector: List[float],
        limit: int = 10,
        score_threshold: float = 0.5,
    ) -> List[SearchResult]:
        client = self._require_client()
        try:
            response = await client.query_points(
                collection_name=self.collection_name,
                query=vector,
                limit=limit,
                score_threshold=score_threshold,
                with_payload=True,
            )
        except Exception as e:
            raise VectorDBOperationError(f"Failed to search documents: {e}") from e

        return [
            SearchResult(id=str(point.id), score=point.score, payload=point.payload or {})
            for point in response.points
        ]

    async def search_by_keywords(
        self,
        keywords: List[str],
        limit: int = 10,
        score_threshold: float = 0.0,
    ) -> List[SearchResult]:
        """
        Score stored points by keyword overlap with their triggers and search text.

        Per keyword: exact trigger match 1.0, partial trigger match 0.5,
        word present in ``searchText`` 0.5. The total is averaged over the
        keyword count and capped at 1.0. Points scoring zero are dropped.
        """
        client = self._require_client()
        normalized = [k.lower() for k in keywords if k and k.strip()]
        if not normalized:
            return []

        try:
            points, _ = await client.scroll(
                collection_name=self.collection_name,
                limit=KEYWORD_SCAN_LIMIT,
                with_payload=True,
                with_vectors=False,
            )
        except Exception as e:
            raise VectorDBOperationError(f"Failed to search by keywords: {e}") from e

        results: List[SearchResult] = []
        for point in points:
            payload = point.payload or {}
            score = self._keyword_score(normalized, payload)
            if score > 0 and score >= score_threshold:
                results.append(SearchResult(id=str(point.id), score=score, payload=payload))

        results.sort(key=lambda r: r.score, reverse=True)
        return results[:limit]

    @staticmethod
    def _keyword_score(keywords: List[str], payload: Dict[str, Any]) -> float:
        triggers = [str(t).lower() for t in payload.get("triggers") or []]
        search_words = set(w for w in _WORD_SPLIT.split(str(payload.get("searchText", "")).lower()) if w)

        total = 0.0
        for keyword in keywords:
            if keyword in triggers:
                total += 1.0
            elif any(keyword in t or t in keyword for t in triggers if t):
                total += 0.5
            if keyword in search_words:
                total += 0.5
        return min(total / len(keywords), 1.0)

    async def get_document(self, document_id: str) -> Optional[VectorDocument]:
        client = self._require_client()
        try:
            points = await client.retrieve(
                collection_name=self.collection_name,
                ids=[document_id],
                with_payload=True,
                with_vectors=True,
            )
        except Exception as e:
            raise VectorDBOperationError(f"Failed to get document: {e}") from e

        if not points:
            return None
        point = points[0]
        vector = point.vector if isinstance(point.vector, list) else None
        return VectorDocument(id=str(point.id), payload=point.payload or {}, vector=vector)

    async def delete_document(self, document_id: str) -> None:
        client = self._require_client()
        try:
            await client.delete(
                collection_name=self.collection_name,
                points_selector=PointIdsList(points=[document_id]),
                wait=True,
            )
        except Exception as e:
            raise VectorDBOperationError(f"Failed to delete document: {e}") from e

    async def delete_all_documents(self) -> None:
        """Drop every point by recreating the collection with its current vector size."""
        client = self._require_client()
        try:
            if not await client.collection_exists(collection_name=self.collection_name):
                return
            info = await client.get_collection(collection_name=self.collection_name)
            dimensions = info.config.params.vectors.size
        except Exception as e:
            raise VectorDBOperationError(f"Failed to delete all documents: {e}") from e

        await self._recreate_collection(dimensions)

    async def get_all_documents(self, limit: int = 10000) -> List[VectorDocument]:
        """List documents without vectors."""
        client = self._require_client()
        try:
            if not await client.collection_exists(collection_name=self.collection_name):
                raise VectorDBOperationError(
                    f"Failed to get all documents: collection '{self.collection_name}' does not exist"
                )
            points, _ = await client.scroll(
                collection_name=self.collection_name,
                limit=limit,
                with_payload=True,
                with_vectors=False,
            )
        except VectorDBOperationError:
            raise
        except Exception as e:
            raise VectorDBOperationError(f"Failed to get all documents: {e}") from e

        return [VectorDocument(id=str(p.id), payload=p.payload or {}) for p in points]

    async def scroll_with_filter(self, query_filter: Filter, limit: int = 100) -> List[VectorDocument]:
        """Exact payload lookups, e.g. by apiVersion."""
        client = self._require_client()
        try:
            points, _ = await client.scroll(
                collection_name=self.collection_name,
                scroll_filter=query_filter,
                limit=limit,
                with_payload=True,
                with_vectors=False,
            )
        except Exception as e:
            raise VectorDBOperationError(f"Failed to query documents: {e}") from e

        return [VectorDocument(id=str(p.id), payload=p.payload or {}) for p in points]

    async def get_collection_info(self) -> Dict[str, Any]:
        client = self._require_client()
        try:
            info = await client.get_collection(collection_name=self.collection_name)
        except Exception as e:
            raise VectorDBOperationError(f"Failed to get collection info: {e}") from e

        return {
            "points_count": info.points_count or 0,
            "vectors_size": info.config.params.vectors.size,
            "status": str(info.status.value if hasattr(info.status, "value") else info.status),
        }

    async def health_check(self) -> bool:
        if self.client is None:
            return False
        try:
            await self.client.get_collections()
            return True
        except Exception as e:
            vector_db_logger.log_structured(
                level="WARNING",
                message="Vector DB health check failed",
                extra={"url": self.url, "error": str(e)}
            )
            return False
