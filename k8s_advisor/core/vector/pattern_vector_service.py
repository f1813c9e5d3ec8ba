from typing import Any, Dict, List, Optional

from k8s_advisor.core.embedding.embedding_service import EmbeddingService
from k8s_advisor.core.models.organizational import OrganizationalPattern
from k8s_advisor.core.models.vector import BaseSearchResult
from k8s_advisor.core.vector.base_vector_service import BaseVectorService
from k8s_advisor.core.vector.vector_db_service import VectorDBService

PATTERNS_COLLECTION = "patterns"


class PatternVectorService(BaseVectorService[OrganizationalPattern]):
    """Organizational patterns that guide resource selection."""

    def __init__(
        self,
        vector_db: VectorDBService,
        embedding_service: Optional[EmbeddingService] = None,
        collection_name: str = PATTERNS_COLLECTION,
    ) -> None:
        super().__init__(collection_name, vector_db, embedding_service)

    def create_search_text(self, data: OrganizationalPattern) -> str:
        parts = [
            data.description,
            " ".join(data.triggers),
            " ".join(data.suggested_resources),
            data.rationale,
        ]
        return " ".join(p for p in parts if p).lower()

    def extract_id(self, data: OrganizationalPattern) -> str:
        return data.id

    def create_payload(self, data: OrganizationalPattern) -> Dict[str, Any]:
        payload = data.model_dump(by_alias=True, exclude={"id"})
        payload["triggers"] = [t.lower() for t in data.triggers]
        return payload

    def payload_to_data(self, payload: Dict[str, Any]) -> OrganizationalPattern:
        return OrganizationalPattern.model_validate({
            "description": payload.get("description", ""),
            "triggers": payload.get("triggers", []),
            "suggestedResources": payload.get("suggestedResources", []),
            "rationale": payload.get("rationale", ""),
            "createdAt": payload.get("createdAt", ""),
            "createdBy": payload.get("createdBy", "unknown"),
        })

    async def store_pattern(self, pattern: OrganizationalPattern) -> None:
        await self.store_data(pattern)

    async def search_patterns(self, query: str, limit: int = 10) -> List[BaseSearchResult[OrganizationalPattern]]:
        return await self.search_data(query, limit=limit)

    async def get_pattern(self, pattern_id: str) -> Optional[OrganizationalPattern]:
        return await self.get_data(pattern_id)

    async def get_all_patterns(self, limit: Optional[int] = None) -> List[OrganizationalPattern]:
        return await self.get_all_data(limit)

    async def delete_pattern(self, pattern_id: str) -> None:
        await self.delete_data(pattern_id)

    async def get_patterns_count(self) -> int:
        return await self.get_data_count()
