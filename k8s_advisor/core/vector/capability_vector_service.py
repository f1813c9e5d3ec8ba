"""
Capability store: what each cluster resource type can do.

Capabilities are keyed by a deterministic id derived from the resource name,
so a rescan replaces the previous entry instead of duplicating it.
"""

from typing import Any, Dict, List, Optional

from qdrant_client.models import FieldCondition, Filter, MatchValue

from k8s_advisor.core.embedding.embedding_service import EmbeddingService
from k8s_advisor.core.models.capability import ResourceCapability, generate_capability_id
from k8s_advisor.core.models.vector import BaseSearchResult
from k8s_advisor.core.vector.base_vector_service import BaseVectorService
from k8s_advisor.core.vector.vector_db_service import VectorDBService

CAPABILITIES_COLLECTION = "capabilities"


class CapabilityVectorService(BaseVectorService[ResourceCapability]):
    """Stores and searches ResourceCapability entries."""

    def __init__(
        self,
        vector_db: VectorDBService,
        embedding_service: Optional[EmbeddingService] = None,
        collection_name: str = CAPABILITIES_COLLECTION,
    ) -> None:
        super().__init__(collection_name, vector_db, embedding_service)

    def create_search_text(self, data: ResourceCapability) -> str:
        parts = [
            data.resource_name,
            " ".join(data.capabilities),
            " ".join(data.providers),
            " ".join(data.abstractions),
            data.description,
            data.use_case,
            data.complexity,
        ]
        return " ".join(p for p in parts if p).strip()

    def extract_id(self, data: ResourceCapability) -> str:
        return generate_capability_id(data.resource_name)

    def create_payload(self, data: ResourceCapability) -> Dict[str, Any]:
        return data.model_dump(by_alias=True, exclude={"id"}, exclude_none=True)

    def payload_to_data(self, payload: Dict[str, Any]) -> ResourceCapability:
        fields = {k: v for k, v in payload.items() if k not in ("searchText", "hasEmbedding")}
        return ResourceCapability.model_validate(fields)

    async def store_capability(self, capability: ResourceCapability) -> None:
        await self.store_data(capability)

    async def search_capabilities(
        self,
        intent: str,
        limit: int = 10,
        complexity_filter: Optional[str] = None,
        provider_filter: Optional[List[str]] = None,
    ) -> List[BaseSearchResult[ResourceCapability]]:
        """
        Hybrid search over capabilities, optionally narrowed by complexity or provider.

        Filtering happens after ranking, so fewer than ``limit`` results may come back.
        """
        results = await self.search_data(intent, limit=limit)

        if complexity_filter:
            results = [r for r in results if r.data.complexity == complexity_filter]
        if provider_filter:
            wanted = {p.lower() for p in provider_filter}
            results = [r for r in results if wanted & {p.lower() for p in r.data.providers}]
        return results

    async def get_capability(self, resource_name: str) -> Optional[ResourceCapability]:
        return await self.get_data(generate_capability_id(resource_name))

    async def get_capability_by_kind_api_version(
        self, kind: str, api_version: str
    ) -> Optional[ResourceCapability]:
        """
        Find a capability by kind and apiVersion.

        Resource names are plural ("deployments", "sqls.devopstoolkit.live"),
        so the kind is matched against the first name segment in singular
        and plural forms.
        """
        query_filter = Filter(must=[FieldCondition(key="apiVersion", match=MatchValue(value=api_version))])
        candidates = await self.query_with_filter(query_filter, limit=100)

        kind_lower = kind.lower()
        plural_forms = {kind_lower, f"{kind_lower}s", f"{kind_lower}es"}
        if kind_lower.endswith("y"):
            plural_forms.add(f"{kind_lower[:-1]}ies")

        for capability in candidates:
            first_segment = capability.resource_name.split(".")[0].lower()
            if first_segment in plural_forms:
                return capability
        return None

    async def delete_capability(self, resource_name: str) -> None:
        await self.delete_data(generate_capability_id(resource_name))

    async def delete_capability_by_id(self, capability_id: str) -> None:
        await self.delete_data(capability_id)

    async def get_all_capabilities(self, limit: Optional[int] = None) -> List[ResourceCapability]:
        return await self.get_all_data(limit)

    async def get_capabilities_count(self) -> int:
        return await self.get_data_count()
