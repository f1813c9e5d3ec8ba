from typing import Any, Dict, List, Optional

from k8s_advisor.core.embedding.embedding_service import EmbeddingService
from k8s_advisor.core.models.organizational import PolicyIntent
from k8s_advisor.core.models.vector import BaseSearchResult
from k8s_advisor.core.vector.base_vector_service import BaseVectorService
from k8s_advisor.core.vector.vector_db_service import VectorDBService

POLICIES_COLLECTION = "policies"


class PolicyVectorService(BaseVectorService[PolicyIntent]):
    """Policy intents that guide resource configuration."""

    def __init__(
        self,
        vector_db: VectorDBService,
        embedding_service: Optional[EmbeddingService] = None,
        collection_name: str = POLICIES_COLLECTION,
    ) -> None:
        super().__init__(collection_name, vector_db, embedding_service)

    def create_search_text(self, data: PolicyIntent) -> str:
        parts = [data.description, " ".join(data.triggers), data.rationale]
        return " ".join(p for p in parts if p).lower()

    def extract_id(self, data: PolicyIntent) -> str:
        return data.id

    def create_payload(self, data: PolicyIntent) -> Dict[str, Any]:
        payload = data.model_dump(by_alias=True, exclude={"id"})
        payload["triggers"] = [t.lower() for t in data.triggers]
        return payload

    def payload_to_data(self, payload: Dict[str, Any]) -> PolicyIntent:
        return PolicyIntent.model_validate({
            "description": payload.get("description", ""),
            "triggers": payload.get("triggers", []),
            "rationale": payload.get("rationale", ""),
            "createdAt": payload.get("createdAt", ""),
            "createdBy": payload.get("createdBy", "unknown"),
            "deployedPolicies": payload.get("deployedPolicies", []),
        })

    async def store_policy_intent(self, policy: PolicyIntent) -> None:
        await self.store_data(policy)

    async def search_policy_intents(self, query: str, limit: int = 10) -> List[BaseSearchResult[PolicyIntent]]:
        return await self.search_data(query, limit=limit)

    async def get_policy_intent(self, policy_id: str) -> Optional[PolicyIntent]:
        return await self.get_data(policy_id)

    async def get_all_policy_intents(self, limit: Optional[int] = None) -> List[PolicyIntent]:
        return await self.get_all_data(limit)

    async def delete_policy_intent(self, policy_id: str) -> None:
        await self.delete_data(policy_id)

    async def get_policy_intents_count(self) -> int:
        return await self.get_data_count()
