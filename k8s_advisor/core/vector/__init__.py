from k8s_advisor.core.vector.base_vector_service import HYBRID_BONUS, BaseVectorService
from k8s_advisor.core.vector.capability_vector_service import CapabilityVectorService
from k8s_advisor.core.vector.pattern_vector_service import PatternVectorService
from k8s_advisor.core.vector.policy_vector_service import PolicyVectorService
from k8s_advisor.core.vector.vector_db_service import VectorDBService

__all__ = [
    "HYBRID_BONUS",
    "BaseVectorService",
    "CapabilityVectorService",
    "PatternVectorService",
    "PolicyVectorService",
    "VectorDBService",
]
