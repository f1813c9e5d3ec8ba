from typing import Optional, Type, TypeVar

from k8s_advisor.config.config import Config
from k8s_advisor.core.cluster.cluster_options import discover_cluster_options
from k8s_advisor.core.cluster.kubectl import KubectlClient
from k8s_advisor.core.embedding.embedding_service import EmbeddingService
from k8s_advisor.core.llm.ai_provider import AIProvider
from k8s_advisor.core.recommender.recommender import ResourceRecommender
from k8s_advisor.core.vector.base_vector_service import BaseVectorService
from k8s_advisor.core.vector.capability_vector_service import CapabilityVectorService
from k8s_advisor.core.vector.pattern_vector_service import PatternVectorService
from k8s_advisor.core.vector.policy_vector_service import PolicyVectorService
from k8s_advisor.core.vector.vector_db_service import VectorDBService
from k8s_advisor.utils.logger import ComponentLogger

factory_logger = ComponentLogger("K8S_ADVISOR_RECOMMENDER")

S = TypeVar("S", bound=BaseVectorService)


def build_store(
    store_cls: Type[S],
    collection_name: str,
    config: Config,
    embedding_service: EmbeddingService,
) -> Optional[S]:
    """Build a store, or log once and return None when its vector DB cannot be constructed."""
    vector_db_config = config.vector_db_config
    try:
        vector_db = VectorDBService(
            collection_name=collection_name,
            url=vector_db_config['url'],
            api_key=vector_db_config['api_key'],
        )
    except Exception as e:
        factory_logger.log_structured(
            level="WARNING",
            message="Vector DB unavailable, store disabled",
            extra={"collection": collection_name, "error": str(e), "error_type": type(e).__name__}
        )
        return None
    return store_cls(vector_db, embedding_service=embedding_service, collection_name=collection_name)


def create_kubectl_client(config: Config) -> KubectlClient:
    return KubectlClient(
        kubeconfig=config.get('KUBECONFIG'),
        timeout=int(config.get('KUBECTL_TIMEOUT', 30)),
    )


def create_resource_recommender(
    config: Optional[Config] = None,
    kubectl: Optional[KubectlClient] = None,
) -> ResourceRecommender:
    """
    Wire a ResourceRecommender from configuration.

    Args:
        config: Configuration; defaults plus environment when omitted
        kubectl: Client used for cluster option discovery

    Returns:
        ResourceRecommender with every collaborator that could be built
    """
    config = config or Config()
    kubectl = kubectl or create_kubectl_client(config)
    embedding_service = EmbeddingService.from_config(config)
    collections = config.vector_db_config['collections']

    return ResourceRecommender(
        ai_provider=AIProvider.from_config(config),
        capability_service=build_store(CapabilityVectorService, collections['capabilities'], config, embedding_service),
        pattern_service=build_store(PatternVectorService, collections['patterns'], config, embedding_service),
        policy_service=build_store(PolicyVectorService, collections['policies'], config, embedding_service),
        cluster_discovery=lambda: discover_cluster_options(kubectl),
        debug_mode=bool(config.get('DEBUG_MODE', False)),
        capability_limit=int(config.get('CAPABILITY_SEARCH_LIMIT', 50)),
        pattern_limit=int(config.get('PATTERN_SEARCH_LIMIT', 5)),
        policy_limit=int(config.get('POLICY_SEARCH_LIMIT', 50)),
    )
