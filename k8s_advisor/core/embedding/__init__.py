from k8s_advisor.core.embedding.embedding_service import (
    EmbeddingProvider,
    EmbeddingService,
    OpenAIEmbeddingProvider,
)

__all__ = [
    "EmbeddingProvider",
    "EmbeddingService",
    "OpenAIEmbeddingProvider",
]
