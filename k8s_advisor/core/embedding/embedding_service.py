"""
Embedding service for semantic search over organizational knowledge.

Uses OpenAI embeddings through langchain-openai. The service reports itself
unavailable when no API key is configured; callers decide whether that is
fatal (writes, primary search) or tolerable.
"""

import os
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from k8s_advisor.utils.exceptions import EmptyTextError, UnsupportedProviderError
from k8s_advisor.utils.logger import ComponentLogger

embedding_logger = ComponentLogger("K8S_ADVISOR_EMBEDDING")

DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"
DEFAULT_EMBEDDING_DIMENSIONS = 1536


class EmbeddingProvider(ABC):
    """Interface for embedding providers."""

    @abstractmethod
    async def generate_embedding(self, text: str) -> List[float]:
        pass

    @abstractmethod
    async def generate_embeddings(self, texts: List[str]) -> List[List[float]]:
        pass

    @abstractmethod
    def is_available(self) -> bool:
        pass

    @abstractmethod
    def get_dimensions(self) -> int:
        pass


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """
    OpenAI embedding provider.

    Defaults to text-embedding-3-small with 1536 dimensions.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        dimensions: Optional[int] = None,
        client: Any = None,
    ) -> None:
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self.model = model or DEFAULT_EMBEDDING_MODEL
        self.dimensions = dimensions or DEFAULT_EMBEDDING_DIMENSIONS
        self._client = client

        if self._client is None and self.api_key:
            from langchain_openai import OpenAIEmbeddings
            self._client = OpenAIEmbeddings(
                model=self.model,
                api_key=self.api_key,
                dimensions=self.dimensions,
            )

    async def generate_embedding(self, text: str) -> List[float]:
        if not self.is_available():
            raise RuntimeError("OpenAI embedding provider not available")
        return await self._client.aembed_query(text.strip())

    async def generate_embeddings(self, texts: List[str]) -> List[List[float]]:
        if not self.is_available():
            raise RuntimeError("OpenAI embedding provider not available")
        if not texts:
            return []
        return await self._client.aembed_documents(texts)

    def is_available(self) -> bool:
        return self._client is not None

    def get_dimensions(self) -> int:
        return self.dimensions

    def get_model(self) -> str:
        return self.model


class EmbeddingService:
    """
    Embedding entry point used by the vector stores.

    Transient provider failures return ``None`` (single) or ``[]`` (batch)
    rather than raising.
    """

    def __init__(self, provider: Optional[EmbeddingProvider] = None, **provider_kwargs: Any) -> None:
        if provider is None:
            provider = OpenAIEmbeddingProvider(**provider_kwargs)
        self.provider: Optional[EmbeddingProvider] = provider if provider.is_available() else None

    @classmethod
    def from_config(cls, config) -> "EmbeddingService":
        embedding_config = config.embedding_config
        if embedding_config["provider"] != "openai":
            raise UnsupportedProviderError(
                f"Unsupported embedding provider: '{embedding_config['provider']}'. "
                "Supported providers: openai"
            )
        return cls(
            model=embedding_config["model"],
            dimensions=embedding_config["dimensions"],
        )

    def is_available(self) -> bool:
        """Check if semantic search is available."""
        return self.provider is not None and self.provider.is_available()

    async def generate_embedding(self, text: str) -> Optional[List[float]]:
        """
        Generate an embedding for a single text.

        Raises:
            EmptyTextError: If text is empty or whitespace-only

        Returns:
            The embedding vector, or None if the service is unavailable or the call failed
        """
        if text is None or not str(text).strip():
            raise EmptyTextError("Text cannot be empty for embedding generation")
        if not self.is_available():
            return None

        try:
            return await self.provider.generate_embedding(text)
        except Exception as e:
            embedding_logger.log_structured(
                level="WARNING",
                message="Embedding generation failed",
                extra={"error": str(e), "error_type": type(e).__name__}
            )
            return None

    async def generate_embeddings(self, texts: List[Optional[str]]) -> List[List[float]]:
        """
        Generate embeddings for multiple texts.

        Empty and None entries are dropped first; the result lines up with
        the remaining inputs in their original order.
        """
        if not self.is_available() or not texts:
            return []

        valid_texts = [t.strip() for t in texts if isinstance(t, str) and t.strip()]
        if not valid_texts:
            return []

        try:
            return await self.provider.generate_embeddings(valid_texts)
        except Exception as e:
            embedding_logger.log_structured(
                level="WARNING",
                message="Batch embedding generation failed",
                extra={"error": str(e), "batch_size": len(valid_texts)}
            )
            return []

    def get_dimensions(self) -> int:
        """Get embedding dimensions (1536 when no provider is configured)."""
        if self.provider is None:
            return DEFAULT_EMBEDDING_DIMENSIONS
        return self.provider.get_dimensions()

    def get_status(self) -> Dict[str, Any]:
        """Get status information for health reporting."""
        if self.is_available():
            status: Dict[str, Any] = {
                "available": True,
                "provider": "openai",
                "dimensions": self.provider.get_dimensions(),
            }
            if isinstance(self.provider, OpenAIEmbeddingProvider):
                status["model"] = self.provider.get_model()
            return status

        return {
            "available": False,
            "provider": None,
            "reason": "OPENAI_API_KEY not set - vector operations will fail",
        }
