"""Pytest configuration and fixtures."""

import os
from typing import Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from k8s_advisor.core.embedding.embedding_service import EmbeddingProvider, EmbeddingService
from k8s_advisor.core.llm.ai_provider import AIResponse
from k8s_advisor.core.vector.vector_db_service import VectorDBService


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables."""
    os.environ["OPENAI_API_KEY"] = "test-openai-key"
    os.environ["QDRANT_URL"] = "test-url"
    os.environ["LOG_TO_CONSOLE"] = "false"


class FakeEmbeddingProvider(EmbeddingProvider):
    """Returns canned vectors; records what it was asked to embed."""

    def __init__(self, vector: Optional[List[float]] = None, dimensions: int = 3) -> None:
        self.vector = vector or [0.1, 0.2, 0.3]
        self.dimensions = dimensions
        self.calls: List[str] = []

    async def generate_embedding(self, text: str) -> List[float]:
        self.calls.append(text)
        return list(self.vector)

    async def generate_embeddings(self, texts: List[str]) -> List[List[float]]:
        self.calls.extend(texts)
        return [list(self.vector) for _ in texts]

    def is_available(self) -> bool:
        return True

    def get_dimensions(self) -> int:
        return self.dimensions


class UnavailableEmbeddingProvider(FakeEmbeddingProvider):
    def is_available(self) -> bool:
        return False


@pytest.fixture
def embedding_provider():
    return FakeEmbeddingProvider()


@pytest.fixture
def embedding_service(embedding_provider):
    return EmbeddingService(provider=embedding_provider)


@pytest.fixture
def unavailable_embedding_service():
    return EmbeddingService(provider=UnavailableEmbeddingProvider())


@pytest.fixture
def mock_vector_db():
    """VectorDBService double with every async operation mocked."""
    db = MagicMock(spec=VectorDBService)
    db.collection_name = "test"
    db.initialize_collection = AsyncMock()
    db.collection_exists = AsyncMock(return_value=True)
    db.upsert_document = AsyncMock()
    db.search_similar = AsyncMock(return_value=[])
    db.search_by_keywords = AsyncMock(return_value=[])
    db.get_document = AsyncMock(return_value=None)
    db.delete_document = AsyncMock()
    db.delete_all_documents = AsyncMock()
    db.get_all_documents = AsyncMock(return_value=[])
    db.scroll_with_filter = AsyncMock(return_value=[])
    db.get_collection_info = AsyncMock(return_value={"points_count": 0, "vectors_size": 3, "status": "green"})
    db.health_check = AsyncMock(return_value=True)
    return db


@pytest.fixture
def mock_ai_provider():
    """Initialized AI provider whose responses are queued per test."""
    provider = MagicMock()
    provider.is_initialized.return_value = True
    provider.send_message = AsyncMock()

    def queue(*contents: str) -> None:
        provider.send_message.side_effect = [AIResponse(content=c) for c in contents]

    provider.queue = queue
    return provider


@pytest.fixture
def explain_resource():
    """Schema lookup returning canned text per resource name."""
    schemas: Dict[str, str] = {}

    async def _explain(resource_name: str) -> str:
        return schemas.get(resource_name, f"KIND: {resource_name}\nFIELDS:\n  spec <Object>")

    _explain.schemas = schemas
    return _explain
