"""Tests for the embedding service with a fake provider."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from k8s_advisor.config.config import Config
from k8s_advisor.core.embedding.embedding_service import EmbeddingService, OpenAIEmbeddingProvider
from k8s_advisor.utils.exceptions import EmptyTextError, UnsupportedProviderError


class TestEmbeddingServiceAvailable:
    @pytest.mark.asyncio
    async def test_generate_embedding(self, embedding_service, embedding_provider):
        result = await embedding_service.generate_embedding("deploy postgres")
        assert result == [0.1, 0.2, 0.3]
        assert embedding_provider.calls == ["deploy postgres"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   \n\t"])
    async def test_empty_text_raises(self, embedding_service, text):
        with pytest.raises(EmptyTextError, match="Text cannot be empty"):
            await embedding_service.generate_embedding(text)

    @pytest.mark.asyncio
    async def test_provider_failure_returns_none(self, embedding_service, embedding_provider):
        embedding_provider.generate_embedding = AsyncMock(side_effect=RuntimeError("rate limited"))
        assert await embedding_service.generate_embedding("hello") is None

    @pytest.mark.asyncio
    async def test_batch_drops_empty_entries(self, embedding_service, embedding_provider):
        result = await embedding_service.generate_embeddings(["a", "", None, "  ", "b"])
        assert len(result) == 2
        assert embedding_provider.calls == ["a", "b"]

    @pytest.mark.asyncio
    async def test_batch_failure_returns_empty(self, embedding_service, embedding_provider):
        embedding_provider.generate_embeddings = AsyncMock(side_effect=RuntimeError("boom"))
        assert await embedding_service.generate_embeddings(["a"]) == []

    def test_status_and_dimensions(self, embedding_service):
        assert embedding_service.is_available()
        assert embedding_service.get_dimensions() == 3
        status = embedding_service.get_status()
        assert status["available"] is True
        assert status["dimensions"] == 3


class TestEmbeddingServiceUnavailable:
    @pytest.mark.asyncio
    async def test_generate_returns_none(self, unavailable_embedding_service):
        assert await unavailable_embedding_service.generate_embedding("hello") is None

    @pytest.mark.asyncio
    async def test_empty_text_still_raises(self, unavailable_embedding_service):
        with pytest.raises(EmptyTextError):
            await unavailable_embedding_service.generate_embedding("")

    def test_status_reports_reason(self, unavailable_embedding_service):
        status = unavailable_embedding_service.get_status()
        assert status["available"] is False
        assert status["provider"] is None
        assert "OPENAI_API_KEY" in status["reason"]

    def test_default_dimensions(self, unavailable_embedding_service):
        assert unavailable_embedding_service.get_dimensions() == 1536


class TestOpenAIEmbeddingProvider:
    @pytest.mark.asyncio
    async def test_uses_injected_client(self):
        client = MagicMock()
        client.aembed_query = AsyncMock(return_value=[1.0, 2.0])
        provider = OpenAIEmbeddingProvider(api_key="k", client=client)

        assert provider.is_available()
        assert await provider.generate_embedding("  text  ") == [1.0, 2.0]
        client.aembed_query.assert_awaited_once_with("text")

    def test_defaults(self):
        provider = OpenAIEmbeddingProvider(api_key="k", client=MagicMock())
        assert provider.get_model() == "text-embedding-3-small"
        assert provider.get_dimensions() == 1536

    def test_no_key_means_unavailable(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        service = EmbeddingService(api_key=None)
        assert not service.is_available()


def test_from_config_rejects_unknown_provider():
    config = Config({"EMBEDDING_PROVIDER": "cohere"})
    with pytest.raises(UnsupportedProviderError):
        EmbeddingService.from_config(config)
