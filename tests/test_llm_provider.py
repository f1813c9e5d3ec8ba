"""Tests for LLM model creation and the AI provider boundary."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from k8s_advisor.config.config import Config
from k8s_advisor.core.llm.ai_provider import AIProvider
from k8s_advisor.core.llm.llm_provider import LLMProvider
from k8s_advisor.utils.exceptions import (
    AIProviderNotInitializedError,
    LLMConfigurationError,
    UnsupportedProviderError,
)


class TestLLMProvider:
    def test_unsupported_provider(self):
        with pytest.raises(UnsupportedProviderError, match="Supported providers: anthropic, azure_openai, openai"):
            LLMProvider.create_llm("cohere", "command-r")

    def test_openai_model_created(self):
        from langchain_openai import ChatOpenAI

        llm = LLMProvider.create_llm("OpenAI", "gpt-4o-mini", temperature=0.0, max_tokens=100)
        assert isinstance(llm, ChatOpenAI)

    def test_missing_anthropic_key(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        with pytest.raises(LLMConfigurationError, match="ANTHROPIC_API_KEY"):
            LLMProvider.create_llm("anthropic", "claude-sonnet-4-5")

    def test_validate_environment(self, monkeypatch):
        monkeypatch.delenv("AZURE_OPENAI_ENDPOINT", raising=False)
        monkeypatch.setenv("AZURE_OPENAI_API_KEY", "key")
        assert LLMProvider.validate_environment("azure_openai") == {
            "valid": False, "missing": ["AZURE_OPENAI_ENDPOINT"]
        }
        assert LLMProvider.validate_environment("openai")["valid"] is True

    def test_supported_providers(self):
        providers = LLMProvider.get_supported_providers()
        assert providers["openai"]["required_env"] == "OPENAI_API_KEY"


class TestAIProvider:
    def test_from_config_without_key_is_uninitialized(self, monkeypatch):
        monkeypatch.setenv("LLM_PROVIDER", "anthropic")
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        provider = AIProvider.from_config(Config())
        assert provider.is_initialized() is False
        assert provider.provider == "anthropic"

    def test_from_config_with_key(self, monkeypatch):
        monkeypatch.setenv("LLM_PROVIDER", "openai")
        assert AIProvider.from_config(Config()).is_initialized() is True

    @pytest.mark.asyncio
    async def test_send_message_uninitialized(self):
        with pytest.raises(AIProviderNotInitializedError, match="API key required"):
            await AIProvider().send_message("hello")

    @pytest.mark.asyncio
    async def test_send_message(self):
        llm = MagicMock()
        llm.ainvoke = AsyncMock(return_value=AIMessage(
            content="answer",
            usage_metadata={"input_tokens": 12, "output_tokens": 4, "total_tokens": 16},
        ))
        provider = AIProvider(llm=llm)

        response = await provider.send_message("question", system_prompt="be brief", operation="test")

        assert response.content == "answer"
        assert response.usage.input_tokens == 12
        assert response.usage.output_tokens == 4
        messages = llm.ainvoke.await_args.args[0]
        assert isinstance(messages[0], SystemMessage)
        assert isinstance(messages[1], HumanMessage)
        assert messages[1].content == "question"

    @pytest.mark.asyncio
    async def test_send_message_without_system_prompt(self):
        llm = MagicMock()
        llm.ainvoke = AsyncMock(return_value=AIMessage(content="ok"))
        response = await AIProvider(llm=llm).send_message("question")
        assert len(llm.ainvoke.await_args.args[0]) == 1
        assert response.usage.input_tokens == 0

    def test_content_blocks_joined(self):
        content = [
            {"type": "text", "text": "part one "},
            {"type": "tool_use", "id": "x"},
            "part two",
        ]
        assert AIProvider._content_to_text(content) == "part one part two"
