"""
AI provider boundary used by the recommendation pipeline.

Wraps a LangChain chat model behind two calls: ``is_initialized`` and
``send_message``. Construction never raises for missing credentials; the
provider simply reports itself as not initialized so callers can fail fast
with a configuration error at the point of use.
"""

from typing import Any, Dict, List, Optional

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from pydantic import BaseModel, Field

from k8s_advisor.config.config import Config
from k8s_advisor.core.llm.llm_provider import LLMProvider
from k8s_advisor.utils.exceptions import AIProviderNotInitializedError, ConfigError
from k8s_advisor.utils.logger import ComponentLogger

ai_provider_logger = ComponentLogger("K8S_ADVISOR_AI_PROVIDER")


class TokenUsage(BaseModel):
    input_tokens: int = 0
    output_tokens: int = 0


class AIResponse(BaseModel):
    """Text content returned by the model plus token accounting."""
    content: str
    usage: TokenUsage = Field(default_factory=TokenUsage)


class AIProvider:
    """Send prompts to a LangChain chat model."""

    def __init__(
        self,
        llm: Optional[BaseChatModel] = None,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        debug_mode: bool = False,
    ) -> None:
        self._llm = llm
        self.provider = provider
        self.model = model
        self.debug_mode = debug_mode

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> "AIProvider":
        """
        Build a provider from configuration.

        A missing API key or unsupported provider leaves the provider
        uninitialized instead of raising.
        """
        config = config or Config()
        llm_config = config.get_llm_config()
        debug_mode = bool(config.get('DEBUG_MODE', False))
        try:
            llm = LLMProvider.create_llm(
                provider=llm_config['provider'],
                model=llm_config['model'],
                temperature=llm_config['temperature'],
                max_tokens=llm_config['max_tokens'],
                timeout=llm_config['timeout'],
            )
        except ConfigError as e:
            ai_provider_logger.log_structured(
                level="WARNING",
                message="LLM provider not configured, AI features disabled",
                extra={"provider": llm_config['provider'], "error": str(e)}
            )
            llm = None
        return cls(llm=llm, provider=llm_config['provider'], model=llm_config['model'], debug_mode=debug_mode)

    def is_initialized(self) -> bool:
        return self._llm is not None

    async def send_message(
        self,
        message: str,
        system_prompt: Optional[str] = None,
        operation: Optional[str] = None,
    ) -> AIResponse:
        """
        Send a prompt to the model.

        Args:
            message: User prompt
            system_prompt: Optional system instructions
            operation: Label used in logs (e.g. 'solution-assembly')

        Returns:
            AIResponse with text content and token usage
        """
        if not self.is_initialized():
            raise AIProviderNotInitializedError(
                "AI provider not initialized. API key required for AI-powered resource ranking."
            )

        messages: List[BaseMessage] = []
        if system_prompt:
            messages.append(SystemMessage(content=system_prompt))
        messages.append(HumanMessage(content=message))

        if self.debug_mode:
            ai_provider_logger.log_structured(
                level="DEBUG",
                message="Sending prompt to AI provider",
                extra={"operation": operation, "prompt": message}
            )

        result = await self._llm.ainvoke(messages)
        content = self._content_to_text(result.content)
        usage = self._usage_from_result(result)

        ai_provider_logger.log_structured(
            level="INFO",
            message="AI response received",
            extra={
                "operation": operation,
                "input_tokens": usage.input_tokens,
                "output_tokens": usage.output_tokens,
            }
        )
        if self.debug_mode:
            ai_provider_logger.log_structured(
                level="DEBUG",
                message="AI response content",
                extra={"operation": operation, "content": content}
            )
        return AIResponse(content=content, usage=usage)

    @staticmethod
    def _content_to_text(content: Any) -> str:
        # Anthropic returns a list of content blocks
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            parts = []
            for block in content:
                if isinstance(block, str):
                    parts.append(block)
                elif isinstance(block, dict) and block.get("type") == "text":
                    parts.append(block.get("text", ""))
            return "".join(parts)
        return str(content)

    @staticmethod
    def _usage_from_result(result: Any) -> TokenUsage:
        usage_metadata: Dict[str, Any] = getattr(result, "usage_metadata", None) or {}
        return TokenUsage(
            input_tokens=usage_metadata.get("input_tokens", 0),
            output_tokens=usage_metadata.get("output_tokens", 0),
        )
