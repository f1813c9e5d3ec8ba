from abc import ABC, abstractmethod
from typing import Any, Optional
from langchain_core.language_models.chat_models import BaseChatModel

class BaseLLMProvider(ABC):
    """
    Abstract base class for all LLM providers.
    Defines the interface for creating LangChain chat models.
    """
    #: Environment variables the provider needs before a model can be built
    required_env: tuple = ()

    @abstractmethod
    def create_llm(
        self,
        model: str,
        temperature: float = 0.1,
        max_tokens: Optional[int] = None,
        timeout: int = 60,
        **kwargs: Any
    ) -> BaseChatModel:
        """
        Create a LangChain chat model.
        Args:
            model: Model name (e.g., 'gpt-4o-mini')
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            timeout: Request timeout in seconds
            **kwargs: Additional provider-specific parameters
        Returns:
            Configured LangChain chat model
        """
        pass
