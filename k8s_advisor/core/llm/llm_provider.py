import os
from typing import Optional, Dict, Any, Type
from langchain_core.language_models.chat_models import BaseChatModel
from k8s_advisor.utils.exceptions import UnsupportedProviderError, LLMConfigurationError
from .base_llm_provider import BaseLLMProvider


class OpenAIProvider(BaseLLMProvider):
    """
    Concrete LLM provider for OpenAI models.
    """
    required_env = ("OPENAI_API_KEY",)

    def create_llm(
        self,
        model: str,
        temperature: float = 0.1,
        max_tokens: Optional[int] = None,
        timeout: int = 60,
        **kwargs: Any
    ) -> BaseChatModel:
        LLMProvider._check_package("langchain_openai", "OpenAI")
        from langchain_openai import ChatOpenAI
        api_key = kwargs.pop('api_key', None) or os.getenv('OPENAI_API_KEY')
        if not api_key:
            raise LLMConfigurationError(
                "OpenAI API key not found. Set OPENAI_API_KEY environment variable "
                "or pass api_key parameter."
            )
        config = {
            "model": model,
            "temperature": temperature,
            "api_key": api_key,
            "timeout": timeout,
        }
        if max_tokens is not None:
            config["max_tokens"] = max_tokens
        if kwargs.get('base_url'):
            config["base_url"] = kwargs.pop('base_url')
        config.update(kwargs)
        return ChatOpenAI(**config)


class AnthropicProvider(BaseLLMProvider):
    """
    Concrete LLM provider for Anthropic models.
    """
    required_env = ("ANTHROPIC_API_KEY",)

    def create_llm(
        self,
        model: str,
        temperature: float = 0.1,
        max_tokens: Optional[int] = None,
        timeout: int = 60,
        **kwargs: Any
    ) -> BaseChatModel:
        LLMProvider._check_package("langchain_anthropic", "Anthropic")
        from langchain_anthropic import ChatAnthropic  # type: ignore
        api_key = kwargs.pop('api_key', None) or os.getenv('ANTHROPIC_API_KEY')
        if not api_key:
            raise LLMConfigurationError(
                "Anthropic API key not found. Set ANTHROPIC_API_KEY environment variable "
                "or pass api_key parameter."
            )
        config = {
            "model": model,
            "temperature": temperature,
            "api_key": api_key,
            "timeout": timeout,
        }
        if max_tokens is not None:
            config["max_tokens"] = max_tokens
        config.update(kwargs)
        return ChatAnthropic(**config)


class AzureOpenAIProvider(BaseLLMProvider):
    """
    Concrete LLM provider for Azure OpenAI deployments.
    """
    required_env = ("AZURE_OPENAI_API_KEY", "AZURE_OPENAI_ENDPOINT")

    def create_llm(
        self,
        model: str,
        temperature: float = 0.1,
        max_tokens: Optional[int] = None,
        timeout: int = 60,
        **kwargs: Any
    ) -> BaseChatModel:
        LLMProvider._check_package("langchain_openai", "Azure OpenAI")
        from langchain_openai import AzureChatOpenAI
        api_key = kwargs.pop('api_key', None) or os.getenv('AZURE_OPENAI_API_KEY')
        endpoint = kwargs.pop('endpoint', None) or os.getenv('AZURE_OPENAI_ENDPOINT')
        if not api_key or not endpoint:
            raise LLMConfigurationError(
                "Azure OpenAI API key or endpoint not found. Set AZURE_OPENAI_API_KEY and AZURE_OPENAI_ENDPOINT "
                "environment variables or pass api_key and endpoint parameters."
            )
        config = {
            "azure_deployment": kwargs.pop('deployment_name', None) or model,
            "temperature": temperature,
            "api_key": api_key,
            "azure_endpoint": endpoint,
            "api_version": kwargs.pop('api_version', None) or os.getenv('AZURE_OPENAI_API_VERSION', '2024-06-01'),
            "timeout": timeout,
        }
        if max_tokens is not None:
            config["max_tokens"] = max_tokens
        config.update(kwargs)
        return AzureChatOpenAI(**config)


class LLMProvider:
    """Factory for creating LangChain chat models from a provider name."""

    _PROVIDERS: Dict[str, Type[BaseLLMProvider]] = {
        "openai": OpenAIProvider,
        "anthropic": AnthropicProvider,
        "azure_openai": AzureOpenAIProvider,
    }

    @staticmethod
    def create_llm(
        provider: str,
        model: str,
        temperature: float = 0.1,
        max_tokens: Optional[int] = None,
        timeout: int = 60,
        **kwargs: Any
    ) -> BaseChatModel:
        """
        Create a LangChain chat model.

        Args:
            provider: LLM provider name ('openai', 'anthropic', 'azure_openai')
            model: Model name (e.g., 'gpt-4o-mini', 'claude-sonnet-4-5')
            temperature: Sampling temperature (0.0 to 2.0)
            max_tokens: Maximum tokens to generate
            timeout: Request timeout in seconds
            **kwargs: Additional provider-specific parameters

        Returns:
            Configured LangChain chat model

        Raises:
            UnsupportedProviderError: If provider is not supported
            LLMConfigurationError: If configuration is invalid
        """
        provider = (provider or "").lower().strip()
        provider_cls = LLMProvider._PROVIDERS.get(provider)
        if provider_cls is None:
            supported = ", ".join(sorted(LLMProvider._PROVIDERS))
            raise UnsupportedProviderError(
                f"Unsupported provider: '{provider}'. "
                f"Supported providers: {supported}"
            )

        try:
            return provider_cls().create_llm(
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
                timeout=timeout,
                **kwargs
            )
        except LLMConfigurationError:
            raise
        except Exception as e:
            raise LLMConfigurationError(
                f"Failed to create LLM for provider '{provider}': {e}"
            ) from e

    @staticmethod
    def _check_package(package_name: str, provider_name: str) -> None:
        """Check if required package is installed."""
        try:
            __import__(package_name)
        except ImportError:
            raise LLMConfigurationError(
                f"{package_name} package is required for {provider_name} provider. "
                f"Install with: pip install {package_name.replace('_', '-')}"
            )

    @staticmethod
    def get_supported_providers() -> Dict[str, Dict[str, str]]:
        """Get the environment each supported provider needs."""
        return {
            name: {"required_env": ", ".join(cls.required_env)}
            for name, cls in LLMProvider._PROVIDERS.items()
        }

    @staticmethod
    def validate_environment(provider: str) -> Dict[str, Any]:
        """
        Validate that required environment variables are set for a provider.

        Args:
            provider: Provider name to validate

        Returns:
            Dictionary with validation results
        """
        provider = (provider or "").lower().strip()
        provider_cls = LLMProvider._PROVIDERS.get(provider)
        if provider_cls is None:
            return {"valid": False, "missing": [f"Unsupported provider: {provider}"]}

        missing = [name for name in provider_cls.required_env if not os.getenv(name)]
        return {"valid": not missing, "missing": missing}
