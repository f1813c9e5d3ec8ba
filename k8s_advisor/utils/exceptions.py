"""Custom exceptions for K8s Advisor."""

from typing import List, Optional


class K8sAdvisorError(Exception):
    """Base exception for all K8s Advisor errors."""
    pass

# Configuration errors: fail fast, never retried

class ConfigError(K8sAdvisorError):
    """Raised for configuration-related errors."""
    pass

class LLMConfigurationError(ConfigError):
    """Raised when LLM configuration is invalid."""
    pass

class UnsupportedProviderError(ConfigError):
    """Raised when an unsupported LLM or embedding provider is requested."""
    pass

class AIProviderNotInitializedError(LLMConfigurationError):
    """Raised when an LLM call is attempted without a configured provider."""
    pass

class VectorDBConfigurationError(ConfigError):
    """Raised when the vector database URL or collection name is missing."""
    pass

# Capability unavailability

class EmbeddingServiceUnavailableError(K8sAdvisorError):
    """Raised when an operation needs embeddings but no provider is configured."""
    pass

class CapabilityServiceUnavailableError(K8sAdvisorError):
    """Raised when recommendations are requested without a capability store."""
    pass

# Operation failures

class EmptyTextError(K8sAdvisorError, ValueError):
    """Raised when an embedding is requested for empty or whitespace-only text."""
    pass

class EmbeddingGenerationError(K8sAdvisorError):
    """Raised when an embedding could not be produced for stored data."""
    pass

class VectorDBNotInitializedError(K8sAdvisorError):
    """Raised when a vector DB operation runs without a client."""
    pass

class VectorDBOperationError(K8sAdvisorError):
    """Raised when a vector DB request fails."""
    pass

class SemanticSearchError(K8sAdvisorError):
    """Raised when hybrid search cannot complete."""
    pass

class CapabilitySearchError(K8sAdvisorError):
    """Raised when the capability store query fails during recommendation."""
    pass

class NoCapabilitiesFoundError(K8sAdvisorError):
    """Raised when no capability matches the user intent."""
    pass

class KubectlError(K8sAdvisorError):
    """Raised when a kubectl invocation fails or times out."""
    def __init__(self, message: str, args: Optional[List[str]] = None, stderr: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.command_args = args or []
        self.stderr = stderr

# Malformed external responses

class JSONExtractionError(K8sAdvisorError, ValueError):
    """Raised when no well-formed JSON value can be extracted from model text."""
    pass

class SolutionParseError(K8sAdvisorError):
    """Raised when the solution assembly response cannot be parsed."""
    def __init__(self, message: str, raw_response: str = "", candidates: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.raw_response = raw_response
        self.candidates = candidates or []

# Partial collection failures

class MissingResourceNameError(K8sAdvisorError):
    """Raised when a solution resource has no resourceName to address its schema."""
    pass

class SchemaFetchError(K8sAdvisorError):
    """Raised when no schema could be fetched for any resource in a solution."""
    def __init__(self, message: str, errors: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors or []
