from typing import Optional


class DefaultConfig:
    """Default configuration for the K8s Advisor recommendation engine."""
    # LLM Configuration
    LLM_PROVIDER: str = "openai"
    LLM_MODEL: str = "gpt-4o-mini"
    LLM_TEMPERATURE: float = 0.0
    LLM_MAX_TOKENS: int = 15000
    LLM_TIMEOUT: int = 120

    # Embedding Configuration
    EMBEDDING_PROVIDER: str = "openai"
    EMBEDDING_MODEL: str = "text-embedding-3-small"
    EMBEDDING_DIMENSIONS: int = 1536

    # Vector DB (Qdrant) Configuration
    QDRANT_URL: str = "http://localhost:6333"
    QDRANT_API_KEY: Optional[str] = None
    QDRANT_CAPABILITIES_COLLECTION: str = "capabilities"
    QDRANT_PATTERNS_COLLECTION: str = "patterns"
    QDRANT_POLICIES_COLLECTION: str = "policies"

    # Recommendation pipeline
    CAPABILITY_SEARCH_LIMIT: int = 50
    PATTERN_SEARCH_LIMIT: int = 5
    POLICY_SEARCH_LIMIT: int = 50
    DEBUG_MODE: bool = False

    # Cluster access
    KUBECONFIG: Optional[str] = None
    KUBECTL_TIMEOUT: int = 30

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "k8s_advisor.log"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"
    LOG_TO_CONSOLE: bool = True
    LOG_TO_FILE: bool = False
    LOG_STRUCTURED_JSON: bool = False
