from k8s_advisor.core.llm.ai_provider import AIProvider, AIResponse, TokenUsage
from k8s_advisor.core.llm.llm_provider import LLMProvider

__all__ = [
    "AIProvider",
    "AIResponse",
    "LLMProvider",
    "TokenUsage",
]
