from k8s_advisor.core.models.capability import PrinterColumn, ResourceCapability, generate_capability_id
from k8s_advisor.core.models.cluster import ClusterOptions, ClusterResourceInfo
from k8s_advisor.core.models.organizational import (
    DeployedPolicyReference,
    OrganizationalPattern,
    PolicyIntent,
)
from k8s_advisor.core.models.solution import (
    HelmRecommendation,
    OpenQuestion,
    PatternInfluence,
    Question,
    QuestionGroup,
    QuestionValidation,
    ResourceCandidate,
    ResourceSolution,
    SolutionAssemblyResponse,
    SolutionResult,
)
from k8s_advisor.core.models.vector import BaseSearchResult, MatchType, SearchResult, VectorDocument

__all__ = [
    "BaseSearchResult",
    "ClusterOptions",
    "ClusterResourceInfo",
    "DeployedPolicyReference",
    "HelmRecommendation",
    "MatchType",
    "OpenQuestion",
    "OrganizationalPattern",
    "PatternInfluence",
    "PolicyIntent",
    "PrinterColumn",
    "Question",
    "QuestionGroup",
    "QuestionValidation",
    "ResourceCandidate",
    "ResourceCapability",
    "ResourceSolution",
    "SearchResult",
    "SolutionAssemblyResponse",
    "SolutionResult",
    "VectorDocument",
    "generate_capability_id",
]
