from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

QuestionType = Literal["text", "select", "multiselect", "boolean", "number"]

FALLBACK_OPEN_QUESTION = (
    "Is there anything else about your requirements or constraints "
    "that would help us provide better recommendations?"
)
FALLBACK_OPEN_PLACEHOLDER = (
    "e.g., specific security requirements, performance needs, "
    "existing infrastructure constraints..."
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ResourceCandidate(_CamelModel):
    """A resource type considered (or chosen) for a solution."""
    kind: str
    group: str = "core"
    api_version: Optional[str] = Field(default=None, alias="apiVersion")
    version: Optional[str] = None
    resource_name: Optional[str] = Field(default=None, alias="resourceName")
    namespaced: bool = True
    capabilities: Dict[str, Any] = Field(default_factory=dict)
    raw_explanation: Optional[str] = Field(default=None, alias="rawExplanation")


class PatternInfluence(_CamelModel):
    pattern_id: str = Field(..., alias="patternId")
    description: str = ""
    influence: Literal["high", "medium", "low"] = "medium"
    matched_triggers: List[str] = Field(default_factory=list, alias="matchedTriggers")


class QuestionValidation(_CamelModel):
    required: Optional[bool] = None
    min: Optional[float] = None
    max: Optional[float] = None
    pattern: Optional[str] = None
    message: Optional[str] = None


class Question(_CamelModel):
    id: str
    question: str
    type: QuestionType = "text"
    options: Optional[List[str]] = None
    placeholder: Optional[str] = None
    validation: Optional[QuestionValidation] = None
    suggested_answer: Optional[Any] = Field(default=None, alias="suggestedAnswer")
    answer: Optional[Union[str, int, float, bool, List[str]]] = None


class OpenQuestion(_CamelModel):
    question: str = FALLBACK_OPEN_QUESTION
    placeholder: str = FALLBACK_OPEN_PLACEHOLDER
    answer: Optional[str] = None


class QuestionGroup(_CamelModel):
    """Follow-up questionnaire attached to a solution."""
    required: List[Question] = Field(default_factory=list)
    basic: List[Question] = Field(default_factory=list)
    advanced: List[Question] = Field(default_factory=list)
    open: OpenQuestion = Field(default_factory=OpenQuestion)
    relevant_policies: List[str] = Field(default_factory=list, alias="relevantPolicies")

    @classmethod
    def fallback(cls) -> "QuestionGroup":
        """Group with only the generic open question."""
        return cls(open=OpenQuestion())

    def all_questions(self) -> List[Question]:
        return [*self.required, *self.basic, *self.advanced]


class ResourceSolution(_CamelModel):
    type: Literal["single", "combination"] = "single"
    resources: List[ResourceCandidate] = Field(default_factory=list)
    score: float = Field(default=0.0, ge=0.0, le=100.0)
    description: str = ""
    reasons: List[str] = Field(default_factory=list)
    analysis: str = ""
    pattern_influences: List[PatternInfluence] = Field(default_factory=list, alias="patternInfluences")
    used_patterns: bool = Field(default=False, alias="usedPatterns")
    questions: QuestionGroup = Field(default_factory=QuestionGroup.fallback)


class HelmRecommendation(_CamelModel):
    """Returned when no cluster capability covers the intent but a Helm chart might."""
    reason: str
    suggested_tool: str = Field(default="helm", alias="suggestedTool")
    search_query: str = Field(default="", alias="searchQuery")


class SolutionResult(_CamelModel):
    solutions: List[ResourceSolution] = Field(default_factory=list)
    helm_recommendation: Optional[HelmRecommendation] = Field(default=None, alias="helmRecommendation")


class SolutionAssemblyResponse(_CamelModel):
    """Shape the LLM must return from solution assembly."""
    solutions: List[ResourceSolution] = Field(default_factory=list)
    helm_recommendation: Optional[HelmRecommendation] = Field(default=None, alias="helmRecommendation")
