from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")


class MatchType(str, Enum):
    SEMANTIC = "semantic"
    KEYWORD = "keyword"
    HYBRID = "hybrid"


class VectorDocument(BaseModel):
    """A point stored in a vector collection."""
    id: str = Field(..., description="Document identifier (Qdrant point id)")
    payload: Dict[str, Any] = Field(default_factory=dict)
    vector: Optional[List[float]] = Field(default=None, description="Embedding, absent on listing reads")


class SearchResult(BaseModel):
    """A raw hit from the vector database. Scores are never negative."""
    id: str
    score: float = Field(..., ge=0.0)
    payload: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("score", mode="before")
    @classmethod
    def clamp_negative(cls, v: float) -> float:
        # cosine similarity can dip below zero
        return max(float(v), 0.0)


class BaseSearchResult(BaseModel, Generic[T]):
    """A typed hit returned by an entity store."""
    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    data: T
    score: float = Field(..., ge=0.0)
    match_type: MatchType = Field(..., alias="matchType")
