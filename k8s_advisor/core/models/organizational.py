import uuid
from datetime import datetime, timezone
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class BaseOrganizationalEntity(BaseModel):
    """Fields shared by patterns and policy intents."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    description: str = Field(default="", description="Detailed description used for embedding")
    triggers: List[str] = Field(default_factory=list, description="User intent keywords")
    rationale: str = Field(default="", description="Why this entity is recommended or required")
    created_at: str = Field(default_factory=_now_iso, alias="createdAt")
    created_by: str = Field(default="unknown", alias="createdBy")


class OrganizationalPattern(BaseOrganizationalEntity):
    """Guides resource selection."""
    suggested_resources: List[str] = Field(
        default_factory=list,
        alias="suggestedResources",
        examples=[["resourcegroups.azure.upbound.io", "servicemonitors.monitoring.coreos.com"]]
    )

    @field_validator("suggested_resources", mode="before")
    @classmethod
    def _drop_blank_resources(cls, value: Any) -> Any:
        # Stored payloads may carry null or non-string entries
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            return value
        return [v for v in value if isinstance(v, str) and v.strip()]


class DeployedPolicyReference(BaseModel):
    """A Kyverno policy applied to the cluster for a policy intent."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    applied_at: str = Field(default_factory=_now_iso, alias="appliedAt")


class PolicyIntent(BaseOrganizationalEntity):
    """Guides resource configuration."""
    deployed_policies: List[DeployedPolicyReference] = Field(default_factory=list, alias="deployedPolicies")
