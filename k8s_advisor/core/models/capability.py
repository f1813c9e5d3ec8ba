import hashlib
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


def generate_capability_id(resource_name: str) -> str:
    """
    Deterministic point id for a capability.

    sha256("capability-<resourceName>") laid out as an 8-4-4-4-12 UUID string,
    so rescanning a resource overwrites its previous entry.
    """
    digest = hashlib.sha256(f"capability-{resource_name}".encode("utf-8")).hexdigest()
    return f"{digest[0:8]}-{digest[8:12]}-{digest[12:16]}-{digest[16:20]}-{digest[20:32]}"


class PrinterColumn(BaseModel):
    name: str
    type: str = "string"
    json_path: str = Field(default="", alias="jsonPath")
    description: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class ResourceCapability(BaseModel):
    """Capability data inferred for a Kubernetes resource type."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, description="Set from the stored document id")
    resource_name: str = Field(..., alias="resourceName", examples=["resourcegroups.azure.upbound.io"])
    api_version: Optional[str] = Field(default=None, alias="apiVersion", examples=["apps/v1"])
    version: Optional[str] = Field(default=None, examples=["v1beta1"])
    group: Optional[str] = Field(default=None, examples=["azure.upbound.io"])
    capabilities: List[str] = Field(default_factory=list, examples=[["postgresql", "database"]])
    providers: List[str] = Field(default_factory=list, examples=[["azure", "aws"]])
    abstractions: List[str] = Field(default_factory=list, examples=[["high-availability", "backup"]])
    complexity: Literal["low", "medium", "high"] = "medium"
    description: str = ""
    use_case: str = Field(default="", alias="useCase")
    printer_columns: Optional[List[PrinterColumn]] = Field(default=None, alias="printerColumns")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    analyzed_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        alias="analyzedAt"
    )
    namespaced: bool = True

    def capability_id(self) -> str:
        return generate_capability_id(self.resource_name)

    def to_metadata(self) -> Dict[str, Any]:
        """Capability fields as a plain dict for prompts and resource candidates."""
        return self.model_dump(by_alias=True, exclude={"id"}, exclude_none=True)
