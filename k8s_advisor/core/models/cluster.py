from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ClusterResourceInfo(BaseModel):
    """A named cluster object that may be marked as the cluster default."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    is_default: bool = Field(default=False, alias="isDefault")


class ClusterOptions(BaseModel):
    """Live values offered as answers to select questions."""
    model_config = ConfigDict(populate_by_name=True)

    namespaces: List[str] = Field(default_factory=list)
    storage_classes: List[ClusterResourceInfo] = Field(default_factory=list, alias="storageClasses")
    ingress_classes: List[ClusterResourceInfo] = Field(default_factory=list, alias="ingressClasses")
    node_labels: List[str] = Field(default_factory=list, alias="nodeLabels")
