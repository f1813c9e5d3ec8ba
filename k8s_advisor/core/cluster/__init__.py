from k8s_advisor.core.cluster.cluster_options import (
    discover_cluster_options,
    format_cluster_options,
    inject_cluster_options,
)
from k8s_advisor.core.cluster.kubectl import KubectlClient

__all__ = [
    "KubectlClient",
    "discover_cluster_options",
    "format_cluster_options",
    "inject_cluster_options",
]
