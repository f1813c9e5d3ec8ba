"""K8s Advisor: intent-driven Kubernetes resource recommendations."""

__version__ = "0.1.0"
