"""Live cluster values used to fill select questions."""

from typing import Any, Dict, List

from k8s_advisor.core.cluster.kubectl import KubectlClient
from k8s_advisor.core.models.cluster import ClusterOptions, ClusterResourceInfo
from k8s_advisor.core.models.solution import Question, QuestionGroup
from k8s_advisor.utils.logger import ComponentLogger

cluster_options_logger = ComponentLogger("K8S_ADVISOR_KUBECTL")

STORAGE_DEFAULT_ANNOTATION = "storageclass.kubernetes.io/is-default-class"
INGRESS_DEFAULT_ANNOTATION = "ingressclass.kubernetes.io/is-default-class"
SKIPPED_LABEL_PREFIXES = ("kubernetes.io/", "node.kubernetes.io/")


def _resource_infos(data: Dict[str, Any], annotation: str) -> List[ClusterResourceInfo]:
    infos = []
    for item in data.get("items", []):
        metadata = item.get("metadata") or {}
        annotations = metadata.get("annotations") or {}
        infos.append(ClusterResourceInfo(
            name=metadata.get("name", ""),
            is_default=annotations.get(annotation) == "true",
        ))
    return infos


def _warn(category: str, error: Exception) -> None:
    cluster_options_logger.log_structured(
        level="WARNING",
        message="Cluster option discovery failed",
        extra={"category": category, "error": str(error)}
    )


async def discover_cluster_options(kubectl: KubectlClient) -> ClusterOptions:
    """
    Discover namespaces, storage classes, ingress classes and node labels.

    Each category fails independently: namespaces fall back to ["default"],
    everything else to an empty list.
    """
    try:
        output = await kubectl.execute(["get", "namespaces", "-o", "jsonpath={.items[*].metadata.name}"])
        namespaces = output.split() or ["default"]
    except Exception as e:
        _warn("namespaces", e)
        namespaces = ["default"]

    try:
        storage_classes = _resource_infos(await kubectl.get_json(["get", "storageclass"]), STORAGE_DEFAULT_ANNOTATION)
    except Exception as e:
        _warn("storageClasses", e)
        storage_classes = []

    try:
        ingress_classes = _resource_infos(await kubectl.get_json(["get", "ingressclass"]), INGRESS_DEFAULT_ANNOTATION)
    except Exception as e:
        _warn("ingressClasses", e)
        ingress_classes = []

    try:
        nodes = await kubectl.get_json(["get", "nodes"])
        labels: Dict[str, None] = {}
        for node in nodes.get("items", []):
            for label in (node.get("metadata") or {}).get("labels") or {}:
                if not label.startswith(SKIPPED_LABEL_PREFIXES):
                    labels[label] = None
        node_labels = list(labels)
    except Exception as e:
        _warn("nodeLabels", e)
        node_labels = []

    return ClusterOptions(
        namespaces=namespaces,
        storage_classes=storage_classes,
        ingress_classes=ingress_classes,
        node_labels=node_labels,
    )


def format_cluster_options(options: ClusterOptions) -> str:
    """Render options as prompt text."""
    def names(items: List[ClusterResourceInfo]) -> str:
        if not items:
            return "None discovered"
        return ", ".join(f"{i.name} (default)" if i.is_default else i.name for i in items)

    labels = ", ".join(options.node_labels[:10]) if options.node_labels else "None discovered"
    return (
        f"Available Namespaces: {', '.join(options.namespaces)}\n"
        f"Available Storage Classes: {names(options.storage_classes)}\n"
        f"Available Ingress Classes: {names(options.ingress_classes)}\n"
        f"Available Node Labels: {labels}"
    )


def _options_for(question: Question, options: ClusterOptions) -> List[str]:
    qid = question.id.lower().replace("-", "_")
    if "namespace" in qid:
        return list(options.namespaces)
    if "storage_class" in qid or "storageclass" in qid:
        return [s.name for s in options.storage_classes]
    if "ingress_class" in qid or "ingressclass" in qid:
        return [i.name for i in options.ingress_classes]
    if "node_label" in qid or "nodelabel" in qid or "node_selector" in qid:
        return list(options.node_labels)
    return []


def inject_cluster_options(questions: QuestionGroup, options: ClusterOptions) -> QuestionGroup:
    """Fill empty select/multiselect questions that ask for cluster values."""
    for question in questions.all_questions():
        if question.type not in ("select", "multiselect") or question.options:
            continue
        values = _options_for(question, options)
        if values:
            question.options = list(values)
    return questions
