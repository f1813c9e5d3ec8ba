"""Deterministic injection of pattern-mandated resources."""

from typing import Any, Dict, Iterable, List, Optional

from k8s_advisor.core.models.organizational import OrganizationalPattern
from k8s_advisor.core.models.solution import ResourceCandidate
from k8s_advisor.utils.logger import ComponentLogger

injection_logger = ComponentLogger("K8S_ADVISOR_RECOMMENDER")

PATTERN_SOURCE = "organizational-pattern"


def infer_providers(resource_name: str) -> List[str]:
    name = resource_name.lower()
    if "azure" in name:
        return ["azure"]
    if "aws" in name:
        return ["aws"]
    if "gcp" in name or "google" in name:
        return ["gcp"]
    return ["kubernetes"]


def parse_suggested_resource(value: Any) -> Optional[Dict[str, str]]:
    """
    Split "resourcegroups.azure.upbound.io" into kind and group.

    Returns None for non-strings, blank strings and names with empty
    dotted segments.
    """
    if not isinstance(value, str):
        return None
    name = value.strip()
    if not name:
        return None
    segments = name.split(".")
    if any(not s for s in segments):
        return None
    return {
        "resource_name": name,
        "kind": segments[0],
        "group": ".".join(segments[1:]) or "core",
    }


def pattern_resource_candidate(parsed: Dict[str, str], pattern: OrganizationalPattern) -> ResourceCandidate:
    resource_name = parsed["resource_name"]
    return ResourceCandidate(
        kind=parsed["kind"],
        group=parsed["group"],
        resource_name=resource_name,
        capabilities={
            "resourceName": resource_name,
            "description": f"Resource suggested by organizational pattern: {pattern.description}",
            "capabilities": ["organizational pattern", pattern.description.lower()],
            "providers": infer_providers(resource_name),
            "complexity": "medium",
            "useCase": f"Pattern-suggested resource for: {pattern.rationale}",
            "confidence": 1.0,
            "source": PATTERN_SOURCE,
            "patternId": pattern.id,
        },
    )


def add_pattern_resources(
    resources: List[ResourceCandidate],
    patterns: Iterable[OrganizationalPattern],
) -> List[ResourceCandidate]:
    """
    Append each pattern's suggested resources that are not already present.

    Presence is matched by resourceName, so applying this twice adds nothing
    the second time.
    """
    result = list(resources)
    present = {r.resource_name for r in result if r.resource_name}

    for pattern in patterns:
        for suggested in pattern.suggested_resources or []:
            parsed = parse_suggested_resource(suggested)
            if parsed is None:
                injection_logger.log_structured(
                    level="DEBUG",
                    message="Skipping malformed suggested resource",
                    extra={"pattern_id": pattern.id, "resource": repr(suggested)}
                )
                continue
            if parsed["resource_name"] in present:
                continue
            result.append(pattern_resource_candidate(parsed, pattern))
            present.add(parsed["resource_name"])

    return result
