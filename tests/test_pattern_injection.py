"""Tests for pattern-mandated resource injection."""

import pytest

from k8s_advisor.core.models.organizational import OrganizationalPattern
from k8s_advisor.core.models.solution import ResourceCandidate
from k8s_advisor.core.recommender.pattern_injection import (
    add_pattern_resources,
    infer_providers,
    parse_suggested_resource,
)


@pytest.fixture
def azure_pattern():
    return OrganizationalPattern(
        id="pattern-azure-rg",
        description="Azure Resource Group",
        triggers=["azure"],
        suggested_resources=["resourcegroups.azure.upbound.io"],
        rationale="Every Azure resource lives in a resource group",
    )


@pytest.fixture
def capability_resources():
    return [
        ResourceCandidate(
            kind="SERVERS",
            group="dbforpostgresql.azure.upbound.io",
            resource_name="servers.dbforpostgresql.azure.upbound.io",
            capabilities={"providers": ["azure"]},
        )
    ]


def test_injects_missing_pattern_resource(capability_resources, azure_pattern):
    result = add_pattern_resources(capability_resources, [azure_pattern])

    assert len(result) == 2
    injected = result[-1]
    assert injected.kind == "resourcegroups"
    assert injected.group == "azure.upbound.io"
    assert injected.resource_name == "resourcegroups.azure.upbound.io"
    assert injected.capabilities["providers"] == ["azure"]
    assert injected.capabilities["patternId"] == "pattern-azure-rg"
    assert injected.capabilities["source"] == "organizational-pattern"


def test_injection_is_idempotent(capability_resources, azure_pattern):
    once = add_pattern_resources(capability_resources, [azure_pattern])
    twice = add_pattern_resources(once, [azure_pattern])
    assert [r.resource_name for r in twice] == [r.resource_name for r in once]


def test_existing_resource_not_duplicated(azure_pattern):
    existing = [ResourceCandidate(kind="resourcegroups", group="azure.upbound.io",
                                  resource_name="resourcegroups.azure.upbound.io")]
    assert len(add_pattern_resources(existing, [azure_pattern])) == 1


def test_does_not_mutate_input(capability_resources, azure_pattern):
    add_pattern_resources(capability_resources, [azure_pattern])
    assert len(capability_resources) == 1


def test_malformed_entries_skipped_without_failing_pattern():
    pattern = OrganizationalPattern.model_construct(
        id="p", description="mixed", rationale="r", triggers=[],
        suggested_resources=["", "   ", None, 42, "bad..name", ".leading", "buckets.s3.aws.upbound.io"],
    )
    result = add_pattern_resources([], [pattern])
    assert [r.resource_name for r in result] == ["buckets.s3.aws.upbound.io"]
    assert result[0].capabilities["providers"] == ["aws"]


def test_same_resource_from_two_patterns_added_once(azure_pattern):
    other = azure_pattern.model_copy(update={"id": "other"})
    result = add_pattern_resources([], [azure_pattern, other])
    assert len(result) == 1
    assert result[0].capabilities["patternId"] == "pattern-azure-rg"


@pytest.mark.parametrize("name,expected", [
    ("resourcegroups.azure.upbound.io", ["azure"]),
    ("buckets.s3.aws.upbound.io", ["aws"]),
    ("instances.compute.gcp.upbound.io", ["gcp"]),
    ("clusters.container.google.com", ["gcp"]),
    ("servicemonitors.monitoring.coreos.com", ["kubernetes"]),
])
def test_infer_providers(name, expected):
    assert infer_providers(name) == expected


def test_parse_core_resource():
    assert parse_suggested_resource("configmaps") == {
        "resource_name": "configmaps", "kind": "configmaps", "group": "core"
    }
