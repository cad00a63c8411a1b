"""
Pytest configuration and fixtures for stackguard tests.

This module provides common fixtures used across unit and integration tests.
"""

from __future__ import annotations

from typing import Any, Callable

import pytest

from stackguard.config import HitrustRegionConfig
from stackguard.models import (
    AWS_PROVIDER_TYPE,
    ResourceGraphSnapshot,
    ResourceRecord,
)

STACK_PREFIX = "urn:pulumi:dev::my-stack"


def provider_urn(name: str) -> str:
    return f"{STACK_PREFIX}::{AWS_PROVIDER_TYPE}::{name}"


def resource_urn(resource_type: str, name: str) -> str:
    return f"{STACK_PREFIX}::{resource_type}::{name}"


HITRUST_TAGS = {
    "Compliance": "HITRUST",
    "Team": "Platform",
    "Environment": "production",
}


@pytest.fixture
def make_provider() -> Callable[..., ResourceRecord]:
    """Return a factory for AWS provider configuration records."""

    def _make(
        name: str = "default_6_67_1",
        region: str | None = "us-east-1",
        tags: dict[str, Any] | None = None,
        default_tags: Any = None,
    ) -> ResourceRecord:
        properties: dict[str, Any] = {}
        if region is not None:
            properties["region"] = region
        if default_tags is not None:
            properties["defaultTags"] = default_tags
        elif tags is not None:
            properties["defaultTags"] = {"tags": tags}
        return ResourceRecord(
            urn=provider_urn(name),
            resource_type=AWS_PROVIDER_TYPE,
            name=name,
            properties=properties,
        )

    return _make


@pytest.fixture
def make_resource() -> Callable[..., ResourceRecord]:
    """Return a factory for managed AWS resource records."""

    def _make(
        name: str = "my-bucket",
        resource_type: str = "aws:s3/bucket:Bucket",
        provider: str | None = None,
        tags: dict[str, Any] | None = None,
        tags_all: dict[str, Any] | None = None,
        **properties: Any,
    ) -> ResourceRecord:
        if tags is not None:
            properties["tags"] = tags
        if tags_all is not None:
            properties["tagsAll"] = tags_all
        return ResourceRecord(
            urn=resource_urn(resource_type, name),
            resource_type=resource_type,
            name=name,
            properties=properties,
            provider_urn=provider,
        )

    return _make


@pytest.fixture
def hitrust_config() -> HitrustRegionConfig:
    """Return HITRUST settings requiring Team and Environment."""
    return HitrustRegionConfig(
        required_regions=["us-east-1", "us-west-2"],
        required_tags={"Team": None, "Environment": "production"},
    )


@pytest.fixture
def compliant_provider(make_provider) -> ResourceRecord:
    """Return a HITRUST provider that satisfies hitrust_config."""
    return make_provider(tags=dict(HITRUST_TAGS))


@pytest.fixture
def compliant_snapshot(compliant_provider, make_resource) -> ResourceGraphSnapshot:
    """Return a snapshot with one compliant provider and one tagged bucket."""
    bucket = make_resource(
        provider=compliant_provider.urn,
        tags_all={"Team": "Platform", "Environment": "production"},
    )
    return ResourceGraphSnapshot([compliant_provider, bucket])


@pytest.fixture
def stack_export() -> dict[str, Any]:
    """Return a minimal `pulumi stack export` document."""
    provider = provider_urn("default_6_67_1")
    return {
        "version": 3,
        "deployment": {
            "manifest": {"time": "2024-01-15T00:00:00Z"},
            "resources": [
                {
                    "urn": f"{STACK_PREFIX}::pulumi:pulumi:Stack::my-stack-dev",
                    "type": "pulumi:pulumi:Stack",
                    "custom": False,
                },
                {
                    "urn": provider,
                    "type": AWS_PROVIDER_TYPE,
                    "custom": True,
                    "id": "04da6b54-80e4-46f7-96ec-b56ff0331ba9",
                    "inputs": {
                        "region": "us-east-1",
                        "defaultTags": '{"tags":{"Compliance":"HITRUST","Team":"Platform","Environment":"production"}}',
                    },
                    "outputs": {
                        "region": "us-east-1",
                        "defaultTags": '{"tags":{"Compliance":"HITRUST","Team":"Platform","Environment":"production"}}',
                    },
                },
                {
                    "urn": resource_urn("aws:s3/bucket:Bucket", "logs"),
                    "type": "aws:s3/bucket:Bucket",
                    "custom": True,
                    "id": "logs-1234",
                    "parent": f"{STACK_PREFIX}::pulumi:pulumi:Stack::my-stack-dev",
                    "provider": f"{provider}::04da6b54-80e4-46f7-96ec-b56ff0331ba9",
                    "inputs": {"tags": {"Team": "Platform"}},
                    "outputs": {
                        "tags": {"Team": "Platform"},
                        "tagsAll": {"Team": "Platform", "Environment": "production"},
                    },
                },
            ],
        },
    }
