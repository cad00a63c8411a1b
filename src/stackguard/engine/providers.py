"""
Provider classification for stackguard.

Finds the AWS provider configurations in a snapshot and selects the ones
that carry the HITRUST compliance marker in their default tags.
"""

from __future__ import annotations

from typing import Iterable

from stackguard.engine.tags import extract_default_tags
from stackguard.models import AWS_PROVIDER_TYPE, ResourceRecord

COMPLIANCE_TAG = "Compliance"
COMPLIANCE_VALUE = "HITRUST"
DEFAULT_PROVIDER_PREFIX = "default"


def get_aws_providers(resources: Iterable[ResourceRecord]) -> list[ResourceRecord]:
    """Return the AWS provider configurations in declaration order."""
    return [r for r in resources if r.resource_type == AWS_PROVIDER_TYPE]


def is_default_provider(provider: ResourceRecord) -> bool:
    """Check if a provider was created implicitly by the engine."""
    return provider.name.startswith(DEFAULT_PROVIDER_PREFIX)


def has_compliance_marker(provider: ResourceRecord) -> bool:
    """
    Check if a provider is marked for HITRUST compliance.

    Args:
        provider: Provider configuration resource

    Returns:
        True if its default tags hold Compliance=HITRUST exactly
    """
    tags = extract_default_tags(provider.properties)
    if tags is None:
        return False
    return tags.get(COMPLIANCE_TAG) == COMPLIANCE_VALUE


def classify_compliant_providers(
    resources: Iterable[ResourceRecord],
) -> list[ResourceRecord]:
    """
    Select the HITRUST-compliant AWS providers.

    Default providers come first, then explicit ones; relative order
    within each group follows the snapshot.

    Args:
        resources: All resources in the snapshot

    Returns:
        Compliant provider resources
    """
    aws_providers = get_aws_providers(resources)

    default_providers = [p for p in aws_providers if is_default_provider(p)]
    explicit_providers = [p for p in aws_providers if not is_default_provider(p)]

    return [p for p in default_providers if has_compliance_marker(p)] + [
        p for p in explicit_providers if has_compliance_marker(p)
    ]
