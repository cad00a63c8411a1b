"""
HITRUST provider evaluation for stackguard.

Checks that a stack's AWS resources are deployed through providers marked
for HITRUST compliance, that those providers sit in an approved region,
and that providers and resources carry the required tags with acceptable
values.

Evaluation is a single pass over an immutable snapshot:

1. No required regions configured -> one violation, stop.
2. No compliant provider found -> one violation, stop.
3. Each compliant provider: region, then required tags in config order.
4. Each AWS resource: provider binding, then required tags.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Collection, Iterable, Iterator

from stackguard.config import HitrustRegionConfig
from stackguard.engine.providers import classify_compliant_providers
from stackguard.engine.tags import extract_default_tags, merge_resource_tags
from stackguard.models import AWS_RESOURCE_PREFIX, ResourceRecord

logger = logging.getLogger(__name__)

ENVIRONMENT_TAG = "Environment"
ALLOWED_ENVIRONMENTS = ("production", "staging", "development")
MANAGED_BY_TAG = "ManagedBy"
MANAGED_BY_VALUE = "pulumi"

PROVIDER_ENTITY = "AWS provider"
RESOURCE_ENTITY = "AWS Resource"

NO_REGIONS_MESSAGE = "No required regions configured for HITRUST compliance."
NO_PROVIDER_MESSAGE = "No AWS provider configured for HITRUST compliance."


@dataclass(frozen=True)
class HitrustViolation:
    """A violation message and the resource it concerns, if any."""

    message: str
    urn: str | None = None

    def __str__(self) -> str:
        return self.message


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def check_tag_value(
    entity: str, urn: str, key: str, actual: Any, expected: str | None
) -> str | None:
    """
    Check a present tag's value.

    Environment is always checked against the fixed environment list.
    ManagedBy, when an expected value is configured, must be "pulumi".
    Any other key is compared with its configured value, if one is set.

    Args:
        entity: Entity label used in the message
        urn: URN of the provider or resource
        key: Tag key
        actual: Tag value found
        expected: Configured expected value, None for presence-only

    Returns:
        Violation message, or None if the value is acceptable
    """
    if key == ENVIRONMENT_TAG:
        if actual not in ALLOWED_ENVIRONMENTS:
            return (
                f"{entity} '{urn}' tag '{ENVIRONMENT_TAG}' must be one of "
                f"[{', '.join(ALLOWED_ENVIRONMENTS)}], but got '{actual}'"
            )
        return None

    if expected is None:
        return None

    required = MANAGED_BY_VALUE if key == MANAGED_BY_TAG else expected
    if actual != required:
        return f"{entity} '{urn}' tag '{key}' must be '{required}', but got '{actual}'"
    return None


def _check_required_tags(
    tags: dict[str, Any],
    required_tags: dict[str, str | None],
    entity: str,
    urn: str,
    missing_message: Callable[[str], str],
) -> Iterator[HitrustViolation]:
    for key, expected in required_tags.items():
        actual = tags.get(key)
        if _is_missing(actual):
            yield HitrustViolation(missing_message(key), urn)
            continue

        message = check_tag_value(entity, urn, key, actual, expected)
        if message:
            yield HitrustViolation(message, urn)


def validate_provider(
    provider: ResourceRecord, config: HitrustRegionConfig
) -> Iterator[HitrustViolation]:
    """
    Validate one compliant provider's region and default tags.

    Args:
        provider: Compliant provider configuration
        config: HITRUST settings

    Yields:
        Violations, region first and then tags in config order
    """
    urn = provider.urn

    region = provider.get_property("region")
    if _is_missing(region) or region not in config.required_regions:
        yield HitrustViolation(
            f"AWS HITRUST provider '{urn}' is not in a required region. "
            f"Must be one of [{','.join(config.required_regions)}]",
            urn,
        )

    tags = extract_default_tags(provider.properties)
    if tags is None:
        if config.required_tags:
            yield HitrustViolation(
                f"{PROVIDER_ENTITY} '{urn}' is missing required tags", urn
            )
        return

    yield from _check_required_tags(
        tags,
        config.required_tags,
        PROVIDER_ENTITY,
        urn,
        lambda key: f"{PROVIDER_ENTITY} '{urn}' is missing required default tag '{key}'",
    )


def validate_providers(
    providers: Iterable[ResourceRecord], config: HitrustRegionConfig
) -> Iterator[HitrustViolation]:
    """Validate every compliant provider independently."""
    for provider in providers:
        yield from validate_provider(provider, config)


def validate_resource_binding(
    resource: ResourceRecord,
    compliant_urns: Collection[str],
    config: HitrustRegionConfig,
) -> Iterator[HitrustViolation]:
    """
    Validate one AWS resource's provider binding and tags.

    A resource bound to anything other than a compliant provider gets a
    single binding violation and no tag checks.

    Args:
        resource: Managed AWS resource
        compliant_urns: URNs of the compliant providers
        config: HITRUST settings

    Yields:
        Violations for the resource
    """
    urn = resource.urn
    provider_urn = resource.provider_urn

    if not provider_urn or provider_urn not in compliant_urns:
        yield HitrustViolation(
            f"{RESOURCE_ENTITY} {urn} is not using a HITRUST-compliant AWS provider. "
            f"Its currently configured to use provider '{provider_urn or 'none'}'",
            urn,
        )
        return

    yield from _check_required_tags(
        merge_resource_tags(resource.properties),
        config.required_tags,
        RESOURCE_ENTITY,
        urn,
        lambda key: f"'{urn}' is missing required HITRUST tag '{key}'",
    )


def validate_resource_bindings(
    resources: Iterable[ResourceRecord],
    compliant_urns: Collection[str],
    config: HitrustRegionConfig,
) -> Iterator[HitrustViolation]:
    """Validate every resource in the AWS namespace."""
    for resource in resources:
        if resource.resource_type.startswith(AWS_RESOURCE_PREFIX):
            yield from validate_resource_binding(resource, compliant_urns, config)


def evaluate_hitrust(
    resources: Iterable[ResourceRecord], config: HitrustRegionConfig
) -> Iterator[HitrustViolation]:
    """
    Evaluate a snapshot against the HITRUST provider rules.

    Args:
        resources: All resources in the snapshot, in declaration order
        config: HITRUST settings

    Yields:
        Violations in report order; nothing if the stack complies
    """
    if not config.required_regions:
        yield HitrustViolation(NO_REGIONS_MESSAGE)
        return

    resources = list(resources)
    compliant_providers = classify_compliant_providers(resources)

    if not compliant_providers:
        yield HitrustViolation(NO_PROVIDER_MESSAGE)
        return

    logger.info(
        f"Found {len(compliant_providers)} AWS Provider(s) configured "
        f"for HITRUST compliance"
    )
    for provider in compliant_providers:
        logger.debug(
            f"  - {provider.urn} - {json.dumps(provider.properties, default=str)}"
        )

    yield from validate_providers(compliant_providers, config)

    compliant_urns = frozenset(p.urn for p in compliant_providers)
    yield from validate_resource_bindings(resources, compliant_urns, config)
