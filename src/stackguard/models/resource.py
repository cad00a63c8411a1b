"""
Resource data model for stackguard.

This module defines the ResourceRecord class representing one declared
resource in a stack snapshot and ResourceGraphSnapshot for managing the
ordered set of resources evaluated in a single policy pass.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Iterator

# Resource kind prefixes
PROVIDER_TYPE_PREFIX = "pulumi:providers:"
AWS_PROVIDER_TYPE = "pulumi:providers:aws"
AWS_RESOURCE_PREFIX = "aws:"


@dataclass(frozen=True)
class ResourceRecord:
    """
    Represents a declared resource in a stack snapshot.

    Records are read-only views of the resource graph, built once by the
    snapshot loader and consumed by policies. The link to a provider
    configuration is held as a URN string and resolved by lookup, never
    as an object reference.

    Attributes:
        urn: Globally unique resource URN
        resource_type: Resource kind (e.g., "aws:s3/bucket:Bucket")
        name: Declared logical name
        properties: Resolved resource properties
        provider_urn: URN of the bound provider configuration, if any
        parent_urn: URN of the parent component, if any
        resource_id: Provisioned id, absent during previews
    """

    urn: str
    resource_type: str
    name: str
    properties: dict[str, Any] = field(default_factory=dict)
    provider_urn: str | None = None
    parent_urn: str | None = None
    resource_id: str | None = None

    def is_provider(self) -> bool:
        """
        Check if this resource is a provider configuration.

        Returns:
            True if the resource kind is in the provider namespace
        """
        return self.resource_type.startswith(PROVIDER_TYPE_PREFIX)

    def get_property(self, key: str, default: Any = None) -> Any:
        """
        Get a property value by key.

        Args:
            key: Property name
            default: Value returned when the property is absent

        Returns:
            Property value or default
        """
        return self.properties.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert record to dictionary representation.

        Returns:
            Dictionary with all record fields, suitable for JSON serialization
        """
        return {
            "urn": self.urn,
            "type": self.resource_type,
            "name": self.name,
            "props": self.properties,
            "provider": self.provider_urn,
            "parent": self.parent_urn,
            "id": self.resource_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResourceRecord:
        """
        Create a ResourceRecord from a dictionary.

        Accepts the policy SDK field names (type, props, provider) as well
        as the longer aliases (kind, properties, boundProvider). A provider
        given as a mapping is reduced to its "urn" entry.

        Args:
            data: Dictionary with record fields

        Returns:
            New ResourceRecord instance
        """
        urn = data["urn"]

        provider = data.get("provider", data.get("boundProvider"))
        if isinstance(provider, dict):
            provider = provider.get("urn")

        parent = data.get("parent")
        if isinstance(parent, dict):
            parent = parent.get("urn")

        properties = data.get("props", data.get("properties")) or {}

        return cls(
            urn=urn,
            resource_type=str(data.get("type") or data.get("kind") or ""),
            name=str(data.get("name") or urn.rsplit("::", 1)[-1]),
            properties=dict(properties),
            provider_urn=provider or None,
            parent_urn=parent or None,
            resource_id=data.get("id") or None,
        )


class ResourceGraphSnapshot:
    """
    An ordered, read-only collection of ResourceRecord objects.

    Iteration order is declaration order; policies rely on it for
    deterministic violation ordering.
    """

    def __init__(self, resources: list[ResourceRecord] | None = None) -> None:
        """
        Initialize snapshot with optional list of resources.

        Args:
            resources: Resources in declaration order (defaults to empty list)
        """
        self._resources: tuple[ResourceRecord, ...] = tuple(resources or ())

    @property
    def resources(self) -> tuple[ResourceRecord, ...]:
        """Get the resources in declaration order."""
        return self._resources

    def __len__(self) -> int:
        """Return number of resources in the snapshot."""
        return len(self._resources)

    def __iter__(self) -> Iterator[ResourceRecord]:
        """Iterate over resources in declaration order."""
        return iter(self._resources)

    def __getitem__(self, index: int) -> ResourceRecord:
        """Get resource by index."""
        return self._resources[index]

    def filter_by_type(self, resource_type: str) -> ResourceGraphSnapshot:
        """
        Filter resources by exact kind.

        Args:
            resource_type: Kind to match (e.g., "pulumi:providers:aws")

        Returns:
            New snapshot containing only matching resources
        """
        return ResourceGraphSnapshot(
            [r for r in self._resources if r.resource_type == resource_type]
        )

    def filter_by_type_prefix(self, prefix: str) -> ResourceGraphSnapshot:
        """
        Filter resources whose kind starts with a namespace prefix.

        Args:
            prefix: Kind prefix (e.g., "aws:")

        Returns:
            New snapshot containing only matching resources
        """
        return ResourceGraphSnapshot(
            [r for r in self._resources if r.resource_type.startswith(prefix)]
        )

    def providers(self) -> ResourceGraphSnapshot:
        """Return only provider configuration resources."""
        return ResourceGraphSnapshot([r for r in self._resources if r.is_provider()])

    def get_by_urn(self, urn: str) -> ResourceRecord | None:
        """
        Look up a resource by URN.

        Args:
            urn: URN to find

        Returns:
            Matching resource or None
        """
        for resource in self._resources:
            if resource.urn == urn:
                return resource
        return None

    def to_list(self) -> list[dict[str, Any]]:
        """Convert snapshot to list of dictionaries."""
        return [r.to_dict() for r in self._resources]

    def to_json(self) -> str:
        """Convert snapshot to JSON string."""
        return json.dumps(self.to_list(), indent=2, default=str)

    @classmethod
    def from_list(cls, data: list[dict[str, Any]]) -> ResourceGraphSnapshot:
        """
        Create snapshot from list of dictionaries.

        Args:
            data: List of record dictionaries

        Returns:
            New ResourceGraphSnapshot
        """
        return cls([ResourceRecord.from_dict(d) for d in data])
