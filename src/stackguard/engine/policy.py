"""
Policy definitions for stackguard.

Provides the base classes every policy in a pack derives from. A policy
receives the snapshot and its own configuration, and reports violations
through a callback; it never returns a verdict.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from stackguard.models import EnforcementLevel, ResourceGraphSnapshot, ResourceRecord

ReportViolation = Callable[..., None]

_SCHEMA_TYPES: dict[str, tuple[type, ...]] = {
    "array": (list, tuple),
    "object": (dict,),
    "string": (str,),
    "boolean": (bool,),
    "number": (int, float),
}


@dataclass
class StackValidationArgs:
    """Arguments passed to a policy for one evaluation."""

    resources: ResourceGraphSnapshot
    config: dict[str, Any] = field(default_factory=dict)

    def get_config(self) -> dict[str, Any]:
        """Return the policy's configuration properties."""
        return self.config


class Policy(ABC):
    """
    Base class for all policies.

    Subclasses set name, description and optionally enforcement_level and
    config_schema, then implement validate().
    """

    name: str = ""
    description: str = ""
    enforcement_level: EnforcementLevel | None = None
    config_schema: Mapping[str, Any] = MappingProxyType({})

    def validate_config(self, config: dict[str, Any]) -> list[str]:
        """
        Check configuration properties against the declared schema.

        Only property types are checked; unknown properties are allowed.

        Args:
            config: Policy configuration properties

        Returns:
            List of validation errors (empty if valid)
        """
        errors: list[str] = []
        properties = self.config_schema.get("properties", {})

        for key, schema in properties.items():
            if key not in config or config[key] is None:
                continue
            expected = _SCHEMA_TYPES.get(schema.get("type", ""))
            if expected and not isinstance(config[key], expected):
                errors.append(
                    f"Property '{key}' must be of type {schema['type']}, "
                    f"got {type(config[key]).__name__}"
                )
                continue

            item_type = _SCHEMA_TYPES.get(schema.get("items", {}).get("type", ""))
            if item_type and isinstance(config[key], (list, tuple)):
                for item in config[key]:
                    if not isinstance(item, item_type):
                        errors.append(
                            f"Property '{key}' items must be of type "
                            f"{schema['items']['type']}, got {type(item).__name__}"
                        )
                        break

        return errors

    @abstractmethod
    def validate(self, args: StackValidationArgs, report: ReportViolation) -> None:
        """
        Evaluate the policy.

        Args:
            args: Snapshot and policy configuration
            report: Called as report(message, urn=None) per violation
        """


class StackValidationPolicy(Policy):
    """A policy evaluated once against the whole snapshot."""

    def validate(self, args: StackValidationArgs, report: ReportViolation) -> None:
        self.validate_stack(args, report)

    @abstractmethod
    def validate_stack(
        self, args: StackValidationArgs, report: ReportViolation
    ) -> None:
        """Validate the snapshot as a whole."""


class ResourceValidationPolicy(Policy):
    """
    A policy evaluated once per resource of the listed types.

    Violations reported from validate_resource are attributed to that
    resource's URN.
    """

    resource_types: tuple[str, ...] = ()

    def applies_to(self, resource: ResourceRecord) -> bool:
        """Check if the policy applies to a resource."""
        return not self.resource_types or resource.resource_type in self.resource_types

    def validate(self, args: StackValidationArgs, report: ReportViolation) -> None:
        for resource in args.resources:
            if not self.applies_to(resource):
                continue

            def report_for_resource(
                message: str, urn: Optional[str] = None, _urn: str = resource.urn
            ) -> None:
                report(message, urn or _urn)

            self.validate_resource(resource, args, report_for_resource)

    @abstractmethod
    def validate_resource(
        self,
        resource: ResourceRecord,
        args: StackValidationArgs,
        report: ReportViolation,
    ) -> None:
        """Validate a single resource."""
