"""
Violation data model for stackguard.

This module defines the Violation class representing one reportable
non-compliance instance and ViolationCollection for managing the
violations produced by a policy pack evaluation.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator


class EnforcementLevel(Enum):
    """How a policy's violations are enforced."""

    ADVISORY = "advisory"
    MANDATORY = "mandatory"
    DISABLED = "disabled"

    @classmethod
    def from_string(cls, value: str) -> EnforcementLevel:
        """
        Create EnforcementLevel from string value.

        Args:
            value: String representation (case-insensitive)

        Returns:
            Matching EnforcementLevel enum value

        Raises:
            ValueError: If value is not a valid enforcement level
        """
        value_lower = value.lower()
        for level in cls:
            if level.value == value_lower:
                return level
        raise ValueError(f"Invalid enforcement level: {value}")


@dataclass(frozen=True)
class Violation:
    """
    Represents a single policy violation.

    The message is surfaced verbatim; downstream tooling matches on
    substrings of it.

    Attributes:
        id: Deterministic violation identifier
        policy_name: Name of the policy that reported the violation
        message: Human-readable violation message
        enforcement_level: Level the policy was evaluated at
        urn: URN of the offending resource, when the policy attributes one
    """

    id: str
    policy_name: str
    message: str
    enforcement_level: EnforcementLevel
    urn: str | None = None

    def is_mandatory(self) -> bool:
        """Check if this violation blocks a deployment."""
        return self.enforcement_level == EnforcementLevel.MANDATORY

    @staticmethod
    def generate_id(policy_name: str, message: str, urn: str | None = None) -> str:
        """
        Generate a deterministic violation ID.

        Same policy, resource and message always produce the same ID,
        allowing a violation to be tracked across evaluations.

        Args:
            policy_name: Reporting policy
            message: Violation message
            urn: Offending resource, if any

        Returns:
            Violation ID
        """
        combined = f"{policy_name}:{urn or ''}:{message}"
        hash_digest = hashlib.sha256(combined.encode()).hexdigest()[:16]
        return f"violation-{hash_digest}"

    @classmethod
    def create(
        cls,
        policy_name: str,
        message: str,
        enforcement_level: EnforcementLevel,
        urn: str | None = None,
    ) -> Violation:
        """Create a violation with a generated ID."""
        return cls(
            id=cls.generate_id(policy_name, message, urn),
            policy_name=policy_name,
            message=message,
            enforcement_level=enforcement_level,
            urn=urn,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert violation to dictionary."""
        return {
            "id": self.id,
            "policy_name": self.policy_name,
            "message": self.message,
            "enforcement_level": self.enforcement_level.value,
            "urn": self.urn,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Violation:
        """Create a Violation from a dictionary."""
        policy_name = data["policy_name"]
        message = data["message"]
        urn = data.get("urn")
        return cls(
            id=data.get("id") or cls.generate_id(policy_name, message, urn),
            policy_name=policy_name,
            message=message,
            enforcement_level=EnforcementLevel.from_string(
                data.get("enforcement_level", "advisory")
            ),
            urn=urn,
        )


class ViolationCollection:
    """
    A collection of Violation objects with filtering capabilities.

    Violations are kept in the order they were reported.
    """

    def __init__(self, violations: list[Violation] | None = None) -> None:
        self._violations: list[Violation] = (
            violations if violations is not None else []
        )

    @property
    def violations(self) -> list[Violation]:
        """Get the list of violations."""
        return self._violations

    def __len__(self) -> int:
        return len(self._violations)

    def __iter__(self) -> Iterator[Violation]:
        return iter(self._violations)

    def __getitem__(self, index: int) -> Violation:
        return self._violations[index]

    def add(self, violation: Violation) -> None:
        """Add a violation to the collection."""
        self._violations.append(violation)

    def extend(self, violations: list[Violation]) -> None:
        """Add multiple violations to the collection."""
        self._violations.extend(violations)

    def filter_by_policy(self, policy_name: str) -> ViolationCollection:
        """
        Filter violations by reporting policy.

        Args:
            policy_name: Policy name to filter by

        Returns:
            New ViolationCollection containing only matching violations
        """
        return ViolationCollection(
            [v for v in self._violations if v.policy_name == policy_name]
        )

    def filter_by_level(self, level: EnforcementLevel) -> ViolationCollection:
        """
        Filter violations by enforcement level.

        Args:
            level: Enforcement level to filter by

        Returns:
            New ViolationCollection containing only matching violations
        """
        return ViolationCollection(
            [v for v in self._violations if v.enforcement_level == level]
        )

    def filter_mandatory(self) -> ViolationCollection:
        """Return only mandatory violations."""
        return self.filter_by_level(EnforcementLevel.MANDATORY)

    def filter_by_urn(self, urn: str) -> ViolationCollection:
        """Return violations attributed to a resource URN."""
        return ViolationCollection([v for v in self._violations if v.urn == urn])

    def count_by_level_dict(self) -> dict[str, int]:
        """
        Count violations per enforcement level.

        Returns:
            Dictionary mapping level value to count
        """
        counts = {level.value: 0 for level in EnforcementLevel}
        for violation in self._violations:
            counts[violation.enforcement_level.value] += 1
        return counts

    def messages(self) -> list[str]:
        """Return violation messages in report order."""
        return [v.message for v in self._violations]

    def to_list(self) -> list[dict[str, Any]]:
        """Convert collection to list of dictionaries."""
        return [v.to_dict() for v in self._violations]

    def to_json(self) -> str:
        """Convert collection to JSON string."""
        return json.dumps(self.to_list(), indent=2)

    @classmethod
    def from_list(cls, data: list[dict[str, Any]]) -> ViolationCollection:
        """Create collection from list of dictionaries."""
        return cls([Violation.from_dict(d) for d in data])
