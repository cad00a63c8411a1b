"""
Data models for stackguard.

This package provides the core data models used throughout stackguard:

- ResourceRecord: A declared resource in a stack snapshot
- Violation: A single policy violation

Each model has an associated collection class for managing groups of
objects with filtering capabilities.
"""

from stackguard.models.resource import (
    ResourceRecord,
    ResourceGraphSnapshot,
    PROVIDER_TYPE_PREFIX,
    AWS_PROVIDER_TYPE,
    AWS_RESOURCE_PREFIX,
)
from stackguard.models.violation import (
    EnforcementLevel,
    Violation,
    ViolationCollection,
)

__all__ = [
    # Resource module
    "ResourceRecord",
    "ResourceGraphSnapshot",
    "PROVIDER_TYPE_PREFIX",
    "AWS_PROVIDER_TYPE",
    "AWS_RESOURCE_PREFIX",
    # Violation module
    "EnforcementLevel",
    "Violation",
    "ViolationCollection",
]
