"""
stackguard - Compliance policy evaluation for infrastructure stacks

Evaluates a policy pack against a materialized snapshot of a stack's
resource graph and reports every violation found. The central policy
checks that AWS resources are deployed through HITRUST-compliant
providers in approved regions, with the required tags.

Key Features:
- Read-only: Never touches cloud resources or the network
- Single pass: Each evaluation is independent and stateless
- Pulumi-style policy configuration and enforcement levels

Quick Start:
    >>> from stackguard.engine import SnapshotLoader, run_evaluation
    >>> from stackguard.config import PackConfiguration
    >>>
    >>> snapshot = SnapshotLoader().load("stack.json")
    >>> config = PackConfiguration.from_file("policy-config.yaml")
    >>> violations, result = run_evaluation(snapshot, config)
    >>> for v in violations:
    ...     print(v.message)
"""

from __future__ import annotations

__version__ = "0.1.0"

from stackguard.models import (
    EnforcementLevel,
    ResourceGraphSnapshot,
    ResourceRecord,
    Violation,
    ViolationCollection,
)

__all__ = [
    "__version__",
    "EnforcementLevel",
    "ResourceGraphSnapshot",
    "ResourceRecord",
    "Violation",
    "ViolationCollection",
]
