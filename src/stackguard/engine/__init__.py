"""
Policy engine for stackguard.

This package provides the evaluation framework including:

- Tag extraction and provider classification helpers
- evaluate_hitrust: The HITRUST compliant-provider evaluation
- Policy, StackValidationPolicy, ResourceValidationPolicy: Policy base classes
- PolicyPack: Evaluate a set of policies against a snapshot
- SnapshotLoader: Load resource snapshots from JSON/YAML
"""

from __future__ import annotations

from stackguard.config import PackConfiguration
from stackguard.engine.tags import extract_default_tags, merge_resource_tags
from stackguard.engine.providers import (
    classify_compliant_providers,
    get_aws_providers,
    has_compliance_marker,
    is_default_provider,
)
from stackguard.engine.hitrust import (
    HitrustViolation,
    evaluate_hitrust,
    validate_providers,
    validate_resource_bindings,
)
from stackguard.engine.policy import (
    Policy,
    ReportViolation,
    ResourceValidationPolicy,
    StackValidationArgs,
    StackValidationPolicy,
)
from stackguard.engine.pack import PackResult, PolicyEvalResult, PolicyPack
from stackguard.engine.loader import SnapshotLoader, SnapshotLoadError
from stackguard.models import ResourceGraphSnapshot, ViolationCollection

__all__ = [
    # Tags
    "extract_default_tags",
    "merge_resource_tags",
    # Providers
    "classify_compliant_providers",
    "get_aws_providers",
    "has_compliance_marker",
    "is_default_provider",
    # HITRUST
    "HitrustViolation",
    "evaluate_hitrust",
    "validate_providers",
    "validate_resource_bindings",
    # Policies
    "Policy",
    "ReportViolation",
    "ResourceValidationPolicy",
    "StackValidationArgs",
    "StackValidationPolicy",
    # Pack
    "PackResult",
    "PolicyEvalResult",
    "PolicyPack",
    # Loader
    "SnapshotLoader",
    "SnapshotLoadError",
    # Convenience functions
    "run_evaluation",
]


def run_evaluation(
    snapshot: ResourceGraphSnapshot,
    config: PackConfiguration | None = None,
    pack: PolicyPack | None = None,
) -> tuple[ViolationCollection, PackResult]:
    """
    Run full policy evaluation.

    Evaluates the given pack, or the default pack, against a snapshot.

    Args:
        snapshot: Resources to evaluate
        config: Optional pack configuration
        pack: Optional policy pack. Defaults to create_default_pack()

    Returns:
        Tuple of (ViolationCollection, PackResult)

    Example:
        >>> from stackguard.engine import SnapshotLoader, run_evaluation
        >>>
        >>> snapshot = SnapshotLoader().load("stack.json")
        >>> violations, result = run_evaluation(snapshot)
        >>> print(f"Found {len(violations)} violations")
    """
    if pack is None:
        from stackguard.rules import create_default_pack

        pack = create_default_pack()

    return pack.evaluate(snapshot, config)
