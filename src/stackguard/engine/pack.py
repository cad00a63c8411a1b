"""
Policy pack evaluation for stackguard.

Runs a set of policies against a resource snapshot and collects the
violations they report.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from stackguard.config import PackConfiguration
from stackguard.engine.policy import Policy, StackValidationArgs
from stackguard.models import (
    EnforcementLevel,
    ResourceGraphSnapshot,
    Violation,
    ViolationCollection,
)

logger = logging.getLogger(__name__)


@dataclass
class PolicyEvalResult:
    """Result of evaluating a single policy."""

    policy_name: str
    enforcement_level: EnforcementLevel
    violations: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class PackResult:
    """Result of evaluating a policy pack."""

    pack_name: str
    policies_evaluated: int
    resources_evaluated: int
    violations_generated: int
    duration_seconds: float
    mandatory_violations: int = 0
    policy_results: dict[str, PolicyEvalResult] = field(default_factory=dict)

    @property
    def has_mandatory(self) -> bool:
        """True if any mandatory violation was reported."""
        return self.mandatory_violations > 0

    @property
    def has_errors(self) -> bool:
        """True if any policy failed to evaluate."""
        return any(r.errors for r in self.policy_results.values())


class PolicyPack:
    """
    A named set of policies evaluated together.

    Each policy's enforcement level is resolved from, in order: its entry
    in the configuration, its own declared level, the configuration's
    pack-wide level, and the pack default.
    """

    def __init__(
        self,
        name: str,
        policies: list[Policy],
        enforcement_level: EnforcementLevel = EnforcementLevel.ADVISORY,
    ):
        """
        Initialize the policy pack.

        Args:
            name: Pack name
            policies: Policies in evaluation order
            enforcement_level: Level for policies that declare none
        """
        names = [p.name for p in policies]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate policy names in pack {name}: {duplicates}")

        self.name = name
        self.policies = list(policies)
        self.enforcement_level = enforcement_level

    def get_policy(self, name: str) -> Policy | None:
        """Get a policy by name."""
        for policy in self.policies:
            if policy.name == name:
                return policy
        return None

    def resolve_level(
        self, policy: Policy, config: PackConfiguration
    ) -> EnforcementLevel:
        """Resolve the effective enforcement level for a policy."""
        settings = config.for_policy(policy.name)
        if settings.enforcement_level is not None:
            return settings.enforcement_level
        if policy.enforcement_level is not None:
            return policy.enforcement_level
        if config.default_level is not None:
            return config.default_level
        return self.enforcement_level

    def evaluate(
        self,
        snapshot: ResourceGraphSnapshot,
        config: PackConfiguration | None = None,
        policy_names: list[str] | None = None,
    ) -> tuple[ViolationCollection, PackResult]:
        """
        Evaluate the pack against a snapshot.

        A policy with invalid configuration or one that raises is recorded
        with its errors; the remaining policies still run.

        Args:
            snapshot: Resources to evaluate
            config: Pack configuration (defaults to empty)
            policy_names: Restrict evaluation to these policies

        Returns:
            Tuple of (ViolationCollection, PackResult)
        """
        config = config or PackConfiguration()
        start_time = time.time()
        violations = ViolationCollection()
        policy_results: dict[str, PolicyEvalResult] = {}
        evaluated = 0

        for policy in self.policies:
            if policy_names is not None and policy.name not in policy_names:
                continue

            level = self.resolve_level(policy, config)
            if level == EnforcementLevel.DISABLED:
                logger.debug(f"Policy {policy.name} is disabled, skipping")
                continue

            evaluated += 1
            result = PolicyEvalResult(policy_name=policy.name, enforcement_level=level)
            policy_results[policy.name] = result

            properties = config.for_policy(policy.name).properties
            config_errors = policy.validate_config(properties)
            if config_errors:
                logger.warning(
                    f"Policy {policy.name} has invalid configuration: {config_errors}"
                )
                result.errors.extend(config_errors)
                continue

            reported: list[Violation] = []

            def report(
                message: str,
                urn: str | None = None,
                _policy: Policy = policy,
                _level: EnforcementLevel = level,
                _reported: list[Violation] = reported,
            ) -> None:
                _reported.append(Violation.create(_policy.name, message, _level, urn))

            try:
                policy.validate(StackValidationArgs(snapshot, dict(properties)), report)
            except Exception as e:
                logger.error(f"Error evaluating policy {policy.name}: {e}")
                result.errors.append(str(e))

            violations.extend(reported)
            result.violations = len(reported)

        duration = time.time() - start_time
        mandatory = len(violations.filter_mandatory())

        pack_result = PackResult(
            pack_name=self.name,
            policies_evaluated=evaluated,
            resources_evaluated=len(snapshot),
            violations_generated=len(violations),
            duration_seconds=duration,
            mandatory_violations=mandatory,
            policy_results=policy_results,
        )

        logger.info(
            f"Evaluation complete: {len(violations)} violations ({mandatory} mandatory) "
            f"from {evaluated} policies against {len(snapshot)} resources"
        )

        return violations, pack_result
