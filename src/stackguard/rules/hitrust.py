"""HITRUST AWS provider policy."""

from __future__ import annotations

from stackguard.config import HITRUST_POLICY_NAME, HitrustRegionConfig
from stackguard.engine.hitrust import evaluate_hitrust
from stackguard.engine.policy import (
    ReportViolation,
    StackValidationArgs,
    StackValidationPolicy,
)
from stackguard.models import EnforcementLevel


class HitrustProviderPolicy(StackValidationPolicy):
    """
    Checks that AWS resources are deployed through HITRUST providers.

    See stackguard.engine.hitrust for the evaluation rules.
    """

    name = HITRUST_POLICY_NAME
    description = "Checks whether the AWS provider is configured in the stack."
    enforcement_level = EnforcementLevel.MANDATORY
    config_schema = {
        "properties": {
            "requiredRegions": {
                "type": "array",
                "items": {"type": "string"},
            },
            # A mapping of key to expected value, or a list of keys
            "requiredTags": {},
        },
    }

    def validate_stack(
        self, args: StackValidationArgs, report: ReportViolation
    ) -> None:
        config = HitrustRegionConfig.from_dict(args.get_config())
        for violation in evaluate_hitrust(args.resources, config):
            report(violation.message, violation.urn)
