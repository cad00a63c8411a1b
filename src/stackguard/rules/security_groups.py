"""Security group ingress policy."""

from __future__ import annotations

from typing import Any

from stackguard.engine.policy import (
    ReportViolation,
    ResourceValidationPolicy,
    StackValidationArgs,
)
from stackguard.models import EnforcementLevel, ResourceRecord

SECURITY_GROUP_TYPE = "aws:ec2/securityGroup:SecurityGroup"
SECURITY_GROUP_RULE_TYPE = "aws:ec2/securityGroupRule:SecurityGroupRule"
OPEN_CIDR = "0.0.0.0/0"

OPEN_INGRESS_MESSAGE = "Security group allows ingress on port 22 from 0.0.0.0/0"


def _is_open(rule: Any) -> bool:
    if not isinstance(rule, dict):
        return False
    cidr_blocks = rule.get("cidrBlocks") or []
    return OPEN_CIDR in cidr_blocks


class OpenIngressPolicy(ResourceValidationPolicy):
    """Warns on security groups and rules open to the whole internet."""

    name = "validate-open-ingresses"
    description = "Warn on open ingresses"
    enforcement_level = EnforcementLevel.ADVISORY
    resource_types = (SECURITY_GROUP_TYPE, SECURITY_GROUP_RULE_TYPE)

    def validate_resource(
        self,
        resource: ResourceRecord,
        args: StackValidationArgs,
        report: ReportViolation,
    ) -> None:
        if resource.resource_type == SECURITY_GROUP_RULE_TYPE:
            if _is_open(resource.properties):
                report(OPEN_INGRESS_MESSAGE)
            return

        for rule in resource.get_property("ingress") or []:
            if _is_open(rule):
                report(OPEN_INGRESS_MESSAGE)
