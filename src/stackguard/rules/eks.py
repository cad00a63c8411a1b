"""EKS cluster node instance type policy."""

from __future__ import annotations

import logging

from stackguard.engine.policy import (
    ReportViolation,
    ResourceValidationPolicy,
    StackValidationArgs,
)
from stackguard.models import ResourceRecord

logger = logging.getLogger(__name__)

EKS_CLUSTER_TYPE = "eks:index:Cluster"


def is_allowed_instance_type(
    instance_type: str | None, allowed_instance_types: list[str]
) -> bool:
    return instance_type is not None and instance_type in allowed_instance_types


class InstanceTypePolicy(ResourceValidationPolicy):
    """Restricts EKS node instance types to a configured allow-list."""

    name = "validate-instance-types"
    description = "Validate node instance types in EKS Cluster"
    resource_types = (EKS_CLUSTER_TYPE,)
    config_schema = {
        "properties": {
            "allowedInstanceTypes": {
                "type": "array",
                "items": {"type": "string"},
            },
        },
    }

    def validate_resource(
        self,
        resource: ResourceRecord,
        args: StackValidationArgs,
        report: ReportViolation,
    ) -> None:
        allowed = args.get_config().get("allowedInstanceTypes")
        if allowed is None:
            logger.debug(f"No allowedInstanceTypes configured, skipping {resource.urn}")
            return

        instance_type = resource.get_property("instanceType")
        if not is_allowed_instance_type(instance_type, allowed):
            report(
                f"Instance type {instance_type} is not allowed. "
                f"Must be one of [{','.join(allowed)}]"
            )
