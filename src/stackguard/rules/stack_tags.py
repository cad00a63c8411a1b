"""Required tags on taggable AWS resources."""

from __future__ import annotations

from stackguard.engine.policy import (
    ReportViolation,
    ResourceValidationPolicy,
    StackValidationArgs,
)
from stackguard.models import EnforcementLevel, ResourceRecord


class RequiredTagsPolicy(ResourceValidationPolicy):
    """
    Ensures required tags are present on taggable AWS resources.

    Which resource types are taggable is part of the policy configuration
    (taggableResourceTypes); resources of other types are ignored.
    """

    name = "check-required-aws-tags"
    description = "Ensure required tags are present on all AWS resources."
    enforcement_level = EnforcementLevel.MANDATORY
    config_schema = {
        "properties": {
            "requiredTags": {
                "type": "array",
                "items": {"type": "string"},
            },
            "taggableResourceTypes": {
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
        config = args.get_config()
        required_tags = config.get("requiredTags") or []
        taggable = config.get("taggableResourceTypes") or []

        if not required_tags or resource.resource_type not in taggable:
            return

        tags = resource.get_property("tags")
        if not isinstance(tags, dict):
            tags = {}

        for key in required_tags:
            if not tags.get(key):
                report(f"Taggable resource '{resource.urn}' is missing required tag '{key}'")
