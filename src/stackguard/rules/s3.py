"""S3 bucket policies."""

from __future__ import annotations

from stackguard.engine.policy import (
    ReportViolation,
    ResourceValidationPolicy,
    StackValidationArgs,
    StackValidationPolicy,
)
from stackguard.models import EnforcementLevel, ResourceRecord

BUCKET_TYPE = "aws:s3/bucket:Bucket"
DEFAULT_PARENT_TYPE = "alphaws:resources:S3Bucket"


def urn_type(urn: str) -> str | None:
    """
    Extract the resource type from a URN.

    URNs look like urn:pulumi:<stack>::<project>::<type>::<name>, where
    <type> may be a "$"-joined chain of parent types.
    """
    parts = urn.split("::")
    if len(parts) < 4:
        return None
    return parts[2].rsplit("$", 1)[-1]


class BucketLoggingPolicy(StackValidationPolicy):
    """
    Checks whether logging is enabled for S3 buckets.

    A bucket that is itself the target of another bucket's logging does
    not need logging of its own.
    """

    name = "s3-bucket-logging-enabled"
    description = "Checks whether logging is enabled for your S3 buckets."
    enforcement_level = EnforcementLevel.MANDATORY

    def validate_stack(
        self, args: StackValidationArgs, report: ReportViolation
    ) -> None:
        buckets = args.resources.filter_by_type(BUCKET_TYPE)

        log_bucket_ids: set[str] = set()
        for bucket in buckets:
            for logging_config in bucket.get_property("loggings") or []:
                if isinstance(logging_config, dict) and logging_config.get("targetBucket"):
                    log_bucket_ids.add(logging_config["targetBucket"])

        for bucket in buckets:
            # Not provisioned yet (preview)
            bucket_id = bucket.resource_id or bucket.get_property("id")
            if not bucket_id:
                continue

            if not bucket.get_property("loggings") and bucket_id not in log_bucket_ids:
                report("Bucket logging must be defined.", bucket.urn)


class BucketParentComponentPolicy(ResourceValidationPolicy):
    """Checks that each S3 bucket is a child of the approved component."""

    name = "s3-bucket-parent-component"
    description = "Checks whether an S3 bucket is a child of a specific parent component."
    enforcement_level = EnforcementLevel.MANDATORY
    resource_types = (BUCKET_TYPE,)
    config_schema = {
        "properties": {
            "parentType": {"type": "string"},
        },
    }

    def validate_resource(
        self,
        resource: ResourceRecord,
        args: StackValidationArgs,
        report: ReportViolation,
    ) -> None:
        parent_type = args.get_config().get("parentType") or DEFAULT_PARENT_TYPE

        if not resource.parent_urn or urn_type(resource.parent_urn) != parent_type:
            report(f"Bucket must be a child of a '{parent_type}' component")
