"""
Built-in policies for stackguard.

- HitrustProviderPolicy: HITRUST-compliant AWS providers, regions and tags
- OpenIngressPolicy: Security groups open to 0.0.0.0/0
- BucketLoggingPolicy: S3 bucket access logging
- BucketParentComponentPolicy: S3 buckets wrapped by the approved component
- InstanceTypePolicy: EKS node instance type allow-list
- RequiredTagsPolicy: Required tags on taggable resources
"""

from __future__ import annotations

from stackguard.engine.pack import PolicyPack
from stackguard.engine.policy import Policy
from stackguard.models import EnforcementLevel
from stackguard.rules.eks import InstanceTypePolicy
from stackguard.rules.hitrust import HitrustProviderPolicy
from stackguard.rules.s3 import BucketLoggingPolicy, BucketParentComponentPolicy
from stackguard.rules.security_groups import OpenIngressPolicy
from stackguard.rules.stack_tags import RequiredTagsPolicy

DEFAULT_PACK_NAME = "org-compliance-policies-aws"

__all__ = [
    "BucketLoggingPolicy",
    "BucketParentComponentPolicy",
    "HitrustProviderPolicy",
    "InstanceTypePolicy",
    "OpenIngressPolicy",
    "RequiredTagsPolicy",
    "DEFAULT_PACK_NAME",
    "get_all_policies",
    "get_default_policies",
    "create_default_pack",
]


def get_default_policies() -> list[Policy]:
    """Return the policies enabled in the default pack."""
    return [
        InstanceTypePolicy(),
        OpenIngressPolicy(),
        BucketLoggingPolicy(),
        HitrustProviderPolicy(),
    ]


def get_all_policies() -> list[Policy]:
    """Return every built-in policy."""
    return get_default_policies() + [
        BucketParentComponentPolicy(),
        RequiredTagsPolicy(),
    ]


def create_default_pack(include_all: bool = False) -> PolicyPack:
    """
    Create the default policy pack.

    Args:
        include_all: Also include the policies that are off by default

    Returns:
        PolicyPack with advisory pack-wide enforcement
    """
    policies = get_all_policies() if include_all else get_default_policies()
    return PolicyPack(
        DEFAULT_PACK_NAME,
        policies,
        enforcement_level=EnforcementLevel.ADVISORY,
    )
