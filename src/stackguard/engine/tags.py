"""
Tag extraction for stackguard.

Normalizes the tag payloads found on resource properties into plain
key/value mappings so policies never see the serialized shapes.
"""

from __future__ import annotations

import json
from typing import Any


def extract_default_tags(properties: dict[str, Any]) -> dict[str, Any] | None:
    """
    Extract a provider's default tags.

    The defaultTags property arrives either as a mapping or as a JSON
    string, both shaped {"tags": {...}}. Malformed payloads yield None.

    Args:
        properties: Provider resource properties

    Returns:
        Tag mapping, or None when no usable tags are present
    """
    default_tags = properties.get("defaultTags")
    if not default_tags:
        return None

    if isinstance(default_tags, str):
        try:
            default_tags = json.loads(default_tags)
        except (ValueError, RecursionError):
            return None

    if isinstance(default_tags, dict):
        tags = default_tags.get("tags")
        if isinstance(tags, dict):
            return tags

    return None


def merge_resource_tags(properties: dict[str, Any]) -> dict[str, Any]:
    """
    Compute the effective tags of a managed resource.

    tagsAll holds the provider-merged tags; tags is laid over it and wins
    on key collisions.

    Args:
        properties: Resource properties

    Returns:
        Merged tag mapping (possibly empty)
    """
    merged: dict[str, Any] = {}
    for key in ("tagsAll", "tags"):
        value = properties.get(key)
        if isinstance(value, dict):
            merged.update(value)
    return merged
