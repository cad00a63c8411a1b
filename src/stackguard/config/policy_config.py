"""
Policy configuration for stackguard.

Provides configuration management for policy pack evaluation: per-policy
enforcement levels and properties, and the typed HITRUST regime settings.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from stackguard.models import EnforcementLevel

HITRUST_POLICY_NAME = "validate-hitrust-aws-provider"

# Pack-wide key in a policy config document
ALL_POLICIES_KEY = "all"


class ConfigError(Exception):
    """Exception raised when a configuration document is invalid."""

    def __init__(self, message: str, source_path: str | None = None):
        self.source_path = source_path
        prefix = f"{source_path}: " if source_path else ""
        super().__init__(f"{prefix}{message}")


def _parse_level(value: Any) -> EnforcementLevel:
    if not isinstance(value, str):
        raise ConfigError(f"Enforcement level must be a string, got {value!r}")
    try:
        return EnforcementLevel.from_string(value)
    except ValueError as e:
        raise ConfigError(str(e)) from e


@dataclass
class HitrustRegionConfig:
    """
    Settings for the HITRUST provider policy.

    required_tags maps a tag key to its expected value; None means the
    tag only has to be present. Key order is the order violations are
    reported in.
    """

    required_regions: list[str] = field(default_factory=list)
    required_tags: dict[str, str | None] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "requiredRegions": list(self.required_regions),
            "requiredTags": dict(self.required_tags),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HitrustRegionConfig:
        """
        Create from a policy config mapping.

        requiredTags may be a mapping of key to expected value or a plain
        list of keys (presence-only).
        """
        regions = data.get("requiredRegions") or []
        if isinstance(regions, str):
            regions = [regions]

        raw_tags = data.get("requiredTags") or {}
        if isinstance(raw_tags, dict):
            required_tags = {
                str(k): (None if v is None else str(v)) for k, v in raw_tags.items()
            }
        elif isinstance(raw_tags, (list, tuple)):
            required_tags = {str(k): None for k in raw_tags}
        else:
            raise ConfigError(
                f"requiredTags must be a mapping or a list, got {type(raw_tags).__name__}"
            )

        return cls(
            required_regions=[str(r) for r in regions],
            required_tags=required_tags,
        )


@dataclass
class PolicySettings:
    """Configuration for a single policy."""

    enforcement_level: EnforcementLevel | None = None
    properties: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = dict(self.properties)
        if self.enforcement_level is not None:
            data["enforcementLevel"] = self.enforcement_level.value
        return data

    @classmethod
    def from_value(cls, value: Any) -> PolicySettings:
        """
        Create from a config document entry.

        An entry is either a bare enforcement level string or a mapping
        holding an optional "enforcementLevel" plus policy properties.
        """
        if value is None:
            return cls()
        if isinstance(value, str):
            return cls(enforcement_level=_parse_level(value))
        if not isinstance(value, dict):
            raise ConfigError(
                f"Policy settings must be a string or mapping, got {type(value).__name__}"
            )

        properties = dict(value)
        level = properties.pop("enforcementLevel", None)
        return cls(
            enforcement_level=_parse_level(level) if level is not None else None,
            properties=properties,
        )


@dataclass
class PackConfiguration:
    """
    Complete policy pack configuration.

    Mirrors the policy config document format: an optional "all" entry
    carrying the pack-wide enforcement level, then one entry per policy.
    """

    default_level: EnforcementLevel | None = None
    policies: dict[str, PolicySettings] = field(default_factory=dict)

    def for_policy(self, name: str) -> PolicySettings:
        """Get settings for a policy, empty if not configured."""
        return self.policies.get(name, PolicySettings())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data: dict[str, Any] = {}
        if self.default_level is not None:
            data[ALL_POLICIES_KEY] = self.default_level.value
        for name, settings in self.policies.items():
            data[name] = settings.to_dict()
        return data

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> PackConfiguration:
        """Create from dictionary."""
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(
                f"Policy configuration must be a mapping, got {type(data).__name__}"
            )

        default_level = None
        all_value = data.get(ALL_POLICIES_KEY)
        if all_value is not None:
            default_level = PolicySettings.from_value(all_value).enforcement_level

        policies = {
            name: PolicySettings.from_value(value)
            for name, value in data.items()
            if name != ALL_POLICIES_KEY
        }
        return cls(default_level=default_level, policies=policies)

    @classmethod
    def from_file(cls, path: str) -> PackConfiguration:
        """Load configuration from a JSON or YAML file."""
        path = os.path.expanduser(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                if path.endswith(".json"):
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except FileNotFoundError:
            raise ConfigError("File not found", path)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigError(f"Invalid configuration document: {e}", path)

        try:
            return cls.from_dict(data)
        except ConfigError as e:
            raise ConfigError(str(e), path) from e

    def save(self, path: str) -> None:
        """Save configuration to file."""
        path = os.path.expanduser(path)
        Path(path).parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            if path.endswith(".json"):
                json.dump(self.to_dict(), f, indent=2)
            else:
                yaml.safe_dump(self.to_dict(), f, default_flow_style=False)


def _split_env_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def load_config_from_env() -> PackConfiguration:
    """
    Load configuration from environment variables.

    Environment variables:
        STACKGUARD_CONFIG_FILE: Path to configuration file
        STACKGUARD_ENFORCEMENT_LEVEL: Pack-wide enforcement level
        STACKGUARD_REQUIRED_REGIONS: Comma-separated HITRUST regions
        STACKGUARD_REQUIRED_TAGS: Comma-separated HITRUST tags, each
            either "Key" or "Key=expected"

    Returns:
        PackConfiguration instance
    """
    config_file = os.getenv("STACKGUARD_CONFIG_FILE")
    if config_file and os.path.exists(config_file):
        return PackConfiguration.from_file(config_file)

    config = PackConfiguration()

    level = os.getenv("STACKGUARD_ENFORCEMENT_LEVEL")
    if level:
        config.default_level = _parse_level(level)

    properties: dict[str, Any] = {}

    regions = os.getenv("STACKGUARD_REQUIRED_REGIONS")
    if regions:
        properties["requiredRegions"] = _split_env_list(regions)

    tags = os.getenv("STACKGUARD_REQUIRED_TAGS")
    if tags:
        required_tags: dict[str, str | None] = {}
        for item in _split_env_list(tags):
            key, sep, expected = item.partition("=")
            required_tags[key.strip()] = expected.strip() if sep else None
        properties["requiredTags"] = required_tags

    if properties:
        config.policies[HITRUST_POLICY_NAME] = PolicySettings(properties=properties)

    return config
