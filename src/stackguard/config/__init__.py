"""
Configuration management for stackguard.

Provides configuration classes and utilities for managing policy
enforcement levels and per-policy settings.
"""

from stackguard.config.policy_config import (
    ALL_POLICIES_KEY,
    HITRUST_POLICY_NAME,
    ConfigError,
    HitrustRegionConfig,
    PackConfiguration,
    PolicySettings,
    load_config_from_env,
)

__all__ = [
    "ALL_POLICIES_KEY",
    "HITRUST_POLICY_NAME",
    "ConfigError",
    "HitrustRegionConfig",
    "PackConfiguration",
    "PolicySettings",
    "load_config_from_env",
]
