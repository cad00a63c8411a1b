"""
Observability for stackguard.

Provides logging configuration for CLI and CI usage.
"""

from stackguard.observability.logging import (
    GuardLogger,
    HumanReadableFormatter,
    StructuredFormatter,
    configure_logging,
    get_logger,
)

__all__ = [
    "GuardLogger",
    "HumanReadableFormatter",
    "StructuredFormatter",
    "configure_logging",
    "get_logger",
]
