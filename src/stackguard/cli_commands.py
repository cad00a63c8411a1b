"""
CLI command implementations for stackguard.

Exit codes for validate:
    0: no mandatory violations
    1: at least one mandatory violation
    2: the snapshot, configuration or a policy could not be processed
"""

from __future__ import annotations

import argparse
import csv
import io
import json
import sys
from typing import Any

from stackguard.config import ConfigError, PackConfiguration, load_config_from_env
from stackguard.engine import SnapshotLoader, SnapshotLoadError
from stackguard.observability import get_logger
from stackguard.rules import create_default_pack

EXIT_OK = 0
EXIT_VIOLATIONS = 1
EXIT_ERROR = 2


def cmd_validate(args: argparse.Namespace) -> int:
    """
    Evaluate the policy pack against a snapshot file.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    log = get_logger("cli")

    try:
        snapshot = SnapshotLoader().load(args.snapshot)
    except SnapshotLoadError as e:
        print(f"Error loading snapshot: {e}", file=sys.stderr)
        return EXIT_ERROR

    try:
        if args.config:
            config = PackConfiguration.from_file(args.config)
        else:
            config = load_config_from_env()
    except ConfigError as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_ERROR

    pack = create_default_pack(include_all=getattr(args, "all_policies", False))

    policy_names = None
    if getattr(args, "policies", None):
        policy_names = [n.strip() for n in args.policies.split(",") if n.strip()]
        unknown = [n for n in policy_names if pack.get_policy(n) is None]
        if unknown:
            print(f"Unknown policies: {', '.join(unknown)}", file=sys.stderr)
            return EXIT_ERROR

    log.evaluation_started(pack.name, args.snapshot, len(snapshot))
    violations, result = pack.evaluate(snapshot, config, policy_names)

    for name, policy_result in result.policy_results.items():
        if policy_result.errors:
            log.policy_failed(name, policy_result.errors)

    log.evaluation_completed(
        pack.name,
        result.violations_generated,
        result.mandatory_violations,
        result.duration_seconds,
    )

    rows = [
        {
            "policy": v.policy_name,
            "level": v.enforcement_level.value,
            "urn": v.urn or "",
            "message": v.message,
        }
        for v in violations
    ]

    if rows:
        print(format_output(rows, args.format))
    elif args.format == "json":
        print("[]")

    if args.format == "table" and not getattr(args, "quiet", False):
        if rows:
            print()
        print(
            f"{result.violations_generated} violation(s), "
            f"{result.mandatory_violations} mandatory, "
            f"from {result.policies_evaluated} policies "
            f"against {result.resources_evaluated} resources"
        )

    if result.has_mandatory:
        return EXIT_VIOLATIONS
    if result.has_errors:
        return EXIT_ERROR
    return EXIT_OK


def cmd_policies(args: argparse.Namespace) -> int:
    """Route policies subcommands."""
    action = getattr(args, "policies_action", None)

    if action == "list":
        return cmd_policies_list(args)

    print("Usage: stackguard policies list")
    return 1


def cmd_policies_list(args: argparse.Namespace) -> int:
    """List the policies in the pack."""
    pack = create_default_pack(include_all=getattr(args, "all_policies", False))

    rows = [
        {
            "name": policy.name,
            "level": pack.resolve_level(policy, PackConfiguration()).value,
            "description": policy.description,
        }
        for policy in pack.policies
    ]

    print(format_output(rows, getattr(args, "format", "table")))
    return EXIT_OK


def format_output(data: list[dict[str, Any]], format_type: str) -> str:
    """
    Format data for output.

    Args:
        data: List of dictionaries to format
        format_type: Output format (table, json, csv)

    Returns:
        Formatted string
    """
    if not data:
        return ""

    if format_type == "json":
        return json.dumps(data, indent=2, default=str)

    elif format_type == "csv":
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=data[0].keys())
        writer.writeheader()
        writer.writerows(data)
        return output.getvalue()

    else:  # table
        return format_table(data)


def format_table(data: list[dict[str, Any]]) -> str:
    """
    Format data as ASCII table.

    Args:
        data: List of dictionaries

    Returns:
        Formatted table string
    """
    if not data:
        return ""

    headers = list(data[0].keys())

    widths = {h: len(str(h)) for h in headers}
    for row in data:
        for h in headers:
            widths[h] = max(widths[h], len(str(row.get(h, ""))))

    lines = []
    lines.append(" | ".join(str(h).ljust(widths[h]) for h in headers))
    lines.append("-+-".join("-" * widths[h] for h in headers))

    for row in data:
        lines.append(
            " | ".join(str(row.get(h, "")).ljust(widths[h]) for h in headers)
        )

    return "\n".join(lines)
