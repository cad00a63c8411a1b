"""
stackguard CLI entry point.

This module provides the command-line interface for stackguard.
"""

from __future__ import annotations

import argparse
import sys

from stackguard import __version__
from stackguard.cli_commands import cmd_policies, cmd_validate
from stackguard.observability import configure_logging


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="stackguard",
        description="stackguard - Compliance policy evaluation for stack snapshots",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"stackguard {__version__}",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be repeated)",
    )

    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-essential output",
    )

    parser.add_argument(
        "--log-format",
        choices=["human", "json"],
        help="Log output format (default: human)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # validate command
    validate_parser = subparsers.add_parser(
        "validate", help="Evaluate policies against a stack snapshot"
    )
    validate_parser.add_argument(
        "snapshot",
        help="Path to a snapshot file (stack export, JSON or YAML)",
    )
    validate_parser.add_argument(
        "-c",
        "--config",
        help="Policy configuration file (default: STACKGUARD_CONFIG_FILE or environment)",
    )
    validate_parser.add_argument(
        "--policies",
        help="Comma-separated list of policies to run (default: all in pack)",
    )
    validate_parser.add_argument(
        "--all-policies",
        action="store_true",
        help="Include policies that are off by default",
    )
    validate_parser.add_argument(
        "--format",
        choices=["table", "json", "csv"],
        default="table",
        help="Output format (default: table)",
    )

    # policies command
    policies_parser = subparsers.add_parser("policies", help="Inspect policies")
    policies_subparsers = policies_parser.add_subparsers(dest="policies_action")

    policies_list_parser = policies_subparsers.add_parser("list", help="List policies")
    policies_list_parser.add_argument(
        "--all-policies",
        action="store_true",
        help="Include policies that are off by default",
    )
    policies_list_parser.add_argument(
        "--format",
        choices=["table", "json", "csv"],
        default="table",
        help="Output format (default: table)",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        level = "DEBUG" if args.verbose > 1 else "INFO"
    elif args.quiet:
        level = "ERROR"
    else:
        level = None
    configure_logging(level=level, format=args.log_format)

    if args.command is None:
        parser.print_help()
        return 0

    command_handlers = {
        "validate": cmd_validate,
        "policies": cmd_policies,
    }

    handler = command_handlers.get(args.command)
    if handler:
        return handler(args)

    print(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
