"""Command line interface for the configuration audit tool."""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Any, Callable, Dict, List, Optional

from .checks import PROFILES
from .core import DEFAULT_PROFILE, export_findings_to_excel, print_report, resolve_profile, run_audit
from .errors import AuditError
from .flag_matrix import (
    DEFAULT_STRICT_FLAGS,
    export_flag_results_to_excel,
    print_flag_matrix,
    run_flag_matrix_audit,
)

PROFILE_ENV = "CONFIG_AUDIT_PROFILE"
TYPE_CHECKER_ENV = "CONFIG_AUDIT_TSC"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Return parsed command line arguments."""

    parser = argparse.ArgumentParser(
        prog="config-audit",
        description="Audit JSON configuration files (tsconfig.json, package.json) for common issues.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="Configuration file to audit (defaults to the profile's conventional filename)",
    )
    parser.add_argument(
        "--profile",
        choices=sorted(PROFILES),
        default=os.environ.get(PROFILE_ENV, DEFAULT_PROFILE),
        help=f"Check table to apply (default: ${PROFILE_ENV} or {DEFAULT_PROFILE})",
    )
    parser.add_argument(
        "--flag-matrix",
        action="store_true",
        help="Type-check with each strict flag individually and suggest a migration order",
    )
    parser.add_argument(
        "--flags",
        nargs="+",
        default=None,
        help="Strict flags to test with --flag-matrix (default: the strict family)",
    )
    parser.add_argument(
        "--tsc",
        dest="type_checker",
        default=os.environ.get(TYPE_CHECKER_ENV) or None,
        help=f"Type checker executable for --flag-matrix (default: ${TYPE_CHECKER_ENV} or tsc)",
    )
    parser.add_argument("--json", dest="json_path", help="Optional path to export results as JSON")
    parser.add_argument(
        "--excel",
        dest="excel_path",
        help="Optional path to export results as an Excel workbook (.xlsx)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log diagnostic details to stderr",
    )
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _write_json(payload: Dict[str, Any], path: str) -> None:
    try:
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2)
    except (OSError, TypeError, ValueError) as exc:
        print(f"Failed to export JSON report: {exc}", file=sys.stderr)
    else:
        print(f"Results exported to {path}")


def _write_excel(writer: Callable[[str], str], path: str) -> None:
    try:
        written = writer(path)
    except (RuntimeError, OSError, ValueError) as exc:
        print(f"Failed to export Excel report: {exc}", file=sys.stderr)
    else:
        print(f"Excel report written to {written}")


def _run_config_audit(args: argparse.Namespace) -> int:
    if args.flags:
        print("Error: --flags requires --flag-matrix.", file=sys.stderr)
        return 1

    try:
        report, exit_code = run_audit(args.path, profile=args.profile)
    except (AuditError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print_report(report)

    if args.json_path:
        _write_json(report.to_dict(), args.json_path)

    if args.excel_path:
        _write_excel(lambda path: export_findings_to_excel(report.findings, path), args.excel_path)

    return exit_code


def _run_flag_matrix(args: argparse.Namespace) -> int:
    if args.profile != "tsconfig":
        print("Error: --flag-matrix only applies to the tsconfig profile.", file=sys.stderr)
        return 1

    flags = args.flags or DEFAULT_STRICT_FLAGS
    try:
        report = run_flag_matrix_audit(args.path, flags=flags, type_checker=args.type_checker)
    except (AuditError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print_flag_matrix(report)

    if args.json_path:
        _write_json(report.to_dict(), args.json_path)

    if args.excel_path:
        _write_excel(lambda path: export_flag_results_to_excel(report, path), args.excel_path)

    return report.exit_code


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point used by ``config-audit`` and ``python -m config_audit``."""

    args = parse_args(argv)
    _configure_logging(args.verbose)

    # Environment defaults bypass argparse ``choices``.
    try:
        args.profile = resolve_profile(args.profile).name
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.flag_matrix:
        return _run_flag_matrix(args)
    return _run_config_audit(args)


__all__ = ["main", "parse_args"]
