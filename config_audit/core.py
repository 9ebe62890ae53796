"""Core orchestration utilities for the configuration audit."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple, Union

from .checks import PROFILES, Profile, evaluate
from .document import load_config_document
from .findings import AuditReport, Finding

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = "tsconfig"
SEPARATOR = "=" * 43


def resolve_profile(name: str) -> Profile:
    """Return the registered profile called *name* (case-insensitive)."""

    key = (name or "").strip().lower()
    if key not in PROFILES:
        valid = ", ".join(sorted(PROFILES))
        raise ValueError(f"Unknown profile '{name}'. Valid profiles: {valid}")
    return PROFILES[key]


def run_audit(
    path: Union[str, Path, None] = None, profile: str = DEFAULT_PROFILE
) -> Tuple[AuditReport, int]:
    """Audit the configuration at *path* and return the report with its exit code.

    When *path* is omitted the profile's conventional filename in the working
    directory is used. Missing or malformed files raise before any check runs.
    """

    selected = resolve_profile(profile)
    target = Path(path) if path else Path(selected.default_filename)
    document = load_config_document(target)

    checks = selected.checks()
    logger.debug("Evaluating %d %s checks against %s", len(checks), selected.name, target)
    report = AuditReport(target=str(target), profile=selected.name)
    for check in checks:
        report.add(evaluate(check, document))
    return report, report.exit_code


def print_report(report: AuditReport) -> None:
    """Pretty-print *report* grouped by check category."""

    print(f"Auditing: {report.target}")
    for category in report.categories():
        print("")
        print(f"=== {category} ===")
        for finding in report.findings:
            if finding.category == category:
                print(f"  {finding.severity.tag:<7} {finding.message}")

    print("")
    print(SEPARATOR)
    print(
        f"Results: {report.errors} error(s), {report.warnings} warning(s), "
        f"{report.infos} info(s)"
    )
    if report.errors:
        print("Fix errors first, then address warnings.")
    elif report.warnings:
        print("No errors, but some improvements recommended.")
    else:
        print("Configuration looks good!")


def export_findings_to_excel(findings: Iterable[Finding], path: str) -> str:
    """Write *findings* to an Excel workbook located at *path*."""

    headers = ("Check", "Category", "Severity", "Message")
    rows = (
        (finding.check_id, finding.category, finding.severity.value, finding.message)
        for finding in findings
    )
    return export_rows_to_excel(
        rows,
        headers,
        path,
        sheet_title="Findings",
        purpose="findings",
    )


def export_rows_to_excel(
    rows: Iterable[Sequence[object]],
    headers: Sequence[str],
    path: str,
    *,
    sheet_title: str,
    purpose: str,
    column_cap: Optional[int] = 80,
) -> str:
    """Write ``rows`` with ``headers`` to an Excel sheet using :mod:`openpyxl`."""

    try:
        from openpyxl import Workbook
        from openpyxl.utils import get_column_letter
    except ImportError as exc:  # pragma: no cover - dependency missing during tests
        raise RuntimeError(
            "The 'openpyxl' package is required to export "
            f"{purpose} to Excel. Install it with 'pip install openpyxl'."
        ) from exc

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = sheet_title

    sheet.append(list(headers))
    column_widths = [len(header) for header in headers]

    for row in rows:
        values = ["" if value is None else value for value in row]
        sheet.append(values)
        for idx, value in enumerate(values):
            column_widths[idx] = max(column_widths[idx], len(str(value)))

    for idx, width in enumerate(column_widths, start=1):
        column_letter = get_column_letter(idx)
        padded = width + 2
        sheet.column_dimensions[column_letter].width = (
            min(padded, column_cap) if column_cap else padded
        )

    workbook.save(path)
    logger.debug("Wrote %s workbook to %s", purpose, path)
    return path


__all__ = [
    "DEFAULT_PROFILE",
    "export_findings_to_excel",
    "export_rows_to_excel",
    "print_report",
    "resolve_profile",
    "run_audit",
]
