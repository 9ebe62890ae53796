"""Tests for running audits and rendering reports."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


from config_audit.checks import PROFILES
from config_audit.core import export_findings_to_excel, print_report, resolve_profile, run_audit
from config_audit.errors import ConfigFileNotFound, ConfigParseError
from config_audit.findings import AuditReport, Finding, Severity


GOOD_TSCONFIG = """{
  // project settings
  "compilerOptions": {
    "strict": true,
    "noUncheckedIndexedAccess": true,
    "exactOptionalPropertyTypes": true,
    "skipLibCheck": true,
    "incremental": true,
    "isolatedModules": true,
    "module": "nodenext",
    "moduleResolution": "nodenext",
    "verbatimModuleSyntax": true,
    "moduleDetection": "force",
    "target": "es2022",
  },
}
"""

WARNINGS_ONLY = """{
  "compilerOptions": {
    "strict": true,
    "module": "amd",
    "moduleResolution": "node",
    "target": "es5"
  }
}
"""


def _write(tmp_path: Path, text: str, name: str = "tsconfig.json") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_one_finding_per_check_in_declaration_order(tmp_path: Path) -> None:
    """N declared checks produce N findings in the same order."""

    report, _ = run_audit(_write(tmp_path, "{}"))
    declared = [check.id for check in PROFILES["tsconfig"].checks()]

    assert [finding.check_id for finding in report.findings] == declared
    assert sum(report.counts.values()) == len(declared)


def test_clean_config_exits_zero(tmp_path: Path) -> None:
    """A fully compliant config has only passing findings."""

    report, exit_code = run_audit(_write(tmp_path, GOOD_TSCONFIG))

    assert exit_code == 0
    assert report.errors == report.warnings == report.infos == 0


def test_warnings_alone_do_not_fail(tmp_path: Path) -> None:
    """Warnings and infos never change the exit code."""

    report, exit_code = run_audit(_write(tmp_path, WARNINGS_ONLY))

    assert report.errors == 0
    assert report.warnings > 0
    assert exit_code == 0


def test_any_error_fails(tmp_path: Path) -> None:
    """A single ERROR finding makes the exit code 1."""

    report, exit_code = run_audit(_write(tmp_path, '{"compilerOptions": {"strict": false}}'))

    assert report.errors == 1
    assert exit_code == 1


def test_exit_code_policy_on_report() -> None:
    """Ten warnings and zero errors still exit 0."""

    report = AuditReport(target="x", profile="tsconfig")
    for index in range(10):
        report.add(Finding(f"w{index}", Severity.WARNING, "warn"))
    assert report.exit_code == 0

    report.add(Finding("e", Severity.ERROR, "error"))
    assert report.exit_code == 1


def test_audit_is_idempotent(tmp_path: Path) -> None:
    """Two runs on an unchanged file give identical reports."""

    path = _write(tmp_path, WARNINGS_ONLY)

    assert run_audit(path) == run_audit(path)


def test_missing_file_fails_without_findings(tmp_path: Path) -> None:
    """A missing config raises before any check is evaluated."""

    with pytest.raises(ConfigFileNotFound):
        run_audit(tmp_path / "nonexistent" / "tsconfig.json")


def test_parse_error_is_fatal(tmp_path: Path) -> None:
    """Malformed content raises ConfigParseError."""

    with pytest.raises(ConfigParseError):
        run_audit(_write(tmp_path, '{"compilerOptions": '))


def test_default_path_uses_profile_filename(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Without a path the conventional filename in the working directory is audited."""

    _write(tmp_path, '{"name": "demo", "version": "1.0.0"}', name="package.json")
    monkeypatch.chdir(tmp_path)

    report, _ = run_audit(profile="package-json")

    assert report.target == "package.json"
    assert report.profile == "package-json"


def test_unknown_profile_lists_valid_profiles() -> None:
    """Unknown profile names raise ValueError naming the valid ones."""

    with pytest.raises(ValueError) as excinfo:
        resolve_profile("webpack")

    assert "tsconfig" in str(excinfo.value)
    assert resolve_profile(" TSConfig ").name == "tsconfig"


def test_print_report_groups_by_category(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Findings are rendered under category headings with severity tags."""

    report, _ = run_audit(_write(tmp_path, '{"compilerOptions": {"strict": true}}'))

    print_report(report)
    out = capsys.readouterr().out

    assert out.startswith("Auditing: ")
    assert out.index("=== Type Safety ===") < out.index("=== Performance ===")
    assert "  [OK]    strict: true" in out
    assert "  [WARN]  noUncheckedIndexedAccess not enabled." in out
    assert "  [INFO]  exactOptionalPropertyTypes not enabled." in out
    assert f"Results: 0 error(s), {report.warnings} warning(s), {report.infos} info(s)" in out
    assert "No errors, but some improvements recommended." in out


def test_print_report_error_advice(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Reports with errors advise fixing them first."""

    report, _ = run_audit(_write(tmp_path, "{}"))

    print_report(report)
    out = capsys.readouterr().out

    assert "  [ERROR] strict is not enabled." in out
    assert "Fix errors first, then address warnings." in out


def test_report_to_dict_uses_plain_values(tmp_path: Path) -> None:
    """The JSON payload contains severity strings and counts."""

    report, _ = run_audit(_write(tmp_path, "{}"))
    payload = report.to_dict()

    assert payload["exit_code"] == 1
    assert payload["counts"]["ERROR"] == 1
    assert payload["findings"][0] == {
        "check_id": "strict",
        "category": "Type Safety",
        "severity": "ERROR",
        "message": "strict is not enabled. This is the foundation of type safety.",
    }


def test_export_findings_to_excel(tmp_path: Path) -> None:
    """Findings are written to a workbook with a header row."""

    openpyxl = pytest.importorskip("openpyxl")
    report, _ = run_audit(_write(tmp_path, "{}"))
    target = tmp_path / "findings.xlsx"

    export_findings_to_excel(report.findings, str(target))

    sheet = openpyxl.load_workbook(target).active
    rows = list(sheet.iter_rows(values_only=True))
    assert rows[0] == ("Check", "Category", "Severity", "Message")
    assert rows[1][:3] == ("strict", "Type Safety", "ERROR")
    assert len(rows) == len(report.findings) + 1
