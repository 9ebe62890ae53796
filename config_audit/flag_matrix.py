"""Per-flag strictness audit driven by an external type checker.

Each flag is tested in isolation: the type checker runs once per flag with
only that flag forced on, and the diagnostic lines in its output are counted.
The counts drive a greedy adoption order (flags that already pass first, then
ascending by error count). Interactions between flags are not modelled.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
import shutil
import subprocess
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from .core import export_rows_to_excel, resolve_profile
from .errors import ConfigFileNotFound, ToolingUnavailable

logger = logging.getLogger(__name__)

TYPE_CHECKER = "tsc"
INSTALL_HINT = "Install TypeScript: npm install -D typescript"
DIAGNOSTIC_MARKER = "error TS"
LOCAL_BIN = Path("node_modules") / ".bin"
SEPARATOR = "=" * 43

# Strict sub-flags in recommended migration order (easiest to hardest).
DEFAULT_STRICT_FLAGS: tuple[str, ...] = (
    "alwaysStrict",
    "strictBindCallApply",
    "strictFunctionTypes",
    "noImplicitThis",
    "noImplicitAny",
    "strictNullChecks",
    "strictPropertyInitialization",
    "useUnknownInCatchVariables",
    "noUncheckedIndexedAccess",
    "exactOptionalPropertyTypes",
)


@dataclass(frozen=True)
class FlagResult:
    """Outcome of one isolated type-checker run: a count or a tooling error."""

    flag: str
    error_count: Optional[int] = None
    tooling_error: Optional[str] = None

    @property
    def measured(self) -> bool:
        return self.tooling_error is None and self.error_count is not None

    @property
    def passes(self) -> bool:
        return self.measured and self.error_count == 0

    def status(self) -> str:
        if not self.measured:
            return f"tooling error: {self.tooling_error}"
        if self.error_count == 0:
            return "PASS"
        return f"{self.error_count} errors"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "flag": self.flag,
            "error_count": self.error_count,
            "tooling_error": self.tooling_error,
        }


def suggest_order(results: Iterable[FlagResult]) -> List[FlagResult]:
    """Return measured flags in suggested adoption order.

    Zero-error flags come first in declared order, followed by the rest sorted
    ascending by error count. The sort is stable so ties keep declared order.
    Flags with tooling errors have no count and are left out.
    """

    measured = [result for result in results if result.measured]
    ready = [result for result in measured if result.error_count == 0]
    remaining = [result for result in measured if result.error_count]
    return ready + sorted(remaining, key=lambda result: result.error_count)


@dataclass
class FlagMatrixReport:
    """Per-flag results for one flag-matrix run."""

    target: str
    type_checker: str
    version: str = ""
    results: List[FlagResult] = field(default_factory=list)

    @property
    def passing(self) -> List[FlagResult]:
        return [result for result in self.results if result.passes]

    @property
    def tooling_errors(self) -> List[FlagResult]:
        return [result for result in self.results if not result.measured]

    @property
    def exit_code(self) -> int:
        """``1`` when any flag could not be measured, ``0`` otherwise."""

        return 1 if self.tooling_errors else 0

    def suggested_order(self) -> List[FlagResult]:
        return suggest_order(self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target": self.target,
            "type_checker": self.type_checker,
            "version": self.version,
            "results": [result.to_dict() for result in self.results],
            "suggested_order": [result.flag for result in self.suggested_order()],
            "exit_code": self.exit_code,
        }


def _local_type_checkers(search_dirs: Iterable[Path]) -> Iterable[Path]:
    for directory in dict.fromkeys(Path(entry) for entry in search_dirs):
        yield directory / LOCAL_BIN / TYPE_CHECKER


def locate_type_checker(
    explicit: Optional[str] = None, search_dirs: Sequence[Union[str, Path]] = ()
) -> str:
    """Return the type checker executable to use.

    Resolution order: *explicit* (a name on ``PATH`` or a file path), ``tsc``
    on ``PATH``, then ``node_modules/.bin/tsc`` under the working directory and
    each of *search_dirs*. Raises :class:`ToolingUnavailable` when none exists.
    """

    if explicit:
        resolved = shutil.which(explicit)
        if resolved:
            return resolved
        raise ToolingUnavailable(explicit, INSTALL_HINT)

    resolved = shutil.which(TYPE_CHECKER)
    if resolved:
        return resolved

    for candidate in _local_type_checkers([Path.cwd(), *search_dirs]):
        if candidate.is_file() and os.access(candidate, os.X_OK):
            return str(candidate)

    raise ToolingUnavailable(TYPE_CHECKER, INSTALL_HINT)


def probe_version(binary: str) -> str:
    """Run ``<binary> --version``; a checker that cannot run is fatal."""

    try:
        completed = subprocess.run(
            [binary, "--version"],
            check=False,
            text=True,
            capture_output=True,
        )
    except OSError as exc:
        raise ToolingUnavailable(binary, f"It could not be started: {exc}") from exc
    if completed.returncode != 0:
        raise ToolingUnavailable(
            binary, f"'{binary} --version' exited with status {completed.returncode}"
        )
    return (completed.stdout or completed.stderr or "").strip()


def count_diagnostics(output: str, marker: str = DIAGNOSTIC_MARKER) -> int:
    """Count output lines that contain the diagnostic *marker*."""

    return sum(1 for line in output.splitlines() if marker in line)


def check_flag(binary: str, config_path: Union[str, Path], flag: str) -> FlagResult:
    """Type-check *config_path* with only *flag* forced on."""

    command = [binary, "--noEmit", "-p", str(config_path), f"--{flag}"]
    logger.debug("Running %s", " ".join(command))
    try:
        completed = subprocess.run(command, check=False, text=True, capture_output=True)
    except OSError as exc:
        logger.debug("Could not start %s for %s: %s", binary, flag, exc)
        return FlagResult(flag=flag, tooling_error=f"could not start {binary}: {exc}")

    output = (completed.stdout or "") + (completed.stderr or "")
    count = count_diagnostics(output)
    if completed.returncode != 0 and count == 0:
        first_line = next((line for line in output.splitlines() if line.strip()), "")
        detail = f"exited with status {completed.returncode}"
        if first_line:
            detail = f"{detail}: {first_line.strip()}"
        return FlagResult(flag=flag, tooling_error=detail)
    return FlagResult(flag=flag, error_count=count)


def _normalize_flags(flags: Iterable[str]) -> List[str]:
    normalized: List[str] = []
    for flag in flags:
        name = flag.strip().lstrip("-")
        if not name:
            raise ValueError(f"Invalid flag name: {flag!r}")
        normalized.append(name)
    return list(dict.fromkeys(normalized))


def run_flag_matrix_audit(
    path: Union[str, Path, None] = None,
    flags: Iterable[str] = DEFAULT_STRICT_FLAGS,
    type_checker: Optional[str] = None,
) -> FlagMatrixReport:
    """Measure each of *flags* in isolation against the config at *path*.

    The type checker is located and probed before any flag is tested; if it
    is unavailable the run fails with :class:`ToolingUnavailable`. A failure
    while testing an individual flag is recorded on that flag's result and the
    remaining flags are still measured.
    """

    target = Path(path) if path else Path(resolve_profile("tsconfig").default_filename)
    if not target.is_file():
        raise ConfigFileNotFound(target)

    selected = _normalize_flags(flags)
    binary = locate_type_checker(type_checker, search_dirs=[target.resolve().parent])
    version = probe_version(binary)
    logger.debug("Using %s (%s) for %d flags", binary, version, len(selected))

    report = FlagMatrixReport(target=str(target), type_checker=binary, version=version)
    for flag in selected:
        report.results.append(check_flag(binary, target, flag))
    return report


def print_flag_matrix(report: FlagMatrixReport) -> None:
    """Pretty-print per-flag results and the suggested adoption order."""

    width = max((len(result.flag) for result in report.results), default=0)

    print(f"Using tsconfig: {report.target}")
    print(f"TypeScript: {report.version or report.type_checker}")
    print("")
    print("Checking each strict flag individually...")
    print(SEPARATOR)
    print("")
    for result in report.results:
        print(f"  {result.flag:<{width}}  {result.status()}")

    total = len(report.results)
    passing = len(report.passing)
    print("")
    print(SEPARATOR)
    print(f"Summary: {passing}/{total} flags pass with zero errors")
    print("")
    print("Suggested migration order:")
    print("")
    for step, result in enumerate(report.suggested_order(), start=1):
        if result.error_count == 0:
            note = "(ready now)"
        else:
            note = f"({result.error_count} errors to fix)"
        print(f"  {step}. {result.flag:<{width}}  {note}")

    if report.tooling_errors:
        print("")
        print("Not measured (tooling errors):")
        for result in report.tooling_errors:
            print(f"  - {result.flag}: {result.tooling_error}")

    print("")
    if total and passing == total:
        print('All strict flags pass. You can safely enable "strict": true.')
    else:
        print("Tip: Enable passing flags now, then work through the rest in order.")
        print('Once all sub-flags pass, replace them with "strict": true.')


def export_flag_results_to_excel(report: FlagMatrixReport, path: str) -> str:
    """Write per-flag results of *report* to an Excel workbook."""

    order = {result.flag: step for step, result in enumerate(report.suggested_order(), start=1)}
    headers = ("Flag", "Errors", "Tooling Error", "Suggested Step")
    rows = (
        (result.flag, result.error_count, result.tooling_error, order.get(result.flag))
        for result in report.results
    )
    return export_rows_to_excel(
        rows,
        headers,
        path,
        sheet_title="Strict Flags",
        purpose="flag matrix results",
    )


__all__ = [
    "DEFAULT_STRICT_FLAGS",
    "DIAGNOSTIC_MARKER",
    "FlagMatrixReport",
    "FlagResult",
    "check_flag",
    "count_diagnostics",
    "export_flag_results_to_excel",
    "locate_type_checker",
    "print_flag_matrix",
    "probe_version",
    "run_flag_matrix_audit",
    "suggest_order",
]
