"""Data models for configuration audit findings."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class Severity(str, Enum):
    """Outcome classification of a single check."""

    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
    PASS = "PASS"

    @property
    def tag(self) -> str:
        """Bracketed label used in the text report."""

        return SEVERITY_TAGS[self]


SEVERITY_TAGS: Dict[Severity, str] = {
    Severity.ERROR: "[ERROR]",
    Severity.WARNING: "[WARN]",
    Severity.INFO: "[INFO]",
    Severity.PASS: "[OK]",
}


@dataclass(frozen=True)
class Finding:
    """The outcome of evaluating one check against a configuration document."""

    check_id: str
    severity: Severity
    message: str
    category: str = "General"

    def to_dict(self) -> Dict[str, str]:
        return {
            "check_id": self.check_id,
            "category": self.category,
            "severity": self.severity.value,
            "message": self.message,
        }


def _empty_counts() -> Dict[Severity, int]:
    return {severity: 0 for severity in Severity}


@dataclass
class AuditReport:
    """Ordered findings and per-severity counts for a single audit run."""

    target: str
    profile: str
    findings: List[Finding] = field(default_factory=list)
    counts: Dict[Severity, int] = field(default_factory=_empty_counts)

    def add(self, finding: Finding) -> None:
        self.findings.append(finding)
        self.counts[finding.severity] += 1

    @property
    def errors(self) -> int:
        return self.counts[Severity.ERROR]

    @property
    def warnings(self) -> int:
        return self.counts[Severity.WARNING]

    @property
    def infos(self) -> int:
        return self.counts[Severity.INFO]

    @property
    def passed(self) -> int:
        return self.counts[Severity.PASS]

    @property
    def exit_code(self) -> int:
        """``1`` when any finding is an error, ``0`` otherwise."""

        return 1 if self.errors else 0

    def categories(self) -> List[str]:
        """Return finding categories in order of first appearance."""

        return list(dict.fromkeys(finding.category for finding in self.findings))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target": self.target,
            "profile": self.profile,
            "counts": {severity.value: count for severity, count in self.counts.items()},
            "exit_code": self.exit_code,
            "findings": [finding.to_dict() for finding in self.findings],
        }


__all__ = ["AuditReport", "Finding", "SEVERITY_TAGS", "Severity"]
