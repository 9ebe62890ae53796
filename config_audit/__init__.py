"""Configuration file auditing toolkit."""

from __future__ import annotations

from .checks import PROFILES, CheckDefinition, Profile, evaluate, register_profile
from .core import print_report, run_audit
from .document import ConfigDocument, load_config_document, parse_config_text
from .errors import AuditError, ConfigFileNotFound, ConfigParseError, ToolingUnavailable
from .findings import AuditReport, Finding, Severity
from .flag_matrix import (
    DEFAULT_STRICT_FLAGS,
    FlagMatrixReport,
    FlagResult,
    print_flag_matrix,
    run_flag_matrix_audit,
    suggest_order,
)

__all__ = [
    "AuditError",
    "AuditReport",
    "CheckDefinition",
    "ConfigDocument",
    "ConfigFileNotFound",
    "ConfigParseError",
    "DEFAULT_STRICT_FLAGS",
    "Finding",
    "FlagMatrixReport",
    "FlagResult",
    "PROFILES",
    "Profile",
    "Severity",
    "ToolingUnavailable",
    "evaluate",
    "load_config_document",
    "parse_config_text",
    "print_flag_matrix",
    "print_report",
    "register_profile",
    "run_audit",
    "run_flag_matrix_audit",
    "suggest_order",
]
