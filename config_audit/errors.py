"""Fatal conditions raised by the configuration auditor."""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, Path]


class AuditError(RuntimeError):
    """Base class for conditions that abort an audit before a report exists."""


class ConfigFileNotFound(AuditError):
    """The configuration path does not resolve to a readable file."""

    def __init__(self, path: PathLike, reason: Optional[str] = None) -> None:
        self.path = str(path)
        self.reason = reason
        if reason:
            message = f"{self.path} could not be read: {reason}"
        else:
            message = f"{self.path} not found"
        super().__init__(message)


class ConfigParseError(AuditError):
    """The configuration could not be parsed even after comment tolerance."""

    def __init__(
        self,
        path: PathLike,
        detail: str,
        *,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        self.path = str(path)
        self.detail = detail
        self.line = line
        self.column = column
        location = f" (line {line}, column {column})" if line is not None else ""
        super().__init__(f"{self.path}: {detail}{location}")


class ToolingUnavailable(AuditError):
    """A required external executable could not be located or started."""

    def __init__(self, tool: str, hint: Optional[str] = None) -> None:
        self.tool = tool
        self.hint = hint
        message = f"{tool} not found."
        if hint:
            message = f"{message} {hint}"
        super().__init__(message)


__all__ = ["AuditError", "ConfigFileNotFound", "ConfigParseError", "ToolingUnavailable"]
