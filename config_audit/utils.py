"""Shared helpers for configuration audits."""
from __future__ import annotations

from typing import TYPE_CHECKING, List

from .findings import Finding, Severity

if TYPE_CHECKING:  # pragma: no cover
    from .checks import CheckDefinition


def strip_json_comments(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments that sit outside string literals.

    Newlines inside removed comments are kept so parser errors still report
    the line numbers of the original file. An unterminated block comment is
    left in place for the JSON parser to reject.
    """

    out: List[str] = []
    index = 0
    length = len(text)
    in_string = False
    while index < length:
        char = text[index]
        if in_string:
            out.append(char)
            if char == "\\" and index + 1 < length:
                out.append(text[index + 1])
                index += 2
                continue
            if char == '"':
                in_string = False
            index += 1
            continue
        if char == '"':
            in_string = True
        elif text.startswith("//", index):
            end = text.find("\n", index)
            index = length if end == -1 else end
            continue
        elif text.startswith("/*", index):
            end = text.find("*/", index + 2)
            if end == -1:
                out.append(text[index:])
                break
            out.append("\n" * text.count("\n", index, end))
            index = end + 2
            continue
        out.append(char)
        index += 1
    return "".join(out)


def strip_trailing_commas(text: str) -> str:
    """Drop commas that directly precede a closing ``}`` or ``]``.

    Expects comment-free input; string literals are left untouched.
    """

    out: List[str] = []
    index = 0
    length = len(text)
    in_string = False
    while index < length:
        char = text[index]
        if in_string:
            out.append(char)
            if char == "\\" and index + 1 < length:
                out.append(text[index + 1])
                index += 2
                continue
            if char == '"':
                in_string = False
        elif char == '"':
            in_string = True
            out.append(char)
        elif char == ",":
            ahead = index + 1
            while ahead < length and text[ahead].isspace():
                ahead += 1
            if ahead >= length or text[ahead] not in "}]":
                out.append(char)
        else:
            out.append(char)
        index += 1
    return "".join(out)


def clean_json_text(text: str) -> str:
    """Return *text* with comments and trailing commas removed."""

    return strip_trailing_commas(strip_json_comments(text))


def finding_from_exception(check: "CheckDefinition", exc: Exception) -> Finding:
    """Create an ERROR :class:`Finding` for a check that raised ``exc``.

    The check still contributes exactly one finding to the report, so a broken
    reader or predicate never hides the remaining results.
    """

    message = f"{check.id}: check could not be evaluated: {type(exc).__name__}: {exc}"
    return Finding(
        check_id=check.id,
        severity=Severity.ERROR,
        message=message,
        category=check.category,
    )


__all__ = [
    "clean_json_text",
    "finding_from_exception",
    "strip_json_comments",
    "strip_trailing_commas",
]
