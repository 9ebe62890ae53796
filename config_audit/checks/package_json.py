"""Best-practice checks for npm ``package.json`` manifests."""
from __future__ import annotations

from typing import List, Optional, Tuple

from ..document import ConfigDocument
from ..findings import Severity
from . import CheckDefinition, is_set, is_true, option, options, register_profile

REQUIRED = "Required Fields"
RECOMMENDED = "Recommended Fields"
MODULE_SYSTEM = "Module System"
ENTRY_POINTS = "Entry Points"
PUBLISHING = "Publishing"
SCRIPTS = "Scripts"


def main_entry(document: ConfigDocument) -> Tuple[Optional[str], bool]:
    """Return the ``main`` entry and whether it exists beside the manifest."""

    main = document.get("main")
    if not is_set(main):
        return None, False
    return str(main), (document.directory / str(main)).is_file()


def _required(field: str) -> CheckDefinition:
    return CheckDefinition(
        id=field,
        category=REQUIRED,
        read=option(field),
        predicate=is_set,
        severity_if_fail=Severity.ERROR,
        message=f"Missing required field: {field}",
        pass_message=f"{field}: {{value}}",
    )


@register_profile(
    "package-json",
    default_filename="package.json",
    description="npm package manifest: required metadata, entry points and publishing hygiene.",
)
def package_json_checks() -> List[CheckDefinition]:
    """Return the ordered check table for ``package.json``."""

    return [
        _required("name"),
        _required("version"),
        CheckDefinition(
            id="description",
            category=RECOMMENDED,
            read=option("description"),
            predicate=is_set,
            severity_if_fail=Severity.WARNING,
            message="Missing recommended field: description",
            pass_message="description is set",
        ),
        CheckDefinition(
            id="license",
            category=RECOMMENDED,
            read=option("license"),
            predicate=is_set,
            severity_if_fail=Severity.WARNING,
            message="Missing recommended field: license",
            pass_message="license: {value}",
        ),
        CheckDefinition(
            id="engines",
            category=RECOMMENDED,
            read=option("engines"),
            predicate=is_set,
            severity_if_fail=Severity.WARNING,
            message="Missing recommended field: engines (specify supported Node.js version)",
            pass_message="engines is set: {value}",
        ),
        CheckDefinition(
            id="type",
            category=MODULE_SYSTEM,
            read=option("type"),
            predicate=is_set,
            severity_if_fail=Severity.WARNING,
            message=(
                'Missing "type" field, defaults to "commonjs". '
                'Consider setting "type": "module" for ESM'
            ),
            pass_message="type: {value}",
        ),
        CheckDefinition(
            id="main-exists",
            category=ENTRY_POINTS,
            read=main_entry,
            predicate=lambda entry: entry[0] is None or entry[1],
            severity_if_fail=Severity.ERROR,
            message="main: {value[0]} (file NOT found)",
            pass_message="main entry point resolves or is not declared",
        ),
        CheckDefinition(
            id="entry-point",
            category=ENTRY_POINTS,
            read=options("main", "exports"),
            predicate=lambda values: any(is_set(value) for value in values),
            severity_if_fail=Severity.WARNING,
            message='Neither "main" nor "exports" field is set',
            pass_message="main/exports entry point is defined",
        ),
        CheckDefinition(
            id="files",
            category=PUBLISHING,
            read=options("private", "files"),
            predicate=lambda values: is_true(values[0]) or is_set(values[1]),
            severity_if_fail=Severity.WARNING,
            message='Missing "files" field. The entire directory will be published',
            pass_message="files field is set or the package is private",
        ),
        CheckDefinition(
            id="license-published",
            category=PUBLISHING,
            read=options("private", "license"),
            predicate=lambda values: is_true(values[0]) or is_set(values[1]),
            severity_if_fail=Severity.INFO,
            message="No license set on a non-private package. Add one or mark the package private",
            pass_message="license is set or the package is private",
        ),
        CheckDefinition(
            id="test-script",
            category=SCRIPTS,
            read=option("scripts.test"),
            predicate=is_set,
            severity_if_fail=Severity.WARNING,
            message='No "test" script found. Consider adding one',
            pass_message="test script is defined",
        ),
    ]


__all__ = ["main_entry", "package_json_checks"]
