"""Best-practice checks for TypeScript ``tsconfig.json`` files."""
from __future__ import annotations

from typing import Any, List

from ..findings import Severity
from . import CheckDefinition, equals, is_set, is_true, lowered, one_of, option, options, register_profile

TYPE_SAFETY = "Type Safety"
PERFORMANCE = "Performance"
MODULE_SYSTEM = "Module System"
MODULE_SETTINGS = "Module Settings"
CONFLICTS = "Potential Conflicts"

MODERN_MODULES = ("node20", "nodenext", "esnext", "es2022", "preserve", "commonjs")
MODERN_RESOLUTION = ("node20", "nodenext", "bundler")
LEGACY_RESOLUTION = ("node", "node10", "classic")
OLD_TARGETS = ("es3", "es5", "es6", "es2015", "es2016", "es2017")


def compiler_option(name: str):
    return option(("compilerOptions", name))


def compiler_options(*names: str):
    return options(*(("compilerOptions", name) for name in names))


def _module_is_current(value: Any) -> bool:
    return is_set(value) and one_of(*MODERN_MODULES)(value)


def _resolution_is_modern(value: Any) -> bool:
    return not one_of(*LEGACY_RESOLUTION)(value)


def _target_is_recent(value: Any) -> bool:
    return lowered(value) not in OLD_TARGETS


@register_profile(
    "tsconfig",
    default_filename="tsconfig.json",
    description="TypeScript compiler options: type safety, build performance and module settings.",
)
def tsconfig_checks() -> List[CheckDefinition]:
    """Return the ordered check table for ``tsconfig.json``."""

    return [
        CheckDefinition(
            id="strict",
            category=TYPE_SAFETY,
            read=compiler_option("strict"),
            predicate=is_true,
            severity_if_fail=Severity.ERROR,
            message="strict is not enabled. This is the foundation of type safety.",
            pass_message="strict: true",
        ),
        CheckDefinition(
            id="noUncheckedIndexedAccess",
            category=TYPE_SAFETY,
            read=compiler_option("noUncheckedIndexedAccess"),
            predicate=is_true,
            severity_if_fail=Severity.WARNING,
            message=(
                "noUncheckedIndexedAccess not enabled. "
                "Array/object index access will not return T | undefined."
            ),
            pass_message="noUncheckedIndexedAccess: true",
        ),
        CheckDefinition(
            id="exactOptionalPropertyTypes",
            category=TYPE_SAFETY,
            read=compiler_option("exactOptionalPropertyTypes"),
            predicate=is_true,
            severity_if_fail=Severity.INFO,
            message=(
                "exactOptionalPropertyTypes not enabled. "
                "Consider enabling for stricter optional handling."
            ),
            pass_message="exactOptionalPropertyTypes: true",
        ),
        CheckDefinition(
            id="skipLibCheck",
            category=PERFORMANCE,
            read=compiler_option("skipLibCheck"),
            predicate=is_true,
            severity_if_fail=Severity.WARNING,
            message="skipLibCheck not enabled. Builds will type-check all .d.ts files (slower).",
            pass_message="skipLibCheck: true",
        ),
        CheckDefinition(
            id="incremental",
            category=PERFORMANCE,
            read=compiler_options("incremental", "composite"),
            predicate=lambda values: any(is_true(value) for value in values),
            severity_if_fail=Severity.WARNING,
            message="Neither incremental nor composite is enabled. Every build is a full rebuild.",
            pass_message="incremental/composite enabled",
        ),
        CheckDefinition(
            id="isolatedModules",
            category=PERFORMANCE,
            read=compiler_option("isolatedModules"),
            predicate=is_true,
            severity_if_fail=Severity.INFO,
            message="isolatedModules not enabled. Required for swc/esbuild transpilation.",
            pass_message="isolatedModules: true",
        ),
        CheckDefinition(
            id="module",
            category=MODULE_SYSTEM,
            read=compiler_option("module"),
            predicate=_module_is_current,
            severity_if_fail=Severity.WARNING,
            message=(
                "module: {value} is missing or outdated. "
                "Prefer node20, nodenext, esnext, or bundler-friendly preserve."
            ),
            pass_message="module is set to a recognised format",
        ),
        CheckDefinition(
            id="module-esm",
            category=MODULE_SYSTEM,
            read=compiler_option("module"),
            predicate=lambda value: not equals("commonjs")(value),
            severity_if_fail=Severity.INFO,
            message="module: commonjs. Consider migrating to ESM (node20/nodenext) for modern Node.js.",
            pass_message="module output is not CommonJS",
        ),
        CheckDefinition(
            id="moduleResolution",
            category=MODULE_SYSTEM,
            read=compiler_option("moduleResolution"),
            predicate=is_set,
            severity_if_fail=Severity.INFO,
            message="moduleResolution not explicitly set. TypeScript will infer it from module.",
            pass_message="moduleResolution is set explicitly",
        ),
        CheckDefinition(
            id="moduleResolution-legacy",
            category=MODULE_SYSTEM,
            read=compiler_option("moduleResolution"),
            predicate=_resolution_is_modern,
            severity_if_fail=Severity.WARNING,
            message="moduleResolution: {value} is the legacy setting. Use node20, nodenext, or bundler.",
            pass_message="moduleResolution is not a legacy strategy",
        ),
        CheckDefinition(
            id="verbatimModuleSyntax",
            category=MODULE_SETTINGS,
            read=compiler_option("verbatimModuleSyntax"),
            predicate=is_true,
            severity_if_fail=Severity.INFO,
            message="verbatimModuleSyntax not enabled. Enforces import type for type-only imports.",
            pass_message="verbatimModuleSyntax: true",
        ),
        CheckDefinition(
            id="moduleDetection",
            category=MODULE_SETTINGS,
            read=compiler_option("moduleDetection"),
            predicate=equals("force"),
            severity_if_fail=Severity.INFO,
            message=(
                "moduleDetection not set to force. Files are treated as modules "
                "only if they have import/export."
            ),
            pass_message="moduleDetection: force",
        ),
        CheckDefinition(
            id="esModuleInterop-redundant",
            category=CONFLICTS,
            read=compiler_options("verbatimModuleSyntax", "esModuleInterop"),
            predicate=lambda values: not (is_true(values[0]) and is_true(values[1])),
            severity_if_fail=Severity.WARNING,
            message="esModuleInterop is unnecessary with verbatimModuleSyntax. Remove esModuleInterop.",
            pass_message="esModuleInterop does not conflict with verbatimModuleSyntax",
        ),
        CheckDefinition(
            id="checkJs-requires-allowJs",
            category=CONFLICTS,
            read=compiler_options("checkJs", "allowJs"),
            predicate=lambda values: not is_true(values[0]) or is_true(values[1]),
            severity_if_fail=Severity.ERROR,
            message="checkJs: true requires allowJs: true.",
            pass_message="checkJs/allowJs are consistent",
        ),
        CheckDefinition(
            id="target",
            category=CONFLICTS,
            read=compiler_option("target"),
            predicate=_target_is_recent,
            severity_if_fail=Severity.WARNING,
            message="target: {value} is old. Consider es2022 or es2023 for modern runtimes.",
            pass_message="target: {value}",
        ),
    ]


__all__ = ["MODERN_MODULES", "OLD_TARGETS", "tsconfig_checks"]
