"""Declarative check tables and the profile registry."""
from __future__ import annotations

from dataclasses import dataclass
import importlib
import json
import logging
import pkgutil
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Sequence, Tuple

from ..document import ConfigDocument, KeyPath, thaw
from ..findings import Finding, Severity
from ..utils import finding_from_exception

logger = logging.getLogger(__name__)

Reader = Callable[[ConfigDocument], Any]
Predicate = Callable[[Any], bool]


def describe(value: Any) -> Any:
    """Return a report-friendly rendering of a configuration value.

    Tuples are returned unchanged so message templates can index into them.
    """

    if value is None:
        return "unset"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (Mapping, list)):
        return json.dumps(thaw(value), sort_keys=True)
    return value


@dataclass(frozen=True)
class CheckDefinition:
    """A single named check: read a value, test it, classify a failure.

    ``message`` and ``pass_message`` are :meth:`str.format` templates that
    receive the value produced by ``read`` as ``{value}``.
    """

    id: str
    category: str
    read: Reader
    predicate: Predicate
    severity_if_fail: Severity
    message: str
    pass_message: str = ""

    def render(self, template: str, value: Any) -> str:
        return template.format(value=describe(value)) if template else self.id


def evaluate(check: CheckDefinition, document: ConfigDocument) -> Finding:
    """Evaluate *check* against *document*, always yielding one finding."""

    try:
        value = check.read(document)
        passed = bool(check.predicate(value))
        if passed:
            return Finding(check.id, Severity.PASS, check.render(check.pass_message, value), check.category)
        return Finding(
            check.id, check.severity_if_fail, check.render(check.message, value), check.category
        )
    except Exception as exc:  # reported as an ERROR finding for this check
        logger.debug("Check %s raised %r", check.id, exc)
        return finding_from_exception(check, exc)


# Reader and predicate factories used by the check tables.


def option(key_path: KeyPath) -> Reader:
    """Reader returning the value at ``key_path`` (``None`` when unset)."""

    return lambda document: document.get(key_path)


def options(*key_paths: KeyPath) -> Reader:
    """Reader returning a tuple with the values at each of ``key_paths``."""

    return lambda document: tuple(document.get(key_path) for key_path in key_paths)


def is_true(value: Any) -> bool:
    return value is True


def is_set(value: Any) -> bool:
    """Return ``True`` for values other than ``None`` and empty strings or containers."""

    if value is None:
        return False
    if isinstance(value, (str, list, tuple, Mapping)):
        return bool(value)
    return True


def lowered(value: Any) -> str:
    return str(value).strip().lower() if value is not None else ""


def equals(expected: str) -> Predicate:
    """Case-insensitive string equality predicate."""

    target = expected.lower()
    return lambda value: lowered(value) == target


def one_of(*choices: str) -> Predicate:
    """Case-insensitive membership predicate."""

    allowed = {choice.lower() for choice in choices}
    return lambda value: lowered(value) in allowed


@dataclass(frozen=True)
class Profile:
    """A named, ordered check table and the file it conventionally audits."""

    name: str
    default_filename: str
    factory: Callable[[], Sequence[CheckDefinition]]
    description: str = ""

    def checks(self) -> Tuple[CheckDefinition, ...]:
        return tuple(self.factory())


ProfileFactory = Callable[[], Sequence[CheckDefinition]]


class ProfileRegistry:
    """Registry that stores available audit profiles."""

    def __init__(self) -> None:
        self._profiles: Dict[str, Profile] = {}

    @staticmethod
    def _normalize(name: str) -> str:
        if not name or not name.strip():
            raise ValueError("Profile name must be a non-empty string")
        return name.strip().lower()

    def register(
        self, name: str, *, default_filename: str, description: str = ""
    ) -> Callable[[ProfileFactory], ProfileFactory]:
        """Return a decorator that registers the wrapped check-table factory as *name*."""

        normalized = self._normalize(name)

        def decorator(func: ProfileFactory) -> ProfileFactory:
            existing = self._profiles.get(normalized)
            if existing is not None and existing.factory is not func:
                raise ValueError(f"Profile '{name}' is already registered")
            self._profiles[normalized] = Profile(
                name=normalized,
                default_filename=default_filename,
                factory=func,
                description=description,
            )
            return func

        return decorator

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str) or not name.strip():
            return False
        return self._normalize(name) in self._profiles

    def __getitem__(self, name: str) -> Profile:
        return self._profiles[self._normalize(name)]

    def as_mapping(self) -> Mapping[str, Profile]:
        return MappingProxyType(self._profiles)


PROFILE_REGISTRY = ProfileRegistry()
register_profile = PROFILE_REGISTRY.register


def get_profiles() -> Mapping[str, Profile]:
    """Return a read-only mapping of registered profiles."""

    return PROFILE_REGISTRY.as_mapping()


def _import_profile_modules() -> None:
    """Import modules that register profiles via decorators."""

    package_name = __name__
    package_paths = getattr(__spec__, "submodule_search_locations", None)
    if not package_paths:
        return

    for module_info in pkgutil.iter_modules(package_paths):
        module_name = module_info.name
        if module_name.startswith("_"):
            continue
        importlib.import_module(f"{package_name}.{module_name}")


_import_profile_modules()

PROFILES: Mapping[str, Profile] = get_profiles()

__all__ = [
    "CheckDefinition",
    "PROFILES",
    "PROFILE_REGISTRY",
    "Predicate",
    "Profile",
    "ProfileRegistry",
    "Reader",
    "describe",
    "equals",
    "evaluate",
    "get_profiles",
    "is_set",
    "is_true",
    "lowered",
    "one_of",
    "option",
    "options",
    "register_profile",
]
