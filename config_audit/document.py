"""Loading of comment-tolerant JSON configuration documents."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, Sequence, Union

from .errors import ConfigFileNotFound, ConfigParseError
from .utils import clean_json_text

logger = logging.getLogger(__name__)

KeyPath = Union[str, Sequence[str]]


def freeze(value: Any) -> Any:
    """Return a read-only copy of parsed JSON: objects become mapping proxies, arrays tuples."""

    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    """Inverse of :func:`freeze`, producing plain ``dict``/``list`` values for serialisation."""

    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [thaw(item) for item in value]
    return value


class ConfigDocument(Mapping[str, Any]):
    """Read-only, key-path addressable view of a parsed configuration file."""

    def __init__(self, data: Mapping[str, Any], path: Optional[Path] = None) -> None:
        self._data = freeze(data)
        self.path = path

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"ConfigDocument(path={str(self.path)!r}, keys={list(self._data)!r})"

    def get(self, key_path: KeyPath, default: Any = None) -> Any:  # type: ignore[override]
        """Return the value at ``key_path`` or ``default`` when any segment is absent.

        ``key_path`` is either a dotted string such as ``"compilerOptions.strict"``
        or a sequence of keys, which allows keys that themselves contain dots.
        """

        keys = key_path.split(".") if isinstance(key_path, str) else list(key_path)
        current: Any = self._data
        for key in keys:
            if not isinstance(current, Mapping) or key not in current:
                return default
            current = current[key]
        return current

    def to_dict(self) -> dict:
        """Return a mutable deep copy of the document data."""

        return thaw(self._data)

    @property
    def directory(self) -> Path:
        """Directory that relative paths inside the document resolve against."""

        return self.path.parent if self.path is not None else Path.cwd()


def parse_config_text(text: str, path: Optional[Path] = None) -> ConfigDocument:
    """Parse tolerant JSON *text* into a :class:`ConfigDocument`."""

    label = str(path) if path is not None else "<string>"
    cleaned = clean_json_text(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ConfigParseError(label, exc.msg, line=exc.lineno, column=exc.colno) from exc
    if not isinstance(data, dict):
        raise ConfigParseError(
            label, f"expected a JSON object at the top level, found {type(data).__name__}"
        )
    return ConfigDocument(data, path)


def load_config_document(path: Union[str, Path]) -> ConfigDocument:
    """Read and parse the configuration file at *path*.

    Raises :class:`ConfigFileNotFound` when the path is not a readable file and
    :class:`ConfigParseError` when its content is not well-formed.
    """

    source = Path(path)
    if not source.is_file():
        raise ConfigFileNotFound(source)
    try:
        text = source.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigFileNotFound(source, reason=str(exc)) from exc

    logger.debug("Loaded %s (%d bytes)", source, len(text))
    return parse_config_text(text, source)


__all__ = [
    "ConfigDocument",
    "KeyPath",
    "freeze",
    "load_config_document",
    "parse_config_text",
    "thaw",
]
