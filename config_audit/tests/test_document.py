"""Tests for tolerant configuration loading."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


from config_audit.document import load_config_document, parse_config_text
from config_audit.errors import ConfigFileNotFound, ConfigParseError
from config_audit.utils import clean_json_text, strip_json_comments, strip_trailing_commas


TOLERANT = """{
  // compiler settings
  "compilerOptions": {
    "strict": true, // inline note
    "lib": ["dom", "es2022",],
    /* block
       comment */
    "outDir": "dist",
  },
}
"""

STRICT = """{
  "compilerOptions": {
    "strict": true,
    "lib": ["dom", "es2022"],
    "outDir": "dist"
  }
}
"""


def test_comments_and_trailing_commas_parse_like_clean_json(tmp_path: Path) -> None:
    """A commented config with trailing commas equals its cleaned counterpart."""

    tolerant = tmp_path / "tolerant.json"
    strict = tmp_path / "strict.json"
    tolerant.write_text(TOLERANT, encoding="utf-8")
    strict.write_text(STRICT, encoding="utf-8")

    assert load_config_document(tolerant).to_dict() == load_config_document(strict).to_dict()


def test_comment_markers_inside_strings_are_preserved() -> None:
    """URLs and glob patterns inside string literals survive comment stripping."""

    document = parse_config_text(
        '{"homepage": "https://example.com", "include": ["src/**/*.ts"], "note": "a, ]"}'
    )

    assert document.get("homepage") == "https://example.com"
    assert document.get("include") == ("src/**/*.ts",)
    assert document.get("note") == "a, ]"


def test_escaped_quotes_do_not_end_strings() -> None:
    """An escaped quote keeps the scanner inside the string literal."""

    text = '{"a": "say \\"hi\\" // not a comment",}'

    assert strip_json_comments(text) == text
    assert parse_config_text(text).get("a") == 'say "hi" // not a comment'


def test_block_comment_keeps_line_numbers() -> None:
    """Removed block comments leave their newlines so error lines stay accurate."""

    cleaned = strip_json_comments('{\n/* one\ntwo\n*/ "a": 1\n}')

    assert cleaned.count("\n") == 4


def test_trailing_commas_removed_only_before_closers() -> None:
    """Separating commas are kept and trailing ones are dropped."""

    assert strip_trailing_commas('[1, 2, ]') == "[1, 2 ]"
    assert strip_trailing_commas('{"a": 1, "b": 2}') == '{"a": 1, "b": 2}'
    assert clean_json_text('{"a": [1,], // x\n}') == '{"a": [1] \n}'


def test_missing_file_raises_file_not_found(tmp_path: Path) -> None:
    """A path that does not exist is reported as ConfigFileNotFound."""

    with pytest.raises(ConfigFileNotFound) as excinfo:
        load_config_document(tmp_path / "missing.json")

    assert "missing.json not found" in str(excinfo.value)


def test_directory_is_not_a_config_file(tmp_path: Path) -> None:
    """Directories do not count as readable configuration files."""

    with pytest.raises(ConfigFileNotFound):
        load_config_document(tmp_path)


def test_malformed_json_reports_location(tmp_path: Path) -> None:
    """Broken JSON raises ConfigParseError with line information."""

    broken = tmp_path / "tsconfig.json"
    broken.write_text('{\n  "compilerOptions": {\n    "strict": tru\n  }\n}\n', encoding="utf-8")

    with pytest.raises(ConfigParseError) as excinfo:
        load_config_document(broken)

    assert excinfo.value.line == 3
    assert str(broken) in str(excinfo.value)


def test_top_level_must_be_an_object() -> None:
    """Arrays and scalars are rejected at the top level."""

    with pytest.raises(ConfigParseError):
        parse_config_text("[1, 2, 3]")


def test_get_walks_key_paths() -> None:
    """Dotted and tuple key paths resolve nested values, absent ones give the default."""

    document = parse_config_text('{"compilerOptions": {"strict": false, "paths": {"@/*": ["src/*"]}}}')

    assert document.get("compilerOptions.strict") is False
    assert document.get(("compilerOptions", "paths", "@/*")) == ("src/*",)
    assert document.get("compilerOptions.missing") is None
    assert document.get("compilerOptions.strict.deeper", "unset") == "unset"


def test_document_is_read_only() -> None:
    """The top-level mapping cannot be modified."""

    document = parse_config_text('{"name": "demo"}')

    with pytest.raises(TypeError):
        document._data["name"] = "changed"  # type: ignore[index]


def test_nested_values_are_read_only() -> None:
    """Nested objects and arrays cannot be changed through values returned by get."""

    document = parse_config_text('{"compilerOptions": {"strict": true, "lib": ["dom"]}}')
    compiler_options = document.get("compilerOptions")

    with pytest.raises(TypeError):
        compiler_options["strict"] = False
    with pytest.raises(AttributeError):
        compiler_options["lib"].append("es2022")
    assert document.get("compilerOptions.strict") is True
    assert document.to_dict() == {"compilerOptions": {"strict": True, "lib": ["dom"]}}


def test_to_dict_returns_an_independent_copy() -> None:
    """Mutating the exported data leaves the document unchanged."""

    document = parse_config_text('{"compilerOptions": {"strict": true}}')

    exported = document.to_dict()
    exported["compilerOptions"]["strict"] = False

    assert document.get("compilerOptions.strict") is True
