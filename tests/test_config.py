from __future__ import annotations

from pathlib import Path

import pytest

from fedimodel.config import ParseSettings
from fedimodel.constants import DEFAULT_MAX_DEPTH, DEFAULT_MAX_NESTING, DEFAULT_PRESERVE_MALFORMED


def _write(tmp: Path, name: str, content: str) -> Path:
    p = tmp / name
    p.write_text(content)
    return p


def test_defaults_come_from_constants() -> None:
    s = ParseSettings()
    assert s.max_depth == DEFAULT_MAX_DEPTH
    assert s.preserve_malformed is DEFAULT_PRESERVE_MALFORMED


def test_max_depth_must_be_positive() -> None:
    with pytest.raises(ValueError):
        ParseSettings(max_depth=0)


def test_from_mapping_applies_known_keys() -> None:
    s = ParseSettings.from_mapping({"preserve_malformed": "off", "max_depth": "8", "other": 1})
    assert s.preserve_malformed is False
    assert s.max_depth == 8


def test_from_mapping_ignores_unusable_values() -> None:
    base = ParseSettings(max_depth=4)
    s = ParseSettings.from_mapping({"preserve_malformed": "maybe", "max_depth": "deep"}, base)
    assert s == base
    assert ParseSettings.from_mapping({"max_depth": 0}) == ParseSettings()
    assert ParseSettings.from_mapping(None) == ParseSettings()


def test_from_toml_reads_tool_table_in_pyproject(tmp_path: Path) -> None:
    p = _write(
        tmp_path,
        "pyproject.toml",
        """
        [project]
        name = "consumer"

        [tool.fedimodel]
        max_depth = 5
        preserve_malformed = false
        """.replace("        ", ""),
    )
    s = ParseSettings.from_toml(p)
    assert s.max_depth == 5
    assert s.preserve_malformed is False


def test_from_toml_reads_fedimodel_table(tmp_path: Path) -> None:
    p = _write(tmp_path, "app.toml", "[fedimodel]\nmax_depth = 3\n")
    assert ParseSettings.from_toml(p).max_depth == 3


def test_from_toml_reads_top_level_keys(tmp_path: Path) -> None:
    p = _write(tmp_path, "fedimodel.toml", "preserve_malformed = false\n")
    assert ParseSettings.from_toml(p).preserve_malformed is False


def test_from_toml_defaults_when_missing_or_invalid(tmp_path: Path) -> None:
    assert ParseSettings.from_toml(tmp_path / "absent.toml") == ParseSettings()
    bad = _write(tmp_path, "bad.toml", "max_depth = = 3")
    assert ParseSettings.from_toml(bad) == ParseSettings()


def test_environment_is_never_read(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FEDIMODEL_MAX_DEPTH", "2")
    monkeypatch.chdir(tmp_path)
    assert ParseSettings().max_depth == DEFAULT_MAX_DEPTH


def test_max_nesting_is_configurable_and_positive() -> None:
    assert ParseSettings().max_nesting == DEFAULT_MAX_NESTING
    assert ParseSettings.from_mapping({"max_nesting": "16"}).max_nesting == 16
    assert ParseSettings.from_mapping({"max_nesting": 0}).max_nesting == DEFAULT_MAX_NESTING
    with pytest.raises(ValueError):
        ParseSettings(max_nesting=0)
