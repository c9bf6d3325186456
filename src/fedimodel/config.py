"""
Configuration for payload extraction.

Defines ParseSettings, a frozen dataclass carrying the knobs of the tolerant
extraction policy. Defaults are sourced from fedimodel.constants (the single
source of truth).

Source of truth
- fedimodel.constants.DEFAULT_MAX_DEPTH, DEFAULT_MAX_NESTING, DEFAULT_PRESERVE_MALFORMED

Notes
- The core never reads the environment or the filesystem on its own. A
  consuming application builds ParseSettings (directly, from a mapping, or from
  a TOML file it names) and passes it to dispatch/extract.
- Loose mappings are applied leniently: unknown keys and unusable values are
  ignored and the previous value is kept.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from .constants import DEFAULT_MAX_DEPTH, DEFAULT_MAX_NESTING, DEFAULT_PRESERVE_MALFORMED

__all__ = ["ParseSettings"]


def _bool(v: Any, fallback: bool) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        lo = v.strip().lower()
        if lo in {"1", "true", "t", "yes", "y", "on"}:
            return True
        if lo in {"0", "false", "f", "no", "n", "off"}:
            return False
    return fallback


@dataclass(frozen=True)
class ParseSettings:
    """
    Runtime settings for extraction and dispatch.

    Attributes:
        preserve_malformed (bool): Keep the raw value of a malformed optional
            field in the entity's extra_fields (under its original key) so that
            re-emission restores it. The field itself is always left unset.
        max_depth (int): Maximum nesting depth of embedded entities. Deeper
            embedded mappings are treated as malformed optional fields (>= 1).
        max_nesting (int): Maximum array/object nesting accepted by `load`
            when parsing JSON text; deeper text is a PayloadSyntaxError (>= 1).

    Examples:
        >>> from fedimodel.config import ParseSettings
        >>> ParseSettings(max_depth=8).max_depth
        8
    """

    preserve_malformed: bool = DEFAULT_PRESERVE_MALFORMED
    max_depth: int = DEFAULT_MAX_DEPTH
    max_nesting: int = DEFAULT_MAX_NESTING

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"ParseSettings max_depth must be >= 1, got {self.max_depth}")
        if self.max_nesting < 1:
            raise ValueError(f"ParseSettings max_nesting must be >= 1, got {self.max_nesting}")

    @classmethod
    def from_mapping(cls, cfg: Any, base: ParseSettings | None = None) -> ParseSettings:
        """Apply a loose config mapping onto settings, returning a new instance."""
        s = base or cls()
        if not isinstance(cfg, dict):
            return s

        if "preserve_malformed" in cfg:
            s = replace(s, preserve_malformed=_bool(cfg["preserve_malformed"], s.preserve_malformed))

        if "max_depth" in cfg:
            try:
                depth = int(cfg["max_depth"])
            except (TypeError, ValueError):
                depth = s.max_depth
            if depth >= 1:
                s = replace(s, max_depth=depth)

        if "max_nesting" in cfg:
            try:
                nesting = int(cfg["max_nesting"])
            except (TypeError, ValueError):
                nesting = s.max_nesting
            if nesting >= 1:
                s = replace(s, max_nesting=nesting)

        return s

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str]) -> ParseSettings:
        """
        Build ParseSettings from a TOML file.

        Accepted layouts:
            1) pyproject.toml with a [tool.fedimodel] table
            2) any other file with a [fedimodel] table, or top-level keys

        Args:
            path: TOML file chosen by the caller.

        Returns:
            ParseSettings: Defaults overlaid with the file's values; plain
            defaults when the file is missing or not valid TOML.
        """
        p = Path(path)
        if not p.exists():
            return cls()
        try:
            with p.open("rb") as fh:
                data = tomllib.load(fh)
        except (OSError, tomllib.TOMLDecodeError):
            return cls()

        if p.name == "pyproject.toml":
            tool = data.get("tool", {})
            cfg = tool.get("fedimodel", {}) if isinstance(tool, dict) else None
        elif isinstance(data.get("fedimodel"), dict):
            cfg = data["fedimodel"]
        else:
            cfg = data
        return cls.from_mapping(cfg)
