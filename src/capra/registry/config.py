"""
Configuration for the capra.registry module.

Defines RegistrySettings, a frozen dataclass carrying the options a SchemaRegistry is
constructed with. Settings come from defaults, an explicitly named TOML file, and
environment variables, with precedence env > TOML > defaults.

Notes
- allow_overwrite: re-registering an existing id replaces the stored document instead
  of raising SchemaConflictError.
- default_schema: preferred default id; it becomes the default when a schema with that
  id is first registered (re-registering it never moves the default).
- Only a TOML path passed by the caller is read; nothing is searched for implicitly.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

__all__ = [
    "RegistrySettings",
]

_TRUE_TOKENS = {"1", "true", "t", "yes", "y", "on"}


def _bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        return v.strip().lower() in _TRUE_TOKENS
    return False


@dataclass(frozen=True)
class RegistrySettings:
    """
    Runtime settings for a SchemaRegistry.

    Attributes:
        allow_overwrite (bool): Replace on duplicate id instead of raising.
        default_schema (str | None): Preferred default schema id.

    Examples:
        >>> from capra.registry import RegistrySettings
        >>> RegistrySettings(allow_overwrite=True)
        RegistrySettings(allow_overwrite=True, default_schema=None)
    """

    allow_overwrite: bool = False
    default_schema: str | None = None

    @classmethod
    def _apply_mapping(
        cls, base: RegistrySettings, cfg: dict[str, Any] | None
    ) -> RegistrySettings:
        """Apply a loose config mapping onto RegistrySettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base
        if "allow_overwrite" in cfg:
            s = replace(s, allow_overwrite=_bool(cfg["allow_overwrite"]))
        if "default_schema" in cfg:
            v = cfg["default_schema"]
            sid = str(v).strip() if v is not None else ""
            s = replace(s, default_schema=sid or None)
        return s

    @classmethod
    def from_env(
        cls, base: RegistrySettings | None = None, prefix: str = "CAPRA_REGISTRY_"
    ) -> RegistrySettings:
        """
        Build RegistrySettings from environment variables. Precedence is env > base > defaults.

        Recognized variables:
            - CAPRA_REGISTRY_ALLOW_OVERWRITE (1/0/true/false/yes/no/on/off)
            - CAPRA_REGISTRY_DEFAULT_SCHEMA
        """
        s = base or cls()

        mapping: dict[str, Any] = {}
        v = os.getenv(prefix + "ALLOW_OVERWRITE")
        if v:
            mapping["allow_overwrite"] = v
        v = os.getenv(prefix + "DEFAULT_SCHEMA")
        if v:
            mapping["default_schema"] = v
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str]) -> RegistrySettings:
        """
        Build RegistrySettings from a TOML file.

        Accepted layouts:
            - pyproject.toml: ``[tool.capra.registry]``
            - any other file: ``[registry]`` table, or top-level keys

        Returns defaults if the file does not exist.
        """
        s = cls()
        p = Path(path)
        if not p.exists():
            return s
        with p.open("rb") as fh:
            data = tomllib.load(fh)

        if p.name == "pyproject.toml":
            cfg = data.get("tool", {}).get("capra", {}).get("registry")
        elif isinstance(data.get("registry"), dict):
            cfg = data["registry"]
        else:
            cfg = data
        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> RegistrySettings:
        """
        Load RegistrySettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional TOML path. When None, only defaults and env are used.
        """
        s = cls.from_toml(path) if path is not None else cls()
        return cls.from_env(base=s)
