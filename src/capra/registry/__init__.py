"""
capra.registry — Keyed store of built schemas and name-to-expression resolution.

## Responsibilities
- Own SchemaDocuments keyed by id, in registration order, with one default schema.
- Resolve semantic names (dimension/measure keys, category codes, filter-config names)
  to the expressions and labels consumers need, in lenient and strict forms.

## Public API
- SchemaRegistry / create_schema_registry — explicit, caller-owned registry objects
  (there is no module-level singleton).
- RegistrySettings — allow_overwrite / default_schema, loaded env > TOML > defaults.
- RegistryError, SchemaConflictError, SchemaNotFoundError.

## Import DAG discipline
- Depends only on stdlib, loguru and capra.core.*.
- Accepts SchemaDocuments; never imports capra.builder.

## Notes
- Single-threaded and in-memory: perform registration at start-up, then read freely.
"""

from __future__ import annotations

from .config import RegistrySettings
from .errors import RegistryError, SchemaConflictError, SchemaNotFoundError
from .registry import SchemaRegistry, create_schema_registry

__all__ = [
    "RegistrySettings",
    "RegistryError",
    "SchemaConflictError",
    "SchemaNotFoundError",
    "SchemaRegistry",
    "create_schema_registry",
]
