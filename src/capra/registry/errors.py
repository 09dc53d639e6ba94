"""
Custom exceptions for the capra.registry module.

Purpose
- Provide registry-specific error types that map cleanly to the registration
  lifecycle and to strict lookups.
- Keep capra.core as the source of truth for grammar/schema errors (see capra.core.errors).

Source of truth and boundaries
- capra.core.errors.SchemaError is raised by SchemaBuilder.build().
- capra.registry raises:
  - SchemaConflictError: id already registered while overwrite is disabled.
  - SchemaNotFoundError: unknown schema id, or unknown key inside a known schema,
    from ``set_default`` and every ``*_or_raise`` accessor.

Notes
- These exceptions do not perform any IO and are stdlib-only.
"""

from __future__ import annotations

__all__ = [
    "RegistryError",
    "SchemaConflictError",
    "SchemaNotFoundError",
]


class RegistryError(Exception):
    """
    Base class for registry errors in capra.registry.

    Notes:
        Use this as a catch-all for registry failures, distinct from capra.core errors.
    """


class SchemaConflictError(RegistryError):
    """
    Raised when registering an id that is already registered and overwrite is disabled.

    Notes:
        Recover by choosing another id, enabling allow_overwrite, or unregistering first.
    """


class SchemaNotFoundError(RegistryError, LookupError):
    """
    Raised by strict accessors when a schema id or a nested key is missing.

    Notes:
        The message names the missing id and, for nested lookups, the missing key.
    """
