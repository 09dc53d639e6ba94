"""
Core exception types raised by grammar validation and schema building.

Provides typed exceptions for core-domain failures:
- GrammarError for naming/normalization violations (blank names, unknown enum values).
- SchemaError for document-level constraints (missing id or data source at build time).

Notes:
    - This module uses only the Python standard library and has no side effects.
    - Validators in capra.core.schema raise GrammarError; pydantic surfaces it as a
      ValidationError when raised inside model validation.
    - capra.builder raises SchemaError from SchemaBuilder.build().
    - Registry failures live in capra.registry.errors.

Examples:
    Catch a build failure.

    >>> from capra.core.errors import SchemaError
    >>> try:
    ...     raise SchemaError("id is required")
    ... except SchemaError as e:
    ...     msg = str(e)
    >>> "id" in msg
    True
"""

from __future__ import annotations

__all__ = [
    "SchemaError",
    "GrammarError",
]


class SchemaError(ValueError):
    """Schema-level validation failure (missing mandatory fields, cross-field rules)."""


class GrammarError(ValueError):
    """Grammar/naming normalization failure (e.g., blank name or invalid enum value)."""
