"""
Lightweight typing aliases used across core schemas, the builder and the registry.

Provides minimal NewTypes and aliases to improve readability and static checks.
This module contains no runtime logic and is zero-IO.

Notes:
    - Entry aliases describe the bulk builder forms: a bare name, or a (name, options) pair.
    - Keep the surface small and stable to avoid churn in dependents.

Examples:
    >>> from capra.core.typing import SchemaId, JsonDict
    >>> def describe(sid: SchemaId) -> str:
    ...     return f"schema:{sid}"
    >>> describe(SchemaId("vendas"))
    'schema:vendas'
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, NewType, Union

__all__ = [
    "SchemaId",
    "JsonDict",
    "OptionsLike",
    "NamedEntry",
    "CategoryEntry",
]

SchemaId = NewType("SchemaId", str)

# Convenient JSON-like mapping alias. Kept intentionally broad for serde boundaries.
JsonDict = dict[str, Any]

# Options accepted by builder methods: a pydantic options model or a plain mapping.
OptionsLike = Union[Mapping[str, Any], Any]

# "loja" or ("turno", {"members": ["ALMOCO", "JANTAR"]})
NamedEntry = Union[str, tuple[str, OptionsLike]]

# ("DELIVERY", "Delivery", "#F97316") or with a trailing options element.
CategoryEntry = Union[tuple[str, str, str], tuple[str, str, str, OptionsLike]]
