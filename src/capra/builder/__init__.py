"""
capra.builder — Fluent construction of SchemaDocuments.

## Public API
- SchemaBuilder — chainable accumulator; ``build()`` validates and freezes.
- create_schema_builder — returns a fresh SchemaBuilder.
- define_schema — one-shot build from a flat declaration.

## Import DAG discipline
- Depends only on loguru, pydantic and capra.core.*.
- MUST NOT import capra.registry; documents are handed to a registry by the caller.
"""

from __future__ import annotations

from .builder import SchemaBuilder, create_schema_builder, define_schema

__all__ = [
    "SchemaBuilder",
    "create_schema_builder",
    "define_schema",
]
