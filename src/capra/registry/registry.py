"""
Keyed store of built SchemaDocuments with a default schema and typed lookups.

Lifecycle of an id: absent -> registered -> (re-registered, when overwrite is allowed)
-> absent (after unregister). The default pointer is updated only by register (first
insert, or the preferred default from settings), unregister (re-election) and
set_default (explicit override).

Lookups come in pairs built on one shared primitive per entity kind:
- lenient ``get_*``/``list_*`` return None (or an empty list) when the schema id or
  the nested key is missing, and never raise;
- strict ``*_or_raise`` raise SchemaNotFoundError naming the missing id/key.

Dimension and measure keys are resolved exactly first, then through
``to_upper_key``, so "loja", "LOJA" and "valorLiquido"/"VALOR_LIQUIDO" all resolve.

Examples:
    >>> from capra.builder import SchemaBuilder
    >>> from capra.registry import create_schema_registry
    >>> registry = create_schema_registry()
    >>> doc = SchemaBuilder().set_data_source_info("Cube", "vendas").add_dimension("loja").build()
    >>> registry.register(doc).get_hierarchy("LOJA")
    '[loja].[Todos].Children'
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Final

from loguru import logger

from capra.core.grammar import to_upper_key
from capra.core.schema import (
    CategorySpec,
    DimensionSpec,
    FilterConfig,
    MeasureSpec,
    ParallelPeriod,
    SchemaDocument,
)

from .config import RegistrySettings
from .errors import SchemaConflictError, SchemaNotFoundError

__all__ = [
    "SchemaRegistry",
    "create_schema_registry",
]

# kind -> (document attribute, label used in messages, normalize key on miss)
_SECTIONS: Final[dict[str, tuple[str, str, bool]]] = {
    "dimension": ("dimensions", "dimension", True),
    "measure": ("measures", "measure", True),
    "category": ("categories", "category", False),
    "filter_config": ("filter_configs", "filter config", False),
}


def _find_in(schema: SchemaDocument, kind: str, key: str) -> Any | None:
    attr, _, normalize = _SECTIONS[kind]
    section = getattr(schema, attr)
    if key in section:
        return section[key]
    if normalize:
        return section.get(to_upper_key(key))
    return None


class SchemaRegistry:
    """Registry of SchemaDocuments keyed by id, in registration order."""

    def __init__(
        self,
        settings: RegistrySettings | None = None,
        *,
        allow_overwrite: bool | None = None,
        default_schema: str | None = None,
    ) -> None:
        s = settings or RegistrySettings()
        if allow_overwrite is not None:
            s = replace(s, allow_overwrite=allow_overwrite)
        if default_schema is not None:
            s = replace(s, default_schema=default_schema)
        self.settings = s
        self._schemas: dict[str, SchemaDocument] = {}
        self._default_id: str | None = None

    # ------------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------------

    def register(self, schema: SchemaDocument) -> SchemaRegistry:
        """
        Store ``schema`` under its id.

        Raises:
            TypeError: If schema is not a SchemaDocument.
            SchemaConflictError: If the id is already registered and overwrite is disabled.

        Notes:
            Overwriting keeps the id's original position in registration order.
        """
        if not isinstance(schema, SchemaDocument):
            raise TypeError(f"expected a SchemaDocument (got {type(schema).__name__})")
        sid = schema.id
        replaced = sid in self._schemas
        if replaced and not self.settings.allow_overwrite:
            raise SchemaConflictError(f"schema {sid!r} is already registered")

        self._schemas[sid] = schema
        if not replaced and (self._default_id is None or sid == self.settings.default_schema):
            self._default_id = sid

        logger.debug(
            "{} schema {!r} (data_source={!r})",
            "Replaced" if replaced else "Registered",
            sid,
            schema.data_source,
        )
        return self

    def unregister(self, schema_id: str) -> bool:
        """
        Remove a schema; returns whether something was removed.

        When the removed id was the default, the default moves to the earliest
        remaining id in registration order, or None when empty.
        """
        if schema_id not in self._schemas:
            return False
        del self._schemas[schema_id]

        if self._default_id == schema_id:
            self._default_id = next(iter(self._schemas), None)
            logger.debug("Default schema re-elected: {!r}", self._default_id)
        return True

    def has(self, schema_id: str) -> bool:
        return schema_id in self._schemas

    def __contains__(self, schema_id: object) -> bool:
        return schema_id in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)

    @property
    def size(self) -> int:
        return len(self._schemas)

    def set_default(self, schema_id: str) -> SchemaRegistry:
        if schema_id not in self._schemas:
            raise SchemaNotFoundError(f"schema {schema_id!r} not found")
        self._default_id = schema_id
        return self

    def get_default_id(self) -> str | None:
        return self._default_id

    def clear(self) -> None:
        self._schemas.clear()
        self._default_id = None

    # ------------------------------------------------------------------------
    # Schema access
    # ------------------------------------------------------------------------

    def get(self, schema_id: str | None = None) -> SchemaDocument | None:
        """Schema by id; the default schema when ``schema_id`` is omitted."""
        sid = schema_id if schema_id is not None else self._default_id
        if sid is None:
            return None
        return self._schemas.get(sid)

    def get_or_raise(self, schema_id: str | None = None) -> SchemaDocument:
        schema = self.get(schema_id)
        if schema is None:
            if schema_id is None:
                raise SchemaNotFoundError("no default schema registered")
            raise SchemaNotFoundError(f"schema {schema_id!r} not found")
        return schema

    def list(self) -> list[SchemaDocument]:
        return list(self._schemas.values())

    def list_ids(self) -> list[str]:
        return list(self._schemas)

    # ------------------------------------------------------------------------
    # Shared lookup primitive
    # ------------------------------------------------------------------------

    def _find(self, kind: str, key: str, schema_id: str | None) -> Any | None:
        schema = self.get(schema_id)
        if schema is None:
            return None
        return _find_in(schema, kind, key)

    def _require(self, kind: str, key: str, schema_id: str | None) -> Any:
        schema = self.get_or_raise(schema_id)
        found = _find_in(schema, kind, key)
        if found is None:
            label = _SECTIONS[kind][1]
            raise SchemaNotFoundError(f"{label} {key!r} not found in schema {schema.id!r}")
        return found

    # ------------------------------------------------------------------------
    # Dimensions
    # ------------------------------------------------------------------------

    def get_dimension(self, key: str, schema_id: str | None = None) -> DimensionSpec | None:
        return self._find("dimension", key, schema_id)

    def get_dimension_or_raise(self, key: str, schema_id: str | None = None) -> DimensionSpec:
        return self._require("dimension", key, schema_id)

    def list_dimensions(self, schema_id: str | None = None) -> list[DimensionSpec]:
        schema = self.get(schema_id)
        return list(schema.dimensions.values()) if schema else []

    def list_dimensions_or_raise(self, schema_id: str | None = None) -> list[DimensionSpec]:
        return list(self.get_or_raise(schema_id).dimensions.values())

    def get_hierarchy(self, key: str, schema_id: str | None = None) -> str | None:
        dim = self.get_dimension(key, schema_id)
        return dim.hierarchy if dim else None

    def get_hierarchy_or_raise(self, key: str, schema_id: str | None = None) -> str:
        return self.get_dimension_or_raise(key, schema_id).hierarchy

    def get_dimension_ref(self, key: str, schema_id: str | None = None) -> str | None:
        dim = self.get_dimension(key, schema_id)
        return dim.dimension if dim else None

    def get_dimension_ref_or_raise(self, key: str, schema_id: str | None = None) -> str:
        return self.get_dimension_or_raise(key, schema_id).dimension

    # ------------------------------------------------------------------------
    # Measures
    # ------------------------------------------------------------------------

    def get_measure(self, key: str, schema_id: str | None = None) -> MeasureSpec | None:
        return self._find("measure", key, schema_id)

    def get_measure_or_raise(self, key: str, schema_id: str | None = None) -> MeasureSpec:
        return self._require("measure", key, schema_id)

    def list_measures(self, schema_id: str | None = None) -> list[MeasureSpec]:
        schema = self.get(schema_id)
        return list(schema.measures.values()) if schema else []

    def list_measures_or_raise(self, schema_id: str | None = None) -> list[MeasureSpec]:
        return list(self.get_or_raise(schema_id).measures.values())

    def get_measure_mdx(self, key: str, schema_id: str | None = None) -> str | None:
        measure = self.get_measure(key, schema_id)
        return measure.mdx if measure else None

    def get_measure_mdx_or_raise(self, key: str, schema_id: str | None = None) -> str:
        return self.get_measure_or_raise(key, schema_id).mdx

    # ------------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------------

    def get_category(self, code: str, schema_id: str | None = None) -> CategorySpec | None:
        return self._find("category", code, schema_id)

    def get_category_or_raise(self, code: str, schema_id: str | None = None) -> CategorySpec:
        return self._require("category", code, schema_id)

    def list_categories(self, schema_id: str | None = None) -> list[CategorySpec]:
        schema = self.get(schema_id)
        return list(schema.categories.values()) if schema else []

    def list_categories_or_raise(self, schema_id: str | None = None) -> list[CategorySpec]:
        return list(self.get_or_raise(schema_id).categories.values())

    def get_category_color(self, code: str, schema_id: str | None = None) -> str | None:
        cat = self.get_category(code, schema_id)
        return cat.color if cat else None

    def get_category_color_or_raise(self, code: str, schema_id: str | None = None) -> str:
        return self.get_category_or_raise(code, schema_id).color

    def get_category_label(self, code: str, schema_id: str | None = None) -> str | None:
        cat = self.get_category(code, schema_id)
        return cat.label if cat else None

    def get_category_label_or_raise(self, code: str, schema_id: str | None = None) -> str:
        return self.get_category_or_raise(code, schema_id).label

    # ------------------------------------------------------------------------
    # Filter configs
    # ------------------------------------------------------------------------

    def get_filter_config(self, name: str, schema_id: str | None = None) -> FilterConfig | None:
        return self._find("filter_config", name, schema_id)

    def get_filter_config_or_raise(self, name: str, schema_id: str | None = None) -> FilterConfig:
        return self._require("filter_config", name, schema_id)

    def list_filter_configs(self, schema_id: str | None = None) -> list[tuple[str, FilterConfig]]:
        """(name, config) pairs in declaration order."""
        schema = self.get(schema_id)
        return list(schema.filter_configs.items()) if schema else []

    def list_filter_configs_or_raise(
        self, schema_id: str | None = None
    ) -> list[tuple[str, FilterConfig]]:
        return list(self.get_or_raise(schema_id).filter_configs.items())

    def get_accepted_filters(self, name: str, schema_id: str | None = None) -> list[str] | None:
        """
        Filters the context named ``name`` lets the dashboard vary.

        Returns the config's ``accepts`` list, or the schema's governance filters when
        the config does not declare one; None when the schema or config is unknown.
        """
        schema = self.get(schema_id)
        if schema is None:
            return None
        config = _find_in(schema, "filter_config", name)
        if config is None:
            return None
        return list(config.accepts if config.accepts is not None else schema.governance_filters)

    def get_accepted_filters_or_raise(self, name: str, schema_id: str | None = None) -> list[str]:
        schema = self.get_or_raise(schema_id)
        config = self._require("filter_config", name, schema.id)
        return list(config.accepts if config.accepts is not None else schema.governance_filters)

    def get_governance_filters(self, schema_id: str | None = None) -> list[str]:
        schema = self.get(schema_id)
        return list(schema.governance_filters) if schema else []

    def get_governance_filters_or_raise(self, schema_id: str | None = None) -> list[str]:
        return list(self.get_or_raise(schema_id).governance_filters)

    # ------------------------------------------------------------------------
    # Data source / time comparison
    # ------------------------------------------------------------------------

    def get_data_source(self, schema_id: str | None = None) -> str | None:
        schema = self.get(schema_id)
        return schema.data_source if schema else None

    def get_data_source_or_raise(self, schema_id: str | None = None) -> str:
        return self.get_or_raise(schema_id).data_source

    def get_parallel_period(self, schema_id: str | None = None) -> ParallelPeriod | None:
        schema = self.get(schema_id)
        return schema.parallel_period if schema else None

    def get_parallel_period_or_raise(self, schema_id: str | None = None) -> ParallelPeriod:
        schema = self.get_or_raise(schema_id)
        if schema.parallel_period is None:
            raise SchemaNotFoundError(f"parallel period not configured in schema {schema.id!r}")
        return schema.parallel_period


def create_schema_registry(
    settings: RegistrySettings | None = None,
    *,
    allow_overwrite: bool | None = None,
    default_schema: str | None = None,
) -> SchemaRegistry:
    """
    Return a new, empty SchemaRegistry.

    Args:
        settings: Base settings (e.g., from ``RegistrySettings.load()``).
        allow_overwrite: Overrides ``settings.allow_overwrite`` when given.
        default_schema: Overrides ``settings.default_schema`` when given.
    """
    return SchemaRegistry(settings, allow_overwrite=allow_overwrite, default_schema=default_schema)
