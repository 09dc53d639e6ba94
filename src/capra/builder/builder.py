"""
Fluent builder that accumulates cube declarations into one SchemaDocument.

Every setter/adder mutates builder-local state and returns the builder so calls chain.
Names are normalized with capra.core.grammar helpers and missing expressions are
derived from the conventional MDX patterns; ``build()`` validates and freezes.

Examples:
    >>> from capra.builder import SchemaBuilder
    >>> schema = (
    ...     SchemaBuilder()
    ...     .set_data_source_info("TesteTeknisaVendas", "vendas")
    ...     .add_dimension("loja")
    ...     .add_time_dimension("data")
    ...     .add_measure("valorLiquido", label="Faturamento", format="currency")
    ...     .add_category("DELIVERY", "Delivery", "#F97316")
    ...     .add_filter_config("kpiGeral", {"accepts": ["data", "loja"]})
    ...     .build()
    ... )
    >>> schema.measures["VALOR_LIQUIDO"].mdx
    '[Measures].[valorliquido]'

Notes:
    - Re-adding a name that maps to an existing key replaces that entry (last write wins).
    - build() deep-copies the accumulator, so later builder calls never reach a built document.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from loguru import logger
from pydantic import BaseModel

from capra.core.constants import (
    DEFAULT_GOVERNANCE_FILTERS,
    DEFAULT_PARALLEL_PERIOD_FIELD,
    DEFAULT_PARALLEL_PERIOD_OFFSETS,
)
from capra.core.errors import SchemaError
from capra.core.grammar import (
    DimensionType,
    assert_name,
    default_dimension_ref,
    default_hierarchy,
    default_measure_mdx,
    parallel_period_hierarchy,
    slugify_id,
    to_upper_key,
)
from capra.core.schema import (
    CategoryOptions,
    CategorySpec,
    DimensionOptions,
    DimensionSpec,
    FilterConfig,
    MeasureOptions,
    MeasureSpec,
    ParallelPeriod,
    SchemaDocument,
)
from capra.core.typing import CategoryEntry, JsonDict, NamedEntry, OptionsLike

__all__ = [
    "SchemaBuilder",
    "create_schema_builder",
    "define_schema",
]

_OptionsT = TypeVar("_OptionsT", bound=BaseModel)


def _coerce_options(
    model: type[_OptionsT], options: OptionsLike | None, overrides: Mapping[str, Any]
) -> _OptionsT:
    # Keyword overrides win over the options object/mapping.
    if options is None:
        data: dict[str, Any] = {}
    elif isinstance(options, model):
        data = options.model_dump(exclude_unset=True)
    elif isinstance(options, Mapping):
        data = dict(options)
    else:
        raise TypeError(
            f"options must be a {model.__name__} or a mapping (got {type(options).__name__})"
        )
    data.update(overrides)
    return model.model_validate(data)


def _split_entry(entry: NamedEntry, what: str) -> tuple[str, OptionsLike | None]:
    if isinstance(entry, str):
        return entry, None
    if isinstance(entry, (tuple, list)) and len(entry) == 2:
        return entry[0], entry[1]
    raise TypeError(f"{what} entries must be a name or a (name, options) pair (got {entry!r})")


class SchemaBuilder:
    """Accumulates dimension, measure, category, filter and time-comparison declarations."""

    def __init__(self) -> None:
        self._id: str = ""
        self._name: str = ""
        self._data_source: str = ""
        self._version: str | None = None
        self._description: str | None = None
        self._dimensions: dict[str, DimensionSpec] = {}
        self._measures: dict[str, MeasureSpec] = {}
        self._categories: dict[str, CategorySpec] = {}
        self._filter_configs: dict[str, FilterConfig] = {}
        self._governance_filters: tuple[str, ...] = DEFAULT_GOVERNANCE_FILTERS
        self._parallel_period: ParallelPeriod | None = None
        self._meta: dict[str, Any] = {}

    # ------------------------------------------------------------------------
    # Basic info
    # ------------------------------------------------------------------------

    def set_id(self, schema_id: str) -> SchemaBuilder:
        self._id = schema_id
        return self

    def set_name(self, name: str) -> SchemaBuilder:
        self._name = name
        return self

    def set_data_source(self, data_source: str) -> SchemaBuilder:
        self._data_source = data_source
        return self

    def set_version(self, version: str) -> SchemaBuilder:
        self._version = version
        return self

    def set_description(self, description: str) -> SchemaBuilder:
        self._description = description
        return self

    def set_data_source_info(
        self, data_source: str, schema_id: str | None = None, name: str | None = None
    ) -> SchemaBuilder:
        """
        Set data source, id and name in one call.

        Args:
            data_source: Backing cube name.
            schema_id: Explicit id; derived with ``slugify_id(data_source)`` when omitted.
            name: Display name; the raw data source when omitted.
        """
        self._data_source = data_source
        self._id = schema_id if schema_id is not None else slugify_id(data_source)
        self._name = name if name is not None else data_source
        return self

    def set_meta(self, meta: Mapping[str, Any]) -> SchemaBuilder:
        """Merge ``meta`` into the schema metadata."""
        self._meta = {**self._meta, **meta}
        return self

    # ------------------------------------------------------------------------
    # Dimensions
    # ------------------------------------------------------------------------

    def add_dimension(
        self, name: str, options: OptionsLike | None = None, **overrides: Any
    ) -> SchemaBuilder:
        """
        Register a dimension.

        Args:
            name: Dimension name as known by the cube (e.g., "loja").
            options: DimensionOptions or mapping of its fields.
            **overrides: Individual DimensionOptions fields; win over ``options``.

        Defaults:
            hierarchy = "[<name>].[Todos].Children", dimension = "[<name>]",
            type = "categorical", key = to_upper_key(name).

        Raises:
            GrammarError: If name is blank.
            pydantic.ValidationError: On unknown option names or invalid values.
        """
        assert_name(name, "dimension name")
        opts = _coerce_options(DimensionOptions, options, overrides)
        key = opts.key or to_upper_key(name)
        self._dimensions[key] = DimensionSpec(
            name=name,
            hierarchy=opts.hierarchy if opts.hierarchy is not None else default_hierarchy(name),
            dimension=opts.dimension if opts.dimension is not None else default_dimension_ref(name),
            type=opts.type or DimensionType.CATEGORICAL.value,
            label=opts.label,
            members=opts.members,
            parallel_period_hierarchy=opts.parallel_period_hierarchy,
            meta=dict(opts.meta or {}),
        )
        return self

    def add_time_dimension(
        self, name: str, options: OptionsLike | None = None, **overrides: Any
    ) -> SchemaBuilder:
        """Same as add_dimension with type forced to "time"."""
        opts = _coerce_options(DimensionOptions, options, overrides)
        return self.add_dimension(name, opts, type=DimensionType.TIME.value)

    def add_dimensions(self, entries: Iterable[NamedEntry]) -> SchemaBuilder:
        for entry in entries:
            name, options = _split_entry(entry, "dimension")
            self.add_dimension(name, options)
        return self

    # ------------------------------------------------------------------------
    # Measures
    # ------------------------------------------------------------------------

    def add_measure(
        self, name: str, options: OptionsLike | None = None, **overrides: Any
    ) -> SchemaBuilder:
        """
        Register a measure.

        Args:
            name: Semantic measure name (e.g., "valorLiquido").
            options: MeasureOptions or mapping of its fields.
            **overrides: Individual MeasureOptions fields; win over ``options``.

        Defaults:
            mdx = "[Measures].[<mdx_name or lower(name)>]", key = to_upper_key(name).
        """
        assert_name(name, "measure name")
        opts = _coerce_options(MeasureOptions, options, overrides)
        key = opts.key or to_upper_key(name)
        self._measures[key] = MeasureSpec(
            name=name,
            mdx=opts.mdx if opts.mdx is not None else default_measure_mdx(name, opts.mdx_name),
            label=opts.label,
            format=opts.format,
            decimals=opts.decimals,
            prefix=opts.prefix,
            suffix=opts.suffix,
            description=opts.description,
            meta=dict(opts.meta or {}),
        )
        return self

    def add_measures(self, entries: Iterable[NamedEntry]) -> SchemaBuilder:
        for entry in entries:
            name, options = _split_entry(entry, "measure")
            self.add_measure(name, options)
        return self

    # ------------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------------

    def add_category(
        self,
        code: str,
        label: str,
        color: str,
        options: OptionsLike | None = None,
        **overrides: Any,
    ) -> SchemaBuilder:
        """Register label/color theming for a literal value code (e.g., "DELIVERY")."""
        opts = _coerce_options(CategoryOptions, options, overrides)
        self._categories[code] = CategorySpec(
            value=code,
            label=label,
            color=color,
            icon=opts.icon,
            order=opts.order,
            meta=dict(opts.meta or {}),
        )
        return self

    def add_categories(self, entries: Iterable[CategoryEntry]) -> SchemaBuilder:
        for entry in entries:
            if not isinstance(entry, (tuple, list)) or len(entry) not in (3, 4):
                raise TypeError(
                    "category entries must be (code, label, color) or "
                    f"(code, label, color, options) (got {entry!r})"
                )
            self.add_category(*entry)
        return self

    # ------------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------------

    def add_filter_config(
        self, name: str, spec: FilterConfig | Mapping[str, Any]
    ) -> SchemaBuilder:
        """Register a named filter-acceptance policy ({fixed, accepts, zero_on_conflict})."""
        assert_name(name, "filter config name")
        self._filter_configs[name] = (
            spec if isinstance(spec, FilterConfig) else FilterConfig.model_validate(dict(spec))
        )
        return self

    def set_governance_filters(self, keys: Iterable[str]) -> SchemaBuilder:
        if isinstance(keys, str):
            raise TypeError(f"governance filters must be a sequence of keys (got {keys!r})")
        self._governance_filters = tuple(keys)
        return self

    # ------------------------------------------------------------------------
    # Parallel period
    # ------------------------------------------------------------------------

    def set_parallel_period(
        self, hierarchy: str, levels: Mapping[str, Any]
    ) -> SchemaBuilder:
        """
        Configure time-comparison offsets.

        Args:
            hierarchy: Hierarchy expression the offsets apply to.
            levels: Level name -> {"level", "offset"} mapping or (level, offset) pair.
        """
        self._parallel_period = ParallelPeriod(hierarchy=hierarchy, levels=dict(levels))
        return self

    def set_default_parallel_period(
        self, dimension_name: str = DEFAULT_PARALLEL_PERIOD_FIELD
    ) -> SchemaBuilder:
        """Day offsets compare one week back; every coarser level compares one unit back."""
        return self.set_parallel_period(
            parallel_period_hierarchy(dimension_name),
            {level: (level, offset) for level, offset in DEFAULT_PARALLEL_PERIOD_OFFSETS},
        )

    # ------------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------------

    def build(self) -> SchemaDocument:
        """
        Validate the accumulated declarations and return a frozen SchemaDocument.

        Raises:
            SchemaError: If id or data_source is missing or blank.

        Notes:
            A schema without dimensions or measures is unusual but valid; a warning is
            logged and the document is still returned.
        """
        if not self._id.strip():
            raise SchemaError("schema id is required (call set_id or set_data_source_info)")
        if not self._data_source.strip():
            raise SchemaError(
                f"schema {self._id!r}: data_source is required (call set_data_source)"
            )
        if not self._dimensions:
            logger.warning("Schema {!r} has no dimensions defined", self._id)
        if not self._measures:
            logger.warning("Schema {!r} has no measures defined", self._id)

        return SchemaDocument(
            id=self._id,
            name=self._name or self._data_source,
            data_source=self._data_source,
            version=self._version,
            description=self._description,
            dimensions=copy.deepcopy(self._dimensions),
            measures=copy.deepcopy(self._measures),
            categories=copy.deepcopy(self._categories),
            filter_configs=copy.deepcopy(self._filter_configs),
            governance_filters=self._governance_filters,
            parallel_period=copy.deepcopy(self._parallel_period),
            meta=copy.deepcopy(self._meta),
        )

    def to_json(self) -> JsonDict:
        """Current accumulator state as a plain dict, without validation."""
        return {
            "id": self._id,
            "name": self._name,
            "data_source": self._data_source,
            "version": self._version,
            "description": self._description,
            "dimensions": {k: v.model_dump(mode="json") for k, v in self._dimensions.items()},
            "measures": {k: v.model_dump(mode="json") for k, v in self._measures.items()},
            "categories": {k: v.model_dump(mode="json") for k, v in self._categories.items()},
            "filter_configs": {
                k: v.model_dump(mode="json") for k, v in self._filter_configs.items()
            },
            "governance_filters": list(self._governance_filters),
            "parallel_period": (
                self._parallel_period.model_dump(mode="json") if self._parallel_period else None
            ),
            "meta": dict(self._meta),
        }


# ============================================================================
# Factories
# ============================================================================


def create_schema_builder() -> SchemaBuilder:
    """Return a fresh SchemaBuilder."""
    return SchemaBuilder()


def define_schema(
    data_source: str,
    *,
    id: str | None = None,
    name: str | None = None,
    dimensions: Iterable[NamedEntry] = (),
    measures: Iterable[NamedEntry] = (),
    categories: Iterable[CategoryEntry] = (),
    filter_configs: Mapping[str, FilterConfig | Mapping[str, Any]] | None = None,
) -> SchemaDocument:
    """
    Build a schema from a flat declaration in one call.

    Args:
        data_source: Backing cube name; also the source of the derived id/name.
        id: Explicit schema id.
        name: Display name.
        dimensions: Bare names or (name, options) pairs.
        measures: Bare names or (name, options) pairs.
        categories: (code, label, color[, options]) tuples.
        filter_configs: Config name -> policy.

    Returns:
        SchemaDocument: The built document.

    Examples:
        >>> doc = define_schema("TestCube", id="test", dimensions=["loja", "turno"])
        >>> sorted(doc.dimensions)
        ['LOJA', 'TURNO']
    """
    builder = (
        SchemaBuilder()
        .set_data_source_info(data_source, id, name)
        .add_dimensions(dimensions)
        .add_measures(measures)
        .add_categories(categories)
    )
    for config_name, spec in (filter_configs or {}).items():
        builder.add_filter_config(config_name, spec)
    return builder.build()
