"""
Pydantic v2 models for schema declarations and the frozen SchemaDocument.

Validators normalize enum-like strings (dimension type, measure format) to their
canonical lower_snake values using grammar helpers and guard mandatory names.

Responsibilities
- Define option models accepted by builder methods (DimensionOptions, MeasureOptions,
  CategoryOptions).
- Define the frozen spec models stored in a document (DimensionSpec, MeasureSpec,
  CategorySpec, FilterConfig, ParallelPeriod).
- Define SchemaDocument, the immutable artifact produced by SchemaBuilder.build().

Style
- Zero-IO (stdlib + pydantic only).
- Option models forbid unknown fields so misspelled options fail loudly.
- Spec models are frozen; sequences are tuples.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import GrammarError
from .grammar import (
    DimensionType,
    assert_name,
    dimension_type_from_value,
    measure_format_from_value,
    to_upper_key,
)
from .hashing import hash_document
from .typing import JsonDict

__all__ = [
    # Options
    "DimensionOptions",
    "MeasureOptions",
    "CategoryOptions",
    # Specs
    "DimensionSpec",
    "MeasureSpec",
    "CategorySpec",
    "FilterConfig",
    "ParallelPeriodLevel",
    "ParallelPeriod",
    # Document
    "SchemaDocument",
]


def _normalize_dimension_type(v: Any) -> Any:
    if v is None:
        return v
    return dimension_type_from_value(v).value


def _normalize_measure_format(v: Any) -> Any:
    if v is None:
        return v
    return measure_format_from_value(v).value


# ============================================================================
# Options (builder inputs)
# ============================================================================


class DimensionOptions(BaseModel):
    """
    Optional overrides for a dimension declaration.

    Attributes:
        key (str | None): Explicit registry key; defaults to ``to_upper_key(name)``.
        type (str | None): "categorical" or "time".
        label (str | None): Display label.
        members (tuple[str, ...] | None): Closed set of allowed member values.
        hierarchy (str | None): Custom hierarchy expression.
        dimension (str | None): Custom dimension reference expression.
        parallel_period_hierarchy (str | None): Hierarchy used for parallel periods.
        meta (dict[str, Any] | None): Free-form metadata.
    """

    model_config = ConfigDict(extra="forbid")

    key: str | None = None
    type: str | None = None
    label: str | None = None
    members: tuple[str, ...] | None = None
    hierarchy: str | None = None
    dimension: str | None = None
    parallel_period_hierarchy: str | None = None
    meta: dict[str, Any] | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, v: Any) -> Any:
        return _normalize_dimension_type(v)


class MeasureOptions(BaseModel):
    """
    Optional overrides for a measure declaration.

    Attributes:
        key (str | None): Explicit registry key; defaults to ``to_upper_key(name)``.
        label (str | None): Display label.
        format (str | None): One of the MeasureFormat values.
        decimals (int | None): Decimal places (>= 0).
        prefix (str | None): Custom display prefix.
        suffix (str | None): Custom display suffix.
        description (str | None): Free-text description.
        mdx_name (str | None): Member name in the cube when it differs from the name.
        mdx (str | None): Full MDX expression; takes precedence over mdx_name.
        meta (dict[str, Any] | None): Free-form metadata.
    """

    model_config = ConfigDict(extra="forbid")

    key: str | None = None
    label: str | None = None
    format: str | None = None
    decimals: int | None = Field(default=None, ge=0)
    prefix: str | None = None
    suffix: str | None = None
    description: str | None = None
    mdx_name: str | None = None
    mdx: str | None = None
    meta: dict[str, Any] | None = None

    @field_validator("format", mode="before")
    @classmethod
    def _normalize_format(cls, v: Any) -> Any:
        return _normalize_measure_format(v)


class CategoryOptions(BaseModel):
    """Optional icon, display order and metadata for a category."""

    model_config = ConfigDict(extra="forbid")

    icon: str | None = None
    order: int | None = None
    meta: dict[str, Any] | None = None


# ============================================================================
# Specs (document contents)
# ============================================================================


class DimensionSpec(BaseModel):
    """
    A categorical or time axis of the cube.

    Attributes:
        name (str): Declared name, original casing.
        hierarchy (str): Hierarchy expression (e.g., "[loja].[Todos].Children").
        dimension (str): Dimension reference expression (e.g., "[loja]").
        type (str): "categorical" or "time".
        label (str | None): Display label.
        members (tuple[str, ...] | None): Closed set of allowed member values.
        parallel_period_hierarchy (str | None): Hierarchy used for parallel periods.
        meta (dict[str, Any]): Free-form metadata.

    Raises:
        pydantic.ValidationError: On blank name or unknown type.

    Examples:
        >>> from capra.core.schema import DimensionSpec
        >>> DimensionSpec(name="loja", hierarchy="[loja].[Todos].Children", dimension="[loja]").type
        'categorical'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    hierarchy: str
    dimension: str
    type: str = DimensionType.CATEGORICAL.value
    label: str | None = None
    members: tuple[str, ...] | None = None
    parallel_period_hierarchy: str | None = None
    meta: dict[str, Any] = Field(default_factory=dict)

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, v: Any) -> Any:
        return assert_name(v, "dimension name")

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, v: Any) -> str:
        return dimension_type_from_value(v).value

    @property
    def is_time(self) -> bool:
        return self.type == DimensionType.TIME.value

    def allows_member(self, value: str) -> bool:
        """True when no closed member set is declared or ``value`` belongs to it."""
        return self.members is None or value in self.members


class MeasureSpec(BaseModel):
    """
    A numeric, aggregatable quantity and its MDX expression.

    Attributes:
        name (str): Declared name, original casing.
        mdx (str): Backend expression (e.g., "[Measures].[valorliquido]").
        label (str | None): Display label.
        format (str | None): Display format hint.
        decimals (int | None): Decimal places.
        prefix (str | None): Display prefix.
        suffix (str | None): Display suffix.
        description (str | None): Free-text description.
        meta (dict[str, Any]): Free-form metadata.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    mdx: str
    label: str | None = None
    format: str | None = None
    decimals: int | None = Field(default=None, ge=0)
    prefix: str | None = None
    suffix: str | None = None
    description: str | None = None
    meta: dict[str, Any] = Field(default_factory=dict)

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, v: Any) -> Any:
        return assert_name(v, "measure name")

    @field_validator("format", mode="before")
    @classmethod
    def _normalize_format(cls, v: Any) -> Any:
        return _normalize_measure_format(v)


class CategorySpec(BaseModel):
    """Theming metadata for a literal value code (label + color)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    value: str
    label: str
    color: str
    icon: str | None = None
    order: int | None = None
    meta: dict[str, Any] = Field(default_factory=dict)

    @field_validator("value", mode="before")
    @classmethod
    def _validate_value(cls, v: Any) -> Any:
        return assert_name(v, "category value")


class FilterConfig(BaseModel):
    """
    Named filter-acceptance policy for a query/UI context.

    Attributes:
        fixed (dict[str, str]): Dimension -> literal MDX member pins that the dashboard
            never overrides (e.g., {"modalidade": "[DELIVERY]"}).
        accepts (tuple[str, ...] | None): Ordered dimensions the context lets the
            dashboard vary. None means "governance filters only".
        zero_on_conflict (bool): When a fixed pin conflicts with a dashboard filter,
            the consumer yields no result instead of querying.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    fixed: dict[str, str] = Field(default_factory=dict)
    accepts: tuple[str, ...] | None = None
    zero_on_conflict: bool = True

    def accepts_filter(self, key: str) -> bool:
        """Case-insensitive membership of ``key`` in ``accepts`` (False when unset)."""
        if self.accepts is None:
            return False
        wanted = to_upper_key(key)
        return any(to_upper_key(k) == wanted for k in self.accepts)

    def is_fixed(self, key: str) -> bool:
        wanted = to_upper_key(key)
        return any(to_upper_key(k) == wanted for k in self.fixed)


class ParallelPeriodLevel(BaseModel):
    """A time level and how many of its units back the comparison point sits."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    level: str
    offset: int


class ParallelPeriod(BaseModel):
    """
    Time-comparison configuration ("same period last cycle").

    Attributes:
        hierarchy (str): Hierarchy expression the offsets are applied on.
        levels (dict[str, ParallelPeriodLevel]): Level name -> {level, offset}.

    Notes:
        Levels may be given as mappings, ParallelPeriodLevel instances, or
        ``(level, offset)`` pairs.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    hierarchy: str
    levels: dict[str, ParallelPeriodLevel] = Field(default_factory=dict)

    @field_validator("levels", mode="before")
    @classmethod
    def _coerce_levels(cls, v: Any) -> Any:
        if not isinstance(v, Mapping):
            return v
        out: dict[str, Any] = {}
        for name, spec in v.items():
            if isinstance(spec, Sequence) and not isinstance(spec, str) and len(spec) == 2:
                out[name] = {"level": spec[0], "offset": spec[1]}
            else:
                out[name] = spec
        return out

    def offset_for(self, level: str) -> int | None:
        entry = self.levels.get(level)
        return entry.offset if entry is not None else None


# ============================================================================
# Document
# ============================================================================


class SchemaDocument(BaseModel):
    """
    Immutable description of one analytical cube.

    Attributes:
        id (str): Stable slug, unique within a registry.
        name (str): Human label; defaults to data_source when blank.
        data_source (str): Backing cube/table identifier.
        version (str | None): Metadata only.
        description (str | None): Metadata only.
        dimensions (dict[str, DimensionSpec]): UPPER key -> dimension.
        measures (dict[str, MeasureSpec]): UPPER key -> measure.
        categories (dict[str, CategorySpec]): Value code -> category.
        filter_configs (dict[str, FilterConfig]): Config name -> policy.
        governance_filters (tuple[str, ...]): Mandatory/global filter keys.
        parallel_period (ParallelPeriod | None): Time-comparison offsets.
        meta (dict[str, Any]): Free-form metadata.

    Raises:
        pydantic.ValidationError: If id or data_source is blank.

    Notes:
        Produced by capra.builder.SchemaBuilder.build(); consumers resolve names
        through capra.registry.SchemaRegistry rather than reading documents directly.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    name: str = ""
    data_source: str
    version: str | None = None
    description: str | None = None
    dimensions: dict[str, DimensionSpec] = Field(default_factory=dict)
    measures: dict[str, MeasureSpec] = Field(default_factory=dict)
    categories: dict[str, CategorySpec] = Field(default_factory=dict)
    filter_configs: dict[str, FilterConfig] = Field(default_factory=dict)
    governance_filters: tuple[str, ...] = ()
    parallel_period: ParallelPeriod | None = None
    meta: dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def _validate_id(cls, v: Any) -> Any:
        return assert_name(v, "id")

    @field_validator("data_source", mode="before")
    @classmethod
    def _validate_data_source(cls, v: Any) -> Any:
        return assert_name(v, "data_source")

    @model_validator(mode="before")
    @classmethod
    def _default_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("name"):
            data = {**data, "name": data.get("data_source")}
        return data

    @model_validator(mode="after")
    def _check_category_keys(self) -> SchemaDocument:
        for code, cat in self.categories.items():
            if code != cat.value:
                raise GrammarError(f"category key {code!r} does not match its value {cat.value!r}")
        return self

    def fingerprint(self) -> str:
        """SHA-256 over the canonical JSON form of the document."""
        return hash_document(self.to_dict())

    def to_dict(self) -> JsonDict:
        """JSON-mode plain dict of the document."""
        return self.model_dump(mode="json")
