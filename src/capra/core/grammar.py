"""
Canonical Capra schema grammar and helpers.

Defines dimension types and measure display formats, plus the pure string transforms
that turn declared names into registry keys, schema ids and default MDX expressions.
Everything here is deterministic and zero-IO so the builder's normalization logic can
be unit-tested in isolation.

Responsibilities
- Define enums for dimension types and measure formats (lower_snake values).
- Derive UPPER_SNAKE keys from declared names (``valorLiquido`` -> ``VALOR_LIQUIDO``).
- Derive schema id slugs from data-source names.
- Build the conventional MDX expressions for dimensions, measures and parallel periods.

Naming standard
---------------
- Enum classes: PascalCase
- Enum member names: UPPER_SNAKE
- Enum serialized values: lower_snake
- Dimension/measure keys: UPPER_SNAKE derived with ``to_upper_key``
- Schema ids: lowercase alphanumerics derived with ``slugify_id``

MDX conventions
---------------
| Declaration                      | Derived expression
|----------------------------------|---------------------------------------
| dimension ``loja`` hierarchy     | ``[loja].[Todos].Children``
| dimension ``loja`` reference     | ``[loja]``
| measure ``valorLiquido``         | ``[Measures].[valorliquido]``
| parallel period on ``datarefvenda`` | ``[BIMFdatarefvenda.(Completo)]``

Examples
--------
>>> to_upper_key("valorLiquido")
'VALOR_LIQUIDO'
>>> slugify_id("Teste Teknisa-Vendas")
'testeteknisavendas'
>>> default_measure_mdx("valorLiquido")
'[Measures].[valorliquido]'
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Final

from .constants import (
    ALL_MEMBERS_LEVEL,
    MEASURES_DIMENSION,
    PARALLEL_PERIOD_PREFIX,
    PARALLEL_PERIOD_SUFFIX,
)
from .errors import GrammarError

__all__ = [
    "DimensionType",
    "MeasureFormat",
    # helpers/validators
    "assert_name",
    "to_upper_key",
    "slugify_id",
    "default_hierarchy",
    "default_dimension_ref",
    "default_measure_mdx",
    "parallel_period_hierarchy",
    "dimension_type_from_value",
    "measure_format_from_value",
]


# ============================================================================
# ENUMS
# ============================================================================


class DimensionType(Enum):
    """
    Kind of analytical axis a dimension represents.

    Members:
      CATEGORICAL: Grouping/filter axis over discrete members (store, shift).
      TIME: Date axis; eligible for parallel-period comparisons.
    """

    CATEGORICAL = "categorical"
    TIME = "time"


class MeasureFormat(Enum):
    """
    Display format hint for a measure.

    Members:
      CURRENCY: Monetary value (e.g., R$ 1.234,56).
      PERCENT: Ratio rendered as a percentage.
      NUMBER: Plain number with locale grouping.
      INTEGER: Number without decimals.
      DECIMAL: Number with fixed decimals.
      COMPACT: Abbreviated magnitude (e.g., 1,5M).
    """

    CURRENCY = "currency"
    PERCENT = "percent"
    NUMBER = "number"
    INTEGER = "integer"
    DECIMAL = "decimal"
    COMPACT = "compact"


# ============================================================================
# Helpers & Validators (zero I/O)
# ============================================================================

_CAMEL_BOUNDARY_RE: Final[re.Pattern[str]] = re.compile(r"([a-z])([A-Z])")
_NON_ALNUM_RE: Final[re.Pattern[str]] = re.compile(r"[^a-zA-Z0-9]")
_NON_LOWER_ALNUM_RE: Final[re.Pattern[str]] = re.compile(r"[^a-z0-9]")


def assert_name(value: str, what: str = "name") -> str:
    """
    Validate that a declared name is a non-blank string.

    Args:
      value (str): Candidate name.
      what (str): Human-friendly label used in the error message.

    Returns:
      str: The name, unchanged.

    Raises:
      GrammarError: If value is not a string or is blank.
    """
    if not isinstance(value, str) or not value.strip():
        raise GrammarError(f"{what} must be a non-empty string (got: {value!r})")
    return value


def to_upper_key(name: str) -> str:
    """
    Derive the UPPER_SNAKE registry key for a dimension or measure name.

    camelCase boundaries become underscores, every other non-alphanumeric character
    becomes an underscore, and the result is upper-cased.

    Args:
      name (str): Declared name (e.g., "loja", "valorLiquido").

    Returns:
      str: Key such as "LOJA" or "VALOR_LIQUIDO".

    Examples:
      >>> to_upper_key("loja")
      'LOJA'
      >>> to_upper_key("valorLiquido")
      'VALOR_LIQUIDO'
      >>> to_upper_key("VALOR_LIQUIDO")
      'VALOR_LIQUIDO'

    Notes:
      Idempotent on keys it produced, so lookups may normalize either form.
    """
    split = _CAMEL_BOUNDARY_RE.sub(r"\1_\2", name)
    return _NON_ALNUM_RE.sub("_", split).upper()


def slugify_id(data_source: str) -> str:
    """
    Derive a schema id from a data-source name.

    Args:
      data_source (str): Raw data-source (cube) name.

    Returns:
      str: Lower-cased name with every non-alphanumeric character removed.

    Examples:
      >>> slugify_id("TesteTeknisaVendas")
      'testeteknisavendas'
    """
    return _NON_LOWER_ALNUM_RE.sub("", (data_source or "").lower())


def default_hierarchy(name: str) -> str:
    """Children of the all-members level: ``[<name>].[Todos].Children``."""
    return f"[{name}].[{ALL_MEMBERS_LEVEL}].Children"


def default_dimension_ref(name: str) -> str:
    """Bare dimension reference: ``[<name>]``."""
    return f"[{name}]"


def default_measure_mdx(name: str, mdx_name: str | None = None) -> str:
    """
    Build the MDX reference for a measure.

    Args:
      name (str): Declared measure name.
      mdx_name (str | None): Explicit member name in the cube; used verbatim when given.

    Returns:
      str: ``[Measures].[<mdx_name or lower(name)>]``.
    """
    member = mdx_name if mdx_name is not None else name.lower()
    return f"[{MEASURES_DIMENSION}].[{member}]"


def parallel_period_hierarchy(field: str) -> str:
    """Parallel-period hierarchy for a date field: ``[BIMF<field>.(Completo)]``."""
    return f"[{PARALLEL_PERIOD_PREFIX}{field}{PARALLEL_PERIOD_SUFFIX}]"


def dimension_type_from_value(s: str | DimensionType) -> DimensionType:
    """
    Parse a dimension type token (case-insensitive) into a DimensionType.

    Raises:
      GrammarError: If s is not a known dimension type.
    """
    if isinstance(s, DimensionType):
        return s
    allowed = {t.value for t in DimensionType}
    s_l = str(s or "").strip().lower()
    if s_l not in allowed:
        raise GrammarError(f"dimension type must be one of {sorted(allowed)} (got {s!r})")
    return DimensionType(s_l)


def measure_format_from_value(s: str | MeasureFormat) -> MeasureFormat:
    """
    Parse a measure format token (case-insensitive) into a MeasureFormat.

    Raises:
      GrammarError: If s is not a known measure format.
    """
    if isinstance(s, MeasureFormat):
        return s
    allowed = {f.value for f in MeasureFormat}
    s_l = str(s or "").strip().lower()
    if s_l not in allowed:
        raise GrammarError(f"measure format must be one of {sorted(allowed)} (got {s!r})")
    return MeasureFormat(s_l)
