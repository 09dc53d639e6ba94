"""
Capra schema conventional defaults.

Defines the defaults the builder falls back to when a declaration omits them. This
module is zero-IO and uses only the Python standard library.

Notes:
    - DEFAULT_GOVERNANCE_FILTERS seeds every new builder; set_governance_filters replaces it.
    - DEFAULT_PARALLEL_PERIOD_FIELD is the date field used by set_default_parallel_period.
    - DEFAULT_PARALLEL_PERIOD_OFFSETS encodes "same point one week / one period back":
      days compare 7 back, every coarser level compares 1 back.
"""

from __future__ import annotations

from typing import Final

__all__ = [
    "ALL_MEMBERS_LEVEL",
    "MEASURES_DIMENSION",
    "PARALLEL_PERIOD_PREFIX",
    "PARALLEL_PERIOD_SUFFIX",
    "DEFAULT_GOVERNANCE_FILTERS",
    "DEFAULT_PARALLEL_PERIOD_FIELD",
    "DEFAULT_PARALLEL_PERIOD_OFFSETS",
]

# Level holding every member of a dimension in the backing cube.
ALL_MEMBERS_LEVEL: Final[str] = "Todos"

# MDX dimension that hosts every measure.
MEASURES_DIMENSION: Final[str] = "Measures"

# Parallel-period hierarchies are named "[BIMF<field>.(Completo)]".
PARALLEL_PERIOD_PREFIX: Final[str] = "BIMF"
PARALLEL_PERIOD_SUFFIX: Final[str] = ".(Completo)"

DEFAULT_GOVERNANCE_FILTERS: Final[tuple[str, ...]] = ("data", "loja")

DEFAULT_PARALLEL_PERIOD_FIELD: Final[str] = "datarefvenda"

# Ordered finest to coarsest.
DEFAULT_PARALLEL_PERIOD_OFFSETS: Final[tuple[tuple[str, int], ...]] = (
    ("Dia", 7),
    ("Semana", 1),
    ("Mes", 1),
    ("Trimestre", 1),
    ("Semestre", 1),
    ("Ano", 1),
)
