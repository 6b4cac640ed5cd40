"""
Claim categories and their per-item inner limits.

The table is read-only: ClaimCalculator copies whatever table it is given
into a MappingProxyType, so neither this module nor a caller can change the
limits a calculator instance applies.

Categories:
  Medical      Medical expenses incurred while travelling
  Electronics  Lost, stolen or damaged electronic devices
  Baggage      Lost, delayed or damaged baggage

Any other category string is still accepted; it simply has no cover and
maps to an inner limit of 0.
"""

from decimal import Decimal
from types import MappingProxyType
from typing import Mapping


class ClaimCategory:
    MEDICAL = "Medical"
    ELECTRONICS = "Electronics"
    BAGGAGE = "Baggage"


# Limit applied to an unrecognised category: claim fully disallowed
UNCOVERED_LIMIT = Decimal("0")

DEFAULT_INNER_LIMITS: Mapping[str, Decimal] = MappingProxyType(
    {
        ClaimCategory.MEDICAL: Decimal("750"),
        ClaimCategory.ELECTRONICS: Decimal("500"),
        ClaimCategory.BAGGAGE: Decimal("400"),
    }
)


def build_inner_limits(
    overrides: Mapping[str, Decimal] | None = None,
) -> Mapping[str, Decimal]:
    """
    Return the default limit table with `overrides` applied on top,
    frozen as a read-only mapping.
    """
    table = dict(DEFAULT_INNER_LIMITS)
    if overrides:
        table.update(overrides)
    return freeze_limits(table)


def freeze_limits(table: Mapping[str, Decimal]) -> Mapping[str, Decimal]:
    """Copy `table` into a read-only mapping with Decimal limits."""
    return MappingProxyType(
        {category: Decimal(limit) for category, limit in table.items()}
    )
