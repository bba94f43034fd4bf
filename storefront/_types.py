"""
Core types for storefront.

Re-exports from kungfu + money helpers shared by every package.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Money
# ═══════════════════════════════════════════════════════════════════════════════

type Money = Decimal
"""Currency amount. Never a float; rounded only when formatted."""

CENTS = Decimal("0.01")


def money(value: Money) -> str:
    """Format money with exactly two decimals, half-up."""
    return str(value.quantize(CENTS, rounding=ROUND_HALF_UP))


def to_money(value: object) -> Money:
    """Coerce int/float/str/Decimal into Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(str(value))


# ═══════════════════════════════════════════════════════════════════════════════
# Clock
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Clock:
    """
    Source of "now".

    Injected into the checkout graph so age checks and order dates are testable.
    """

    fixed: datetime | None = field(default=None)

    def now(self) -> datetime:
        return self.fixed if self.fixed is not None else datetime.now()


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Money
    "Money",
    "CENTS",
    "money",
    "to_money",
    # Time
    "Clock",
)
