"""
Pricing types — eligibility and computed totals.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from storefront._types import Money, money


# ═══════════════════════════════════════════════════════════════════════════════
# Discount Type
# ═══════════════════════════════════════════════════════════════════════════════


class DiscountType(Enum):
    """Label printed on the receipt. SENIOR wins when a buyer is both."""

    SENIOR = "Senior"
    PWD = "PWD"
    NONE = "None"


# ═══════════════════════════════════════════════════════════════════════════════
# Eligibility
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Eligibility:
    age: int
    is_senior: bool
    is_pwd: bool

    @property
    def eligible(self) -> bool:
        return self.is_senior or self.is_pwd

    @property
    def discount_type(self) -> DiscountType:
        if self.is_senior:
            return DiscountType.SENIOR
        if self.is_pwd:
            return DiscountType.PWD
        return DiscountType.NONE


# ═══════════════════════════════════════════════════════════════════════════════
# Totals
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Totals:
    """
    Unrounded money fields of one order.

    Note: subtotal is VAT-inclusive. Rounding happens only in formatted().
    """

    subtotal: Money
    discount_applied: bool
    discount_type: DiscountType
    discount_amount: Money
    tax_amount: Money
    discounted_total: Money
    final_total: Money

    def formatted(self) -> dict[str, str | bool]:
        """Receipt money fields, two decimals each."""
        return {
            "discountApplied": self.discount_applied,
            "discountType": self.discount_type.value,
            "discountAmount": money(self.discount_amount),
            "taxAmount": money(self.tax_amount),
            "subtotal": money(self.subtotal),
            "discountedTotal": money(self.discounted_total),
            "finalTotal": money(self.final_total),
        }


__all__ = ("DiscountType", "Eligibility", "Totals")
