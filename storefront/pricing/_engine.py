"""
Pricing engine — pure money computation.

No I/O, no state: the same inputs always give the same Totals.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date
from decimal import Decimal, InvalidOperation

from storefront._types import Money, to_money
from storefront.pricing._types import DiscountType, Eligibility, Totals

# ═══════════════════════════════════════════════════════════════════════════════
# Rates
# ═══════════════════════════════════════════════════════════════════════════════

VAT_RATE = Decimal("0.12")
VAT_DIVISOR = Decimal("1.12")
DISCOUNT_RATE = Decimal("0.20")
SENIOR_AGE = 60

_PRICE_NOISE = re.compile(r"[^0-9.]")


# ═══════════════════════════════════════════════════════════════════════════════
# Eligibility
# ═══════════════════════════════════════════════════════════════════════════════


def age_on(birth_date: date | None, today: date) -> int:
    """Whole years between birth_date and today. Missing birth date → 0."""
    if birth_date is None:
        return 0
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return max(age, 0)


def eligibility(birth_date: date | None, is_pwd: bool, today: date) -> Eligibility:
    """
    Senior Citizen / PWD discount eligibility.

    Example:
        e = eligibility(date(1950, 1, 1), is_pwd=False, today=date.today())
        e.eligible        # True
        e.discount_type   # DiscountType.SENIOR
    """
    age = age_on(birth_date, today)
    return Eligibility(age=age, is_senior=age >= SENIOR_AGE, is_pwd=is_pwd)


# ═══════════════════════════════════════════════════════════════════════════════
# Totals
# ═══════════════════════════════════════════════════════════════════════════════


def compute_totals(
    subtotal: Money,
    eligible: bool,
    discount_type: DiscountType,
) -> Totals:
    """
    Compute VAT / discount figures for a VAT-inclusive subtotal.

    Eligible buyers pay the VAT-exempt amount less 20%; everyone else pays
    subtotal plus 12% tax.

    Example:
        t = compute_totals(Decimal("1120"), True, DiscountType.SENIOR)
        t.formatted()["finalTotal"]   # "800.00"
    """
    vat_exempt = subtotal / VAT_DIVISOR

    if eligible:
        discount = vat_exempt * DISCOUNT_RATE
        discounted = vat_exempt - discount
        return Totals(
            subtotal=subtotal,
            discount_applied=True,
            discount_type=discount_type,
            discount_amount=discount,
            tax_amount=Decimal(0),
            discounted_total=discounted,
            final_total=discounted,
        )

    tax = subtotal * VAT_RATE
    return Totals(
        subtotal=subtotal,
        discount_applied=False,
        discount_type=discount_type,
        discount_amount=Decimal(0),
        tax_amount=tax,
        discounted_total=subtotal,
        final_total=subtotal + tax,
    )


def subtotal_of(lines: Iterable[tuple[Money, int]]) -> Money:
    """Σ unit_price × quantity."""
    return sum((price * qty for price, qty in lines), Decimal(0))


def parse_price(value: object) -> Money:
    """
    Read a price the way the storefront displays it.

    Accepts numbers and strings like "₱1,120.00"; everything but digits and
    the decimal point is dropped. NaN and infinities are rejected.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid price: {value!r}")
    if isinstance(value, (int, float, Decimal)):
        price = to_money(value)
    else:
        try:
            price = Decimal(_PRICE_NOISE.sub("", str(value)))
        except InvalidOperation:
            raise ValueError(f"Invalid price: {value!r}") from None
    if not price.is_finite():
        raise ValueError(f"Invalid price: {value!r}")
    return price


__all__ = (
    "VAT_RATE",
    "VAT_DIVISOR",
    "DISCOUNT_RATE",
    "SENIOR_AGE",
    "age_on",
    "eligibility",
    "compute_totals",
    "subtotal_of",
    "parse_price",
)
