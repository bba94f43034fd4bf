"""
Pricing — VAT and Senior Citizen / PWD discount rules.

    from storefront import pricing as P

    e = P.eligibility(buyer.birth_date, buyer.is_pwd, today)
    totals = P.compute_totals(subtotal, e.eligible, e.discount_type)
    totals.formatted()   # receipt money fields
"""

from storefront.pricing._types import DiscountType, Eligibility, Totals
from storefront.pricing._engine import (
    VAT_RATE,
    VAT_DIVISOR,
    DISCOUNT_RATE,
    SENIOR_AGE,
    age_on,
    eligibility,
    compute_totals,
    subtotal_of,
    parse_price,
)

__all__ = (
    "DiscountType",
    "Eligibility",
    "Totals",
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
