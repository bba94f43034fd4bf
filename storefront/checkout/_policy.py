"""
Checkout policy — trust boundary for prices and the optional stock check.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class PriceSource(Enum):
    """
    CART: charge the unit price the cart carried (price locked when the item
          was added).

    CATALOG: re-read every product's base price at checkout time.
    """

    CART = "cart"
    CATALOG = "catalog"

    @classmethod
    def parse(cls, raw: str) -> PriceSource:
        try:
            return cls(raw.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown price source: {raw!r}") from None


@dataclass(frozen=True, slots=True)
class CheckoutPolicy:
    """
    Checkout behavior.

    Example:
        policy = (
            CheckoutPolicy()
            .with_price_source(PriceSource.CATALOG)
            .with_stock_check()
        )

    Note: Immutable — each method returns a new CheckoutPolicy.
    """

    price_source: PriceSource = PriceSource.CART
    verify_stock: bool = False
    # Allowed gap between the client's total and the computed subtotal
    # before a warning is logged.
    claim_tolerance: Decimal = Decimal("0.01")

    def with_price_source(self, source: PriceSource) -> CheckoutPolicy:
        return CheckoutPolicy(
            price_source=source,
            verify_stock=self.verify_stock,
            claim_tolerance=self.claim_tolerance,
        )

    def with_stock_check(self, enabled: bool = True) -> CheckoutPolicy:
        """
        Reject with OutOfStock before anything is written when a line asks
        for more than the ledger holds.
        """
        return CheckoutPolicy(
            price_source=self.price_source,
            verify_stock=enabled,
            claim_tolerance=self.claim_tolerance,
        )

    def with_claim_tolerance(self, tolerance: Decimal) -> CheckoutPolicy:
        if tolerance < 0:
            raise ValueError("claim_tolerance must be >= 0")
        return CheckoutPolicy(
            price_source=self.price_source,
            verify_stock=self.verify_stock,
            claim_tolerance=tolerance,
        )


__all__ = ("PriceSource", "CheckoutPolicy")
