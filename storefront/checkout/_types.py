"""
Checkout types — request, cart lines and the outcome.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from storefront._types import Money
from storefront.inventory import StockChange
from storefront.transactions import LineItem, Receipt, ReceiptItem, Transaction

NO_COLOR = "N/A"


@dataclass(frozen=True, slots=True)
class CartLine:
    """
    One cart row as the client holds it.

    unit_price is the price shown when the item was added to the cart.
    stock_snapshot is informational only; the ledger is authoritative.
    """

    product_id: str
    quantity: int
    unit_price: Money
    color: str = NO_COLOR
    name: str = ""
    brand: str = ""
    stock_snapshot: int | None = None

    def repriced(self, unit_price: Money) -> CartLine:
        return replace(self, unit_price=unit_price)

    def line_item(self) -> LineItem:
        return LineItem(self.product_id, self.color, self.quantity)

    def receipt_item(self) -> ReceiptItem:
        return ReceiptItem(
            name=self.name,
            brand=self.brand,
            color=self.color,
            quantity=self.quantity,
            price=self.unit_price,
        )


@dataclass(frozen=True, slots=True)
class CheckoutRequest:
    buyer_id: str
    lines: tuple[CartLine, ...]
    claimed_total: Money | None = None


@dataclass(frozen=True, slots=True)
class SkippedLine:
    """A decrement that did not happen after the sale was recorded."""

    product_id: str
    color: str
    quantity: int
    reason: str


@dataclass(frozen=True, slots=True)
class CheckoutOutcome:
    transaction: Transaction
    receipt: Receipt
    changes: tuple[StockChange, ...] = ()
    skipped: tuple[SkippedLine, ...] = ()

    @property
    def fully_applied(self) -> bool:
        return not self.skipped


__all__ = ("NO_COLOR", "CartLine", "CheckoutRequest", "SkippedLine", "CheckoutOutcome")
