"""
Transaction types — status, frozen line items and the receipt snapshot.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP
from enum import Enum
from typing import Any

from storefront._types import CENTS, Money, money
from storefront.errors import Errors
from storefront.pricing import Totals


# ═══════════════════════════════════════════════════════════════════════════════
# Status
# ═══════════════════════════════════════════════════════════════════════════════


class TransactionStatus(Enum):
    """Exact strings are part of the admin API contract."""

    SHIPPED = "Shipped"
    IN_TRANSIT = "In-Transit"
    COMPLETED = "Completed"

    @classmethod
    def parse(cls, raw: str) -> TransactionStatus:
        for status in cls:
            if status.value == raw:
                return status
        raise Errors.invalid_status(raw)


# ═══════════════════════════════════════════════════════════════════════════════
# Line items — what was bought, frozen at purchase time
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class LineItem:
    product_id: str
    color: str
    quantity: int

    def to_payload(self) -> dict[str, Any]:
        return {"id": self.product_id, "color": self.color, "qty": self.quantity}

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> LineItem:
        return cls(str(data["id"]), str(data.get("color", "N/A")), int(data["qty"]))


def encode_line_items(items: tuple[LineItem, ...]) -> str:
    return json.dumps([i.to_payload() for i in items])


def decode_line_items(raw: str | None) -> tuple[LineItem, ...]:
    if not raw:
        return ()
    return tuple(LineItem.from_payload(d) for d in json.loads(raw))


# ═══════════════════════════════════════════════════════════════════════════════
# Receipt
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ReceiptItem:
    name: str
    brand: str
    color: str
    quantity: int
    price: Money

    @property
    def total(self) -> Money:
        return self.price * self.quantity

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "brand": self.brand,
            "color": self.color,
            "quantity": self.quantity,
            "price": float(self.price),
            "total": f"{self.total.quantize(CENTS, rounding=ROUND_HALF_UP):,.2f}",
        }


@dataclass(frozen=True, slots=True)
class Receipt:
    """
    Denormalized purchase snapshot.

    Note: money fields are stored already formatted ("800.00") so the receipt
    never changes after it is written, whatever happens to the catalog.
    """

    buyer_name: str
    address: str
    timestamp: str
    discount_applied: bool
    discount_type: str
    discount_amount: str
    tax_amount: str
    subtotal: str
    discounted_total: str
    final_total: str
    items: tuple[dict[str, Any], ...] = ()

    @classmethod
    def build(
        cls,
        buyer_name: str,
        address: str,
        timestamp: datetime,
        totals: Totals,
        items: tuple[ReceiptItem, ...],
    ) -> Receipt:
        fields = totals.formatted()
        return cls(
            buyer_name=buyer_name or "Unknown User",
            address=address or "No Address Provided",
            timestamp=timestamp.strftime("%m/%d/%Y, %I:%M:%S %p"),
            discount_applied=bool(fields["discountApplied"]),
            discount_type=str(fields["discountType"]),
            discount_amount=str(fields["discountAmount"]),
            tax_amount=str(fields["taxAmount"]),
            subtotal=str(fields["subtotal"]),
            discounted_total=str(fields["discountedTotal"]),
            final_total=str(fields["finalTotal"]),
            items=tuple(i.to_payload() for i in items),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "buyerName": self.buyer_name,
            "address": self.address,
            "timestamp": self.timestamp,
            "discountApplied": self.discount_applied,
            "discountType": self.discount_type,
            "discountAmount": self.discount_amount,
            "taxAmount": self.tax_amount,
            "subtotal": self.subtotal,
            "discountedTotal": self.discounted_total,
            "finalTotal": self.final_total,
            "items": list(self.items),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_payload())

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> Receipt:
        items = data.get("items") or []
        if isinstance(items, str):
            items = json.loads(items)
        return cls(
            buyer_name=data["buyerName"],
            address=data["address"],
            timestamp=data["timestamp"],
            discount_applied=bool(data["discountApplied"]),
            discount_type=data["discountType"],
            discount_amount=data["discountAmount"],
            tax_amount=data["taxAmount"],
            subtotal=data["subtotal"],
            discounted_total=data["discountedTotal"],
            final_total=data["finalTotal"],
            items=tuple(items),
        )

    @classmethod
    def from_json(cls, raw: str, total_amount: Money | None = None) -> Receipt:
        """Decode a stored receipt; unreadable rows get a zeroed placeholder."""
        try:
            return cls.from_payload(json.loads(raw))
        except (ValueError, KeyError, TypeError):
            return cls.unreadable(total_amount)

    @classmethod
    def unreadable(cls, total_amount: Money | None = None) -> Receipt:
        return cls(
            buyer_name="Unknown",
            address="Unknown",
            timestamp="Unknown",
            discount_applied=False,
            discount_type="None",
            discount_amount="0.00",
            tax_amount="0.00",
            subtotal="0.00",
            discounted_total="0.00",
            final_total=money(total_amount) if total_amount is not None else "0.00",
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Transaction
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Transaction:
    id: int
    buyer_id: str
    order_date: datetime
    total_amount: Money
    status: TransactionStatus
    line_items: tuple[LineItem, ...]
    receipt: Receipt


__all__ = (
    "TransactionStatus",
    "LineItem",
    "encode_line_items",
    "decode_line_items",
    "ReceiptItem",
    "Receipt",
    "Transaction",
)
