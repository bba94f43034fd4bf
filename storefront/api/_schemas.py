"""
Wire models — JSON shapes the storefront client already speaks.

Each request model knows how to become a domain value (to_domain), each
response model how to be built from one (from_domain).
"""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from storefront import pricing as P
from storefront._types import money
from storefront.buyers import Buyer, parse_birthday
from storefront.checkout import NO_COLOR, CartLine, CheckoutOutcome, CheckoutRequest
from storefront.errors import Errors
from storefront.inventory import Product
from storefront.transactions import Transaction, TransactionStatus, encode_line_items


class _Wire(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ═══════════════════════════════════════════════════════════════════════════════
# Checkout
# ═══════════════════════════════════════════════════════════════════════════════


class CartItemIn(_Wire):
    id: str | int
    brand: str = ""
    name: str = ""
    # Display strings such as "₱1,120.00" are accepted.
    price: int | float | str
    quantity: int = 1
    selected_color: str | None = Field(default=None, alias="selectedColor")
    stock: int | None = None

    def to_domain(self) -> CartLine:
        try:
            unit_price = P.parse_price(self.price)
        except ValueError:
            raise Errors.invalid(f"Invalid price for gadget {self.id}: {self.price!r}") from None
        return CartLine(
            product_id=str(self.id),
            quantity=self.quantity,
            unit_price=unit_price,
            color=self.selected_color or NO_COLOR,
            name=self.name,
            brand=self.brand,
            stock_snapshot=self.stock,
        )


class CheckoutIn(_Wire):
    user_id: str | int | None = Field(default=None, alias="userId")
    cart_items: list[CartItemIn] | None = Field(default=None, alias="cartItems")
    total_amount: int | float | str | None = Field(default=None, alias="totalAmount")

    def to_domain(self) -> CheckoutRequest:
        """
        Missing, empty or zero fields are all "not provided".

        Raises:
            ValidationError: with the required-fields message
        """
        if not self.user_id or not self.cart_items or not self.total_amount:
            raise Errors.required_fields()
        try:
            claimed = P.parse_price(self.total_amount)
        except ValueError:
            raise Errors.invalid(f"Invalid total amount: {self.total_amount!r}") from None
        return CheckoutRequest(
            buyer_id=str(self.user_id),
            lines=tuple(item.to_domain() for item in self.cart_items),
            claimed_total=claimed,
        )


class CheckoutOut(_Wire):
    success: bool = True
    message: str = "Transaction stored successfully"
    transaction_id: int = Field(alias="transactionId")
    receipt_data: dict[str, Any] = Field(alias="receiptData")

    @classmethod
    def from_domain(cls, outcome: CheckoutOutcome) -> CheckoutOut:
        return cls(
            transaction_id=outcome.transaction.id,
            receipt_data=outcome.receipt.to_payload(),
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Transactions
# ═══════════════════════════════════════════════════════════════════════════════


class StatusIn(_Wire):
    transaction_id: int = Field(alias="transactionId")
    status: str

    def to_domain(self) -> TransactionStatus:
        return TransactionStatus.parse(self.status)


class SuccessOut(_Wire):
    success: bool = True


class TransactionRowOut(_Wire):
    """Row shape of the admin status board; receipts and orders stay JSON strings."""

    id: int
    user_id: str
    username: str | None
    order_date: str
    total_amount: float
    status: str
    receipts: str
    orders: str

    @classmethod
    def from_domain(cls, tx: Transaction, username: str | None) -> TransactionRowOut:
        return cls(
            id=tx.id,
            user_id=tx.buyer_id,
            username=username,
            order_date=tx.order_date.isoformat(),
            total_amount=float(tx.total_amount),
            status=tx.status.value,
            receipts=tx.receipt.to_json(),
            orders=encode_line_items(tx.line_items),
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Buyers
# ═══════════════════════════════════════════════════════════════════════════════


class BuyerIn(_Wire):
    name: str = ""
    address: str = ""
    birthday: str | None = None
    is_pwd: bool = Field(default=False, alias="isPwd")

    def to_domain(self, buyer_id: str) -> Buyer:
        return Buyer(
            id=buyer_id,
            display_name=self.name,
            shipping_address=self.address,
            birth_date=parse_birthday(self.birthday),
            is_pwd=self.is_pwd,
        )


class BuyerOut(_Wire):
    id: str
    name: str
    address: str
    birthday: date | None
    is_pwd: bool = Field(alias="isPwd")
    has_address: bool = Field(alias="hasAddress")

    @classmethod
    def from_domain(cls, buyer: Buyer) -> BuyerOut:
        return cls(
            id=buyer.id,
            name=buyer.display_name,
            address=buyer.shipping_address,
            birthday=buyer.birth_date,
            is_pwd=buyer.is_pwd,
            has_address=buyer.has_shipping_address,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Products
# ═══════════════════════════════════════════════════════════════════════════════


class ColorOut(_Wire):
    color: str
    stock: int


class ProductOut(_Wire):
    id: str
    brand: str
    name: str
    price: str
    colors: list[ColorOut]

    @classmethod
    def from_domain(cls, product: Product) -> ProductOut:
        return cls(
            id=product.id,
            brand=product.brand,
            name=product.name,
            price=money(product.base_price),
            colors=[ColorOut(color=c.color, stock=c.stock) for c in product.colors],
        )


__all__ = (
    "CartItemIn",
    "CheckoutIn",
    "CheckoutOut",
    "StatusIn",
    "SuccessOut",
    "TransactionRowOut",
    "BuyerIn",
    "BuyerOut",
    "ColorOut",
    "ProductOut",
)
