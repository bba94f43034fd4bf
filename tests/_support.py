"""Shared test helpers."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from kungfu import Ok, Error

from storefront import pricing as P
from storefront._types import Clock
from storefront.buyers import Buyer, BuyerDirectory
from storefront.checkout import CartLine, Checkout, CheckoutPolicy, CheckoutRequest
from storefront.errors import Errors
from storefront.inventory import ColorVariant, Ledger, Product
from storefront.transactions import (
    LineItem,
    MemoryTransactionStore,
    Receipt,
    ReceiptItem,
    TransactionStore,
)

NOW = datetime(2026, 1, 15, 10, 30, 0)
CLOCK = Clock(NOW)


def unwrap(result: Any) -> Any:
    match result:
        case Ok(value):
            return value
        case Error(e):
            raise AssertionError(f"expected Ok, got Error({e!r})")


def unwrap_error(result: Any) -> Any:
    match result:
        case Error(e):
            return e
        case Ok(value):
            raise AssertionError(f"expected Error, got Ok({value!r})")


@dataclass
class World:
    """One set of collaborators, memory- or SQL-backed."""

    kind: str
    buyers: BuyerDirectory
    ledger: Ledger
    transactions: TransactionStore

    def checkout(self, policy: CheckoutPolicy | None = None, clock: Clock = CLOCK) -> Checkout:
        return Checkout(self.buyers, self.ledger, self.transactions, policy, clock)

    async def stock(self, product_id: str, color: str) -> int:
        return unwrap(await self.ledger.get_stock(product_id, color))

    async def transaction_count(self, buyer_id: str | None = None) -> int:
        return len(unwrap(await self.transactions.list(buyer_id)))


SENIOR = Buyer("senior", "Lola Remedios", "12 Mabini St", date(1961, 1, 15))
STANDARD = Buyer("standard", "Paolo Cruz", "88 Katipunan Ave", date(1995, 7, 2))
PWD = Buyer("pwd", "Ana Santos", "5 Rizal Blvd", date(1990, 1, 20), is_pwd=True)
NO_ADDRESS = Buyer("noaddress", "Jun Reyes", "No Address Provided", date(2000, 11, 5))
BLANK_ADDRESS = Buyer("blank", "Mara Lim", "   ", date(1985, 4, 9))
TURNS_60_TODAY = Buyer("sixty", "Ben Tan", "3 Luna St", date(1966, 1, 15))
TURNS_60_TOMORROW = Buyer("almost", "Cora Go", "4 Luna St", date(1966, 1, 16))
NAMELESS = Buyer("nameless", "", "7 Aguinaldo Hwy", None)

BUYERS = (
    SENIOR,
    STANDARD,
    PWD,
    NO_ADDRESS,
    BLANK_ADDRESS,
    TURNS_60_TODAY,
    TURNS_60_TOMORROW,
    NAMELESS,
)

PHONE = Product(
    "1",
    "Apple",
    "iPhone 15",
    Decimal("560.00"),
    (ColorVariant("Black", 5), ColorVariant("Blue", 3)),
)
TABLET = Product("3", "Samsung", "Galaxy Tab S9", Decimal("1120.00"), (ColorVariant("Graphite", 1),))
HEADPHONES = Product("2", "Sony", "WH-1000XM5", Decimal("500.00"), (ColorVariant("Black", 10),))

PRODUCTS = (PHONE, TABLET, HEADPHONES)


async def populate(world: World) -> World:
    for buyer in BUYERS:
        unwrap(await world.buyers.save(buyer))
    for product in PRODUCTS:
        unwrap(await world.ledger.add_product(product))
    return world


def line(product: Product, color: str, quantity: int = 1, price: str | None = None) -> CartLine:
    return CartLine(
        product_id=product.id,
        quantity=quantity,
        unit_price=Decimal(price) if price is not None else product.base_price,
        color=color,
        name=product.name,
        brand=product.brand,
    )


def request(buyer: Buyer, *lines: CartLine, claimed: str | None = None) -> CheckoutRequest:
    return CheckoutRequest(
        buyer_id=buyer.id,
        lines=lines,
        claimed_total=Decimal(claimed) if claimed is not None else None,
    )


def receipt_for(buyer: Buyer, subtotal: str, address: str | None = None) -> tuple[P.Totals, Receipt]:
    totals = P.compute_totals(Decimal(subtotal), False, P.DiscountType.NONE)
    receipt = Receipt.build(
        buyer_name=buyer.display_name,
        address=buyer.shipping_address if address is None else address,
        timestamp=NOW,
        totals=totals,
        items=(ReceiptItem("iPhone 15", "Apple", "Black", 1, Decimal(subtotal)),),
    )
    return totals, receipt


ITEMS = (LineItem("1", "Black", 1),)


class BrokenTransactionStore(MemoryTransactionStore):
    """Every insert fails the way a full disk would."""

    async def record(self, buyer_id, line_items, totals, receipt, order_date):
        return Error(Errors.storage("disk I/O error"))
