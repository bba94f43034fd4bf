"""
Checkout nodes.

    BuyerNode              ◄ CheckoutRequest, BuyerDirectory
    AddressGateNode        ◄ BuyerNode
    NowNode                ◄ Clock
    CartNode               ◄ CheckoutRequest, AddressGateNode
    PricedCartNode         ◄ CartNode, CheckoutPolicy, Ledger
    SubtotalNode           ◄ PricedCartNode
    EligibilityNode        ◄ BuyerNode, NowNode
    TotalsNode             ◄ SubtotalNode, EligibilityNode
    StockCheckNode         ◄ PricedCartNode, CheckoutPolicy, Ledger
    ReceiptNode            ◄ BuyerNode, AddressGateNode, PricedCartNode, TotalsNode, NowNode
    RecordTransactionNode  ◄ ReceiptNode, StockCheckNode, TransactionStore, ...
    StockDecrementNode     ◄ RecordTransactionNode, Ledger
    CheckoutNode           ◄ RecordTransactionNode, ReceiptNode, StockDecrementNode

RecordTransactionNode is the only write that can fail the checkout. Nothing
before it writes; StockDecrementNode never raises.
"""

from datetime import datetime

import structlog
from kungfu import Ok, Error, LazyCoroResult

import combinators as C
from storefront import graph as G
from storefront import pricing as P
from storefront._types import Clock, Money
from storefront.buyers import Buyer, BuyerDirectory
from storefront.checkout._policy import CheckoutPolicy, PriceSource
from storefront.checkout._types import (
    CartLine,
    CheckoutOutcome,
    CheckoutRequest,
    SkippedLine,
)
from storefront.errors import Errors, ShopError
from storefront.inventory import Ledger, StockChange
from storefront.transactions import Receipt, Transaction, TransactionStore

logger = structlog.get_logger()


# ═══════════════════════════════════════════════════════════════════════════════
# Buyer
# ═══════════════════════════════════════════════════════════════════════════════


@G.node
class BuyerNode:
    def __init__(self, data: Buyer) -> None:
        self.data = data

    @classmethod
    async def __compose__(
        cls, request: CheckoutRequest, buyers: BuyerDirectory
    ) -> "BuyerNode":
        match await buyers.get(request.buyer_id):
            case Ok(buyer):
                return cls(buyer)
            case Error(e):
                raise e


@G.node
class AddressGateNode:
    """Stops the checkout before pricing when the buyer has nowhere to ship."""

    def __init__(self, address: str) -> None:
        self.address = address

    @classmethod
    async def __compose__(cls, buyer: BuyerNode) -> "AddressGateNode":
        if not buyer.data.has_shipping_address:
            logger.info("checkout_rejected_no_address", buyer_id=buyer.data.id)
            raise Errors.address_required()
        return cls(buyer.data.shipping_address.strip())


@G.node
class NowNode:
    """Single timestamp shared by the eligibility check, receipt and order date."""

    def __init__(self, value: datetime) -> None:
        self.value = value

    @classmethod
    def __compose__(cls, clock: Clock) -> "NowNode":
        return cls(clock.now())


# ═══════════════════════════════════════════════════════════════════════════════
# Cart
# ═══════════════════════════════════════════════════════════════════════════════


@G.node
class CartNode:
    def __init__(self, lines: tuple[CartLine, ...]) -> None:
        self.lines = lines

    @classmethod
    async def __compose__(
        cls, request: CheckoutRequest, gate: AddressGateNode
    ) -> "CartNode":
        if not request.lines:
            raise Errors.empty_cart()
        for line in request.lines:
            if line.quantity <= 0:
                raise Errors.invalid(f"Quantity for {line.product_id} must be positive")
            if line.unit_price < 0:
                raise Errors.invalid(f"Price for {line.product_id} must not be negative")
        return cls(request.lines)


@G.node
class PricedCartNode:
    """Cart lines carrying the unit price that will be charged."""

    def __init__(self, lines: tuple[CartLine, ...]) -> None:
        self.lines = lines

    @classmethod
    async def __compose__(
        cls, cart: CartNode, policy: CheckoutPolicy, ledger: Ledger
    ) -> "PricedCartNode":
        if policy.price_source is PriceSource.CART:
            return cls(cart.lines)

        def reprice(line: CartLine) -> LazyCoroResult[CartLine, ShopError]:
            return LazyCoroResult(
                lambda pid=line.product_id: ledger.get_product(pid)
            ).map(lambda product: line.repriced(product.base_price))

        match await C.traverse_par(cart.lines, reprice)():
            case Ok(lines):
                return cls(tuple(lines))
            case Error(e):
                raise e


@G.node
class SubtotalNode:
    def __init__(self, value: Money) -> None:
        self.value = value

    @classmethod
    async def __compose__(
        cls, cart: PricedCartNode, request: CheckoutRequest, policy: CheckoutPolicy
    ) -> "SubtotalNode":
        subtotal = P.subtotal_of((line.unit_price, line.quantity) for line in cart.lines)
        claimed = request.claimed_total
        if claimed is not None and abs(claimed - subtotal) > policy.claim_tolerance:
            logger.warning(
                "claimed_total_mismatch",
                buyer_id=request.buyer_id,
                claimed=str(claimed),
                computed=str(subtotal),
            )
        return cls(subtotal)


# ═══════════════════════════════════════════════════════════════════════════════
# Pricing
# ═══════════════════════════════════════════════════════════════════════════════


@G.node
class EligibilityNode:
    def __init__(self, data: P.Eligibility) -> None:
        self.data = data

    @classmethod
    async def __compose__(cls, buyer: BuyerNode, now: NowNode) -> "EligibilityNode":
        return cls(P.eligibility(buyer.data.birth_date, buyer.data.is_pwd, now.value.date()))


@G.node
class TotalsNode:
    def __init__(self, data: P.Totals) -> None:
        self.data = data

    @classmethod
    async def __compose__(
        cls, subtotal: SubtotalNode, eligibility: EligibilityNode
    ) -> "TotalsNode":
        e = eligibility.data
        return cls(P.compute_totals(subtotal.value, e.eligible, e.discount_type))


# ═══════════════════════════════════════════════════════════════════════════════
# Stock check (opt-in)
# ═══════════════════════════════════════════════════════════════════════════════


@G.node
class StockCheckNode:
    """
    Pre-write availability check. Disabled by default: the sale is then
    recorded even if the ledger holds less than requested.

    Note: advisory only, a concurrent checkout may still take the stock
    between this check and the decrement.
    """

    def __init__(self, checked: bool) -> None:
        self.checked = checked

    @classmethod
    async def __compose__(
        cls, cart: PricedCartNode, policy: CheckoutPolicy, ledger: Ledger
    ) -> "StockCheckNode":
        if not policy.verify_stock:
            return cls(False)

        for line in cart.lines:
            match await ledger.get_stock(line.product_id, line.color):
                case Ok(available):
                    if available < line.quantity:
                        raise Errors.out_of_stock(
                            line.product_id, line.color, line.quantity, available
                        )
                case Error(e):
                    raise e
        return cls(True)


# ═══════════════════════════════════════════════════════════════════════════════
# Receipt + record
# ═══════════════════════════════════════════════════════════════════════════════


@G.node
class ReceiptNode:
    def __init__(self, data: Receipt) -> None:
        self.data = data

    @classmethod
    async def __compose__(
        cls,
        buyer: BuyerNode,
        gate: AddressGateNode,
        cart: PricedCartNode,
        totals: TotalsNode,
        now: NowNode,
    ) -> "ReceiptNode":
        receipt = Receipt.build(
            buyer_name=buyer.data.display_name,
            address=gate.address,
            timestamp=now.value,
            totals=totals.data,
            items=tuple(line.receipt_item() for line in cart.lines),
        )
        return cls(receipt)


@G.node
class RecordTransactionNode:
    def __init__(self, data: Transaction) -> None:
        self.data = data

    @classmethod
    async def __compose__(
        cls,
        buyer: BuyerNode,
        cart: PricedCartNode,
        totals: TotalsNode,
        receipt: ReceiptNode,
        stock: StockCheckNode,
        now: NowNode,
        transactions: TransactionStore,
    ) -> "RecordTransactionNode":
        result = await transactions.record(
            buyer.data.id,
            tuple(line.line_item() for line in cart.lines),
            totals.data,
            receipt.data,
            now.value,
        )
        match result:
            case Ok(tx):
                return cls(tx)
            case Error(e):
                raise e


# ═══════════════════════════════════════════════════════════════════════════════
# Stock decrement (after the sale is recorded)
# ═══════════════════════════════════════════════════════════════════════════════


@G.node
class StockDecrementNode:
    """
    Decrement each line in cart order.

    The transaction already exists, so failures here are reported, not raised.
    """

    def __init__(
        self, changes: tuple[StockChange, ...], skipped: tuple[SkippedLine, ...]
    ) -> None:
        self.changes = changes
        self.skipped = skipped

    @classmethod
    async def __compose__(
        cls, record: RecordTransactionNode, cart: PricedCartNode, ledger: Ledger
    ) -> "StockDecrementNode":
        changes: list[StockChange] = []
        skipped: list[SkippedLine] = []

        for line in cart.lines:
            match await ledger.decrement(line.product_id, line.color, line.quantity):
                case Ok(change):
                    if change.clamped:
                        logger.warning(
                            "stock_oversold",
                            transaction_id=record.data.id,
                            product_id=line.product_id,
                            color=line.color,
                            requested=change.requested,
                            available=change.before,
                        )
                    changes.append(change)
                case Error(e):
                    logger.warning(
                        "stock_decrement_skipped",
                        transaction_id=record.data.id,
                        product_id=line.product_id,
                        color=line.color,
                        reason=e.message,
                    )
                    skipped.append(
                        SkippedLine(line.product_id, line.color, line.quantity, e.message)
                    )

        return cls(tuple(changes), tuple(skipped))


@G.node
class CheckoutNode:
    def __init__(self, data: CheckoutOutcome) -> None:
        self.data = data

    @classmethod
    async def __compose__(
        cls,
        record: RecordTransactionNode,
        receipt: ReceiptNode,
        stock: StockDecrementNode,
    ) -> "CheckoutNode":
        return cls(CheckoutOutcome(record.data, receipt.data, stock.changes, stock.skipped))


__all__ = (
    "BuyerNode",
    "AddressGateNode",
    "NowNode",
    "CartNode",
    "PricedCartNode",
    "SubtotalNode",
    "EligibilityNode",
    "TotalsNode",
    "StockCheckNode",
    "ReceiptNode",
    "RecordTransactionNode",
    "StockDecrementNode",
    "CheckoutNode",
)
