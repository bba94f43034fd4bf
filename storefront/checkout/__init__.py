"""
Checkout — price the cart, record the sale, then take the stock.

    from storefront import checkout as CO

    checkout = CO.Checkout(buyers, ledger, transactions, CO.CheckoutPolicy())
    request = CO.CheckoutRequest("u1", (CO.CartLine("1", 2, Decimal("560"), "Black"),))

    match await checkout.run(request):
        case Ok(outcome):   # outcome.transaction, outcome.receipt
            ...
        case Error(e):      # AddressRequired, BuyerNotFound, OutOfStock, StorageError
            ...

Order of effects: validation, pricing, transaction insert, stock decrements.
A failure before the insert leaves nothing behind.
"""

from storefront.checkout._types import (
    NO_COLOR,
    CartLine,
    CheckoutRequest,
    SkippedLine,
    CheckoutOutcome,
)
from storefront.checkout._policy import PriceSource, CheckoutPolicy
from storefront.checkout._nodes import (
    BuyerNode,
    AddressGateNode,
    NowNode,
    CartNode,
    PricedCartNode,
    SubtotalNode,
    EligibilityNode,
    TotalsNode,
    StockCheckNode,
    ReceiptNode,
    RecordTransactionNode,
    StockDecrementNode,
    CheckoutNode,
)
from storefront.checkout._orchestrator import Checkout

__all__ = (
    "NO_COLOR",
    "CartLine",
    "CheckoutRequest",
    "SkippedLine",
    "CheckoutOutcome",
    "PriceSource",
    "CheckoutPolicy",
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
    "Checkout",
)
