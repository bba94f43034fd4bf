"""
storefront — checkout and inventory consistency for a gadget shop.

    from storefront import pricing as P        # VAT / Senior / PWD totals
    from storefront import inventory as INV    # per-color stock ledger
    from storefront import transactions as TX  # purchases + frozen receipts
    from storefront import checkout as CO      # the checkout graph
"""

from storefront import graph
from storefront import pricing
from storefront import buyers
from storefront import inventory
from storefront import transactions
from storefront import checkout
from storefront._types import Money, money, to_money, Clock

__version__ = "0.1.0"

__all__ = (
    "graph",
    "pricing",
    "buyers",
    "inventory",
    "transactions",
    "checkout",
    "Money",
    "money",
    "to_money",
    "Clock",
)
