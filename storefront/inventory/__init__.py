"""
Inventory — per-product, per-color stock ledger.

    from storefront import inventory as INV

    ledger = INV.SQLAlchemyLedger(session_factory)
    await ledger.get_stock("1", "Black")          # Ok(5)
    await ledger.decrement("1", "Black", 10)       # Ok(StockChange(before=5, after=0))

Stock never goes negative: oversold decrements clamp to zero.
"""

from storefront.inventory._types import (
    ColorVariant,
    Product,
    StockChange,
    decode_colors,
    encode_colors,
    clamp_decrement,
)
from storefront.inventory._ledger import Ledger, MemoryLedger
from storefront.inventory._sqlalchemy import (
    SQLAlchemyLedger,
    DEFAULT_BACKOFF_INITIAL,
    DEFAULT_BACKOFF_MAX,
)

__all__ = (
    "ColorVariant",
    "Product",
    "StockChange",
    "decode_colors",
    "encode_colors",
    "clamp_decrement",
    "Ledger",
    "MemoryLedger",
    "SQLAlchemyLedger",
    "DEFAULT_BACKOFF_INITIAL",
    "DEFAULT_BACKOFF_MAX",
)
