"""
Transactions — completed purchases with their frozen receipts.

    from storefront import transactions as TX

    store = TX.SQLAlchemyTransactionStore(session_factory, TX.FORWARD_ONLY)
    await store.record(buyer_id, items, totals, receipt, now)   # Ok(Transaction)
    await store.set_status(1, TX.TransactionStatus.IN_TRANSIT)
    await store.list("u1")                                        # newest first
"""

from storefront.transactions._types import (
    TransactionStatus,
    LineItem,
    encode_line_items,
    decode_line_items,
    ReceiptItem,
    Receipt,
    Transaction,
)
from storefront.transactions._policy import StatusPolicy, UNCONSTRAINED, FORWARD_ONLY
from storefront.transactions._store import TransactionStore, MemoryTransactionStore
from storefront.transactions._sqlalchemy import SQLAlchemyTransactionStore

__all__ = (
    "TransactionStatus",
    "LineItem",
    "encode_line_items",
    "decode_line_items",
    "ReceiptItem",
    "Receipt",
    "Transaction",
    "StatusPolicy",
    "UNCONSTRAINED",
    "FORWARD_ONLY",
    "TransactionStore",
    "MemoryTransactionStore",
    "SQLAlchemyTransactionStore",
)
