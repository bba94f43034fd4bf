"""
Transaction store — durable record of completed purchases.

All methods return Result for explicit error handling.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Protocol

from kungfu import Result, Ok, Error

from storefront._types import Money, money
from storefront.buyers import BuyerDirectory, address_is_set
from storefront.errors import Errors, ShopError
from storefront.pricing import Totals
from storefront.transactions._policy import StatusPolicy
from storefront.transactions._types import (
    LineItem,
    Receipt,
    Transaction,
    TransactionStatus,
)


# ═══════════════════════════════════════════════════════════════════════════════
# Store Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class TransactionStore(Protocol):
    """
    Transactions are append-only: rows are never deleted and the receipt is
    never rewritten. Only status changes after insert.
    """

    async def record(
        self,
        buyer_id: str,
        line_items: tuple[LineItem, ...],
        totals: Totals,
        receipt: Receipt,
        order_date: datetime,
    ) -> Result[Transaction, ShopError]:
        """
        Persist one transaction with status Shipped.

        Either the whole row is written or nothing is.
        """
        ...

    async def set_status(
        self, transaction_id: int, status: TransactionStatus
    ) -> Result[Transaction, ShopError]:
        ...

    async def get(self, transaction_id: int) -> Result[Transaction, ShopError]:
        ...

    async def list(self, buyer_id: str | None = None) -> Result[list[Transaction], ShopError]:
        """Newest first. All buyers when buyer_id is None."""
        ...


def check_record(line_items: tuple[LineItem, ...], receipt: Receipt) -> ShopError | None:
    """Preconditions shared by every store."""
    if not line_items:
        return Errors.empty_cart()
    if any(item.quantity <= 0 for item in line_items):
        return Errors.invalid("Quantities must be positive")
    if not address_is_set(receipt.address):
        return Errors.address_required()
    return None


def stored_total(totals: Totals) -> Money:
    """final_total as persisted: two decimals."""
    return Decimal(money(totals.final_total))


def newest_first(rows: list[Transaction]) -> list[Transaction]:
    return sorted(rows, key=lambda t: (t.order_date, t.id), reverse=True)


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Store — For Testing
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class MemoryTransactionStore:
    """
    In-process store.

    Buyer existence is only checked when a directory is given.
    """

    buyers: BuyerDirectory | None = None
    policy: StatusPolicy = StatusPolicy.UNCONSTRAINED
    _rows: dict[int, Transaction] = field(default_factory=dict[int, Transaction])
    _next_id: int = 1

    async def record(
        self,
        buyer_id: str,
        line_items: tuple[LineItem, ...],
        totals: Totals,
        receipt: Receipt,
        order_date: datetime,
    ) -> Result[Transaction, ShopError]:
        if (problem := check_record(line_items, receipt)) is not None:
            return Error(problem)

        if self.buyers is not None:
            match await self.buyers.get(buyer_id):
                case Error(e):
                    return Error(e)
                case Ok(_):
                    pass

        tx = Transaction(
            id=self._next_id,
            buyer_id=buyer_id,
            order_date=order_date,
            total_amount=stored_total(totals),
            status=TransactionStatus.SHIPPED,
            line_items=line_items,
            receipt=receipt,
        )
        self._rows[tx.id] = tx
        self._next_id += 1
        return Ok(tx)

    async def set_status(
        self, transaction_id: int, status: TransactionStatus
    ) -> Result[Transaction, ShopError]:
        tx = self._rows.get(transaction_id)
        if tx is None:
            return Error(Errors.transaction_not_found(transaction_id))

        match self.policy.check(tx.status, status):
            case Ok(allowed):
                updated = replace(tx, status=allowed)
                self._rows[transaction_id] = updated
                return Ok(updated)
            case Error(e):
                return Error(e)

    async def get(self, transaction_id: int) -> Result[Transaction, ShopError]:
        tx = self._rows.get(transaction_id)
        return Ok(tx) if tx else Error(Errors.transaction_not_found(transaction_id))

    async def list(self, buyer_id: str | None = None) -> Result[list[Transaction], ShopError]:
        rows = [t for t in self._rows.values() if buyer_id is None or t.buyer_id == buyer_id]
        return Ok(newest_first(rows))


__all__ = (
    "TransactionStore",
    "MemoryTransactionStore",
    "check_record",
    "stored_total",
    "newest_first",
)
