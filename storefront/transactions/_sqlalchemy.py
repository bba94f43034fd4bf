"""
SQLAlchemy transaction store.

record() is the only atomic boundary of a checkout: buyer check and insert
share one database transaction, so a failure leaves no row behind.
"""

from datetime import datetime

import structlog
from kungfu import Result, Ok, Error
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.db import BuyerTable, TransactionTable
from storefront.errors import Errors, ShopError
from storefront.pricing import Totals
from storefront.transactions._policy import StatusPolicy
from storefront.transactions._store import check_record, stored_total
from storefront.transactions._types import (
    LineItem,
    Receipt,
    Transaction,
    TransactionStatus,
    decode_line_items,
    encode_line_items,
)

logger = structlog.get_logger()


class SQLAlchemyTransactionStore:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        policy: StatusPolicy = StatusPolicy.UNCONSTRAINED,
    ) -> None:
        self._session_factory = session_factory
        self._policy = policy

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

        try:
            async with self._session_factory() as session, session.begin():
                if await session.get(BuyerTable, buyer_id) is None:
                    return Error(Errors.buyer_not_found(buyer_id))

                row = TransactionTable(
                    buyer_id=buyer_id,
                    order_date=order_date,
                    total_amount=stored_total(totals),
                    status=TransactionStatus.SHIPPED.value,
                    receipts=receipt.to_json(),
                    orders=encode_line_items(line_items),
                )
                session.add(row)
                await session.flush()
                tx = _to_transaction(row)
        except Exception as e:
            return Error(Errors.storage(f"Failed to record transaction: {e}", e))

        logger.info(
            "transaction_recorded",
            transaction_id=tx.id,
            buyer_id=buyer_id,
            total_amount=str(tx.total_amount),
        )
        return Ok(tx)

    async def set_status(
        self, transaction_id: int, status: TransactionStatus
    ) -> Result[Transaction, ShopError]:
        try:
            async with self._session_factory() as session, session.begin():
                row = await session.get(TransactionTable, transaction_id)
                if row is None:
                    return Error(Errors.transaction_not_found(transaction_id))

                match self._policy.check(TransactionStatus.parse(row.status), status):
                    case Ok(allowed):
                        row.status = allowed.value
                    case Error(e):
                        return Error(e)
                await session.flush()
                return Ok(_to_transaction(row))
        except ShopError as e:
            return Error(e)
        except Exception as e:
            return Error(Errors.storage(f"Failed to update status: {e}", e))

    async def get(self, transaction_id: int) -> Result[Transaction, ShopError]:
        try:
            async with self._session_factory() as session:
                row = await session.get(TransactionTable, transaction_id)
                if row is None:
                    return Error(Errors.transaction_not_found(transaction_id))
                return Ok(_to_transaction(row))
        except Exception as e:
            return Error(Errors.storage(f"Failed to load transaction: {e}", e))

    async def list(self, buyer_id: str | None = None) -> Result[list[Transaction], ShopError]:
        try:
            async with self._session_factory() as session:
                stmt = select(TransactionTable).order_by(
                    TransactionTable.order_date.desc(), TransactionTable.id.desc()
                )
                if buyer_id is not None:
                    stmt = stmt.where(TransactionTable.buyer_id == buyer_id)
                rows = (await session.execute(stmt)).scalars().all()
                return Ok([_to_transaction(r) for r in rows])
        except Exception as e:
            return Error(Errors.storage(f"Failed to list transactions: {e}", e))


def _to_transaction(row: TransactionTable) -> Transaction:
    return Transaction(
        id=row.id,
        buyer_id=row.buyer_id,
        order_date=row.order_date,
        total_amount=row.total_amount,
        status=TransactionStatus.parse(row.status),
        line_items=decode_line_items(row.orders),
        receipt=Receipt.from_json(row.receipts, row.total_amount),
    )


__all__ = ("SQLAlchemyTransactionStore",)
