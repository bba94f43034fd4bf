"""
Buyer directory — read buyers, save profile updates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from kungfu import Result, Ok, Error
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.buyers._types import Buyer, parse_birthday
from storefront.db import BuyerTable
from storefront.errors import Errors, NotFoundError, StorageError


class BuyerDirectory(Protocol):
    async def get(self, buyer_id: str) -> Result[Buyer, NotFoundError | StorageError]:
        """Load a buyer. Error(BuyerNotFound) if absent."""
        ...

    async def save(self, buyer: Buyer) -> Result[Buyer, StorageError]:
        """Insert or replace the buyer's profile."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Directory — For Testing
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class MemoryBuyerDirectory:
    _buyers: dict[str, Buyer] = field(default_factory=dict[str, Buyer])

    async def get(self, buyer_id: str) -> Result[Buyer, NotFoundError | StorageError]:
        buyer = self._buyers.get(buyer_id)
        return Ok(buyer) if buyer else Error(Errors.buyer_not_found(buyer_id))

    async def save(self, buyer: Buyer) -> Result[Buyer, StorageError]:
        self._buyers[buyer.id] = buyer
        return Ok(buyer)

    def __contains__(self, buyer_id: object) -> bool:
        return buyer_id in self._buyers


# ═══════════════════════════════════════════════════════════════════════════════
# SQLAlchemy Directory
# ═══════════════════════════════════════════════════════════════════════════════


class SQLAlchemyBuyerDirectory:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, buyer_id: str) -> Result[Buyer, NotFoundError | StorageError]:
        try:
            async with self._session_factory() as session:
                row = await session.get(BuyerTable, buyer_id)
                if row is None:
                    return Error(Errors.buyer_not_found(buyer_id))
                return Ok(_to_buyer(row))
        except Exception as e:
            return Error(Errors.storage(f"Failed to load buyer: {e}", e))

    async def save(self, buyer: Buyer) -> Result[Buyer, StorageError]:
        try:
            async with self._session_factory() as session, session.begin():
                row = await session.get(BuyerTable, buyer.id)
                if row is None:
                    row = BuyerTable(id=buyer.id)
                    session.add(row)
                row.name = buyer.display_name
                row.address = buyer.shipping_address
                row.birthday = buyer.birth_date.isoformat() if buyer.birth_date else None
                row.is_pwd = buyer.is_pwd
            return Ok(buyer)
        except Exception as e:
            return Error(Errors.storage(f"Failed to save buyer: {e}", e))


def _to_buyer(row: BuyerTable) -> Buyer:
    return Buyer(
        id=row.id,
        display_name=row.name or "",
        shipping_address=row.address or "",
        birth_date=parse_birthday(row.birthday),
        is_pwd=bool(row.is_pwd),
    )


__all__ = ("BuyerDirectory", "MemoryBuyerDirectory", "SQLAlchemyBuyerDirectory")
