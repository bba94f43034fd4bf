"""
Services — stores and the checkout built once per process.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.buyers import BuyerDirectory, SQLAlchemyBuyerDirectory
from storefront.checkout import Checkout
from storefront.config import Settings
from storefront.inventory import Ledger, SQLAlchemyLedger
from storefront.transactions import SQLAlchemyTransactionStore, TransactionStore


@dataclass(frozen=True, slots=True)
class Services:
    buyers: BuyerDirectory
    ledger: Ledger
    transactions: TransactionStore
    checkout: Checkout


def build_services(
    session_factory: async_sessionmaker[AsyncSession], settings: Settings
) -> Services:
    buyers = SQLAlchemyBuyerDirectory(session_factory)
    ledger = SQLAlchemyLedger(session_factory)
    transactions = SQLAlchemyTransactionStore(session_factory, settings.status_policy)
    checkout = Checkout(buyers, ledger, transactions, settings.checkout_policy())
    return Services(buyers, ledger, transactions, checkout)


def get_services(request: Request) -> Services:
    """FastAPI dependency."""
    return request.app.state.services


__all__ = ("Services", "build_services", "get_services")
