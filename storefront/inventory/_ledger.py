"""
Inventory ledger — authoritative per-color stock.

Ledger[...] methods return Result for explicit error handling, like every
store in storefront.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Protocol

from kungfu import Result, Ok, Error

from storefront.errors import Errors, NotFoundError, ShopError
from storefront.inventory._types import Product, StockChange, clamp_decrement


# ═══════════════════════════════════════════════════════════════════════════════
# Ledger Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class Ledger(Protocol):
    """
    Per-product, per-color stock counters.

    Invariant: stock never drops below zero. decrement() clamps instead of
    rejecting, so an oversold line ends at 0 rather than failing.
    """

    async def get_product(self, product_id: str) -> Result[Product, ShopError]:
        ...

    async def get_stock(self, product_id: str, color: str) -> Result[int, ShopError]:
        """Error(ProductNotFound) if product or color is unknown."""
        ...

    async def decrement(
        self, product_id: str, color: str, quantity: int
    ) -> Result[StockChange, ShopError]:
        """Atomically set stock to max(0, stock - quantity)."""
        ...

    async def add_product(self, product: Product) -> Result[Product, ShopError]:
        ...


def _stock_of(product: Product, color: str) -> Result[int, NotFoundError]:
    variant = product.variant(color)
    if variant is None:
        return Error(Errors.color_not_found(product.id, color))
    return Ok(variant.stock)


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Ledger — For Testing
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class MemoryLedger:
    """
    In-process ledger.

    Decrements hold a per-product lock across the read and the write.
    """

    _products: dict[str, Product] = field(default_factory=dict[str, Product])
    _locks: defaultdict[str, asyncio.Lock] = field(
        default_factory=lambda: defaultdict(asyncio.Lock)
    )

    async def get_product(self, product_id: str) -> Result[Product, ShopError]:
        product = self._products.get(product_id)
        return Ok(product) if product else Error(Errors.product_not_found(product_id))

    async def get_stock(self, product_id: str, color: str) -> Result[int, ShopError]:
        match await self.get_product(product_id):
            case Ok(product):
                return _stock_of(product, color)
            case Error(e):
                return Error(e)

    async def decrement(
        self, product_id: str, color: str, quantity: int
    ) -> Result[StockChange, ShopError]:
        async with self._locks[product_id]:
            product = self._products.get(product_id)
            if product is None:
                return Error(Errors.product_not_found(product_id))
            variant = product.variant(color)
            if variant is None:
                return Error(Errors.color_not_found(product_id, color))

            after = clamp_decrement(variant.stock, quantity)
            self._products[product_id] = product.with_stock(color, after)
            return Ok(StockChange(product_id, color, quantity, variant.stock, after))

    async def add_product(self, product: Product) -> Result[Product, ShopError]:
        self._products[product.id] = product
        return Ok(product)


__all__ = ("Ledger", "MemoryLedger")
