"""
SQLAlchemy ledger — stock stored as a JSON colors array per product.

Decrement is a compare-and-swap on product_details.version:

    SELECT colors, version FROM product_details WHERE product_id = :id
    UPDATE product_details SET colors = :new, version = version + 1
     WHERE product_id = :id AND version = :seen

rowcount 0 means another write landed first: wait a jittered, growing delay,
re-read and try again. A conflict never ends the loop; every lost round means
another decrement committed.
"""

import asyncio
import random
from typing import Any, cast

import structlog
from kungfu import Result, Ok, Error
from sqlalchemy import select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.db import ProductTable, ProductDetailsTable
from storefront.errors import Errors, ShopError
from storefront.inventory._types import (
    ColorVariant,
    Product,
    StockChange,
    clamp_decrement,
    decode_colors,
    encode_colors,
)

logger = structlog.get_logger()

DEFAULT_BACKOFF_INITIAL = 0.001
DEFAULT_BACKOFF_MAX = 0.05


class SQLAlchemyLedger:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        backoff_initial: float = DEFAULT_BACKOFF_INITIAL,
        backoff_max: float = DEFAULT_BACKOFF_MAX,
    ) -> None:
        """
        Args:
            session_factory: SQLAlchemy async session factory
            backoff_initial: first delay (seconds) after a version conflict
            backoff_max: ceiling for the doubling delay
        """
        if backoff_initial < 0 or backoff_max < backoff_initial:
            raise ValueError("need 0 <= backoff_initial <= backoff_max")
        self._session_factory = session_factory
        self._backoff_initial = backoff_initial
        self._backoff_max = backoff_max

    async def get_product(self, product_id: str) -> Result[Product, ShopError]:
        try:
            async with self._session_factory() as session:
                stmt = (
                    select(ProductTable, ProductDetailsTable.colors)
                    .outerjoin(
                        ProductDetailsTable,
                        ProductDetailsTable.product_id == ProductTable.id,
                    )
                    .where(ProductTable.id == product_id)
                )
                row = (await session.execute(stmt)).one_or_none()
                if row is None:
                    return Error(Errors.product_not_found(product_id))

                product_row, colors = row
                return Ok(
                    Product(
                        id=product_row.id,
                        brand=product_row.brand,
                        name=product_row.name,
                        base_price=product_row.price,
                        colors=decode_colors(colors),
                    )
                )
        except Exception as e:
            return Error(Errors.storage(f"Failed to load product: {e}", e))

    async def get_stock(self, product_id: str, color: str) -> Result[int, ShopError]:
        match await self.get_product(product_id):
            case Ok(product):
                variant = product.variant(color)
                if variant is None:
                    return Error(Errors.color_not_found(product_id, color))
                return Ok(variant.stock)
            case Error(e):
                return Error(e)

    async def decrement(
        self, product_id: str, color: str, quantity: int
    ) -> Result[StockChange, ShopError]:
        try:
            attempt = 0
            while True:
                attempt += 1
                async with self._session_factory() as session:
                    seen = (
                        await session.execute(
                            select(ProductDetailsTable.colors, ProductDetailsTable.version)
                            .where(ProductDetailsTable.product_id == product_id)
                        )
                    ).one_or_none()
                    if seen is None:
                        return Error(Errors.product_not_found(product_id))

                    colors = decode_colors(seen.colors)
                    current = next((c for c in colors if c.color == color), None)
                    if current is None:
                        return Error(Errors.color_not_found(product_id, color))

                    after = clamp_decrement(current.stock, quantity)
                    updated = tuple(
                        ColorVariant(c.color, after) if c.color == color else c
                        for c in colors
                    )

                    cursor = cast(
                        CursorResult[Any],
                        await session.execute(
                            update(ProductDetailsTable)
                            .where(
                                ProductDetailsTable.product_id == product_id,
                                ProductDetailsTable.version == seen.version,
                            )
                            .values(colors=encode_colors(updated), version=seen.version + 1)
                        ),
                    )
                    await session.commit()

                    if cursor.rowcount == 1:
                        return Ok(
                            StockChange(product_id, color, quantity, current.stock, after)
                        )

                logger.debug(
                    "stock_version_conflict",
                    product_id=product_id,
                    color=color,
                    attempt=attempt,
                )
                await asyncio.sleep(self._delay(attempt))
        except Exception as e:
            return Error(Errors.storage(f"Failed to decrement stock: {e}", e))

    def _delay(self, attempt: int) -> float:
        """Full jitter over an exponentially growing, capped window."""
        window = min(self._backoff_max, self._backoff_initial * 2 ** (attempt - 1))
        return random.uniform(0, window)

    async def add_product(self, product: Product) -> Result[Product, ShopError]:
        """Insert or replace a product with its color variants."""
        try:
            async with self._session_factory() as session, session.begin():
                await session.merge(
                    ProductTable(
                        id=product.id,
                        brand=product.brand,
                        name=product.name,
                        price=product.base_price,
                    )
                )
                details = await session.get(ProductDetailsTable, product.id)
                if details is None:
                    session.add(
                        ProductDetailsTable(
                            product_id=product.id,
                            colors=encode_colors(product.colors),
                            version=0,
                        )
                    )
                else:
                    details.colors = encode_colors(product.colors)
                    details.version = details.version + 1
            return Ok(product)
        except Exception as e:
            return Error(Errors.storage(f"Failed to save product: {e}", e))


__all__ = ("SQLAlchemyLedger", "DEFAULT_BACKOFF_INITIAL", "DEFAULT_BACKOFF_MAX")
