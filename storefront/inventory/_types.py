"""
Inventory types — products, color variants, stock changes.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace

from storefront._types import Money


@dataclass(frozen=True, slots=True)
class ColorVariant:
    """Smallest inventory-tracked unit."""

    color: str
    stock: int


@dataclass(frozen=True, slots=True)
class Product:
    id: str
    brand: str
    name: str
    base_price: Money
    colors: tuple[ColorVariant, ...] = ()

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for variant in self.colors:
            if variant.color in seen:
                raise ValueError(f"Duplicate color {variant.color!r} on product {self.id}")
            if variant.stock < 0:
                raise ValueError(f"Negative stock for {self.id}/{variant.color}")
            seen.add(variant.color)

    def variant(self, color: str) -> ColorVariant | None:
        for v in self.colors:
            if v.color == color:
                return v
        return None

    def with_stock(self, color: str, stock: int) -> Product:
        colors = tuple(
            ColorVariant(v.color, stock) if v.color == color else v for v in self.colors
        )
        return replace(self, colors=colors)


@dataclass(frozen=True, slots=True)
class StockChange:
    """Outcome of one decrement. after == max(0, before - requested)."""

    product_id: str
    color: str
    requested: int
    before: int
    after: int

    @property
    def clamped(self) -> bool:
        return self.requested > self.before


# ═══════════════════════════════════════════════════════════════════════════════
# Color list codec — stored as a JSON array on product_details
# ═══════════════════════════════════════════════════════════════════════════════


def decode_colors(raw: str | None) -> tuple[ColorVariant, ...]:
    """
    Parse the stored colors array.

    Older rows hold stock as a string ("5"); both forms are read.
    """
    if not raw:
        return ()
    data = json.loads(raw)
    return tuple(ColorVariant(str(c["color"]), int(c["stock"])) for c in data)


def encode_colors(colors: tuple[ColorVariant, ...]) -> str:
    return json.dumps([{"color": c.color, "stock": c.stock} for c in colors])


def clamp_decrement(current: int, quantity: int) -> int:
    return max(0, current - quantity)


__all__ = (
    "ColorVariant",
    "Product",
    "StockChange",
    "decode_colors",
    "encode_colors",
    "clamp_decrement",
)
