"""
Buyers — identity, shipping address and discount flags of a purchaser.
"""

from storefront.buyers._types import NO_ADDRESS, address_is_set, parse_birthday, Buyer
from storefront.buyers._directory import (
    BuyerDirectory,
    MemoryBuyerDirectory,
    SQLAlchemyBuyerDirectory,
)

__all__ = (
    "NO_ADDRESS",
    "address_is_set",
    "parse_birthday",
    "Buyer",
    "BuyerDirectory",
    "MemoryBuyerDirectory",
    "SQLAlchemyBuyerDirectory",
)
