"""
Buyer types.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

# Stored by the profile form when the buyer never entered an address.
NO_ADDRESS = "No Address Provided"


def address_is_set(address: str | None) -> bool:
    """False for None, blank, or the NO_ADDRESS placeholder."""
    if address is None:
        return False
    stripped = address.strip()
    return bool(stripped) and stripped != NO_ADDRESS


def parse_birthday(raw: str | None) -> date | None:
    """ISO date (time part ignored); anything else → None."""
    if not raw:
        return None
    try:
        return date.fromisoformat(raw.strip()[:10])
    except ValueError:
        return None


@dataclass(frozen=True, slots=True)
class Buyer:
    id: str
    display_name: str
    shipping_address: str
    birth_date: date | None = None
    is_pwd: bool = False

    @property
    def has_shipping_address(self) -> bool:
        return address_is_set(self.shipping_address)


__all__ = ("NO_ADDRESS", "address_is_set", "parse_birthday", "Buyer")
