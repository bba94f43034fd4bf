"""
Settings — read once from the environment at process start.

    STOREFRONT_DATABASE_URL     sqlite+aiosqlite:///storefront.db
    STOREFRONT_LOG_LEVEL        info
    STOREFRONT_LOG_JSON         true
    STOREFRONT_SEED_DEMO        false     load demo buyers and gadgets on startup
    STOREFRONT_VERIFY_STOCK     false     reject checkouts the ledger cannot cover
    STOREFRONT_PRICE_SOURCE     cart      cart | catalog
    STOREFRONT_STATUS_POLICY    unconstrained | forward_only
    HOST / PORT                 0.0.0.0 / 8000
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from storefront.checkout import CheckoutPolicy, PriceSource
from storefront.logs import level_from_name
from storefront.transactions import StatusPolicy

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///storefront.db"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass(frozen=True, slots=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    log_level: str = "info"
    log_json: bool = True
    seed_demo: bool = False
    verify_stock: bool = False
    price_source: PriceSource = PriceSource.CART
    status_policy: StatusPolicy = StatusPolicy.UNCONSTRAINED
    host: str = "0.0.0.0"
    port: int = 8000

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        """Invalid values raise ValueError so a misconfigured process never starts."""
        env = os.environ if env is None else env
        log_level = env.get("STOREFRONT_LOG_LEVEL", "info")
        level_from_name(log_level)
        return cls(
            database_url=env.get("STOREFRONT_DATABASE_URL", DEFAULT_DATABASE_URL),
            log_level=log_level,
            log_json=_flag(env, "STOREFRONT_LOG_JSON", True),
            seed_demo=_flag(env, "STOREFRONT_SEED_DEMO", False),
            verify_stock=_flag(env, "STOREFRONT_VERIFY_STOCK", False),
            price_source=PriceSource.parse(env.get("STOREFRONT_PRICE_SOURCE", "cart")),
            status_policy=StatusPolicy.parse(
                env.get("STOREFRONT_STATUS_POLICY", "unconstrained")
            ),
            host=env.get("HOST", "0.0.0.0"),
            port=int(env.get("PORT", "8000")),
        )

    def checkout_policy(self) -> CheckoutPolicy:
        return (
            CheckoutPolicy()
            .with_price_source(self.price_source)
            .with_stock_check(self.verify_stock)
        )


__all__ = ("Settings", "DEFAULT_DATABASE_URL")
