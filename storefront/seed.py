"""
Demo data — a handful of buyers and gadgets for local runs and API tests.
"""

from datetime import date
from decimal import Decimal

from kungfu import Error

from storefront.buyers import NO_ADDRESS, Buyer, BuyerDirectory
from storefront.inventory import ColorVariant, Ledger, Product

DEMO_BUYERS = (
    Buyer("u-senior", "Lola Remedios", "12 Mabini St, Quezon City", date(1950, 3, 14)),
    Buyer("u-standard", "Paolo Cruz", "88 Katipunan Ave, Quezon City", date(1995, 7, 2)),
    Buyer("u-pwd", "Ana Santos", "5 Rizal Blvd, Makati", date(1990, 1, 20), is_pwd=True),
    Buyer("u-noaddress", "Jun Reyes", NO_ADDRESS, date(2000, 11, 5)),
)

DEMO_PRODUCTS = (
    Product(
        "1",
        "Apple",
        "iPhone 15",
        Decimal("560.00"),
        (ColorVariant("Black", 5), ColorVariant("Blue", 3)),
    ),
    Product(
        "2",
        "Sony",
        "WH-1000XM5",
        Decimal("500.00"),
        (ColorVariant("Black", 10), ColorVariant("Silver", 4)),
    ),
    Product(
        "3",
        "Samsung",
        "Galaxy Tab S9",
        Decimal("1120.00"),
        (ColorVariant("Graphite", 1),),
    ),
)


async def seed_demo(buyers: BuyerDirectory, ledger: Ledger) -> None:
    """Insert or replace the demo rows. Raises the first storage error."""
    for buyer in DEMO_BUYERS:
        match await buyers.save(buyer):
            case Error(e):
                raise e
            case _:
                pass
    for product in DEMO_PRODUCTS:
        match await ledger.add_product(product):
            case Error(e):
                raise e
            case _:
                pass


__all__ = ("DEMO_BUYERS", "DEMO_PRODUCTS", "seed_demo")
