"""Tests for the checkout graph against memory and SQLAlchemy collaborators."""

import asyncio
from decimal import Decimal

from storefront.buyers import Buyer
from storefront.checkout import Checkout, CheckoutPolicy, PriceSource
from storefront.errors import (
    AddressRequired,
    BuyerNotFound,
    OutOfStock,
    ProductNotFound,
    StorageError,
    ValidationError,
)
from storefront.inventory import Product
from storefront.transactions import TransactionStatus

from tests._support import (
    BLANK_ADDRESS,
    BrokenTransactionStore,
    CLOCK,
    HEADPHONES,
    NAMELESS,
    NO_ADDRESS,
    PHONE,
    PWD,
    SENIOR,
    STANDARD,
    TABLET,
    TURNS_60_TODAY,
    TURNS_60_TOMORROW,
    World,
    line,
    request,
    unwrap,
    unwrap_error,
)


# ═══════════════════════════════════════════════════════════════════════════════
# Happy paths
# ═══════════════════════════════════════════════════════════════════════════════


async def test_senior_checkout(world: World) -> None:
    outcome = unwrap(
        await world.checkout().run(request(SENIOR, line(TABLET, "Graphite"), claimed="1120"))
    )
    receipt = outcome.receipt.to_payload()

    assert receipt["discountApplied"] is True
    assert receipt["discountType"] == "Senior"
    assert receipt["subtotal"] == "1120.00"
    assert receipt["discountAmount"] == "200.00"
    assert receipt["discountedTotal"] == "800.00"
    assert receipt["taxAmount"] == "0.00"
    assert receipt["finalTotal"] == "800.00"
    assert receipt["address"] == SENIOR.shipping_address
    assert receipt["items"][0]["name"] == "Galaxy Tab S9"

    tx = outcome.transaction
    assert tx.status is TransactionStatus.SHIPPED
    assert tx.total_amount == Decimal("800.00")
    assert [(i.product_id, i.color, i.quantity) for i in tx.line_items] == [("3", "Graphite", 1)]
    assert outcome.fully_applied
    assert await world.stock("3", "Graphite") == 0


async def test_standard_checkout_adds_vat(world: World) -> None:
    outcome = unwrap(
        await world.checkout().run(
            request(STANDARD, line(HEADPHONES, "Black", 2), claimed="1000.00")
        )
    )

    assert outcome.receipt.subtotal == "1000.00"
    assert outcome.receipt.tax_amount == "120.00"
    assert outcome.receipt.final_total == "1120.00"
    assert not outcome.receipt.discount_applied
    assert await world.stock("2", "Black") == 8


async def test_pwd_checkout(world: World) -> None:
    outcome = unwrap(await world.checkout().run(request(PWD, line(TABLET, "Graphite"))))

    assert outcome.receipt.discount_type == "PWD"
    assert outcome.receipt.final_total == "800.00"


async def test_sixtieth_birthday_boundary(world: World) -> None:
    today = unwrap(await world.checkout().run(request(TURNS_60_TODAY, line(PHONE, "Black"))))
    tomorrow = unwrap(await world.checkout().run(request(TURNS_60_TOMORROW, line(PHONE, "Black"))))

    assert today.receipt.discount_type == "Senior"
    assert tomorrow.receipt.discount_type == "None"
    assert tomorrow.receipt.tax_amount == "67.20"


async def test_multi_line_cart_decrements_each_line(world: World) -> None:
    outcome = unwrap(
        await world.checkout().run(
            request(STANDARD, line(PHONE, "Black", 2), line(PHONE, "Blue", 1), line(HEADPHONES, "Black"))
        )
    )

    assert outcome.receipt.subtotal == "2180.00"
    assert [c.after for c in outcome.changes] == [3, 2, 9]
    assert await world.stock("1", "Black") == 3
    assert await world.stock("1", "Blue") == 2


async def test_blank_name_prints_unknown_user(world: World) -> None:
    outcome = unwrap(await world.checkout().run(request(NAMELESS, line(PHONE, "Black"))))
    assert outcome.receipt.buyer_name == "Unknown User"


async def test_identical_carts_price_identically(world: World) -> None:
    cart = request(SENIOR, line(PHONE, "Black", 1), line(HEADPHONES, "Black", 3))

    first = unwrap(await world.checkout().run(cart))
    second = unwrap(await world.checkout().run(cart))

    assert first.receipt.to_payload() == second.receipt.to_payload()
    assert first.transaction.id != second.transaction.id


# ═══════════════════════════════════════════════════════════════════════════════
# Address gate
# ═══════════════════════════════════════════════════════════════════════════════


async def test_sentinel_address_rejects_without_side_effects(world: World) -> None:
    error = unwrap_error(await world.checkout().run(request(NO_ADDRESS, line(PHONE, "Black"))))

    assert isinstance(error, AddressRequired)
    assert error.message.startswith("No address provided.")
    assert await world.transaction_count() == 0
    assert await world.stock("1", "Black") == 5


async def test_blank_address_rejects(world: World) -> None:
    error = unwrap_error(await world.checkout().run(request(BLANK_ADDRESS, line(PHONE, "Black"))))

    assert isinstance(error, AddressRequired)
    assert await world.transaction_count() == 0


# ═══════════════════════════════════════════════════════════════════════════════
# Rejections
# ═══════════════════════════════════════════════════════════════════════════════


async def test_unknown_buyer(world: World) -> None:
    missing = Buyer("ghost", "Nobody", "Nowhere 1")
    error = unwrap_error(await world.checkout().run(request(missing, line(PHONE, "Black"))))

    assert isinstance(error, BuyerNotFound)
    assert error.message == "User not found"
    assert await world.transaction_count() == 0


async def test_empty_cart(world: World) -> None:
    error = unwrap_error(await world.checkout().run(request(STANDARD)))

    assert isinstance(error, ValidationError)
    assert await world.transaction_count() == 0


async def test_non_positive_quantity(world: World) -> None:
    error = unwrap_error(await world.checkout().run(request(STANDARD, line(PHONE, "Black", 0))))

    assert isinstance(error, ValidationError)
    assert await world.stock("1", "Black") == 5


async def test_stock_check_rejects_before_any_write(world: World) -> None:
    policy = CheckoutPolicy().with_stock_check()
    error = unwrap_error(
        await world.checkout(policy).run(request(STANDARD, line(TABLET, "Graphite", 2)))
    )

    assert isinstance(error, OutOfStock)
    assert error.status_code == 409
    assert await world.transaction_count() == 0
    assert await world.stock("3", "Graphite") == 1


async def test_stock_check_passes_when_covered(world: World) -> None:
    policy = CheckoutPolicy().with_stock_check()
    unwrap(await world.checkout(policy).run(request(STANDARD, line(TABLET, "Graphite", 1))))

    assert await world.stock("3", "Graphite") == 0


# ═══════════════════════════════════════════════════════════════════════════════
# Stock after the sale
# ═══════════════════════════════════════════════════════════════════════════════


async def test_oversold_line_clamps_to_zero(world: World) -> None:
    outcome = unwrap(await world.checkout().run(request(STANDARD, line(PHONE, "Blue", 5))))

    assert outcome.changes[0].clamped
    assert await world.stock("1", "Blue") == 0
    assert await world.transaction_count() == 1


async def test_concurrent_checkouts_for_last_unit(world: World) -> None:
    checkout = world.checkout()
    results = await asyncio.gather(
        checkout.run(request(STANDARD, line(TABLET, "Graphite"))),
        checkout.run(request(SENIOR, line(TABLET, "Graphite"))),
    )
    outcomes = [unwrap(r) for r in results]

    assert len({o.transaction.id for o in outcomes}) == 2
    assert await world.transaction_count() == 2
    assert await world.stock("3", "Graphite") == 0
    assert sorted(c.after for o in outcomes for c in o.changes) == [0, 0]


async def test_unknown_color_is_reported_not_raised(world: World) -> None:
    outcome = unwrap(
        await world.checkout().run(request(STANDARD, line(PHONE, "N/A"), line(PHONE, "Black")))
    )

    assert not outcome.fully_applied
    assert [(s.product_id, s.color) for s in outcome.skipped] == [("1", "N/A")]
    assert [c.color for c in outcome.changes] == ["Black"]
    assert await world.transaction_count() == 1
    assert await world.stock("1", "Black") == 4


# ═══════════════════════════════════════════════════════════════════════════════
# Failed insert
# ═══════════════════════════════════════════════════════════════════════════════


async def test_failed_insert_aborts_before_any_stock_change(world: World) -> None:
    checkout = Checkout(world.buyers, world.ledger, BrokenTransactionStore(), clock=CLOCK)
    cart = request(
        STANDARD,
        line(PHONE, "Black", 2),
        line(PHONE, "Blue", 1),
        line(TABLET, "Graphite", 1),
    )

    error = unwrap_error(await checkout.run(cart))

    assert isinstance(error, StorageError)
    assert error.status_code == 500
    assert await world.stock("1", "Black") == 5
    assert await world.stock("1", "Blue") == 3
    assert await world.stock("3", "Graphite") == 1
    assert await world.transaction_count() == 0


# ═══════════════════════════════════════════════════════════════════════════════
# Price source
# ═══════════════════════════════════════════════════════════════════════════════


async def test_cart_price_is_charged_by_default(world: World) -> None:
    outcome = unwrap(
        await world.checkout().run(request(STANDARD, line(PHONE, "Black", price="500.00")))
    )
    assert outcome.receipt.subtotal == "500.00"


async def test_catalog_price_source_reprices(world: World) -> None:
    policy = CheckoutPolicy().with_price_source(PriceSource.CATALOG)
    outcome = unwrap(
        await world.checkout(policy).run(
            request(
                STANDARD,
                line(PHONE, "Black", 2, price="1.00"),
                line(HEADPHONES, "Black", 1, price="1.00"),
                claimed="3.00",
            )
        )
    )

    assert outcome.receipt.subtotal == "1620.00"
    assert [i["price"] for i in outcome.receipt.items] == [560.0, 500.0]


async def test_catalog_price_source_unknown_product(world: World) -> None:
    policy = CheckoutPolicy().with_price_source(PriceSource.CATALOG)
    ghost = Product("404", "Nope", "Ghost", Decimal("1.00"))
    error = unwrap_error(await world.checkout(policy).run(request(STANDARD, line(ghost, "Black"))))

    assert isinstance(error, ProductNotFound)
    assert await world.transaction_count() == 0
