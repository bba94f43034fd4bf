"""
Routes — checkout, admin status board, buyer profile and catalog reads.
"""

import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from kungfu import Ok, Error

from storefront.api._schemas import (
    BuyerIn,
    BuyerOut,
    CheckoutIn,
    CheckoutOut,
    ProductOut,
    StatusIn,
    SuccessOut,
    TransactionRowOut,
)
from storefront.api._services import Services, get_services
from storefront.buyers import BuyerDirectory

router = APIRouter()

ServicesDep = Annotated[Services, Depends(get_services)]


# ═══════════════════════════════════════════════════════════════════════════════
# Checkout
# ═══════════════════════════════════════════════════════════════════════════════


@router.post("/checkout", status_code=201, response_model=CheckoutOut)
async def checkout(body: CheckoutIn, services: ServicesDep) -> CheckoutOut:
    match await services.checkout.run(body.to_domain()):
        case Ok(outcome):
            return CheckoutOut.from_domain(outcome)
        case Error(e):
            raise e


# ═══════════════════════════════════════════════════════════════════════════════
# Transactions
# ═══════════════════════════════════════════════════════════════════════════════


@router.post("/transactions", response_model=SuccessOut)
async def set_status(body: StatusIn, services: ServicesDep) -> SuccessOut:
    match await services.transactions.set_status(body.transaction_id, body.to_domain()):
        case Ok(_):
            return SuccessOut()
        case Error(e):
            raise e


@router.get("/transactions", response_model=list[TransactionRowOut])
async def list_transactions(
    services: ServicesDep,
    user_id: Annotated[str | None, Query(alias="userId")] = None,
) -> list[TransactionRowOut]:
    match await services.transactions.list(user_id):
        case Ok(rows):
            names = await _display_names(services.buyers, {tx.buyer_id for tx in rows})
            return [TransactionRowOut.from_domain(tx, names.get(tx.buyer_id)) for tx in rows]
        case Error(e):
            raise e


async def _display_names(buyers: BuyerDirectory, ids: set[str]) -> dict[str, str]:
    """Buyers that no longer resolve are left out."""
    ordered = sorted(ids)
    results = await asyncio.gather(*(buyers.get(i) for i in ordered))
    names: dict[str, str] = {}
    for buyer_id, result in zip(ordered, results):
        match result:
            case Ok(buyer):
                names[buyer_id] = buyer.display_name
            case Error(_):
                pass
    return names


# ═══════════════════════════════════════════════════════════════════════════════
# Buyers
# ═══════════════════════════════════════════════════════════════════════════════


@router.get("/buyers/{buyer_id}", response_model=BuyerOut)
async def get_buyer(buyer_id: str, services: ServicesDep) -> BuyerOut:
    match await services.buyers.get(buyer_id):
        case Ok(buyer):
            return BuyerOut.from_domain(buyer)
        case Error(e):
            raise e


@router.put("/buyers/{buyer_id}", response_model=BuyerOut)
async def update_buyer(buyer_id: str, body: BuyerIn, services: ServicesDep) -> BuyerOut:
    """Profile settings. The buyer must already exist; signup is elsewhere."""
    match await services.buyers.get(buyer_id):
        case Error(e):
            raise e
        case Ok(_):
            pass

    match await services.buyers.save(body.to_domain(buyer_id)):
        case Ok(buyer):
            return BuyerOut.from_domain(buyer)
        case Error(e):
            raise e


# ═══════════════════════════════════════════════════════════════════════════════
# Products
# ═══════════════════════════════════════════════════════════════════════════════


@router.get("/products/{product_id}", response_model=ProductOut)
async def get_product(product_id: str, services: ServicesDep) -> ProductOut:
    match await services.ledger.get_product(product_id):
        case Ok(product):
            return ProductOut.from_domain(product)
        case Error(e):
            raise e


__all__ = ("router",)
