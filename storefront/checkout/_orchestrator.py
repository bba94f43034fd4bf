"""
Checkout — runs the compiled checkout graph against injected collaborators.
"""

from __future__ import annotations

import time

import structlog
from kungfu import Result, Ok, Error

from storefront import graph as G
from storefront._types import Clock
from storefront.buyers import BuyerDirectory
from storefront.checkout._nodes import CheckoutNode
from storefront.checkout._policy import CheckoutPolicy
from storefront.checkout._types import CheckoutOutcome, CheckoutRequest
from storefront.errors import ShopError
from storefront.inventory import Ledger
from storefront.transactions import TransactionStore

logger = structlog.get_logger()

_pipeline = G.graph(CheckoutNode)


class Checkout:
    """
    Checkout service.

    Example:
        checkout = Checkout(buyers, ledger, transactions)
        match await checkout.run(request):
            case Ok(outcome):
                outcome.receipt.to_payload()
            case Error(e):
                e.status_code, e.message
    """

    def __init__(
        self,
        buyers: BuyerDirectory,
        ledger: Ledger,
        transactions: TransactionStore,
        policy: CheckoutPolicy | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.buyers = buyers
        self.ledger = ledger
        self.transactions = transactions
        self.policy = policy or CheckoutPolicy()
        self.clock = clock or Clock()
        self._bindings = (
            G.Bindings()
            .bind(self.buyers, BuyerDirectory)
            .bind(self.ledger, Ledger)
            .bind(self.transactions, TransactionStore)
            .bind(self.policy, CheckoutPolicy)
            .bind(self.clock, Clock)
        )

    async def run(self, request: CheckoutRequest) -> Result[CheckoutOutcome, ShopError]:
        log = logger.bind(buyer_id=request.buyer_id, lines=len(request.lines))
        start = time.perf_counter()
        try:
            node = await _pipeline.run(self._bindings.bind(request, CheckoutRequest))
        except ShopError as e:
            log.info(
                "checkout_failed",
                code=e.code,
                error=e.message,
                elapsed_ms=round((time.perf_counter() - start) * 1000, 1),
            )
            return Error(e)

        outcome = node.data
        log.info(
            "checkout_completed",
            transaction_id=outcome.transaction.id,
            final_total=outcome.receipt.final_total,
            skipped=len(outcome.skipped),
            elapsed_ms=round((time.perf_counter() - start) * 1000, 1),
        )
        return Ok(outcome)


__all__ = ("Checkout",)
