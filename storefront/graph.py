"""
Graph — nodnod pipelines compiled once and run with per-call bindings.

    from storefront import graph as G

    @G.node
    class BuyerNode:
        @classmethod
        async def __compose__(cls, request: CheckoutRequest, buyers: BuyerDirectory) -> "BuyerNode":
            ...

    pipeline = G.graph(CheckoutNode)
    bindings = G.Bindings().bind(buyers, BuyerDirectory).bind(request)
    outcome = await pipeline.run(bindings)

A node's dependencies are the parameter types of its __compose__; nodes that
do not depend on each other run concurrently. An exception raised by a node
aborts the run and reaches the caller unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, cast

from nodnod import EventLoopAgent, Node, Scope, Value
from nodnod import scalar_node as node


@dataclass(frozen=True, slots=True)
class Bindings:
    """
    Starting values of a run, keyed by the type a node asks for.

    Collaborators typed as a Protocol must be bound with an explicit key:

        Bindings().bind(SQLAlchemyLedger(factory), Ledger)
    """

    entries: tuple[tuple[type[Any], Any], ...] = ()

    def bind(self, value: object, key: type[Any] | None = None) -> Bindings:
        typ = key if key is not None else type(value)
        return Bindings((*self.entries, (typ, value)))


@dataclass(frozen=True, slots=True)
class Pipeline[T]:
    target: type[T]
    agent: EventLoopAgent

    @property
    def name(self) -> str:
        return self.target.__name__

    async def run(self, bindings: Bindings) -> T:
        scope = Scope(detail=f"run:{self.name}")
        async with scope:
            for typ, value in bindings.entries:
                scope.push(Value(typ, value))
            await self.agent.run(scope, {})
            found = scope.get(self.target)
            if found is None:
                raise LookupError(f"{self.name} was not produced by the run")
            return cast(T, found.value)


def graph[T](target: type[T]) -> Pipeline[T]:
    """Collect every node target depends on and build the execution plan."""
    return Pipeline(target, EventLoopAgent.build({cast(type[Node[Any, Any]], target)}))


__all__ = ("node", "Bindings", "Pipeline", "graph")
