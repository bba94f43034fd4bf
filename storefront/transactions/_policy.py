"""
Status policy — which status changes the admin surface may make.
"""

from __future__ import annotations

from enum import Enum, auto

from kungfu import Result, Ok, Error

from storefront.errors import Errors, InvalidStatus
from storefront.transactions._types import TransactionStatus


# ═══════════════════════════════════════════════════════════════════════════════
# Status Policy
# ═══════════════════════════════════════════════════════════════════════════════


class StatusPolicy(Enum):
    """
    UNCONSTRAINED: any known status may replace any other.
                   Admins use this to correct mistakes in either direction.

    FORWARD_ONLY: Shipped → In-Transit → Completed, plus re-setting the
                  current status. Everything else is rejected.
    """

    UNCONSTRAINED = auto()
    FORWARD_ONLY = auto()

    @classmethod
    def parse(cls, raw: str) -> StatusPolicy:
        try:
            return cls[raw.strip().upper().replace("-", "_")]
        except KeyError:
            raise ValueError(f"Unknown status policy: {raw!r}") from None

    def check(
        self, current: TransactionStatus, target: TransactionStatus
    ) -> Result[TransactionStatus, InvalidStatus]:
        if self is StatusPolicy.UNCONSTRAINED or current is target:
            return Ok(target)
        if target in _FORWARD.get(current, ()):
            return Ok(target)
        return Error(Errors.illegal_transition(current.value, target.value))


_FORWARD: dict[TransactionStatus, tuple[TransactionStatus, ...]] = {
    TransactionStatus.SHIPPED: (TransactionStatus.IN_TRANSIT,),
    TransactionStatus.IN_TRANSIT: (TransactionStatus.COMPLETED,),
    TransactionStatus.COMPLETED: (),
}

UNCONSTRAINED = StatusPolicy.UNCONSTRAINED
FORWARD_ONLY = StatusPolicy.FORWARD_ONLY


__all__ = ("StatusPolicy", "UNCONSTRAINED", "FORWARD_ONLY")
