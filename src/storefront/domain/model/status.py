"""Order / line-item status taxonomy and the transition table.

Orders and their line-item tracks share one enumeration.  The policy is
permissive: any status other than CANCELLED may be assigned through the
update operations, whatever the current status.  CANCELLED is only
reachable through the cancellation operations, and never from SHIPPED or
DELIVERED.
"""

from __future__ import annotations

from enum import Enum

from storefront.domain.exceptions import ValidationError


class OrderStatus(Enum):
    NEW = "NEW"
    PROCESSING = "PROCESSING"
    CANCELLED = "CANCELLED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    RETURNED = "RETURNED"
    PAID = "PAID"
    COMPLETED = "COMPLETED"
    REFUNDED = "REFUNDED"

    @classmethod
    def parse(cls, raw: str) -> OrderStatus:
        try:
            return cls(raw.strip().upper())
        except ValueError as exc:
            allowed = ", ".join(s.value for s in cls)
            raise ValidationError(
                f"Unknown order status '{raw}' (expected one of: {allowed})"
            ) from exc


class Transition(Enum):
    """The two paths through which a status can change."""

    UPDATE = "UPDATE"
    CANCEL = "CANCEL"


_ALL = frozenset(OrderStatus)
_UPDATE_TARGETS = _ALL - {OrderStatus.CANCELLED}
_NOT_CANCELLABLE = frozenset(
    {OrderStatus.CANCELLED, OrderStatus.SHIPPED, OrderStatus.DELIVERED}
)

# current status -> transition -> statuses it may move to
TRANSITIONS: dict[OrderStatus, dict[Transition, frozenset[OrderStatus]]] = {
    status: {
        Transition.UPDATE: _UPDATE_TARGETS,
        Transition.CANCEL: (
            frozenset() if status in _NOT_CANCELLABLE
            else frozenset({OrderStatus.CANCELLED})
        ),
    }
    for status in OrderStatus
}


def is_allowed(current: OrderStatus, target: OrderStatus, via: Transition) -> bool:
    return target in TRANSITIONS[current][via]


def is_update_target(status: OrderStatus) -> bool:
    """True if *status* may be assigned by the update operations."""
    return status in _UPDATE_TARGETS


def aggregate_status(line_statuses: list[OrderStatus]) -> OrderStatus:
    """Derive the order-level status from its non-cancelled line statuses.

    One distinct status wins outright; a mix means the order is PROCESSING.
    """
    distinct = {s for s in line_statuses if s is not OrderStatus.CANCELLED}
    if len(distinct) == 1:
        return next(iter(distinct))
    return OrderStatus.PROCESSING
