"""Application service: Cancel Order use case.

Cancels every live line item along with the order.  Orders that have
already shipped or been delivered cannot be cancelled.

Stock taken at checkout is not returned to the catalog.
"""

from __future__ import annotations

from storefront.application.action_log import ActionRecorder
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.action_log import Action
from storefront.domain.repository.action_log_repository import ActionLogRepository
from storefront.domain.repository.order_repository import OrderRepository


class CancelOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        action_log_repo: ActionLogRepository,
    ) -> None:
        self._order_repo = order_repo
        self._actions = ActionRecorder(action_log_repo)

    def handle(self, actor_id: str, order_id: str, notes: str) -> None:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order not found with ID: {order_id}")

        order.cancel(notes)
        self._order_repo.save(order)

        self._actions.record(actor_id, Action.CANCEL, order_id, "Cancelled the order")
