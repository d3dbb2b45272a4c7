"""Application service: Update Order Status use case.

Sets the order-level status and pushes it down to every live line item.
CANCELLED is refused here; cancellation has its own use cases.
"""

from __future__ import annotations

from storefront.application.action_log import ActionRecorder
from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.action_log import Action
from storefront.domain.model.status import OrderStatus
from storefront.domain.repository.action_log_repository import ActionLogRepository
from storefront.domain.repository.order_repository import OrderRepository


class UpdateOrderStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        action_log_repo: ActionLogRepository,
    ) -> None:
        self._order_repo = order_repo
        self._actions = ActionRecorder(action_log_repo)

    def handle(
        self,
        actor_id: str,
        order_id: str,
        status: OrderStatus,
        notes: str = "",
    ) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order not found with ID: {order_id}")

        order.update_status(status)
        self._order_repo.save(order)

        details = f"Updated order status to {status.value}"
        if notes:
            details += f" ({notes})"
        self._actions.record(actor_id, Action.UPDATE, order_id, details)
        return order_to_dto(order)
