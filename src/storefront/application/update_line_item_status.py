"""Application service: Update Line Item Status use case.

Moves one line item's track to a new status, then re-derives the order
status from all live line items: one shared status carries over to the
order, a mix makes the order PROCESSING.
"""

from __future__ import annotations

from storefront.application.action_log import ActionRecorder
from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.action_log import Action
from storefront.domain.model.status import OrderStatus
from storefront.domain.repository.action_log_repository import ActionLogRepository
from storefront.domain.repository.order_repository import OrderRepository


class UpdateLineItemStatusHandler:

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
        product_id: str,
        color: str,
        size: str,
        status: OrderStatus,
        notes: str,
    ) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order not found with ID: {order_id}")

        order.update_line_status(product_id, color, size, status, notes)
        self._order_repo.save(order)

        self._actions.record(
            actor_id,
            Action.UPDATE,
            order_id,
            f"Updated product variant status for product ID: {product_id}, "
            f"color: {color}, size: {size} to {status.value}",
        )
        return order_to_dto(order)
