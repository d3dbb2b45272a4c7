"""Application service: Cancel Line Item use case.

Cancels a single product variant within an order and recomputes the
order's money fields.  When the last live line goes, the order itself
becomes CANCELLED.
"""

from __future__ import annotations

from storefront.application.action_log import ActionRecorder
from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.action_log import Action
from storefront.domain.repository.action_log_repository import ActionLogRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.pricing import PricingEngine


class CancelLineItemHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        action_log_repo: ActionLogRepository,
        pricing: PricingEngine | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._actions = ActionRecorder(action_log_repo)
        self._pricing = pricing or PricingEngine()

    def handle(
        self,
        actor_id: str,
        order_id: str,
        product_id: str,
        color: str,
        size: str,
        notes: str,
    ) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order not found with ID: {order_id}")

        order.cancel_line(product_id, color, size, notes, self._pricing)
        self._order_repo.save(order)

        self._actions.record(
            actor_id,
            Action.CANCEL,
            order_id,
            f"Cancelled product variant with ID: {product_id}, color: {color}, "
            f"size: {size} from the order",
        )
        return order_to_dto(order)
