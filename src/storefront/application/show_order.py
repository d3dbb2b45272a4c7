"""Application service: Show Order use case (query)."""

from __future__ import annotations

from storefront.application.dto import OrderBriefDTO, OrderDTO, order_to_brief, order_to_dto
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order not found with ID: {order_id}")
        return order_to_dto(order)

    def by_tracking_number(self, tracking_number: str) -> OrderBriefDTO:
        """Customer-facing lookup; returns the brief view only."""
        order = self._order_repo.get_by_tracking_number(tracking_number.strip().upper())
        if order is None:
            raise EntityNotFoundError(
                f"Order not found with tracking number: {tracking_number}"
            )
        return order_to_brief(order)
