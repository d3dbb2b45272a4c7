"""Application service: order listings (queries).

Listings by customer and by merchant treat "nothing found" as an error;
the other listings return an empty page.
"""

from __future__ import annotations

from datetime import datetime, timezone

from storefront.application.dto import (
    OrderBriefDTO,
    OrderMerchantDTO,
    PageDTO,
    merchant_lines,
    order_to_brief,
    page_to_dto,
)
from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.status import OrderStatus
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.paging import PageRequest


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def all(self, request: PageRequest, keyword: str | None = None) -> PageDTO[OrderBriefDTO]:
        keyword = keyword.strip() if keyword else None
        page = self._order_repo.search(keyword or None, request)
        return page_to_dto(page, order_to_brief)

    def by_customer(self, customer_id: str, request: PageRequest) -> PageDTO[OrderBriefDTO]:
        page = self._order_repo.find_by_customer(customer_id, request)
        if page.total_items == 0:
            raise EntityNotFoundError(f"Order not found with customer ID: {customer_id}")
        return page_to_dto(page, order_to_brief)

    def by_status(self, status: OrderStatus, request: PageRequest) -> PageDTO[OrderBriefDTO]:
        page = self._order_repo.find_by_status(status, request)
        return page_to_dto(page, order_to_brief)

    def by_merchant(
        self, merchant_id: str, request: PageRequest
    ) -> PageDTO[OrderMerchantDTO]:
        """One row per line item the merchant sold, across the page of orders."""
        page = self._order_repo.find_by_merchant(merchant_id, request)
        if page.total_items == 0:
            raise EntityNotFoundError(f"Order not found for merchant: {merchant_id}")
        rows: list[OrderMerchantDTO] = []
        for order in page.items:
            rows.extend(merchant_lines(order, merchant_id))
        return PageDTO(
            items=rows,
            page=page.page,
            total_items=page.total_items,
            total_pages=page.total_pages,
        )

    def by_date_range(
        self, start: datetime, end: datetime, request: PageRequest
    ) -> PageDTO[OrderBriefDTO]:
        start, end = _as_utc(start), _as_utc(end)
        if start > end:
            raise ValidationError("Start of date range must not be after its end")
        page = self._order_repo.find_by_date_range(start, end, request)
        return page_to_dto(page, order_to_brief)


def _as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
