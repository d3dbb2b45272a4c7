"""Application service: Create Order (checkout) use case.

Turns a customer's cart into a committed order.  This is the only place
that coordinates several aggregates at once: the cart, the products whose
stock is taken, the customer's address book and the new order.

Side effects on products and the cart are not rolled back if a later step
fails: stock is written before the order is saved, and the cart is cleared
after it.
"""

from __future__ import annotations

from datetime import datetime, timezone

import structlog

from storefront.application.action_log import ActionRecorder
from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.exceptions import (
    CartEmptyError,
    DomainException,
    EntityNotFoundError,
)
from storefront.domain.model.action_log import Action
from storefront.domain.model.order import (
    DEFAULT_DELIVERY_DAYS,
    Order,
    OrderDetail,
    OrderTrack,
    PaymentMethod,
)
from storefront.domain.model.status import OrderStatus
from storefront.domain.model.value_objects import Quantity
from storefront.domain.repository.action_log_repository import ActionLogRepository
from storefront.domain.repository.address_book import AddressBook
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.pricing import PricingEngine
from storefront.domain.service.stock_allocation import (
    Allocation,
    StockAllocationService,
)
from storefront.domain.service.tracking_number import TrackingNumberGenerator

logger = structlog.get_logger(__name__)

MAX_TRACKING_NUMBER_ATTEMPTS = 5
ORDER_PLACED_NOTE = "Order placed"


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        address_book: AddressBook,
        action_log_repo: ActionLogRepository,
        pricing: PricingEngine | None = None,
        tracking_numbers: TrackingNumberGenerator | None = None,
        delivery_days: int = DEFAULT_DELIVERY_DAYS,
    ) -> None:
        self._order_repo = order_repo
        self._cart_repo = cart_repo
        self._address_book = address_book
        self._stock = StockAllocationService(product_repo)
        self._actions = ActionRecorder(action_log_repo)
        self._pricing = pricing or PricingEngine()
        self._tracking_numbers = tracking_numbers or TrackingNumberGenerator()
        self._delivery_days = delivery_days

    def handle(
        self,
        customer_id: str,
        address_id: str,
        payment_method: PaymentMethod,
    ) -> OrderDTO:
        """Check out the customer's cart.

        Steps:
        1. Load the cart (fail if empty) and the shipping address.
        2. Reserve a tracking number no other order uses.
        3. Validate stock for every cart line, then decrement it.
        4. Build line items with *current* prices (snapshot) and price the order.
        5. Persist, clear the cart, record the action.
        """
        cart_items = self._cart_repo.list_items(customer_id)
        if not cart_items:
            raise CartEmptyError("Shopping cart is empty")

        address = self._address_book.get_address(customer_id, address_id)
        if address is None:
            raise EntityNotFoundError(f"Shipping address not found: '{address_id}'")

        tracking_number = self._new_tracking_number()
        allocations = self._stock.allocate(cart_items)

        order = Order.create(
            tracking_number=tracking_number,
            customer_id=customer_id,
            payment_method=payment_method,
            shipping_address=address,
            items=[self._line_item(a) for a in allocations],
            pricing=self._pricing,
            delivery_days=self._delivery_days,
        )
        self._order_repo.save(order)
        self._cart_repo.clear(customer_id)

        logger.info(
            "Order created",
            order_id=order.id,
            tracking_number=order.tracking_number,
            customer_id=customer_id,
            items=len(order.items),
            total=str(order.total.amount),
        )
        self._actions.record(
            customer_id, Action.CREATE, order.tracking_number, "Created a new order"
        )
        return order_to_dto(order)

    # --- Helpers --------------------------------------------------------------

    def _new_tracking_number(self) -> str:
        for _ in range(MAX_TRACKING_NUMBER_ATTEMPTS):
            candidate = self._tracking_numbers.generate()
            if not self._order_repo.tracking_number_exists(candidate):
                return candidate
            logger.warning("Tracking number collision", tracking_number=candidate)
        raise DomainException(
            f"Could not allocate a unique tracking number after "
            f"{MAX_TRACKING_NUMBER_ATTEMPTS} attempts"
        )

    @staticmethod
    def _line_item(allocation: Allocation) -> OrderDetail:
        product = allocation.product
        line = allocation.cart_item
        return OrderDetail(
            merchant_id=product.merchant_id,
            product_id=product.id,
            product_name=product.name,
            quantity=Quantity(line.quantity),
            color=line.color,
            size=line.size,
            price=product.selling_price,  # <-- price snapshot
            shipping_cost=product.shipping_cost,
            track=OrderTrack(
                status=OrderStatus.NEW,
                updated_on=datetime.now(timezone.utc).date(),
                notes=ORDER_PLACED_NOTE,
            ),
        )
