"""Order status changes, with stock restored on cancellation and re-taken on reinstatement."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.catalogue.lookup import find_product, get_product
from ordering.catalogue.product import Product
from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus
from shared.errors import InsufficientStock

logger = structlog.get_logger(__name__)

ALLOWED_STATUSES = [status.value for status in OrderStatus]


@ordering.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@ordering.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        if command.status not in ALLOWED_STATUSES:
            raise ValidationError({"status": [f"Invalid status. Allowed: {', '.join(ALLOWED_STATUSES)}"]})
        target = OrderStatus(command.status)

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous = order.transition_to(target)

        if target == OrderStatus.CANCELLED:
            self._restore_stock(order)
        elif previous == OrderStatus.CANCELLED:
            self._withdraw_stock(order)

        repo.add(order)
        logger.info(
            "Changed order status",
            order_id=str(order.id),
            previous_status=previous.value,
            new_status=target.value,
        )
        return order.status

    @staticmethod
    def _restore_stock(order):
        repo = current_domain.repository_for(Product)
        for product_id, quantity in order.product_quantities().items():
            product = find_product(product_id)
            if product is None:
                logger.warning("Cannot restore stock of missing product", order_id=str(order.id), product_id=product_id)
                continue
            product.restore_stock(quantity, order_id=str(order.id))
            repo.add(product)

    @staticmethod
    def _withdraw_stock(order):
        repo = current_domain.repository_for(Product)
        demand = order.product_quantities()
        products = {product_id: get_product(product_id) for product_id in demand}

        shortages = [products[pid].shortage(quantity) for pid, quantity in demand.items()]
        shortages = [missing for missing in shortages if missing]
        if shortages:
            raise InsufficientStock(shortages, message="Not enough stock to un-cancel this order")

        for product_id, quantity in demand.items():
            products[product_id].withdraw_stock(quantity, order_id=str(order.id))
            repo.add(products[product_id])
