"""Checkout: turn a cart (or an explicit item list) into an order.

Steps, all inside the handler's unit of work:

1. resolve each line's live price and, for products, stock;
2. reject the whole request if any product is short (services are not
   stock-limited);
3. freeze ``unit_price × quantity`` per line;
4. persist the order as ``pending``;
5. withdraw stock per product (lines on the same product are summed first);
6. clear the cart when the order came from it.

Validation finishes before anything is written. Products are saved with
their aggregate version, so a concurrent checkout that touched the same
product first makes this one fail with ``ExpectedVersionError`` and the
unit of work rolls back; ``ordering.checkout.retry`` handles the retry.
"""

import json
from datetime import datetime

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart, ItemType
from ordering.catalogue.lookup import get_product, get_service
from ordering.catalogue.product import Product
from ordering.domain import ordering
from ordering.order.order import Order
from shared.errors import InsufficientStock

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    items = Text()  # JSON list of {product_id|service_id, quantity, appointment?}
    from_cart = Boolean(default=False)


def _requested_from_cart(cart) -> list[dict]:
    return [
        {
            f"{item.item_type}_id": item.catalogue_id,
            "quantity": item.quantity,
            "appointment": item.appointment,
        }
        for item in cart.items
    ]


def _parse_appointment(value):
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError as exc:
        raise ValidationError({"appointment": [f"Invalid appointment: {value}"]}) from exc


def _price_lines(requested) -> tuple[list[dict], dict[str, int], dict[str, Product]]:
    """Resolve and price every requested line; returns lines, product demand and loaded products."""
    lines, demand, products = [], {}, {}

    for entry in requested:
        product_id, service_id = entry.get("product_id"), entry.get("service_id")
        if bool(product_id) == bool(service_id):
            raise ValidationError({"items": ["Each item needs either a product_id or a service_id"]})

        quantity = entry.get("quantity")
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be a positive integer"]})

        if product_id:
            product = products.get(str(product_id)) or get_product(product_id)
            products[str(product.id)] = product
            demand[str(product.id)] = demand.get(str(product.id), 0) + quantity
            entry_name, unit_price = product.name, product.price
            reference = {"item_type": ItemType.PRODUCT.value, "product_id": str(product.id)}
            appointment = None
        else:
            service = get_service(service_id)
            if not service.is_active:
                raise ValidationError({"service_id": [f"Service is not available: {service.name}"]})
            entry_name, unit_price = service.name, service.price
            reference = {"item_type": ItemType.SERVICE.value, "service_id": str(service.id)}
            appointment = _parse_appointment(entry.get("appointment"))

        lines.append(
            {
                **reference,
                "item_name": entry_name,
                "quantity": quantity,
                "unit_price": unit_price,
                "total_price": round(unit_price * quantity, 2),
                "appointment": appointment,
            }
        )

    return lines, demand, products


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        cart_repo = current_domain.repository_for(Cart)
        cart = None

        if command.from_cart:
            cart = cart_repo.for_user(command.user_id)
            requested = _requested_from_cart(cart) if cart else []
            if not requested:
                raise ValidationError({"cart": ["Cart is empty"]})
        else:
            requested = json.loads(command.items) if command.items else []
            if not requested:
                raise ValidationError({"items": ["No items provided"]})

        lines, demand, products = _price_lines(requested)

        shortages = [products[pid].shortage(quantity) for pid, quantity in demand.items()]
        shortages = [missing for missing in shortages if missing]
        if shortages:
            logger.info("Checkout rejected for insufficient stock", user_id=str(command.user_id), shortages=shortages)
            raise InsufficientStock(shortages)

        order = Order.place(user_id=command.user_id, lines=lines, from_cart=bool(command.from_cart))
        current_domain.repository_for(Order).add(order)

        product_repo = current_domain.repository_for(Product)
        for product_id, quantity in demand.items():
            products[product_id].withdraw_stock(quantity, order_id=str(order.id))
            product_repo.add(products[product_id])

        if cart is not None:
            cart.clear()
            cart_repo.add(cart)

        logger.info(
            "Placed order",
            order_id=str(order.id),
            user_id=str(command.user_id),
            total_price=order.total_price,
            from_cart=bool(command.from_cart),
        )
        return str(order.id)
