"""Read-side views of a cart, priced against the live catalogue."""

import structlog
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart, ItemType
from ordering.catalogue.lookup import find_product, find_service

logger = structlog.get_logger(__name__)


def _money(amount) -> float:
    return round(float(amount), 2)


def cart_lines(user_id) -> list[dict]:
    """Every line of the user's cart joined with its current catalogue entry.

    Lines whose product or service no longer exists are left out.
    """
    cart = current_domain.repository_for(Cart).for_user(user_id)
    if cart is None:
        return []

    lines = []
    for item in cart.items:
        is_product = item.item_type == ItemType.PRODUCT.value
        entry = find_product(item.product_id) if is_product else find_service(item.service_id)
        if entry is None:
            logger.warning(
                "Omitting cart line for missing catalogue entry",
                user_id=str(user_id),
                item_id=str(item.id),
                item_type=item.item_type,
                catalogue_id=item.catalogue_id,
            )
            continue

        line = {
            "id": str(item.id),
            "item_type": item.item_type,
            "product_id": str(item.product_id) if is_product else None,
            "service_id": None if is_product else str(item.service_id),
            "name": entry.name,
            "price": _money(entry.price),
            "quantity": item.quantity,
            "subtotal": _money(entry.price * item.quantity),
            "appointment": item.appointment,
            "added_at": item.added_at,
        }
        if is_product:
            line["stock"] = entry.stock
        lines.append(line)

    return lines


def cart_summary(user_id) -> dict:
    lines = cart_lines(user_id)
    products = [line for line in lines if line["item_type"] == ItemType.PRODUCT.value]
    services = [line for line in lines if line["item_type"] == ItemType.SERVICE.value]

    return {
        "items": lines,
        "total_items": sum(line["quantity"] for line in lines),
        "total_price": _money(sum(line["subtotal"] for line in lines)),
        "product_items": sum(line["quantity"] for line in products),
        "product_price": _money(sum(line["subtotal"] for line in products)),
        "service_items": sum(line["quantity"] for line in services),
        "service_price": _money(sum(line["subtotal"] for line in services)),
    }


def check_stock(user_id) -> list[dict]:
    """Product lines asking for more than the shelf holds. Advisory only."""
    return [
        {
            "id": line["id"],
            "product_id": line["product_id"],
            "name": line["name"],
            "quantity": line["quantity"],
            "stock": line["stock"],
        }
        for line in cart_lines(user_id)
        if line["item_type"] == ItemType.PRODUCT.value and line["quantity"] > line["stock"]
    ]
