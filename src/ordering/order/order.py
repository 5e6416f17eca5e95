"""Order aggregate with frozen OrderItem lines.

State machine:
    pending   -> shipped | delivered | cancelled
    shipped   -> delivered | cancelled
    cancelled -> pending (reinstatement)
    delivered is terminal

Line items are a snapshot taken at checkout: name, unit price and totals do
not follow later catalogue changes.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String

from ordering.cart.cart import ItemType
from ordering.domain import ordering
from ordering.order.events import OrderPlaced, OrderStatusChanged


class OrderStatus(Enum):
    PENDING = "pending"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.CANCELLED: {OrderStatus.PENDING},
    OrderStatus.DELIVERED: set(),  # Terminal
}


@ordering.entity(part_of="Order")
class OrderItem:
    item_type = String(required=True, choices=ItemType)
    product_id = Identifier()
    service_id = Identifier()
    item_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    total_price = Float(required=True, min_value=0.0)
    appointment = DateTime()


@ordering.aggregate
class Order:
    user_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    items = HasMany(OrderItem)
    total_price = Float(required=True, min_value=0.0)
    from_cart = Boolean(default=False)
    placed_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def place(cls, user_id, lines, from_cart=False):
        """Create a pending order from priced lines (dicts shaped like ``OrderItem``)."""
        if not lines:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = datetime.now(UTC)
        order = cls(
            user_id=user_id,
            status=OrderStatus.PENDING.value,
            total_price=round(sum(line["total_price"] for line in lines), 2),
            from_cart=from_cart,
            placed_at=now,
            updated_at=now,
        )
        order.add_items([OrderItem(**line) for line in lines])

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                total_price=order.total_price,
                item_count=len(lines),
                from_cart=from_cart,
                placed_at=now,
            )
        )
        return order

    def product_quantities(self) -> dict[str, int]:
        """Units per product across all lines."""
        quantities: dict[str, int] = {}
        for item in self.items:
            if item.product_id:
                key = str(item.product_id)
                quantities[key] = quantities.get(key, 0) + item.quantity
        return quantities

    def transition_to(self, target: OrderStatus) -> OrderStatus:
        current = OrderStatus(self.status)
        if target not in _VALID_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot change order status from {current.value} to {target.value}"]})

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )
        return current
