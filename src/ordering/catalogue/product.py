"""Product aggregate: a stock-limited catalogue entry."""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, String, Text

from ordering.catalogue.events import StockAdjusted, StockRestored, StockWithdrawn
from ordering.domain import ordering
from shared.errors import InsufficientStock


@ordering.aggregate
class Product:
    """A physical good. ``stock`` only moves through the methods below and never goes negative."""

    name = String(required=True, max_length=255)
    description = Text()
    price = Float(required=True, min_value=0.0)
    stock = Integer(default=0, min_value=0)
    category = String(max_length=100)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, name, price, stock=0, description=None, category=None):
        now = datetime.now(UTC)
        return cls(
            name=name,
            description=description,
            price=price,
            stock=stock,
            category=category,
            created_at=now,
            updated_at=now,
        )

    def update_details(self, name=None, description=None, price=None, category=None):
        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if price is not None:
            self.price = price
        if category is not None:
            self.category = category
        self.updated_at = datetime.now(UTC)

    def shortage(self, quantity) -> dict | None:
        """Describe the shortfall if ``quantity`` units cannot be supplied."""
        if quantity <= self.stock:
            return None
        return {
            "product_id": str(self.id),
            "item_name": self.name,
            "requested": quantity,
            "available": self.stock,
        }

    def withdraw_stock(self, quantity, order_id=None):
        missing = self.shortage(quantity)
        if missing:
            raise InsufficientStock([missing], message="Not enough stock available")

        self.stock -= quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockWithdrawn(
                product_id=str(self.id),
                quantity=quantity,
                remaining=self.stock,
                order_id=order_id,
                withdrawn_at=self.updated_at,
            )
        )

    def restore_stock(self, quantity, order_id=None):
        self.stock += quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockRestored(
                product_id=str(self.id),
                quantity=quantity,
                remaining=self.stock,
                order_id=order_id,
                restored_at=self.updated_at,
            )
        )

    def adjust_stock(self, delta, reason=None):
        if self.stock + delta < 0:
            raise ValidationError({"stock": ["Stock cannot go below zero"]})

        self.stock += delta
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockAdjusted(
                product_id=str(self.id),
                delta=delta,
                remaining=self.stock,
                reason=reason,
                adjusted_at=self.updated_at,
            )
        )
