"""Cart aggregate: one per user, holding product and service lines.

The cart never stores prices. Subtotals are computed at read time from the
catalogue (see ``ordering.cart.pricing``) and frozen only when an order is
placed.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from ordering.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from ordering.domain import ordering


class ItemType(Enum):
    PRODUCT = "product"
    SERVICE = "service"


@ordering.entity(part_of="Cart")
class CartItem:
    product_id = Identifier()
    service_id = Identifier()
    quantity = Integer(required=True, min_value=1)
    appointment = DateTime()
    added_at = DateTime()

    @invariant.post
    def references_exactly_one_catalogue_entry(self):
        if bool(self.product_id) == bool(self.service_id):
            raise ValidationError({"item": ["A cart item must reference either a product or a service"]})

    @property
    def item_type(self) -> str:
        return ItemType.PRODUCT.value if self.product_id else ItemType.SERVICE.value

    @property
    def catalogue_id(self) -> str:
        return str(self.product_id or self.service_id)


@ordering.aggregate
class Cart:
    user_id = Identifier(required=True, unique=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def open_for(cls, user_id):
        now = datetime.now(UTC)
        return cls(user_id=user_id, created_at=now, updated_at=now)

    def find_line(self, item_type, catalogue_id):
        """The line holding ``catalogue_id`` of ``item_type``, or ``None``."""
        return next(
            (i for i in self.items if i.item_type == item_type and i.catalogue_id == str(catalogue_id)),
            None,
        )

    def get_item(self, item_id):
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ObjectNotFoundError("Cart item not found")
        return item

    def add_item(self, item_type, catalogue_id, quantity, appointment=None):
        """Add ``quantity`` units, merging into an existing line for the same entry."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if appointment is not None and item_type != ItemType.SERVICE.value:
            raise ValidationError({"appointment": ["Appointments can only be booked for services"]})

        now = datetime.now(UTC)
        existing = self.find_line(item_type, catalogue_id)

        if existing:
            existing.quantity += quantity
            if appointment is not None:
                existing.appointment = appointment
            item = existing
        else:
            reference = "product_id" if item_type == ItemType.PRODUCT.value else "service_id"
            item = CartItem(quantity=quantity, appointment=appointment, added_at=now, **{reference: catalogue_id})
            self.add_items(item)

        self.updated_at = now
        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=str(item.id),
                item_type=item_type,
                catalogue_id=str(catalogue_id),
                quantity=quantity,
                line_quantity=item.quantity,
            )
        )
        return item

    def update_item_quantity(self, item_id, quantity):
        """Set a line's quantity. Zero or less removes the line."""
        item = self.get_item(item_id)
        if quantity <= 0:
            self.remove_item(item_id)
            return None

        previous_quantity = item.quantity
        item.quantity = quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(item_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )
        return item

    def remove_item(self, item_id):
        item = self.get_item(item_id)
        self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartItemRemoved(cart_id=str(self.id), item_id=str(item_id)))

    def drop_entry(self, item_type, catalogue_id) -> bool:
        """Remove the line for a catalogue entry that is going away. Answers whether one existed."""
        line = self.find_line(item_type, catalogue_id)
        if line is None:
            return False
        self.remove_item(line.id)
        return True

    def clear(self):
        removed = len(self.items)
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartCleared(cart_id=str(self.id), user_id=str(self.user_id), items_removed=removed))


@ordering.repository(part_of=Cart)
class CartRepository:
    def for_user(self, user_id):
        items = self._dao.query.filter(user_id=user_id).all().items
        return items[0] if items else None
