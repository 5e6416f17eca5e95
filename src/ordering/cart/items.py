"""Cart line management: commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart, ItemType
from ordering.catalogue.lookup import get_product, get_service
from ordering.domain import ordering
from shared.errors import InsufficientStock


@ordering.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    item_type = String(required=True, choices=ItemType)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    appointment = DateTime()


@ordering.command(part_of="Cart")
class UpdateCartItem:
    """Set a line's quantity; zero or less removes the line."""

    user_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True)


@ordering.command(part_of="Cart")
class RemoveCartItem:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)


@ordering.command(part_of="Cart")
class ClearCart:
    user_id = Identifier(required=True)


def _ensure_stock(product, quantity):
    missing = product.shortage(quantity)
    if missing:
        raise InsufficientStock([missing], message="Not enough stock available")


@ordering.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id) or Cart.open_for(command.user_id)

        if command.item_type == ItemType.PRODUCT.value:
            product = get_product(command.item_id)
            existing = cart.find_line(command.item_type, product.id)
            _ensure_stock(product, command.quantity + (existing.quantity if existing else 0))
        else:
            service = get_service(command.item_id)
            if not service.is_active:
                raise ValidationError({"service_id": ["Service is not available"]})

        item = cart.add_item(
            item_type=command.item_type,
            catalogue_id=command.item_id,
            quantity=command.quantity,
            appointment=command.appointment,
        )
        repo.add(cart)
        return str(item.id)

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        repo = current_domain.repository_for(Cart)
        cart = self._cart_of(command.user_id)
        item = cart.get_item(command.item_id)

        if command.quantity > 0 and item.item_type == ItemType.PRODUCT.value:
            _ensure_stock(get_product(item.product_id), command.quantity)

        cart.update_item_quantity(command.item_id, command.quantity)
        repo.add(cart)

    @handle(RemoveCartItem)
    def remove_cart_item(self, command):
        repo = current_domain.repository_for(Cart)
        cart = self._cart_of(command.user_id)
        cart.remove_item(command.item_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id)
        if cart is None or not cart.items:
            return
        cart.clear()
        repo.add(cart)

    @staticmethod
    def _cart_of(user_id):
        cart = current_domain.repository_for(Cart).for_user(user_id)
        if cart is None:
            raise ObjectNotFoundError("Cart item not found")
        return cart
