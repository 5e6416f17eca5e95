"""BDD tests for cart item management."""

from ordering.cart.cart import Cart, ItemType
from ordering.cart.items import AddToCart, UpdateCartItem
from protean import current_domain
from pytest_bdd import parsers, scenarios, then, when
from shared.errors import InsufficientStock

scenarios("features/cart_items.feature")


def _line(customer_id, products, name):
    return current_domain.repository_for(Cart).for_user(customer_id).find_line(ItemType.PRODUCT.value, products[name])


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the customer adds {quantity:d} of "{name}"'))
def customer_adds(customer_id, products, outcome, quantity, name):
    try:
        current_domain.process(
            AddToCart(user_id=customer_id, item_type=ItemType.PRODUCT.value, item_id=products[name], quantity=quantity),
            asynchronous=False,
        )
    except InsufficientStock as exc:
        outcome["exc"] = exc


@when(parsers.cfparse('the customer sets the "{name}" quantity to {quantity:d}'))
def customer_sets_quantity(customer_id, products, name, quantity):
    item = _line(customer_id, products, name)
    current_domain.process(
        UpdateCartItem(user_id=customer_id, item_id=str(item.id), quantity=quantity),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the "{name}" line has quantity {quantity:d}'))
def line_quantity(customer_id, products, name, quantity):
    assert _line(customer_id, products, name).quantity == quantity


@then("the cart change is rejected for insufficient stock")
def cart_change_rejected(outcome):
    assert isinstance(outcome["exc"], InsufficientStock)
