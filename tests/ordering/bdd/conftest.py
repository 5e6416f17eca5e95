"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.cart.cart import Cart, ItemType
from ordering.cart.items import AddToCart
from ordering.catalogue.management import AdjustStock, CreateProduct
from ordering.catalogue.product import Product
from ordering.checkout.placement import PlaceOrder
from ordering.order.order import Order
from ordering.order.status import UpdateOrderStatus
from protean import current_domain
from pytest_bdd import given, parsers, then


@pytest.fixture()
def products():
    """Product ids by name."""
    return {}


@pytest.fixture()
def outcome():
    """What the When step produced: an ``order_id`` or a captured ``exc``."""
    return {"order_id": None, "exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a customer "{user_id}"'), target_fixture="customer_id")
def a_customer(user_id):
    return user_id


@given(parsers.cfparse('a product "{name}" priced {price:f} with {stock:d} in stock'))
def a_product(products, name, price, stock):
    products[name] = current_domain.process(CreateProduct(name=name, price=price, stock=stock), asynchronous=False)


@given(parsers.cfparse('the customer has {quantity:d} of "{name}" in the cart'))
def product_in_cart(customer_id, products, quantity, name):
    current_domain.process(
        AddToCart(user_id=customer_id, item_type=ItemType.PRODUCT.value, item_id=products[name], quantity=quantity),
        asynchronous=False,
    )


@given(parsers.cfparse('the stock of "{name}" is reduced by {amount:d}'))
def stock_reduced(products, name, amount):
    current_domain.process(AdjustStock(product_id=products[name], delta=-amount), asynchronous=False)


@given("the customer has checked out")
def checked_out(customer_id, outcome):
    outcome["order_id"] = current_domain.process(PlaceOrder(user_id=customer_id, from_cart=True), asynchronous=False)


@given(parsers.cfparse('the order is moved to "{status}"'))
def order_moved(outcome, status):
    current_domain.process(UpdateOrderStatus(order_id=outcome["order_id"], status=status), asynchronous=False)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def product_stock(products, name, stock):
    assert current_domain.repository_for(Product).get(products[name]).stock == stock


@then("the cart is empty")
def cart_is_empty(customer_id):
    assert len(current_domain.repository_for(Cart).for_user(customer_id).items) == 0


@then(parsers.cfparse("the cart holds {count:d} line"))
@then(parsers.cfparse("the cart still holds {count:d} line"))
def cart_lines(customer_id, count):
    assert len(current_domain.repository_for(Cart).for_user(customer_id).items) == count


@then(parsers.cfparse('the order status is "{status}"'))
def order_status(outcome, status):
    assert current_domain.repository_for(Order).get(outcome["order_id"]).status == status
