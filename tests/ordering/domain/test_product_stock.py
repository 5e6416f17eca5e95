"""Tests for Product stock movements."""

import uuid

import pytest
from ordering.catalogue.events import StockAdjusted, StockRestored, StockWithdrawn
from ordering.catalogue.product import Product
from protean.exceptions import ValidationError
from shared.errors import InsufficientStock


@pytest.fixture()
def product():
    return Product.create(name="Kettle", price=40.0, stock=5, category="kitchen")


class TestProductCreation:
    def test_defaults(self):
        product = Product.create(name="Mug", price=8.5)
        assert product.stock == 0
        assert product.created_at is not None

    def test_identity_is_a_uuid_string(self):
        product = Product.create(name="Mug", price=8.5)
        assert isinstance(product.id, str)
        assert str(uuid.UUID(product.id)) == product.id

    def test_negative_price_is_rejected(self):
        with pytest.raises(ValidationError):
            Product.create(name="Mug", price=-1.0)

    def test_negative_stock_is_rejected(self):
        with pytest.raises(ValidationError):
            Product.create(name="Mug", price=1.0, stock=-1)


class TestShortage:
    def test_enough_stock(self, product):
        assert product.shortage(5) is None

    def test_short(self, product):
        assert product.shortage(8) == {
            "product_id": str(product.id),
            "item_name": "Kettle",
            "requested": 8,
            "available": 5,
        }


class TestWithdrawStock:
    def test_withdraw(self, product):
        product.withdraw_stock(3, order_id="ord-001")

        assert product.stock == 2
        event = product._events[-1]
        assert isinstance(event, StockWithdrawn)
        assert event.remaining == 2
        assert event.order_id == "ord-001"

    def test_withdraw_everything(self, product):
        product.withdraw_stock(5)
        assert product.stock == 0

    def test_withdraw_more_than_available(self, product):
        with pytest.raises(InsufficientStock) as exc:
            product.withdraw_stock(6)

        assert product.stock == 5
        assert exc.value.lines[0]["available"] == 5


class TestRestoreAndAdjust:
    def test_restore(self, product):
        product.restore_stock(2)
        assert product.stock == 7
        assert isinstance(product._events[-1], StockRestored)

    def test_adjust_up(self, product):
        product.adjust_stock(10, reason="Delivery")
        assert product.stock == 15
        event = product._events[-1]
        assert isinstance(event, StockAdjusted)
        assert event.reason == "Delivery"

    def test_adjust_down_to_zero(self, product):
        product.adjust_stock(-5)
        assert product.stock == 0

    def test_adjust_below_zero(self, product):
        with pytest.raises(ValidationError) as exc:
            product.adjust_stock(-6)
        assert exc.value.messages["stock"] == ["Stock cannot go below zero"]
        assert product.stock == 5


class TestUpdateDetails:
    def test_partial_update(self, product):
        product.update_details(price=45.0)
        assert product.price == 45.0
        assert product.name == "Kettle"
