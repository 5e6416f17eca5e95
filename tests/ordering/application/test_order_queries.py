"""Order listings and statistics."""

import json

from ordering.checkout.placement import PlaceOrder
from ordering.order.queries import all_orders, order_statistics, orders_of_user
from ordering.order.status import UpdateOrderStatus
from protean import current_domain


def _place(product_id, quantity, user_id):
    return current_domain.process(
        PlaceOrder(user_id=user_id, items=json.dumps([{"product_id": product_id, "quantity": quantity}])),
        asynchronous=False,
    )


class TestListings:
    def test_orders_of_user(self, create_product):
        product_id = create_product(stock=20)
        _place(product_id, 1, "user-001")
        _place(product_id, 1, "user-001")
        _place(product_id, 1, "user-002")

        result = orders_of_user("user-001")
        assert result["total"] == 2
        assert {order["user_id"] for order in result["items"]} == {"user-001"}

    def test_all_orders_by_status(self, create_product):
        product_id = create_product(stock=20)
        cancelled = _place(product_id, 1, "user-001")
        _place(product_id, 1, "user-002")
        current_domain.process(UpdateOrderStatus(order_id=cancelled, status="cancelled"), asynchronous=False)

        result = all_orders(status="cancelled")
        assert [order["id"] for order in result["items"]] == [cancelled]
        assert all_orders()["total"] == 2


class TestStatistics:
    def test_empty(self):
        stats = order_statistics()
        assert stats["total_orders"] == 0
        assert stats["total_revenue"] == 0.0
        assert stats["by_status"] == {"pending": 0, "shipped": 0, "delivered": 0, "cancelled": 0}

    def test_cancelled_orders_bring_no_revenue(self, create_product):
        product_id = create_product(price=10.0, stock=20)
        _place(product_id, 2, "user-001")
        cancelled = _place(product_id, 5, "user-002")
        current_domain.process(UpdateOrderStatus(order_id=cancelled, status="cancelled"), asynchronous=False)

        stats = order_statistics()
        assert stats["total_orders"] == 2
        assert stats["by_status"]["pending"] == 1
        assert stats["by_status"]["cancelled"] == 1
        assert stats["total_revenue"] == 20.0
        assert stats["total_customers"] == 2
