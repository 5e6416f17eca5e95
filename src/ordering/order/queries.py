"""Order reads: per-user history, detail, back-office listing and statistics."""

from protean.utils.globals import current_domain

from ordering.order.order import Order, OrderStatus
from shared.query import scan


def order_data(order) -> dict:
    return {
        "id": str(order.id),
        "user_id": str(order.user_id),
        "status": order.status,
        "total_price": order.total_price,
        "from_cart": order.from_cart,
        "placed_at": order.placed_at,
        "updated_at": order.updated_at,
        "items": [
            {
                "id": str(item.id),
                "item_type": item.item_type,
                "product_id": str(item.product_id) if item.product_id else None,
                "service_id": str(item.service_id) if item.service_id else None,
                "item_name": item.item_name,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "total_price": item.total_price,
                "appointment": item.appointment,
            }
            for item in order.items
        ],
    }


def _listing(queryset, offset, limit) -> dict:
    result = queryset.order_by("-placed_at").offset(offset).limit(limit).all()
    return {"items": [order_data(order) for order in result.items], "total": result.total}


def orders_of_user(user_id, offset=0, limit=20) -> dict:
    """The user's orders, newest first."""
    queryset = current_domain.repository_for(Order)._dao.query.filter(user_id=user_id)
    return _listing(queryset, offset, limit)


def all_orders(status=None, user_id=None, offset=0, limit=20) -> dict:
    criteria = {}
    if status:
        criteria["status"] = status
    if user_id:
        criteria["user_id"] = user_id

    queryset = current_domain.repository_for(Order)._dao.query
    if criteria:
        queryset = queryset.filter(**criteria)
    return _listing(queryset, offset, limit)


def order_statistics() -> dict:
    """Counts per status, revenue of non-cancelled orders and distinct customers."""
    by_status = {status.value: 0 for status in OrderStatus}
    revenue = 0.0
    customers = set()

    for order in scan(current_domain.repository_for(Order)._dao.query):
        by_status[order.status] = by_status.get(order.status, 0) + 1
        customers.add(str(order.user_id))
        if order.status != OrderStatus.CANCELLED.value:
            revenue += order.total_price

    return {
        "total_orders": sum(by_status.values()),
        "by_status": by_status,
        "total_revenue": round(revenue, 2),
        "total_customers": len(customers),
    }
