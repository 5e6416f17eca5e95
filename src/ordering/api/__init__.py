"""Ordering domain API package."""

from ordering.api.routes import cart_router, order_router, product_router, service_router

__all__ = ["product_router", "service_router", "cart_router", "order_router"]
