"""Ordering bounded context: catalogue inventory, carts, checkout and orders.

Inventory shares the context with carts and orders so that placing an
order, withdrawing stock and clearing the cart commit in one unit of work.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

ordering = Domain(name="ordering")
