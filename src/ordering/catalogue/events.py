"""Domain events for catalogue inventory."""

from protean.fields import DateTime, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Product")
class StockWithdrawn:
    """Units left the shelf because an order was placed or reinstated."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    remaining = Integer(required=True)
    order_id = Identifier()
    withdrawn_at = DateTime(required=True)


@ordering.event(part_of="Product")
class StockRestored:
    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    remaining = Integer(required=True)
    order_id = Identifier()
    restored_at = DateTime(required=True)


@ordering.event(part_of="Product")
class StockAdjusted:
    """Manual stock correction by a catalogue manager."""

    __version__ = 1

    product_id = Identifier(required=True)
    delta = Integer(required=True)
    remaining = Integer(required=True)
    reason = String(max_length=255)
    adjusted_at = DateTime(required=True)
