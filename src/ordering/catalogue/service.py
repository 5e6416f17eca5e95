"""Service aggregate: a bookable offering listed by a user. Not stock-limited."""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Float, Identifier, String, Text

from ordering.domain import ordering


@ordering.aggregate
class Service:
    name = String(required=True, max_length=255)
    description = Text()
    price = Float(required=True, min_value=0.0)
    category = String(max_length=100)
    owner_id = Identifier(required=True)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def list_for(cls, owner_id, name, price, description=None, category=None):
        now = datetime.now(UTC)
        return cls(
            owner_id=owner_id,
            name=name,
            description=description,
            price=price,
            category=category,
            created_at=now,
            updated_at=now,
        )

    def update_details(self, name=None, description=None, price=None, category=None, is_active=None):
        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if price is not None:
            self.price = price
        if category is not None:
            self.category = category
        if is_active is not None:
            self.is_active = is_active
        self.updated_at = datetime.now(UTC)
