"""Permission aggregate: a named capability such as ``place_orders``."""

from datetime import UTC, datetime

from protean.fields import DateTime, String

from identity.domain import identity


@identity.aggregate
class Permission:
    name: String(required=True, max_length=100, unique=True)
    description: String(max_length=255)
    created_at: DateTime(default=lambda: datetime.now(UTC))

    def update(self, name=None, description=None):
        if name is not None:
            self.name = name
        if description is not None:
            self.description = description


@identity.repository(part_of=Permission)
class PermissionRepository:
    def find_by_name(self, name):
        items = self._dao.query.filter(name=name).all().items
        return items[0] if items else None

    def listing(self, offset=0, limit=100):
        return self._dao.query.order_by("name").offset(offset).limit(limit).all()
