import pytest
from ordering.catalogue.management import CreateProduct, CreateService
from protean import current_domain


@pytest.fixture()
def create_product():
    def _create(name="Desk Lamp", price=100.0, stock=10, category="lighting"):
        return current_domain.process(
            CreateProduct(name=name, price=price, stock=stock, category=category),
            asynchronous=False,
        )

    return _create


@pytest.fixture()
def create_service():
    def _create(name="Lamp Assembly", price=30.0, owner_id="owner-001", category="assembly"):
        return current_domain.process(
            CreateService(name=name, price=price, owner_id=owner_id, category=category),
            asynchronous=False,
        )

    return _create
