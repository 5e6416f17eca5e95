"""Catalogue maintenance: product and service commands with their handlers.

Authorization happens at the HTTP boundary; handlers assume the caller was
allowed to act.
"""

import structlog
from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart, ItemType
from ordering.catalogue.product import Product
from ordering.catalogue.service import Service
from ordering.domain import ordering
from shared.query import scan

logger = structlog.get_logger(__name__)


def _drop_from_carts(item_type, catalogue_id):
    """Remove every cart line pointing at a catalogue entry that is being deleted."""
    cart_repo = current_domain.repository_for(Cart)
    for cart in list(scan(cart_repo._dao.query)):
        if cart.drop_entry(item_type, catalogue_id):
            cart_repo.add(cart)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
@ordering.command(part_of="Product")
class CreateProduct:
    name = String(required=True, max_length=255)
    description = Text()
    price = Float(required=True, min_value=0.0)
    stock = Integer(default=0, min_value=0)
    category = String(max_length=100)


@ordering.command(part_of="Product")
class UpdateProduct:
    product_id = Identifier(required=True)
    name = String(max_length=255)
    description = Text()
    price = Float(min_value=0.0)
    category = String(max_length=100)


@ordering.command(part_of="Product")
class DeleteProduct:
    product_id = Identifier(required=True)


@ordering.command(part_of="Product")
class AdjustStock:
    """Add (positive delta) or remove (negative delta) units by hand."""

    product_id = Identifier(required=True)
    delta = Integer(required=True)
    reason = String(max_length=255)


@ordering.command_handler(part_of=Product)
class ManageProductsHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        product = Product.create(
            name=command.name,
            description=command.description,
            price=command.price,
            stock=command.stock or 0,
            category=command.category,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update_details(
            name=command.name,
            description=command.description,
            price=command.price,
            category=command.category,
        )
        repo.add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        _drop_from_carts(ItemType.PRODUCT.value, product.id)
        repo._dao.delete(product)
        logger.info("Deleted product", product_id=str(command.product_id))

    @handle(AdjustStock)
    def adjust_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.adjust_stock(command.delta, reason=command.reason)
        repo.add(product)
        return product.stock


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------
@ordering.command(part_of="Service")
class CreateService:
    owner_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    description = Text()
    price = Float(required=True, min_value=0.0)
    category = String(max_length=100)


@ordering.command(part_of="Service")
class UpdateService:
    service_id = Identifier(required=True)
    name = String(max_length=255)
    description = Text()
    price = Float(min_value=0.0)
    category = String(max_length=100)
    is_active = Boolean()


@ordering.command(part_of="Service")
class DeleteService:
    service_id = Identifier(required=True)


@ordering.command_handler(part_of=Service)
class ManageServicesHandler:
    @handle(CreateService)
    def create_service(self, command):
        service = Service.list_for(
            owner_id=command.owner_id,
            name=command.name,
            description=command.description,
            price=command.price,
            category=command.category,
        )
        current_domain.repository_for(Service).add(service)
        return str(service.id)

    @handle(UpdateService)
    def update_service(self, command):
        repo = current_domain.repository_for(Service)
        service = repo.get(command.service_id)
        service.update_details(
            name=command.name,
            description=command.description,
            price=command.price,
            category=command.category,
            is_active=command.is_active,
        )
        repo.add(service)

    @handle(DeleteService)
    def delete_service(self, command):
        repo = current_domain.repository_for(Service)
        service = repo.get(command.service_id)
        _drop_from_carts(ItemType.SERVICE.value, service.id)
        repo._dao.delete(service)
        logger.info("Deleted service", service_id=str(command.service_id))
