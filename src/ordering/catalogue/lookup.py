"""Catalogue reads with client-facing not-found messages."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.catalogue.product import Product
from ordering.catalogue.service import Service


def get_product(product_id) -> Product:
    try:
        return current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError as exc:
        raise ObjectNotFoundError("Product not found") from exc


def get_service(service_id) -> Service:
    try:
        return current_domain.repository_for(Service).get(service_id)
    except ObjectNotFoundError as exc:
        raise ObjectNotFoundError("Service not found") from exc


def find_product(product_id) -> Product | None:
    """Like ``get_product`` but answers ``None`` for entries that vanished."""
    try:
        return current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        return None


def find_service(service_id) -> Service | None:
    try:
        return current_domain.repository_for(Service).get(service_id)
    except ObjectNotFoundError:
        return None
