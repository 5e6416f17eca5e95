"""Public catalogue reads."""

from protean.utils.globals import current_domain

from ordering.catalogue.product import Product
from ordering.catalogue.service import Service


def product_data(product) -> dict:
    return {
        "id": str(product.id),
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "stock": product.stock,
        "category": product.category,
        "in_stock": product.stock > 0,
    }


def service_data(service) -> dict:
    return {
        "id": str(service.id),
        "name": service.name,
        "description": service.description,
        "price": service.price,
        "category": service.category,
        "owner_id": str(service.owner_id),
        "is_active": service.is_active,
    }


def list_products(category=None, offset=0, limit=20) -> dict:
    queryset = current_domain.repository_for(Product)._dao.query
    if category:
        queryset = queryset.filter(category=category)
    result = queryset.order_by("name").offset(offset).limit(limit).all()
    return {"items": [product_data(p) for p in result.items], "total": result.total}


def list_services(category=None, owner_id=None, include_inactive=False, offset=0, limit=20) -> dict:
    criteria = {}
    if category:
        criteria["category"] = category
    if owner_id:
        criteria["owner_id"] = owner_id
    if not include_inactive:
        criteria["is_active"] = True

    queryset = current_domain.repository_for(Service)._dao.query
    if criteria:
        queryset = queryset.filter(**criteria)
    result = queryset.order_by("name").offset(offset).limit(limit).all()
    return {"items": [service_data(s) for s in result.items], "total": result.total}
