"""FastAPI routes for the Ordering domain: catalogue, cart and orders."""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from identity.access.dependencies import Requires, authenticated, current_principal
from identity.access.gate import Principal, require_login, require_owner_or_permission, require_permission
from ordering.api.schemas import (
    AdjustStockRequest,
    CartLineRequest,
    CreateOrderRequest,
    CreateProductRequest,
    CreateServiceRequest,
    UpdateCartItemRequest,
    UpdateOrderStatusRequest,
    UpdateProductRequest,
    UpdateServiceRequest,
)
from ordering.cart.cart import ItemType
from ordering.cart.items import AddToCart, ClearCart, RemoveCartItem, UpdateCartItem
from ordering.cart.pricing import cart_summary, check_stock
from ordering.catalogue.lookup import get_product, get_service
from ordering.catalogue.management import (
    AdjustStock,
    CreateProduct,
    CreateService,
    DeleteProduct,
    DeleteService,
    UpdateProduct,
    UpdateService,
)
from ordering.catalogue.queries import list_products, list_services, product_data, service_data
from ordering.checkout.placement import PlaceOrder
from ordering.checkout.retry import process_with_retry
from ordering.order.order import Order
from ordering.order.queries import all_orders, order_data, order_statistics, orders_of_user
from ordering.order.status import UpdateOrderStatus
from shared.api import envelope


def _paged(result: dict, page: int, per_page: int) -> dict:
    return {**result, "page": page, "per_page": per_page}


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.get("")
async def get_products(
    category: str | None = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
):
    result = list_products(category=category, offset=(page - 1) * per_page, limit=per_page)
    return envelope("Products retrieved", _paged(result, page, per_page))


@product_router.get("/detail")
async def get_product_detail(product_id: str = Query(..., alias="id")):
    return envelope("Product retrieved", product_data(get_product(product_id)))


@product_router.post("", status_code=201)
async def create_product(body: CreateProductRequest, principal: Principal = Depends(Requires("manage_products"))):
    command = CreateProduct(
        name=body.name,
        description=body.description,
        price=body.price,
        stock=body.stock,
        category=body.category,
    )
    product_id = current_domain.process(command, asynchronous=False)
    return envelope("Product created", {"product_id": product_id}, status_code=201)


@product_router.put("/detail")
async def update_product(
    body: UpdateProductRequest,
    product_id: str = Query(..., alias="id"),
    principal: Principal = Depends(Requires("manage_products")),
):
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        description=body.description,
        price=body.price,
        category=body.category,
    )
    current_domain.process(command, asynchronous=False)
    return envelope("Product updated", product_data(get_product(product_id)))


@product_router.delete("/detail")
async def delete_product(
    product_id: str = Query(..., alias="id"),
    principal: Principal = Depends(Requires("manage_products")),
):
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return envelope("Product deleted")


@product_router.put("/stock")
async def adjust_product_stock(
    body: AdjustStockRequest,
    product_id: str = Query(..., alias="id"),
    principal: Principal = Depends(Requires("manage_products")),
):
    command = AdjustStock(product_id=product_id, delta=body.delta, reason=body.reason)
    stock = current_domain.process(command, asynchronous=False)
    return envelope("Stock updated", {"product_id": product_id, "stock": stock})


# ---------------------------------------------------------------------------
# Service Router
# ---------------------------------------------------------------------------
service_router = APIRouter(prefix="/services", tags=["services"])


@service_router.get("")
async def get_services(
    category: str | None = None,
    owner_id: str | None = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
):
    result = list_services(category=category, owner_id=owner_id, offset=(page - 1) * per_page, limit=per_page)
    return envelope("Services retrieved", _paged(result, page, per_page))


@service_router.get("/detail")
async def get_service_detail(service_id: str = Query(..., alias="id")):
    return envelope("Service retrieved", service_data(get_service(service_id)))


@service_router.post("", status_code=201)
async def create_service(body: CreateServiceRequest, principal: Principal | None = Depends(current_principal)):
    principal = require_login(principal)
    if not principal.can("manage_services"):
        require_permission(principal, "manage_own_services")

    command = CreateService(
        owner_id=principal.user_id,
        name=body.name,
        description=body.description,
        price=body.price,
        category=body.category,
    )
    service_id = current_domain.process(command, asynchronous=False)
    return envelope("Service created", {"service_id": service_id}, status_code=201)


@service_router.put("/detail")
async def update_service(
    body: UpdateServiceRequest,
    service_id: str = Query(..., alias="id"),
    principal: Principal | None = Depends(current_principal),
):
    service = get_service(service_id)
    require_owner_or_permission(principal, service.owner_id, "manage_services", "manage_own_services")

    command = UpdateService(
        service_id=service_id,
        name=body.name,
        description=body.description,
        price=body.price,
        category=body.category,
        is_active=body.is_active,
    )
    current_domain.process(command, asynchronous=False)
    return envelope("Service updated", service_data(get_service(service_id)))


@service_router.delete("/detail")
async def delete_service(
    service_id: str = Query(..., alias="id"),
    principal: Principal | None = Depends(current_principal),
):
    service = get_service(service_id)
    require_owner_or_permission(principal, service.owner_id, "manage_services", "manage_own_services")

    current_domain.process(DeleteService(service_id=service_id), asynchronous=False)
    return envelope("Service deleted")


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("")
async def get_cart(principal: Principal = Depends(authenticated)):
    return envelope("Cart retrieved", cart_summary(principal.user_id))


@cart_router.post("")
async def add_to_cart(body: CartLineRequest, principal: Principal = Depends(Requires("place_orders"))):
    if body.product_id:
        item_type, item_id = ItemType.PRODUCT.value, body.product_id
    else:
        item_type, item_id = ItemType.SERVICE.value, body.service_id

    command = AddToCart(
        user_id=principal.user_id,
        item_type=item_type,
        item_id=item_id,
        quantity=body.quantity,
        appointment=body.appointment,
    )
    item_id = current_domain.process(command, asynchronous=False)
    return envelope("Item added to cart", {"item_id": item_id, "cart": cart_summary(principal.user_id)})


@cart_router.put("/item")
async def update_cart_item(
    body: UpdateCartItemRequest,
    item_id: str = Query(..., alias="id"),
    principal: Principal = Depends(Requires("place_orders")),
):
    command = UpdateCartItem(user_id=principal.user_id, item_id=item_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    message = "Cart item updated" if body.quantity > 0 else "Item removed from cart"
    return envelope(message, cart_summary(principal.user_id))


@cart_router.delete("/item")
async def remove_cart_item(
    item_id: str = Query(..., alias="id"),
    principal: Principal = Depends(Requires("place_orders")),
):
    current_domain.process(RemoveCartItem(user_id=principal.user_id, item_id=item_id), asynchronous=False)
    return envelope("Item removed from cart", cart_summary(principal.user_id))


@cart_router.delete("/clear")
async def clear_cart(principal: Principal = Depends(Requires("place_orders"))):
    current_domain.process(ClearCart(user_id=principal.user_id), asynchronous=False)
    return envelope("Cart cleared")


@cart_router.get("/check-stock")
async def check_cart_stock(principal: Principal = Depends(authenticated)):
    shortages = check_stock(principal.user_id)
    return envelope(
        "Stock checked",
        {"out_of_stock_items": shortages, "has_stock_issues": bool(shortages)},
    )


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("/checkout", status_code=201)
async def checkout(principal: Principal = Depends(Requires("place_orders"))):
    order_id = process_with_retry(lambda: PlaceOrder(user_id=principal.user_id, from_cart=True))
    order = current_domain.repository_for(Order).get(order_id)
    return envelope("Order placed successfully", order_data(order), status_code=201)


@order_router.post("", status_code=201)
async def create_order(body: CreateOrderRequest, principal: Principal = Depends(Requires("place_orders"))):
    items = json.dumps(
        [
            {
                "product_id": line.product_id,
                "service_id": line.service_id,
                "quantity": line.quantity,
                "appointment": line.appointment.isoformat() if line.appointment else None,
            }
            for line in body.items
        ]
    )
    order_id = process_with_retry(lambda: PlaceOrder(user_id=principal.user_id, items=items, from_cart=False))
    order = current_domain.repository_for(Order).get(order_id)
    return envelope("Order created", order_data(order), status_code=201)


@order_router.get("")
async def get_my_orders(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    principal: Principal = Depends(authenticated),
):
    result = orders_of_user(principal.user_id, offset=(page - 1) * per_page, limit=per_page)
    return envelope("Orders retrieved", _paged(result, page, per_page))


@order_router.get("/all")
async def get_all_orders(
    status: str | None = None,
    user_id: str | None = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    principal: Principal = Depends(Requires("manage_orders")),
):
    result = all_orders(status=status, user_id=user_id, offset=(page - 1) * per_page, limit=per_page)
    return envelope("Orders retrieved", _paged(result, page, per_page))


@order_router.get("/statistics")
async def get_order_statistics(principal: Principal = Depends(Requires("manage_orders"))):
    return envelope("Order statistics retrieved", order_statistics())


@order_router.get("/detail")
async def get_order_detail(
    order_id: str = Query(..., alias="id"),
    principal: Principal = Depends(authenticated),
):
    order = current_domain.repository_for(Order).get(order_id)
    if not principal.owns(order.user_id):
        require_permission(principal, "manage_orders")
    return envelope("Order retrieved", order_data(order))


@order_router.put("/detail")
async def update_order_status(
    body: UpdateOrderStatusRequest,
    order_id: str = Query(..., alias="id"),
    principal: Principal = Depends(Requires("manage_orders")),
):
    current_domain.process(UpdateOrderStatus(order_id=order_id, status=body.status), asynchronous=False)
    order = current_domain.repository_for(Order).get(order_id)
    return envelope("Order status updated", order_data(order))
