"""Marketplace FastAPI application.

One web server in front of both bounded contexts. Each request runs inside
the Protean domain that owns its URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from identity.domain import identity
from ordering.domain import ordering
from shared.api import domain_context_middleware, envelope, register_envelope_handlers

# PROTEAN_ENV selects the domain.toml overlay (memory by default, PostgreSQL in production).
identity.init()
ordering.init()

from identity.api import auth_router, permission_router, role_router, user_router  # noqa: E402
from ordering.api import cart_router, order_router, product_router, service_router  # noqa: E402

ROUTE_DOMAINS = {
    "/auth": identity,
    "/users": identity,
    "/roles": identity,
    "/permissions": identity,
    "/products": ordering,
    "/services": ordering,
    "/cart": ordering,
    "/orders": ordering,
}

ROUTERS = (
    auth_router,
    user_router,
    role_router,
    permission_router,
    product_router,
    service_router,
    cart_router,
    order_router,
)


def create_app() -> FastAPI:
    application = FastAPI(
        title="Marketplace API",
        description="Products, services, carts and orders behind role-based access control",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.middleware("http")(domain_context_middleware(ROUTE_DOMAINS))
    register_envelope_handlers(application)

    for router in ROUTERS:
        application.include_router(router)

    @application.get("/health")
    async def health():
        return envelope(
            "ok",
            {"domains": {"identity": identity.name, "ordering": ordering.name}},
        )

    return application


app = create_app()
