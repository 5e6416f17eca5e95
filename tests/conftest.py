import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay before any domain module is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ.setdefault("MARKETPLACE_SECRET_KEY", "test-secret-key")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path or "/bdd/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


def _reset(domain):
    with domain.domain_context():
        for _, provider in domain.providers.items():
            provider._data_reset()

        for _, broker in domain.brokers.items():
            broker._data_reset()

        domain.event_store.store._data_reset()


@pytest.fixture(scope="session")
def identity_domain():
    from identity.domain import identity

    identity.init()
    return identity


@pytest.fixture(scope="session")
def ordering_domain(identity_domain):
    from ordering.domain import ordering

    ordering.init()
    return ordering


@pytest.fixture(scope="session", autouse=True)
def setup_databases(identity_domain, ordering_domain):
    from shared.db import drop_db, setup_db

    setup_db(identity_domain)
    setup_db(ordering_domain)

    yield

    drop_db(identity_domain)
    drop_db(ordering_domain)


@pytest.fixture(autouse=True)
def run_around_tests(identity_domain, ordering_domain):
    """Cleanup both domains after every test."""
    yield

    _reset(identity_domain)
    _reset(ordering_domain)


# ---------------------------------------------------------------------------
# HTTP helpers shared by the integration suites
# ---------------------------------------------------------------------------
@pytest.fixture()
def client(identity_domain, ordering_domain):
    from fastapi import FastAPI
    from fastapi.testclient import TestClient
    from identity.api import auth_router, permission_router, role_router, user_router
    from ordering.api import cart_router, order_router, product_router, service_router
    from shared.api import domain_context_middleware, register_envelope_handlers

    app = FastAPI()
    app.middleware("http")(
        domain_context_middleware(
            {
                "/auth": identity_domain,
                "/users": identity_domain,
                "/roles": identity_domain,
                "/permissions": identity_domain,
                "/products": ordering_domain,
                "/services": ordering_domain,
                "/cart": ordering_domain,
                "/orders": ordering_domain,
            }
        )
    )
    register_envelope_handlers(app)
    for router in (
        auth_router,
        user_router,
        role_router,
        permission_router,
        product_router,
        service_router,
        cart_router,
        order_router,
    ):
        app.include_router(router)

    return TestClient(app)


@pytest.fixture()
def seeded(identity_domain):
    """Default permission catalogue plus the ``admin`` and ``customer`` roles."""
    from identity.access.seed import seed_access_control

    with identity_domain.domain_context():
        return seed_access_control()


@pytest.fixture()
def make_user(identity_domain, seeded):
    """Register a user, give them ``roles`` and return ``(user_id, auth_headers)``."""
    from identity.access.credentials import issue_access_token
    from identity.user.registration import RegisterUser
    from identity.user.role_assignment import AssignUserRoles

    def _make(username, roles=("customer",), password="secret123"):
        with identity_domain.domain_context():
            user_id = identity_domain.process(
                RegisterUser(username=username, email=f"{username}@example.com", password=password),
                asynchronous=False,
            )
            identity_domain.process(AssignUserRoles(user_id=user_id, roles=list(roles)), asynchronous=False)
        return user_id, {"Authorization": f"Bearer {issue_access_token(user_id)}"}

    return _make
