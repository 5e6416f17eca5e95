import pytest


@pytest.fixture(autouse=True)
def identity_ctx(identity_domain):
    """Run every identity test inside the identity domain context."""
    ctx = identity_domain.domain_context()
    ctx.push()

    yield identity_domain

    ctx.pop()
