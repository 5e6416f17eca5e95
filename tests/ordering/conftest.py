import pytest


@pytest.fixture(autouse=True)
def ordering_ctx(ordering_domain):
    """Run every ordering test inside the ordering domain context."""
    ctx = ordering_domain.domain_context()
    ctx.push()

    yield ordering_domain

    ctx.pop()
