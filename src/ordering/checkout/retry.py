"""Bounded retry of checkout commands that lost an optimistic-concurrency race."""

import structlog
from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

from shared.errors import Conflict
from shared.settings import get_settings

logger = structlog.get_logger(__name__)


def process_with_retry(build_command, attempts: int | None = None):
    """Process the command produced by ``build_command`` until it commits.

    A fresh command is built for every attempt so stock is re-read each
    time. After ``attempts`` version conflicts the caller gets ``Conflict``.
    """
    attempts = attempts or get_settings().checkout_retry_attempts

    for attempt in range(1, attempts + 1):
        try:
            return current_domain.process(build_command(), asynchronous=False)
        except ExpectedVersionError as exc:
            logger.warning("Checkout lost a concurrent stock update", attempt=attempt, attempts=attempts)
            if attempt == attempts:
                raise Conflict("Stock changed while checking out, please try again") from exc
