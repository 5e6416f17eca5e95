"""Error taxonomy shared by the bounded contexts.

Protean's own exceptions cover validation (``ValidationError``), missing
records (``ObjectNotFoundError``) and concurrent modification
(``ExpectedVersionError``). The classes below add the outcomes Protean does
not model: authentication, authorization, uniqueness conflicts and stock
shortages. Every class carries the HTTP
status it is translated to by ``shared.api``.
"""

from protean.exceptions import ValidationError


class MarketplaceError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Unauthenticated(MarketplaceError):
    """No principal, or the supplied credentials did not verify."""

    status_code = 401

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class Forbidden(MarketplaceError):
    """The principal is known but lacks the required permission."""

    status_code = 403

    def __init__(self, message: str = "Permission denied") -> None:
        super().__init__(message)


class Conflict(MarketplaceError):
    status_code = 409


class InsufficientStock(ValidationError):
    """One or more product lines ask for more than the catalogue holds.

    ``lines`` lists every offending line as a dict with ``product_id``,
    ``item_name``, ``requested`` and ``available`` so callers can report all
    of them at once.
    """

    def __init__(self, lines: list[dict], message: str = "Not enough stock for some items") -> None:
        self.lines = lines
        self.message = message
        super().__init__({"stock": [message]})
