"""Response error extraction for load test observability.

Every marketplace response is an envelope:
``{"success": false, "message": "...", "errors": {...}}``. ``errors`` is
either field messages (``{"field": ["msg"]}``) or, for stock failures,
``{"out_of_stock_items": [...]}``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    """
    try:
        body = response.json()
    except ValueError:
        # Not JSON, return raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if not isinstance(body, dict):
        return str(body)[:300]

    message = body.get("message") or "(no message)"
    errors = body.get("errors")
    if not errors:
        return message

    if "out_of_stock_items" in errors:
        shortages = [
            f"{line.get('item_name')}: {line.get('requested')}>{line.get('available')}"
            for line in errors["out_of_stock_items"]
        ]
        return f"{message} ({', '.join(shortages)})"

    parts = []
    for field, messages in errors.items():
        text = "; ".join(messages) if isinstance(messages, list) else str(messages)
        parts.append(f"{field}: {text}")
    return f"{message} | {' | '.join(parts)}"
