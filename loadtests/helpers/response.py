"""Response error extraction for load test observability.

Parses Storefront API error responses into human-readable messages.
Every error body has the shape ``{"error": ..., "data": ...}``:

- Validation (400): {"error": {"items.0.quantity": ["..."]}}
- Not found / auth (401/403/404): {"error": "msg"}
- Insufficient stock (409): {"error": "msg", "data": {"product_id": 1, "requested": 3, "available": 2}}
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
        # Not JSON: return raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if not isinstance(body, dict) or "error" not in body:
        return str(body)[:300]

    error = body["error"]
    if isinstance(error, dict):
        detail = " | ".join(f"{k}: {', '.join(v) if isinstance(v, list) else v}" for k, v in error.items())
    else:
        detail = str(error)

    data = body.get("data")
    if data:
        detail += " (" + ", ".join(f"{k}={v}" for k, v in data.items()) + ")"
    return detail


def is_sold_out(response: Response) -> bool:
    """True when a placement was refused for lack of stock."""
    return response.status_code == 409
