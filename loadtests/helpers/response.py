"""Response error extraction for load test observability.

Parses customer API error responses into human-readable messages.
Handles the shapes the service produces:

- Client errors (400/413): {"error": "msg"}
- Reserved-id lookups (404): empty body
- Anything else FastAPI renders itself: {"detail": ...}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    Gracefully handles empty or unparseable bodies.
    """
    text = getattr(response, "text", "") or ""
    if not text:
        return "(empty response body)"

    try:
        body = response.json()
    except ValueError:
        return text[:300]

    if isinstance(body, dict):
        if "error" in body:
            return str(body["error"])
        if "detail" in body:
            return str(body["detail"])[:300]

    return str(body)[:300]
