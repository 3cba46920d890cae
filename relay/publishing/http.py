"""Helpers shared by the HTTP publishers."""

from typing import Any

import httpx


def response_body(response: httpx.Response) -> Any:
    """Decode a provider response as JSON, falling back to raw text."""
    try:
        return response.json()
    except ValueError:
        return response.text


def as_result(body: Any) -> dict[str, Any]:
    """Wrap non-object bodies so they fit PublishReceipt.result."""
    if isinstance(body, dict):
        return body
    return {"raw": body}
