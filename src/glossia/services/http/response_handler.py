"""Response Handler - turns provider HTTP responses into data or typed errors."""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx

from glossia.core import (
    AuthenticationError,
    BadRequestError,
    GlossiaError,
    HttpError,
    ParseError,
    RateLimitError,
)


def parse_retry_after(value: Optional[str]) -> Optional[int]:
    """Parse a Retry-After header given in whole seconds."""
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def handle_response(response: httpx.Response) -> Any:
    """
    Return the parsed JSON body of a successful response.

    Raises:
        ParseError: If a 2xx body is not valid JSON.
        GlossiaError: A structured error for any non-2xx status.
    """
    if response.is_success:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ParseError(f"Failed to parse JSON response: {e}") from e

    raise error_from_response(response)


def error_from_response(response: httpx.Response) -> GlossiaError:
    """
    Build the most specific error for a non-2xx response.

    A body of the form {"error": {"message", "type", "code"}} is promoted
    to Authentication/BadRequest/RateLimit by status; anything else keeps
    the status, headers and body on an HttpError.
    """
    status = response.status_code
    headers = dict(response.headers)
    body = response.text

    try:
        data = json.loads(body) if body else None
    except ValueError:
        data = None

    if isinstance(data, dict) and isinstance(data.get("error"), dict):
        details = data["error"]
        message = details.get("message") or f"HTTP {status}"
        provider_type = details.get("type")
        provider_code = details.get("code")
        if provider_code is not None:
            provider_code = str(provider_code)

        if status in (401, 403):
            return AuthenticationError(
                message,
                status=status,
                provider_type=provider_type,
                provider_code=provider_code,
            )
        if status == 400:
            return BadRequestError(message, provider_type=provider_type, provider_code=provider_code)
        if status == 429:
            return RateLimitError(message, retry_after_secs=parse_retry_after(response.headers.get("retry-after")))
        return HttpError(status, message, headers=headers, body=body)

    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return HttpError(status, data["message"], headers=headers, body=body)

    return HttpError(status, f"HTTP {status}", headers=headers, body=body)
