"""Classification of API responses into typed values or API errors."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlsplit

import requests

from ..constants import HEADER_REQUEST_ID
from ..exceptions import (
    APIError,
    GenericAPIError,
    ResponseDecodeError,
    TransportError,
    UnhandledAPIError,
    UserError,
    ValidationError,
)
from ..types import GenericErrorDetails, UnhandledErrorDetails, UserErrorDetails

logger = logging.getLogger(__name__)


def _request_metadata(response: requests.Response) -> dict[str, str | None]:
    request = getattr(response, "request", None)
    url = getattr(request, "url", None) or getattr(response, "url", None)
    return {
        "request_id": response.headers.get(HEADER_REQUEST_ID) or None,
        "path": urlsplit(url).path if url else None,
        "method": getattr(request, "method", None),
    }


def handle_api_response(response: requests.Response, response_type: Any = None) -> Any:
    """Decode a successful response or raise a classified :class:`APIError`.

    Error bodies are matched, in order, against the user error shape
    (``messages`` with at least one locale), the generic error shape
    (non-empty ``msg``) and finally kept verbatim as an unhandled error.
    """

    metadata = _request_metadata(response)

    try:
        body: bytes = response.content or b""
    except requests.RequestException as exc:
        raise TransportError(
            "Failed to read response body",
            endpoint=metadata["path"],
            status_code=response.status_code,
            details={**metadata, "error": str(exc)},
        ) from exc

    status = response.status_code
    if 200 <= status < 300:
        return _decode_success(response, body, response_type, metadata)

    try:
        payload = response.json() if body else None
    except ValueError:
        payload = None

    user_error = UserErrorDetails.from_dict(payload)
    if user_error is not None:
        raise UserError("User error", status, user_error, **metadata)

    generic_error = GenericErrorDetails.from_dict(payload)
    if generic_error is not None:
        raise GenericAPIError(generic_error.msg, status, generic_error, **metadata)

    raw = UnhandledErrorDetails(body=body.decode("utf-8", errors="replace"))
    raise UnhandledAPIError("Unhandled error", status, raw, **metadata)


def _decode_success(
    response: requests.Response,
    body: bytes,
    response_type: Any,
    metadata: dict[str, str | None],
) -> Any:
    if not body.strip():
        if response_type is None:
            return None
        payload: Any = {}
    else:
        try:
            payload = response.json()
        except ValueError as exc:
            raise ResponseDecodeError(
                "Failed to parse success response",
                endpoint=metadata["path"],
                status_code=response.status_code,
                details={**metadata, "error": str(exc)},
            ) from exc

    if response_type is None:
        return payload

    try:
        return response_type.from_dict(payload)
    except (ValidationError, KeyError, TypeError, ValueError, AttributeError) as exc:
        logger.debug("Success body did not match %s: %s", response_type, exc)
        raise ResponseDecodeError(
            "Failed to parse success response",
            endpoint=metadata["path"],
            status_code=response.status_code,
            details={**metadata, "error": str(exc)},
        ) from exc


def format_api_error(err: APIError) -> str:
    """Render an API error as a multi-line report for console display."""

    lines = [
        "API Error Report",
        "---------------",
        f"Status:     {err.status_code}",
        f"Request ID: {err.request_id or ''}",
        f"Path:       {err.method or ''} {err.path or ''}".rstrip(),
        f"Message:    {err.message}",
    ]

    if err.context:
        lines.append("")
        lines.append("Context:")
        lines.extend(f"- {key}: {value}" for key, value in err.context.items())

    details = err.error_details
    lines.append("")
    if isinstance(details, UserErrorDetails):
        lines.append("User Error Details:")
        for locale, entry in details.messages.items():
            lines.append(f"[{locale}]")
            lines.append(f"Message:   {entry.user_message}")
            if entry.solutions:
                lines.append("Solutions:")
                lines.extend(f"- {solution}" for solution in entry.solutions)
    elif isinstance(details, GenericErrorDetails):
        lines.append("Error Details:")
        lines.append(f"Message: {details.msg}")
        if details.reasons:
            lines.append("Reasons:")
            lines.extend(f"- {reason}" for reason in details.reasons)
    else:
        lines.append("Raw Details:")
        lines.append(details.body)

    return "\n".join(lines) + "\n"
