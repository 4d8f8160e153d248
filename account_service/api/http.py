"""Request body reading and response writing shared by every route."""

from __future__ import annotations

import json
from typing import Any

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.requests import ClientDisconnect

from ..domain.errors import AccountError, MalformedBody

JSON_CONTENT = "application/json"
HTML_CONTENT = "text/html"
TEXT_CONTENT = "text/plain"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


async def read_json_body(request: Request) -> dict[str, Any]:
    """Read the whole request body and decode it as a JSON object.

    There is no size cap. Raises ``MalformedBody`` when the stream breaks off,
    the bytes are not valid JSON, or the decoded value is not an object.
    """
    try:
        raw = await request.body()
    except ClientDisconnect as exc:
        raise MalformedBody() from exc
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as exc:
        raise MalformedBody() from exc
    if not isinstance(payload, dict):
        raise MalformedBody()
    return payload


def send_response(status_code: int, data: Any, content_type: str = JSON_CONTENT) -> Response:
    """Build the single response for a request, always carrying the CORS headers."""
    if content_type == JSON_CONTENT:
        return JSONResponse(content=data, status_code=status_code, headers=CORS_HEADERS)
    return Response(
        content=data,
        status_code=status_code,
        media_type=content_type,
        headers=CORS_HEADERS,
    )


def error_response(exc: AccountError) -> Response:
    return send_response(exc.status_code, {"success": False, "error": exc.message})


def not_found_response() -> Response:
    return send_response(404, {"error": "Not found"})


def preflight_response() -> Response:
    return send_response(200, "", TEXT_CONTENT)
