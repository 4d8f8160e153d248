"""HTTP route definitions for the account service."""

from __future__ import annotations

import html
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable

from fastapi import APIRouter, Depends, Request, Response, status
from prometheus_client import Counter
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from ..config import get_settings
from ..domain.contracts import DeleteAccountInput, LoginInput, RegisterInput, UpdateEmailInput
from ..domain.errors import AccountError, InternalError
from ..domain.service import AccountService
from ..schemas import (
    AccountIdResponse,
    HealthResponse,
    MessageResponse,
    UserListResponse,
    UserSummary,
)
from .http import HTML_CONTENT, error_response, read_json_body, send_response

logger = logging.getLogger(__name__)

router = APIRouter(redirect_slashes=False)

ACCOUNT_OPERATIONS = Counter(
    "account_operations_total",
    "Account API operations by outcome status code.",
    ["operation", "status"],
)

_ROOT_PAGE = """
<html>
  <head><title>Body Garage</title></head>
  <body>
    <h1>Welcome to Body Garage Server</h1>
    <p>Environment: {environment}</p>
    <p>Server running on port: {port}</p>
    <p>Use Postman or frontend to access API routes.</p>
  </body>
</html>
"""


def get_service(request: Request) -> AccountService:
    """Resolve the `AccountService` stored on the FastAPI application state."""
    service: AccountService = request.app.state.account_service
    return service


async def _respond(
    operation: str,
    status_code: int,
    action: Callable[[], Awaitable[BaseModel]],
) -> Response:
    """Run an operation and turn its result or failure into exactly one response."""
    try:
        result = await action()
    except AccountError as exc:
        ACCOUNT_OPERATIONS.labels(operation, str(exc.status_code)).inc()
        return error_response(exc)
    except Exception:
        logger.exception("%s failed", operation)
        ACCOUNT_OPERATIONS.labels(operation, "500").inc()
        return error_response(InternalError())
    ACCOUNT_OPERATIONS.labels(operation, str(status_code)).inc()
    return send_response(status_code, result.model_dump(mode="json", by_alias=True))


@router.post("/register")
async def register(request: Request, service: AccountService = Depends(get_service)) -> Response:
    """Create an account from ``{name, password, email?}``."""

    async def action() -> AccountIdResponse:
        payload = RegisterInput.from_payload(await read_json_body(request))
        account = await run_in_threadpool(service.register, payload)
        return AccountIdResponse(message="Account created", user_id=account.account_id)

    return await _respond("register", status.HTTP_201_CREATED, action)


@router.post("/login")
async def login(request: Request, service: AccountService = Depends(get_service)) -> Response:
    """Check ``{name, password}`` and return the account id; no session is issued."""

    async def action() -> AccountIdResponse:
        payload = LoginInput.from_payload(await read_json_body(request))
        account = await run_in_threadpool(service.login, payload)
        return AccountIdResponse(message="Login successful", user_id=account.account_id)

    return await _respond("login", status.HTTP_200_OK, action)


@router.get("/users")
async def list_users(service: AccountService = Depends(get_service)) -> Response:
    """List every account with its public fields only."""

    async def action() -> UserListResponse:
        summaries = await run_in_threadpool(service.list_accounts)
        return UserListResponse(users=[UserSummary.from_domain(item) for item in summaries])

    return await _respond("list_users", status.HTTP_200_OK, action)


@router.put("/user")
async def update_email(request: Request, service: AccountService = Depends(get_service)) -> Response:
    """Replace the email of the account named by ``{id, email}``."""

    async def action() -> MessageResponse:
        payload = UpdateEmailInput.from_payload(await read_json_body(request))
        await run_in_threadpool(service.update_email, payload)
        return MessageResponse(message="Email updated")

    return await _respond("update_email", status.HTTP_200_OK, action)


@router.delete("/user")
async def delete_user(request: Request, service: AccountService = Depends(get_service)) -> Response:
    """Delete the account named by ``{id}``."""

    async def action() -> MessageResponse:
        payload = DeleteAccountInput.from_payload(await read_json_body(request))
        await run_in_threadpool(service.delete_account, payload)
        return MessageResponse(message="User deleted")

    return await _respond("delete_user", status.HTTP_200_OK, action)


@router.get("/health", tags=["health"])
def health() -> Response:
    """Report liveness without touching the store."""
    settings = get_settings()
    body = HealthResponse(
        timestamp=datetime.now(timezone.utc),
        environment=settings.environment,
        port=settings.http_port,
    )
    return send_response(status.HTTP_200_OK, body.model_dump(mode="json"))


@router.get("/")
def root() -> Response:
    """Serve the informational HTML landing page."""
    settings = get_settings()
    page = _ROOT_PAGE.format(
        environment=html.escape(settings.environment),
        port=settings.http_port,
    )
    return send_response(status.HTTP_200_OK, page, HTML_CONTENT)
