"""FastAPI application wiring for the account service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Callable

import uvicorn
from fastapi import FastAPI, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from psycopg_pool import ConnectionPool, PoolTimeout
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.http import not_found_response, preflight_response, send_response
from .api.routes import router as accounts_router
from .config import get_settings
from .domain.service import AccountService
from .repository import AccountRepository
from .security.passwords import PasswordHasher

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the Postgres pool and build the account service for the app lifecycle.

    A store that cannot be reached at startup is fatal: the error propagates and
    uvicorn aborts instead of serving requests without a database.
    """
    settings = get_settings()
    pool = ConnectionPool(settings.database_url, open=False)
    repository = AccountRepository(pool)
    try:
        pool.open(wait=True, timeout=settings.db_connect_timeout)
        repository.ensure_schema()
    except PoolTimeout:
        logger.error(
            "database connection failed: no connection within %ss",
            settings.db_connect_timeout,
        )
        pool.close()
        raise
    except Exception:
        logger.exception("database schema bootstrap failed")
        pool.close()
        raise
    logger.info("connected to %s database", "local" if settings.database_is_local else "remote")

    app.state.pool = pool
    app.state.account_service = AccountService(repository, PasswordHasher(settings.bcrypt_rounds))
    try:
        yield
    finally:
        pool.close()
        logger.info("database pool closed")


async def _intercept_preflight(request: Request, call_next: Callable[[Request], Any]) -> Response:
    # OPTIONS is answered before any path lookup.
    if request.method == "OPTIONS":
        return preflight_response()
    return await call_next(request)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    # Unknown paths and known paths with another method are both plain misses.
    if exc.status_code in (404, 405):
        return not_found_response()
    return send_response(exc.status_code, {"success": False, "error": exc.detail})


def create_app(*, lifespan: Callable[[FastAPI], Any] | None = None) -> FastAPI:
    """Assemble the application: route table, preflight interception and 404 fallback."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        lifespan=lifespan,
        redirect_slashes=False,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.middleware("http")(_intercept_preflight)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.include_router(accounts_router)

    @app.get("/metrics")
    def metrics() -> Response:
        return send_response(200, generate_latest(), CONTENT_TYPE_LATEST)

    return app


app = create_app(lifespan=lifespan)


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = get_settings()
    logger.info(
        "Starting %s on %s:%s (environment: %s)",
        settings.app_name,
        settings.http_host,
        settings.http_port,
        settings.environment,
    )
    uvicorn.run(app, host=settings.http_host, port=settings.http_port, log_level="info")


if __name__ == "__main__":
    main()
