"""FastAPI application instance and error mapping."""
from __future__ import annotations

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from dvfactor.core import get_logger
from dvfactor.core.errors import DVFactorError
from dvfactor.core.log import log_context
from dvfactor.routers import admin_router, dashboard_router, payouts_router

LOGGER = get_logger(__name__)


async def handle_domain_error(request: Request, exc: DVFactorError) -> JSONResponse:
    """Render service errors with their HTTP status and diagnostic context."""

    if exc.status_code >= 500:
        LOGGER.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        LOGGER.info("%s %s rejected: %s", request.method, request.url.path, exc)
    headers = {"Retry-After": "5"} if exc.retryable else None
    return JSONResponse(status_code=exc.status_code, content=exc.as_dict(), headers=headers)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(title="DV-Factor", version="0.1.0")
    app.add_exception_handler(DVFactorError, handle_domain_error)  # type: ignore[arg-type]

    @app.middleware("http")
    async def bind_request_context(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid4().hex[:12]
        with log_context.scope(request_id=request_id):
            response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    app.include_router(dashboard_router)
    app.include_router(admin_router)
    app.include_router(payouts_router)

    @app.get("/health", include_in_schema=False)
    def health() -> dict[str, str]:
        return {"status": "ok"}

    LOGGER.info("FastAPI application initialised")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("dvfactor.main:app", host="0.0.0.0", port=8000)
