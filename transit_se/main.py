from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from transit_se.adapters.api.controllers.nearby import router as nearby_router
from transit_se.domain.exceptions import (
    ApiKeyMissingError,
    InvalidArgumentError,
    RemoteError,
    SiteNotFoundError,
    TransitError,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="transit-se")
app.include_router(nearby_router)


def _status_for(exc: TransitError) -> int:
    if isinstance(exc, InvalidArgumentError):
        return 400
    if isinstance(exc, SiteNotFoundError):
        return 404
    if isinstance(exc, ApiKeyMissingError):
        return 503
    if isinstance(exc, RemoteError):
        return 502
    return 500


@app.exception_handler(TransitError)
async def transit_error_handler(request: Request, exc: TransitError) -> JSONResponse:
    status = _status_for(exc)
    if status >= 500:
        logger.warning(
            "%s on %s: %s", exc.__class__.__name__, request.url.path, exc
        )
    return JSONResponse(
        status_code=status,
        content={"detail": str(exc), "error": exc.__class__.__name__},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Ensure API errors are JSON, never Starlette's plain-text 500."""

    logger.exception("Unhandled exception", extra={"path": str(request.url.path)})

    reveal = (os.getenv("TRANSIT_SE_REVEAL_ERRORS") or "").strip().lower() in {
        "1",
        "true",
        "yes",
        "on",
    }

    if reveal or isinstance(exc, (RuntimeError, ValueError)):
        detail = str(exc) or exc.__class__.__name__
    else:
        detail = "Internal Server Error"

    return JSONResponse(status_code=500, content={"detail": detail})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
