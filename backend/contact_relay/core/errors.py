import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from contact_relay.core.settings import settings
from contact_relay.lib.submission import format_validation_errors

log = logging.getLogger("uvicorn.error")


def register_exception_handlers(app: FastAPI) -> None:
    """Register the app-wide exception handlers."""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # Rejections are client errors; the access log is enough
        return JSONResponse(status_code=400, content={"errors": format_validation_errors(exc.errors())})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        log.exception(f"[app] unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "details": str(exc) if settings.is_development else None,
            },
        )
