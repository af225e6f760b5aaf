"""Fetch exceptions and centralized FastAPI error handlers."""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """A forecast could not be obtained from the weather API."""

    def __init__(self, message: str, city: Optional[str] = None, status_code: int = 502):
        super().__init__(message)
        self.city = city
        self.status_code = status_code


class NetworkError(FetchError):
    """The request did not complete (DNS, connection, timeout)."""


class HttpStatusError(FetchError):
    def __init__(self, city: str, upstream_status: int):
        super().__init__(f"Weather API returned HTTP {upstream_status} for {city}", city=city)
        self.upstream_status = upstream_status


class ParseError(FetchError):
    """The response body was not a valid forecast document."""


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(FetchError)
    async def handle_fetch_error(_request: Request, exc: FetchError):
        return JSONResponse({"error": str(exc)}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse({"error": "Internal server error"}, status_code=500)
