from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger("app")


class ErrorResponse(BaseModel):
    error: str


class MissingInput(Exception):
    """The request carried no audio payload."""

    status_code = 400

    def __init__(self, message: str = "No audio file provided") -> None:
        super().__init__(message)
        self.message = message


class ProcessingFailure(Exception):
    """A provider call or request handling step failed."""

    status_code = 500

    def __init__(self, message: str = "Failed to process audio file") -> None:
        super().__init__(message)
        self.message = message


class StorageError(RuntimeError):
    """The local notes slot could not be read or written."""


class ClientError(RuntimeError):
    """The worker could not be reached or rejected a client request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).dict())


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(MissingInput)
    async def _handle_missing_input(request: Request, exc: MissingInput):  # type: ignore[unused-variable]
        return _error(exc.status_code, exc.message)

    @app.exception_handler(ProcessingFailure)
    async def _handle_processing_failure(request: Request, exc: ProcessingFailure):  # type: ignore[unused-variable]
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def _handle_validation(request: Request, exc: RequestValidationError):  # type: ignore[unused-variable]
        logger.info("rejected malformed request: %s", exc.errors())
        return _error(400, "Invalid request")

    @app.exception_handler(HTTPException)
    async def _handle_http_exception(request: Request, exc: HTTPException):  # type: ignore[unused-variable]
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def _handle_unexpected(request: Request, exc: Exception):  # type: ignore[unused-variable]
        logger.exception("unhandled error")
        return _error(500, ProcessingFailure().message)
