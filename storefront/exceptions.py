"""Custom exception classes and global exception handlers."""

import logging
import traceback

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class StorefrontException(Exception):
    """Base exception for all storefront-specific errors."""

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundException(StorefrontException):
    """Resource not found exception."""

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found", 404)


class ConflictException(StorefrontException):
    """Resource conflict exception."""

    def __init__(self, message: str = "Resource already exists"):
        super().__init__(message, 409)


class ValidationException(StorefrontException):
    """Validation error exception with field-level errors."""

    def __init__(self, errors: list[dict] | str):
        if isinstance(errors, str):
            errors = [{"field": "general", "message": errors}]
        super().__init__("Validation failed", 422)
        self.errors = errors


class SettingsWriteError(StorefrontException):
    """One or more keys of a batched configuration write were not saved.

    Every key in the batch has been attempted; ``failures`` maps each key
    that failed to the error it raised.
    """

    def __init__(self, failures: dict[str, Exception]):
        self.failures = failures
        keys = ", ".join(sorted(failures))
        super().__init__(f"Failed to save configuration keys: {keys}", 500)
        self.errors = [
            {"field": key, "message": str(error)} for key, error in sorted(failures.items())
        ]


def create_exception_handlers():
    """Create exception handlers rendering the JSON error envelope."""

    async def storefront_exception_handler(request: Request, exc: StorefrontException):
        """Handle storefront custom exceptions."""
        logger.warning(f"StorefrontException on {request.method} {request.url.path}: {exc.message} (status={exc.status_code})")

        content = {
            "status": "error",
            "message": exc.message,
        }
        if hasattr(exc, "errors"):
            content["errors"] = exc.errors
        return JSONResponse(status_code=exc.status_code, content=content)

    async def generic_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(f"Unhandled exception on {request.method} {request.url.path}")
        logger.error(f"Exception: {type(exc).__name__}: {exc}")
        tb_lines = traceback.format_exception(type(exc), exc, exc.__traceback__)
        logger.error("".join(tb_lines))

        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "message": "An unexpected error occurred",
            },
        )

    return {
        StorefrontException: storefront_exception_handler,
        Exception: generic_exception_handler,
    }
