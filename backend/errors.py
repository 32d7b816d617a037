"""Custom exceptions and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class HNServerError(Exception):
    """Base exception with HTTP status code and a machine-readable code."""

    code = "INTERNAL_ERROR"

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class ValidationError(HNServerError):
    """Caller-supplied arguments violate a tool's schema."""

    code = "VALIDATION_ERROR"

    def __init__(self, issues: list[dict[str, str]]):
        self.issues = issues
        summary = ", ".join(f"{issue['field']}: {issue['reason']}" for issue in issues)
        super().__init__(f"Validation error: {summary}", status_code=400)

    def to_dict(self) -> dict:
        return {**super().to_dict(), "details": self.issues}


class NotFoundError(HNServerError):
    code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: int | str):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} with ID {resource_id} not found", status_code=404)


class ApiError(HNServerError):
    """Upstream call failed: network error, non-2xx status or unparsable body."""

    code = "API_ERROR"

    def __init__(self, api: str, message: str):
        self.api = api
        super().__init__(f"{api} API error: {message}", status_code=502)

    def to_dict(self) -> dict:
        return {**super().to_dict(), "api": self.api}


class MethodNotFoundError(HNServerError):
    code = "METHOD_NOT_FOUND"

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Tool '{tool_name}' not found", status_code=404)


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(HNServerError)
    async def handle_server_error(_request: Request, exc: HNServerError):
        if isinstance(exc, ApiError):
            logger.warning("Upstream failure: %s", exc)
        return JSONResponse({"error": exc.to_dict()}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            {"error": {"code": "INTERNAL_ERROR", "message": "Internal server error"}},
            status_code=500,
        )
