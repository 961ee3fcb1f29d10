"""
Module 09D - API Error Handling

Standardized error handling for the API.
"""

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from api.models.responses import ErrorResponse, ErrorDetail
from core.schemas.errors import DistributorException, ErrorCodes


# HTTP status per domain error code; unknown codes map to 400
STATUS_BY_CODE: dict[str, int] = {
    ErrorCodes.EMPTY_INPUT: 400,
    ErrorCodes.LEAF_NOT_FOUND: 404,
    ErrorCodes.INVALID_AMOUNT: 422,
    ErrorCodes.DUPLICATE_CLAIM: 422,
    ErrorCodes.AMOUNT_OVERFLOW: 422,
    ErrorCodes.INVALID_PROOF: 400,
    ErrorCodes.EXCESSIVE_CLAIM: 409,
    ErrorCodes.NOTHING_TO_CLAIM: 409,
    ErrorCodes.TRANSFER_FAILED: 503,
    ErrorCodes.INSUFFICIENT_BALANCE: 503,
    ErrorCodes.UNAUTHORIZED: 403,
}


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )


class InvalidRequestError(APIError):
    """Invalid request parameters."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code="INVALID_REQUEST",
            message=message,
            status_code=400,
            details=details,
        )


class MissingCallerError(APIError):
    """Caller identity was not supplied by the transport layer."""

    def __init__(self, message: str = "Missing X-Caller header"):
        super().__init__(
            code="MISSING_CALLER",
            message=message,
            status_code=401,
        )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def distributor_error_handler(request: Request, exc: DistributorException) -> JSONResponse:
    """Handle domain exceptions raised by tree building, aggregation or claims."""
    return JSONResponse(
        status_code=STATUS_BY_CODE.get(exc.code, 400),
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=exc.code,
                message=exc.message,
                details=exc.details,
            ),
        ).model_dump(),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
