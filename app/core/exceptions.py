"""Application-level exceptions and FastAPI exception handlers."""


from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details
        super().__init__(message)

class NotFoundError(AppException):
    def __init__(self, entity: str, entity_id: str | None = None):
        msg = f"{entity} not found" if not entity_id else f"{entity} '{entity_id}' not found"
        super().__init__(msg, status_code=404, code="NOT_FOUND")

class UnauthorizedError(AppException):
    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, status_code=401, code="UNAUTHORIZED")

class InvalidFinancialInputError(AppException):
    """A price, discount, tax rate or cost violates the financial constraints."""

    def __init__(self, message: str):
        super().__init__(message, status_code=422, code="INVALID_FINANCIAL_INPUT")

class InvalidStateTransitionError(AppException):
    """The transaction is not in a status that allows the requested action."""

    def __init__(self, transaction_id: str | None, current_status: str, action: str):
        self.transaction_id = transaction_id
        self.current_status = current_status
        self.action = action
        super().__init__(
            f"Cannot {action} a sales transaction in status '{current_status}'",
            status_code=409,
            code="INVALID_STATE_TRANSITION",
        )

class InvalidUpdateError(AppException):
    """The update body names fields a sales transaction does not accept."""

    def __init__(self, fields: list[str]):
        self.fields = fields
        super().__init__(
            f"Unknown fields: {', '.join(fields)}",
            status_code=422,
            code="INVALID_UPDATE",
            details={"fields": fields},
        )

class DownstreamEffectFailedError(AppException):
    """The transaction state was committed but the vehicle-side write failed.

    The transition itself stands; the vehicle needs reconciliation.
    """

    def __init__(self, transaction_id: str, status: str, reason: str):
        self.transaction_id = transaction_id
        self.status = status
        super().__init__(
            f"Sales transaction '{transaction_id}' is {status}, "
            f"but updating the vehicle failed: {reason}",
            status_code=502,
            code="DOWNSTREAM_EFFECT_FAILED",
            details={"transactionId": transaction_id, "status": status},
        )

# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

def _error_body(code: str, message: str, details: dict[str, Any] | None = None) -> dict:
    error: dict[str, Any] = {"code": code, "message": message}
    if details:
        error["details"] = details
    return {"error": error}

def register_exception_handlers(app: FastAPI) -> None:
    """Attach all custom exception handlers to the FastAPI app."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.code, exc.message, exc.details),
        )

    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content=_error_body("NOT_FOUND", "Resource not found"),
        )

    @app.exception_handler(500)
    async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=500,
            content=_error_body("INTERNAL_ERROR", "An unexpected error occurred"),
        )
