"""
Error handling middleware for API

Converts exceptions raised while serving a request into the shared
ErrorResponse envelope:
- Validation errors (bad request body) → 422
- Domain errors (DomainError and engine exceptions) → their status code
- Anything else → 500
"""

import json
import uuid
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from revdash.api.schemas.error import ErrorDetail, ErrorResponse, ValidationErrorResponse
from revdash.models.errors import ControllerShutdownError, InvalidAmountError, SimulationError
from revdash.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)


class DomainError(Exception):
    """Base class for API-facing domain errors"""
    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
        status_code: int = 400
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        super().__init__(message)


class SimulationUnavailableError(DomainError):
    """Controller was shut down, the dashboard is frozen"""
    def __init__(self, message: str):
        super().__init__(
            code="SIMULATION_SHUT_DOWN",
            message=message,
            status_code=503
        )


def to_domain_error(exc: SimulationError) -> DomainError:
    """Map engine exceptions onto API error codes"""
    if isinstance(exc, ControllerShutdownError):
        return SimulationUnavailableError(str(exc))
    if isinstance(exc, InvalidAmountError):
        return DomainError(
            code="INVALID_AMOUNT",
            message=str(exc),
            details={"amount": repr(exc.amount)},
            status_code=422
        )
    return DomainError(code="SIMULATION_ERROR", message=str(exc), status_code=409)


def _json(status_code: int, response) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=json.loads(response.model_dump_json()))


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with FastAPI app"""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        request_id = str(uuid.uuid4())
        errors = exc.errors()

        log.warn(f"Validation error: {len(errors)} errors", request_id=request_id, path=request.url.path)

        validation_errors = []
        for error in errors:
            field = ".".join(str(x) for x in error["loc"][1:])  # skip "body"
            validation_errors.append({
                "field": field,
                "message": error["msg"],
                "type": error["type"]
            })

        response = ValidationErrorResponse(
            error=ErrorDetail(
                code="VALIDATION_ERROR",
                message="Request validation failed",
                details={"error_count": len(errors)},
            ),
            validation_errors=validation_errors,
            request_id=request_id
        )
        return _json(status.HTTP_422_UNPROCESSABLE_ENTITY, response)

    @app.exception_handler(DomainError)
    async def domain_exception_handler(request: Request, exc: DomainError):
        request_id = str(uuid.uuid4())
        log.warn(f"Domain error: {exc.code} - {exc.message}", request_id=request_id)

        response = ErrorResponse(
            error=ErrorDetail(code=exc.code, message=exc.message, details=exc.details),
            request_id=request_id
        )
        return _json(exc.status_code, response)

    @app.exception_handler(SimulationError)
    async def simulation_exception_handler(request: Request, exc: SimulationError):
        return await domain_exception_handler(request, to_domain_error(exc))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        request_id = str(uuid.uuid4())
        log.error(
            f"Unexpected error: {type(exc).__name__}: {exc}",
            request_id=request_id,
            path=request.url.path
        )

        response = ErrorResponse(
            error=ErrorDetail(
                code="INTERNAL_SERVER_ERROR",
                message="An unexpected error occurred. Please try again.",
                details={"request_id": request_id},
            ),
            request_id=request_id
        )
        return _json(status.HTTP_500_INTERNAL_SERVER_ERROR, response)
