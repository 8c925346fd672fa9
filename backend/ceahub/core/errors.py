# backend/ceahub/core/errors.py
from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status


class AppError(HTTPException):
    """
    Base for every error a handler is allowed to surface.

    Clients receive:
      {"error": <message>, "details": <code>}
    Messages must be safe to show; store/identity errors are logged
    server-side and replaced with a generic message.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"
    message: str = "Internal server error."

    headers: dict[str, str] | None = None

    def __init__(self, message: str | None = None, *, details: Any = None) -> None:
        self.message = message or self.message
        self.details = details if details is not None else self.code
        super().__init__(status_code=self.status_code, detail=self.message, headers=type(self).headers)

    def to_body(self) -> dict[str, Any]:
        return {"error": self.message, "details": self.details}


class InvalidInput(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_input"
    message = "Invalid input."


class NoEligibleSales(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "no_eligible_sales"
    message = "No confirmed sales are currently available for payout."


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"
    message = "Unauthorized."
    headers = {"WWW-Authenticate": "Bearer"}


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    message = "Forbidden."


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    message = "Not found."


class UpstreamError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "upstream_error"
    message = "The data service failed to process the request."


class InternalError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "internal_error"
    message = "Internal server error."
