"""Domain exceptions and their JSON rendering."""

from __future__ import annotations

from typing import Any

from flask import Flask, jsonify
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from .logging_config import get_logger

logger = get_logger("errors")


class BudgetWiseError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message: str | None = None, *, errors: dict[str, list[str]] | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.errors = errors

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "success": False,
            "statusCode": self.status_code,
            "message": self.message,
        }
        if self.errors:
            payload["errors"] = self.errors
        return payload


class NotFound(BudgetWiseError):
    """Record is missing or owned by someone else."""

    status_code = 404
    default_message = "Not found"


class AccountNotFound(NotFound):
    default_message = "Account not found"


class TransactionNotFound(NotFound):
    default_message = "Transaction not found"


class BudgetNotFound(NotFound):
    default_message = "Budget not found"


class CategoryNotFound(NotFound):
    default_message = "Category not found"


class RecurringNotFound(NotFound):
    default_message = "Recurring transaction not found"


class InvalidTransition(BudgetWiseError):
    """Transaction shape violates the transfer/category rules."""

    status_code = 422
    default_message = "Invalid transaction"


class PayloadInvalid(BudgetWiseError):
    """Request body failed validation."""

    status_code = 400
    default_message = "Invalid request payload"

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> "PayloadInvalid":
        structured: dict[str, list[str]] = {}
        for error in exc.errors(include_url=False):
            loc = error.get("loc", ())
            key = str(loc[0]) if loc else "__root__"
            structured.setdefault(key, []).append(error.get("msg", "Invalid value"))
        return cls(errors=structured)


class AccountInUse(BudgetWiseError):
    status_code = 409
    default_message = "Cannot delete account with associated transactions"


class CategoryInUse(BudgetWiseError):
    status_code = 409
    default_message = "Cannot delete category with associated records"


class CategoryLocked(BudgetWiseError):
    """Default categories keep their name and type and cannot be deleted."""

    status_code = 400
    default_message = "Cannot modify name or type of default categories"


class Unauthorized(BudgetWiseError):
    status_code = 401
    default_message = "A valid X-User-Id header is required"


def register_error_handlers(app: Flask) -> None:
    """Render domain and HTTP errors with the JSON error envelope."""

    @app.errorhandler(BudgetWiseError)
    def _handle_domain_error(exc: BudgetWiseError):
        if exc.status_code >= 500:
            logger.exception("Unhandled domain error")
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(ValidationError)
    def _handle_validation_error(exc: ValidationError):
        err = PayloadInvalid.from_validation_error(exc)
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def _handle_http_error(exc: HTTPException):
        status = exc.code or 500
        payload = {"success": False, "statusCode": status, "message": exc.description}
        return jsonify(payload), status

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.exception("Unhandled error while processing request")
        payload = {"success": False, "statusCode": 500, "message": "Internal Server Error"}
        return jsonify(payload), 500
