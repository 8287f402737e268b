"""Error Hierarchy — typed, categorized exceptions for every users API failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory) and http_status
    - to_response() produces the {success: false, message, errors?} envelope
    - Internal detail is only added for 500-level errors when include_detail is
      True (development mode)

Design Decisions:
    - Single hierarchy with UsersApiError base: one FastAPI handler catches all
    - ValidationError carries field-level pairs but is normally built from a
      ValidationResult in the route, not raised by the validator
"""

from dataclasses import dataclass, asdict
from enum import Enum


class ErrorCategory(str, Enum):
    """High-level error categories for logging and routing."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass(frozen=True)
class FieldError:
    """One failed rule: the dotted field path and a human-readable message."""
    field: str
    message: str


class UsersApiError(Exception):
    """Base exception for all users API errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        http_status: int = 500,
        detail: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.http_status = http_status
        self.detail = detail

    def to_response(self, include_detail: bool = False) -> dict:
        """Convert to the standard error envelope."""
        body: dict = {"success": False, "message": self.message}
        if include_detail and self.detail and self.http_status >= 500:
            body["error"] = self.detail
        return body


# ─── Client Errors (400-level) ──────────────────────────────────

class ValidationError(UsersApiError):
    """Request payload, path or query failed its rule set."""
    def __init__(self, errors: list[FieldError], message: str = "Validation failed"):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION, 400,
        )
        self.errors = errors

    def to_response(self, include_detail: bool = False) -> dict:
        body = super().to_response(include_detail)
        body["errors"] = [asdict(e) for e in self.errors]
        return body


class MalformedBodyError(UsersApiError):
    """Request body is not parseable JSON."""
    def __init__(self, detail: str | None = None):
        super().__init__(
            "Invalid JSON format", "MALFORMED_BODY",
            ErrorCategory.VALIDATION, 400, detail,
        )


class NotFoundError(UsersApiError):
    """Requested resource does not exist."""
    def __init__(self, resource_type: str = "User", resource_id: object = None):
        super().__init__(
            f"{resource_type} not found", "RESOURCE_NOT_FOUND",
            ErrorCategory.RESOURCE_NOT_FOUND, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(UsersApiError):
    """Unique constraint violated (duplicate email)."""
    def __init__(self, message: str = "Email already exists", detail: str | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT, 409, detail,
        )


# ─── Server Errors (500-level) ──────────────────────────────────

class InternalError(UsersApiError):
    """Unclassified failure. Message is generic; detail only shown in development."""
    def __init__(
        self,
        message: str = "Internal server error",
        detail: str | None = None,
        code: str = "INTERNAL_ERROR",
        category: ErrorCategory = ErrorCategory.INTERNAL,
    ):
        super().__init__(message, code, category, 500, detail)


class DatabaseError(InternalError):
    """Database operation failed for a reason other than a unique violation."""
    def __init__(self, operation: str, detail: str | None = None):
        super().__init__(
            f"Database {operation} failed", detail,
            "DATABASE_ERROR", ErrorCategory.DATABASE,
        )
        self.operation = operation
