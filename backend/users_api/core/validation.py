"""Request Validation — runs the user rule sets and returns results instead of raising.

Invariants:
    - Every validate_* function is pure and never raises for bad input
    - A ValidationResult holds either a coerced value or >= 1 FieldError, never both
    - Field messages match the public API contract (see _MESSAGES)

Design Decisions:
    - Pydantic performs the checks; this module only translates its error list
      into {field, message} pairs so routes can answer 400 without try/except
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from users_api.core.domain_types import UserId
from users_api.core.errors import FieldError
from users_api.schemas.user import (
    UserCreate, UserIdParam, UserListQuery, UserUpdate,
)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


# (field, pydantic error type) -> client-facing message
_MESSAGES: dict[tuple[str, str], str] = {
    ("name", "string_too_short"): "Name must be at least 2 characters long",
    ("name", "string_too_long"): "Name cannot exceed 100 characters",
    ("name", "string_pattern_mismatch"): "Name can only contain letters and spaces",
    ("email", "string_too_long"): "Email cannot exceed 255 characters",
    ("age", "int_type"): "Age must be a whole number",
    ("age", "greater_than_equal"): "Age must be at least 1",
    ("age", "less_than_equal"): "Age cannot exceed 120",
    ("id", "greater_than"): "User ID must be a positive number",
    ("id", "less_than_equal"): "User ID must be a valid number",
    ("page", "int_parsing"): "Page must be a valid number",
    ("page", "greater_than_equal"): "Page must be at least 1",
    ("page", "less_than_equal"): "Page must be a valid number",
    ("limit", "int_parsing"): "Limit must be a valid number",
    ("limit", "greater_than_equal"): "Limit must be at least 1",
    ("limit", "less_than_equal"): "Limit cannot exceed 100",
    ("body", "model_type"): "Request body must be a JSON object",
}


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    """Either the coerced value (ok) or the list of failed rules."""
    value: T | None = None
    errors: tuple[FieldError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


def _field_errors(exc: PydanticValidationError) -> tuple[FieldError, ...]:
    errors = []
    for e in exc.errors():
        field = ".".join(str(loc) for loc in e["loc"]) or "body"
        message = _MESSAGES.get((field, e["type"]), e["msg"])
        errors.append(FieldError(field=field, message=message))
    return tuple(errors)


def _run(model: type[M], data: object) -> ValidationResult[M]:
    try:
        return ValidationResult(value=model.model_validate(data))
    except PydanticValidationError as exc:
        return ValidationResult(errors=_field_errors(exc))


def validate_user_create(payload: object) -> ValidationResult[UserCreate]:
    """Create rule set: name, email and age all required."""
    return _run(UserCreate, payload)


def validate_user_update(payload: object) -> ValidationResult[UserUpdate]:
    """Update rule set: every field optional, unknown keys dropped."""
    return _run(UserUpdate, payload)


def validate_user_id(raw: str) -> ValidationResult[UserId]:
    """Id rule set: numeric string coerced to a positive integer."""
    result = _run(UserIdParam, {"id": raw})
    if not result.ok:
        return ValidationResult(errors=result.errors)
    return ValidationResult(value=UserId(result.value.id))


def validate_list_query(params: Mapping[str, str]) -> ValidationResult[UserListQuery]:
    """List rule set: optional page/limit/sortBy/sortOrder."""
    return _run(UserListQuery, dict(params))
