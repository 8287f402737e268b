"""User Schemas — Pydantic models with field-level rules for every users endpoint.

Invariants:
    - UserCreate: name, email, age all required
    - UserUpdate: every field optional; unknown keys ignored; null means "not supplied"
    - UserIdParam: [0-9]+ string coerced to an int in 1..MAX_ID (the Integer column range)
    - age is strict: "30", true and 30.5 are rejected; JSON 30.0 is the integer 30

Design Decisions:
    - Custom checks raise PydanticCustomError so the message reaches the client verbatim;
      built-in constraint messages are rewritten in core/validation.py
"""

from datetime import datetime
import re
from typing import Annotated

from email_validator import EmailNotValidError, validate_email
from pydantic import (
    AfterValidator, BaseModel, ConfigDict, Field, StringConstraints, field_validator,
)
from pydantic_core import PydanticCustomError

from users_api.core.domain_types import SortField, SortOrder


NAME_PATTERN = r"^[a-zA-Z\s]+$"
MAX_ID = 2_147_483_647
_ID_PATTERN = re.compile(r"^[0-9]+$")


def _check_email(v: str) -> str:
    try:
        result = validate_email(
            v, check_deliverability=False, globally_deliverable=False,
        )
    except EmailNotValidError:
        raise PydanticCustomError(
            "email_invalid", "Please provide a valid email address",
        )
    # special-use TLDs (.test, .local) are fine, dotless hosts are not
    if "." not in result.ascii_domain:
        raise PydanticCustomError(
            "email_invalid", "Please provide a valid email address",
        )
    return v


def _integral_float_to_int(v: object) -> object:
    if isinstance(v, float) and v.is_integer():
        return int(v)
    return v


Email = Annotated[
    str, StringConstraints(max_length=255), AfterValidator(_check_email),
]


class UserCreate(BaseModel):
    """User creation — all fields required."""
    name: str = Field(min_length=2, max_length=100, pattern=NAME_PATTERN)
    email: Email
    age: int = Field(ge=1, le=120, strict=True)

    @field_validator("age", mode="before")
    @classmethod
    def age_from_integral_float(cls, v: object) -> object:
        return _integral_float_to_int(v)


class UserUpdate(BaseModel):
    """Partial user update — only supplied fields change."""
    name: str | None = Field(
        None, min_length=2, max_length=100, pattern=NAME_PATTERN,
    )
    email: Email | None = None
    age: int | None = Field(None, ge=1, le=120, strict=True)

    @field_validator("age", mode="before")
    @classmethod
    def age_from_integral_float(cls, v: object) -> object:
        return _integral_float_to_int(v)

    def changes(self) -> dict:
        """Fields the client actually supplied with a non-null value."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class UserIdParam(BaseModel):
    """Path parameter — raw string in, positive int out."""
    id: int = Field(gt=0, le=MAX_ID)

    @field_validator("id", mode="before")
    @classmethod
    def digits_only(cls, v: object) -> int:
        if not isinstance(v, str) or not _ID_PATTERN.match(v):
            raise PydanticCustomError(
                "id_not_numeric", "User ID must be a valid number",
            )
        return int(v)


class UserListQuery(BaseModel):
    """Optional list query — sorting and pagination. Absent limit means all rows."""
    model_config = ConfigDict(populate_by_name=True)

    page: int | None = Field(None, ge=1, le=MAX_ID)
    limit: int | None = Field(None, ge=1, le=100)
    sort_by: SortField = Field(SortField.CREATED_AT, alias="sortBy")
    sort_order: SortOrder = Field(SortOrder.DESC, alias="sortOrder")


class UserResponse(BaseModel):
    """User as returned inside the envelope's data field."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    age: int | None
    created_at: datetime
    updated_at: datetime
