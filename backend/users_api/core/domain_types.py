"""Domain Types — rich types that replace bare primitives in the users API.

Invariants:
    - UserId is always a positive integer once it leaves core/validation.py
    - Sortable columns and directions encoded as Enums — no raw string matching
"""

from enum import Enum
from typing import NewType


UserId = NewType("UserId", int)


class SortField(str, Enum):
    """Columns the user list may be ordered by."""
    NAME = "name"
    EMAIL = "email"
    AGE = "age"
    CREATED_AT = "created_at"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"
