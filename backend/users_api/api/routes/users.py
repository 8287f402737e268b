"""Users Routes — CRUD endpoints under /api/users.

Invariants:
    - Every handler validates first; a failed ValidationResult becomes a 400
      response here and never reaches the repository
    - Missing rows raise NotFoundError (404); duplicate emails surface as
      ConflictError (409) from the repository
    - Success bodies are {success: true, message, data?, count?}
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status

from users_api.api.dependencies import get_user_repository
from users_api.api.error_handlers import validation_error_response
from users_api.core.errors import NotFoundError
from users_api.core.validation import (
    validate_list_query, validate_user_create,
    validate_user_id, validate_user_update,
)
from users_api.infrastructure.user_repository import UserRepository
from users_api.models.user import User
from users_api.schemas.user import UserResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/users", tags=["users"])


def _serialize(user: User) -> dict:
    return UserResponse.model_validate(user).model_dump(mode="json")


@router.get("")
async def list_users(
    request: Request,
    repository: UserRepository = Depends(get_user_repository),
):
    """List users, newest first. Optional sortBy/sortOrder/page/limit."""
    query = validate_list_query(request.query_params)
    if not query.ok:
        return validation_error_response(request, query.errors)

    users = await repository.list_users(query.value)
    return {
        "success": True,
        "message": "Users retrieved successfully",
        "data": [_serialize(u) for u in users],
        "count": len(users),
    }


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    request: Request,
    repository: UserRepository = Depends(get_user_repository),
):
    user_id_result = validate_user_id(user_id)
    if not user_id_result.ok:
        return validation_error_response(request, user_id_result.errors)

    user = await repository.get_user(user_id_result.value)
    if user is None:
        raise NotFoundError("User", user_id_result.value)
    return {
        "success": True,
        "message": "User retrieved successfully",
        "data": _serialize(user),
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    request: Request,
    payload: Any = Body(None),
    repository: UserRepository = Depends(get_user_repository),
):
    """Create a user. All of name, email and age are required."""
    body = validate_user_create(payload)
    if not body.ok:
        return validation_error_response(request, body.errors)

    user = await repository.create_user(body.value)
    return {
        "success": True,
        "message": "User created successfully",
        "data": _serialize(user),
    }


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    request: Request,
    payload: Any = Body(None),
    repository: UserRepository = Depends(get_user_repository),
):
    """Partial update. A body with no recognized fields leaves the row untouched."""
    user_id_result = validate_user_id(user_id)
    body = validate_user_update({} if payload is None else payload)
    if not (user_id_result.ok and body.ok):
        return validation_error_response(
            request, user_id_result.errors + body.errors,
        )

    existing = await repository.get_user(user_id_result.value)
    if existing is None:
        raise NotFoundError("User", user_id_result.value)

    changes = body.value.changes()
    if not changes:
        logger.info(
            "Update with no recognized fields",
            extra={"user_id": user_id_result.value},
        )
        user = existing
    else:
        user = await repository.update_user(user_id_result.value, changes)
        if user is None:
            raise NotFoundError("User", user_id_result.value)
    return {
        "success": True,
        "message": "User updated successfully",
        "data": _serialize(user),
    }


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    request: Request,
    repository: UserRepository = Depends(get_user_repository),
):
    user_id_result = validate_user_id(user_id)
    if not user_id_result.ok:
        return validation_error_response(request, user_id_result.errors)

    if not await repository.delete_user(user_id_result.value):
        raise NotFoundError("User", user_id_result.value)
    return {"success": True, "message": "User deleted successfully"}
