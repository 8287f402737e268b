"""FastAPI dependencies — hand the lifespan-built repository to route handlers."""

from fastapi import Request

from users_api.infrastructure.user_repository import UserRepository


def get_user_repository(request: Request) -> UserRepository:
    repository = getattr(request.app.state, "user_repository", None)
    if repository is None:
        raise RuntimeError("Database not initialized")
    return repository
