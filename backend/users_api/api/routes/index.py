"""API Index — GET /api describes the available user endpoints."""

from fastapi import APIRouter

router = APIRouter(prefix="/api", tags=["index"])

API_VERSION = "1.0"


@router.get("")
async def api_index():
    return {
        "success": True,
        "message": "Welcome to API",
        "version": API_VERSION,
        "endpoints": {
            "users": {
                "GET /api/users": "Get all users",
                "GET /api/users/{id}": "Get user by ID",
                "POST /api/users": "Create new user",
                "PUT /api/users/{id}": "Update user",
                "DELETE /api/users/{id}": "Delete user",
            },
        },
    }
