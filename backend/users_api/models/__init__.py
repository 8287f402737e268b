"""ORM Models — SQLAlchemy declarative models.

Design Decisions:
    - All models imported here so Base.metadata is complete for create_all and alembic
"""

from users_api.models.user import User  # noqa: F401
