"""User Data Accessor — parameterized SQL for the five user operations.

Invariants:
    - Every statement is a SQLAlchemy Core construct with bound parameters
    - Each operation opens its own session and commits independently
    - update_user() with no changes issues no statement and returns None
    - create_user()/update_user() re-fetch the row after writing it

Design Decisions:
    - Writes go through the Core table (insert/update/delete on users),
      reads hydrate ORM User objects (select(User))
    - The pool arrives through the constructor; the repository owns no engine
"""

import logging

from sqlalchemy import delete, insert, select, update

from users_api.core.domain_types import SortField, SortOrder, UserId
from users_api.core.errors import InternalError
from users_api.infrastructure.database import DatabaseSessionManager
from users_api.models.user import User
from users_api.schemas.user import UserCreate, UserListQuery

logger = logging.getLogger(__name__)

users_table = User.__table__

_SORT_COLUMNS = {
    SortField.NAME: User.name,
    SortField.EMAIL: User.email,
    SortField.AGE: User.age,
    SortField.CREATED_AT: User.created_at,
}


class UserRepository:
    """Data accessor for the users table."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def list_users(self, query: UserListQuery | None = None) -> list[User]:
        """All users, newest first unless the query asks otherwise."""
        query = query or UserListQuery()
        column = _SORT_COLUMNS[query.sort_by]
        if query.sort_order is SortOrder.DESC:
            stmt = select(User).order_by(column.desc(), User.id.desc())
        else:
            stmt = select(User).order_by(column.asc(), User.id.asc())
        if query.limit is not None:
            page = query.page or 1
            stmt = stmt.limit(query.limit).offset((page - 1) * query.limit)

        async with self._db.session() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def get_user(self, user_id: UserId) -> User | None:
        async with self._db.session() as session:
            result = await session.execute(
                select(User).where(User.id == user_id),
            )
            return result.scalar_one_or_none()

    async def create_user(self, data: UserCreate) -> User:
        """Insert a user and return the stored row. Duplicate email -> ConflictError."""
        stmt = insert(users_table).values(
            name=data.name, email=data.email, age=data.age,
        )
        async with self._db.session() as session:
            result = await session.execute(stmt)
            await session.commit()
            user_id = UserId(result.inserted_primary_key[0])

        user = await self.get_user(user_id)
        if user is None:
            raise InternalError("Failed to create user")
        logger.info("User created", extra={"user_id": user_id})
        return user

    async def update_user(self, user_id: UserId, changes: dict) -> User | None:
        """Apply only the supplied fields. Empty changes is a no-op returning None."""
        if not changes:
            return None
        stmt = (
            update(users_table)
            .where(users_table.c.id == user_id)
            .values(**changes)
        )
        async with self._db.session() as session:
            await session.execute(stmt)
            await session.commit()

        logger.info("User updated", extra={"user_id": user_id})
        return await self.get_user(user_id)

    async def delete_user(self, user_id: UserId) -> bool:
        """Delete by id. Returns whether a row was actually removed."""
        stmt = delete(users_table).where(users_table.c.id == user_id)
        async with self._db.session() as session:
            result = await session.execute(stmt)
            await session.commit()
            deleted = result.rowcount > 0

        if deleted:
            logger.info("User deleted", extra={"user_id": user_id})
        return deleted
