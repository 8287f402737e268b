"""User Repository — verifies the five data operations against SQLite.

Invariants:
    - create re-fetches and returns the stored row with a generated id
    - duplicate email raises ConflictError and leaves one row
    - update touches only supplied fields; empty changes never open a session
    - delete reports whether a row was removed
"""

import pytest

from users_api.core.domain_types import SortField, SortOrder, UserId
from users_api.core.errors import ConflictError
from users_api.models.user import User
from users_api.schemas.user import UserCreate, UserListQuery


def _user(name="Ann Lee", email="ann@example.com", age=30) -> UserCreate:
    return UserCreate(name=name, email=email, age=age)


async def test_create_returns_row_with_generated_id(user_repository):
    user = await user_repository.create_user(_user())
    assert user.id == 1
    assert user.name == "Ann Lee"
    assert user.email == "ann@example.com"
    assert user.age == 30
    assert user.created_at is not None
    assert user.updated_at is not None


async def test_create_duplicate_email_raises_conflict(user_repository):
    await user_repository.create_user(_user())

    with pytest.raises(ConflictError):
        await user_repository.create_user(_user(name="Other Ann"))

    users = await user_repository.list_users()
    assert [u.name for u in users] == ["Ann Lee"]


async def test_get_missing_returns_none(user_repository):
    assert await user_repository.get_user(UserId(999)) is None


async def test_list_newest_first(user_repository):
    await user_repository.create_user(_user(name="First", email="first@example.com"))
    await user_repository.create_user(_user(name="Second", email="second@example.com"))
    await user_repository.create_user(_user(name="Third", email="third@example.com"))

    users = await user_repository.list_users()
    assert [u.name for u in users] == ["Third", "Second", "First"]


async def test_list_sort_and_paginate(user_repository):
    for name in ("Carl", "Alice", "Bob"):
        await user_repository.create_user(
            _user(name=name, email=f"{name.lower()}@example.com"),
        )

    by_name = await user_repository.list_users(
        UserListQuery(sort_by=SortField.NAME, sort_order=SortOrder.ASC),
    )
    assert [u.name for u in by_name] == ["Alice", "Bob", "Carl"]

    second_page = await user_repository.list_users(
        UserListQuery(
            sort_by=SortField.NAME, sort_order=SortOrder.ASC, page=2, limit=2,
        ),
    )
    assert [u.name for u in second_page] == ["Carl"]


async def test_update_changes_only_supplied_fields(user_repository):
    created = await user_repository.create_user(_user())

    updated = await user_repository.update_user(created.id, {"age": 31})

    assert updated.id == created.id
    assert updated.age == 31
    assert updated.name == "Ann Lee"
    assert updated.email == "ann@example.com"
    assert updated.updated_at >= created.updated_at


async def test_update_without_changes_never_touches_store(
    user_repository, db_manager, monkeypatch,
):
    created = await user_repository.create_user(_user())

    def _fail():
        raise AssertionError("store must not be touched")

    monkeypatch.setattr(db_manager, "session", _fail)

    assert await user_repository.update_user(created.id, {}) is None


async def test_update_missing_user_returns_none(user_repository):
    assert await user_repository.update_user(UserId(42), {"age": 50}) is None


async def test_update_to_existing_email_raises_conflict(user_repository):
    await user_repository.create_user(_user())
    other = await user_repository.create_user(
        _user(name="Bob", email="bob@example.com"),
    )

    with pytest.raises(ConflictError):
        await user_repository.update_user(other.id, {"email": "ann@example.com"})

    unchanged = await user_repository.get_user(other.id)
    assert unchanged.email == "bob@example.com"


async def test_delete_reports_removal(user_repository):
    created = await user_repository.create_user(_user())

    assert await user_repository.delete_user(created.id) is True
    assert await user_repository.delete_user(created.id) is False
    assert await user_repository.get_user(created.id) is None


def test_email_unique_index_is_declared():
    index = next(i for i in User.__table__.indexes if i.name == "ix_users_email")
    assert index.unique
    assert [c.name for c in index.columns] == ["email"]
