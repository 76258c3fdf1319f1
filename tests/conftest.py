"""
Pytest fixtures: fake MySQL connection, repository, client with overridden dependencies.
"""
import os
from typing import Any, Dict, List, Sequence, Tuple

# Fast hashing and stderr request log for the whole test session
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "1000")
os.environ.setdefault("LOG_FILE", "")

import pymysql
import pytest
from fastapi.testclient import TestClient

from users_backend.core.security import PasswordHasher
from users_backend.core.settings import reset_settings
from users_backend.db import ExecuteResult
from users_backend.deps import get_connection
from users_backend.main import app
from users_backend.models import UserRequest
from users_backend.repositories.queries import (
    CREATE,
    CREATE_WITH_ID,
    DELETE_BY_ID,
    FIND_ALL,
    FIND_BY_ID,
    FIND_BY_USERNAME,
    UPDATE_BY_ID,
)
from users_backend.repositories.user_repository import MySQLUserRepository

reset_settings()


class FakeMySQLConnection:
    """In-memory stand-in for MySQLConnection that understands the users queries.

    Enforces the primary key and the UNIQUE username constraint like MySQL does.
    """

    def __init__(self) -> None:
        self.rows: Dict[int, dict] = {}
        self.executed: List[Tuple[str, tuple]] = []
        self.is_open = True
        self._next_id = 1

    @property
    def insert_count(self) -> int:
        return sum(1 for q, _ in self.executed if q in (CREATE, CREATE_WITH_ID))

    def _public(self, row: dict) -> dict:
        return {"id": row["id"], "username": row["username"], "admin": row["admin"]}

    def _check_username_free(self, username: str, own_id: int | None = None) -> None:
        for row in self.rows.values():
            if row["username"] == username and row["id"] != own_id:
                raise pymysql.err.IntegrityError(1062, f"Duplicate entry '{username}' for key 'username'")

    def _insert(self, user_id: int, username: str, password: str, salt: str, admin: Any) -> None:
        if user_id in self.rows:
            raise pymysql.err.IntegrityError(1062, f"Duplicate entry '{user_id}' for key 'PRIMARY'")
        self._check_username_free(username)
        self.rows[user_id] = {
            "id": user_id,
            "username": username,
            "password": password,
            "salt": salt,
            "admin": int(bool(admin)),
        }
        self._next_id = max(self._next_id, user_id + 1)

    async def execute(self, query: str, params: Sequence[Any] = ()):
        params = tuple(params)
        self.executed.append((query, params))
        if query == FIND_ALL:
            return [self._public(self.rows[k]) for k in sorted(self.rows)]
        if query == FIND_BY_ID:
            row = self.rows.get(params[0])
            return [self._public(row)] if row else []
        if query == FIND_BY_USERNAME:
            return [dict(r) for r in self.rows.values() if r["username"] == params[0]]
        if query == CREATE:
            user_id = self._next_id
            self._insert(user_id, *params)
            return ExecuteResult(insert_id=user_id, affected_rows=1)
        if query == CREATE_WITH_ID:
            self._insert(*params)
            return ExecuteResult(insert_id=params[0], affected_rows=1)
        if query == UPDATE_BY_ID:
            username, password, salt, admin, user_id = params
            row = self.rows.get(user_id)
            if row is None:
                return ExecuteResult(insert_id=0, affected_rows=0)
            self._check_username_free(username, own_id=user_id)
            row.update(username=username, password=password, salt=salt, admin=int(bool(admin)))
            return ExecuteResult(insert_id=0, affected_rows=1)
        if query == DELETE_BY_ID:
            removed = self.rows.pop(params[0], None)
            return ExecuteResult(insert_id=0, affected_rows=1 if removed else 0)
        if query == "SELECT 1":
            return [{"1": 1}]
        raise AssertionError(f"Unexpected query: {query}")

    async def ping(self) -> bool:
        return self.is_open


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=1000)


@pytest.fixture
def fake_connection():
    return FakeMySQLConnection()


@pytest.fixture
def user_repo(fake_connection, hasher):
    return MySQLUserRepository(fake_connection, hasher=hasher)


@pytest.fixture
def alice():
    return UserRequest(username="alice", password="s3cret!", admin=False)


@pytest.fixture
def client(fake_connection):
    """TestClient with the connection dependency overridden to the in-memory fake (no lifespan)."""
    app.dependency_overrides[get_connection] = lambda: fake_connection
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_connection, None)
