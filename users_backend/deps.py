"""FastAPI dependency injection: connection, repositories, services."""
from typing import Annotated

from fastapi import Depends, Request

from users_backend.core.errors import DatabaseUnavailableError
from users_backend.db import MySQLConnection
from users_backend.repositories import MySQLUserRepository
from users_backend.repositories.protocols import UserRepository
from users_backend.services.user_manager import UserManager


def get_connection(request: Request) -> MySQLConnection:
    """Shared pool handle from app.state (set in lifespan)."""
    connection = getattr(request.app.state, "db", None)
    if connection is None:
        raise DatabaseUnavailableError()
    return connection


def get_user_repository(
    connection: Annotated[MySQLConnection, Depends(get_connection)],
) -> UserRepository:
    return MySQLUserRepository(connection)


def get_user_manager(
    user_repo: Annotated[UserRepository, Depends(get_user_repository)],
) -> UserManager:
    return UserManager(user_repo)
