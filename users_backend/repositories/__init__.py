"""Repository layer: data access abstractions and implementations."""

from users_backend.repositories.protocols import UserRepository
from users_backend.repositories.user_repository import MySQLUserRepository

__all__ = [
    "UserRepository",
    "MySQLUserRepository",
]
