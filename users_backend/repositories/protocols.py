"""Repository protocols (interfaces) for testability and clear boundaries."""
from typing import List, Optional, Protocol

from users_backend.models import UserRequest, UserResponse


class UserRepository(Protocol):
    """User persistence: list, create (idempotent on identical input), find/update/create/delete by id."""

    async def find_all(self) -> List[UserResponse]:
        """Return every user in storage order."""
        ...

    async def create(self, user: UserRequest) -> UserResponse:
        """Insert user, or return the existing one if username, password and admin all match.
        Raises ConflictError if the username exists with different credentials or admin flag."""
        ...

    async def find_by_id(self, user_id: int) -> UserResponse:
        """Return user. Raises NotFoundError if missing."""
        ...

    async def update_by_id(self, user_id: int, user: UserRequest) -> Optional[UserResponse]:
        """Replace username, password and admin flag. Returns None if no such id."""
        ...

    async def create_with_id(self, user_id: int, user: UserRequest) -> UserResponse:
        """Insert user with a caller-chosen id."""
        ...

    async def delete_by_id(self, user_id: int) -> None:
        """Delete user. Raises NotFoundError if missing."""
        ...
