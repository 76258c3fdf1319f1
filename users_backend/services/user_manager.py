"""
User application layer.
Delegates to any UserRepository implementation; errors propagate unchanged.
"""
from typing import List, Optional

from users_backend.models import UserRequest, UserResponse
from users_backend.repositories.protocols import UserRepository


class UserManager:
    """Decouples callers (HTTP handlers) from the concrete storage technology."""

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    async def find_users(self) -> List[UserResponse]:
        return await self._user_repo.find_all()

    async def create_user(self, user: UserRequest) -> UserResponse:
        return await self._user_repo.create(user)

    async def find_user_by_id(self, user_id: int) -> UserResponse:
        return await self._user_repo.find_by_id(user_id)

    async def update_user_by_id(self, user_id: int, user: UserRequest) -> Optional[UserResponse]:
        return await self._user_repo.update_by_id(user_id, user)

    async def create_user_with_id(self, user_id: int, user: UserRequest) -> UserResponse:
        return await self._user_repo.create_with_id(user_id, user)

    async def delete_user_by_id(self, user_id: int) -> None:
        return await self._user_repo.delete_by_id(user_id)
