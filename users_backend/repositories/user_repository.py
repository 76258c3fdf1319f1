"""MySQL implementation of UserRepository. Every write re-reads the row so callers see what storage persisted."""
import logging
from typing import List, Optional

from users_backend.core.errors import ConflictError, NotFoundError
from users_backend.core.security import PasswordHasher, get_password_hasher
from users_backend.db import MySQLConnection
from users_backend.models import User, UserRequest, UserResponse
from users_backend.repositories.queries import (
    CREATE,
    CREATE_WITH_ID,
    DELETE_BY_ID,
    FIND_ALL,
    FIND_BY_ID,
    FIND_BY_USERNAME,
    UPDATE_BY_ID,
)

logger = logging.getLogger(__name__)


class MySQLUserRepository:
    """User persistence in MySQL through an injected MySQLConnection."""

    def __init__(self, connection: MySQLConnection, hasher: Optional[PasswordHasher] = None) -> None:
        self._connection = connection
        self._hasher = hasher or get_password_hasher()

    async def _fetch_by_id(self, user_id: int) -> Optional[UserResponse]:
        rows = await self._connection.execute(FIND_BY_ID, (user_id,))
        if not rows:
            return None
        return UserResponse.from_row(rows[0])

    async def _reread(self, user_id: int) -> UserResponse:
        user = await self._fetch_by_id(user_id)
        if user is None:
            # Row vanished between write and read (concurrent delete).
            raise NotFoundError()
        return user

    async def find_all(self) -> List[UserResponse]:
        rows = await self._connection.execute(FIND_ALL, ())
        return [UserResponse.from_row(row) for row in rows]

    async def create(self, user: UserRequest) -> UserResponse:
        to_create = user.to_db_request(self._hasher)
        rows = await self._connection.execute(FIND_BY_USERNAME, (to_create.username,))

        if rows:
            existing = User.from_row(rows[0])
            if (
                existing.username != to_create.username
                or not self._hasher.verify(user.password, existing.password_hash, existing.salt)
                or existing.admin != to_create.admin
            ):
                logger.warning("Create rejected for existing username (id=%s)", existing.id)
                raise ConflictError()
            logger.debug("Create is a no-op for existing user id=%s", existing.id)
            return existing.to_response()

        result = await self._connection.execute(CREATE, to_create.as_params())
        created = await self._reread(result.insert_id)
        logger.info("Created user id=%s username=%s", created.id, created.username)
        return created

    async def find_by_id(self, user_id: int) -> UserResponse:
        user = await self._fetch_by_id(user_id)
        if user is None:
            raise NotFoundError()
        return user

    async def update_by_id(self, user_id: int, user: UserRequest) -> Optional[UserResponse]:
        if await self._fetch_by_id(user_id) is None:
            return None
        params = user.to_db_request(self._hasher).as_params() + (user_id,)
        await self._connection.execute(UPDATE_BY_ID, params)
        updated = await self._reread(user_id)
        logger.info("Updated user id=%s", user_id)
        return updated

    async def create_with_id(self, user_id: int, user: UserRequest) -> UserResponse:
        params = (user_id,) + user.to_db_request(self._hasher).as_params()
        await self._connection.execute(CREATE_WITH_ID, params)
        created = await self._reread(user_id)
        logger.info("Created user id=%s username=%s", created.id, created.username)
        return created

    async def delete_by_id(self, user_id: int) -> None:
        if await self._fetch_by_id(user_id) is None:
            raise NotFoundError()
        await self._connection.execute(DELETE_BY_ID, (user_id,))
        logger.info("Deleted user id=%s", user_id)
        return None
