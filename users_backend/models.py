"""
Pydantic data models: user request/response/db shapes and the API error schema.
"""
from typing import TYPE_CHECKING, Any, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from users_backend.core.security import PasswordHasher


class ErrorDetail(BaseModel):
    """Single error detail (e.g. field-level)."""

    code: str = Field(..., description="Error code or field name")
    message: str = Field(..., description="Human-readable message")


class ErrorResponse(BaseModel):
    """Structured error response for 4xx/5xx."""

    code: str = Field(..., description="Application error code")
    message: str = Field(..., description="Human-readable summary")
    details: Optional[List[ErrorDetail]] = Field(None, description="Optional per-field or extra details")


# ----- Users -----

USERNAME_MAX_LENGTH = 255
PASSWORD_MAX_LENGTH = 255


class UserRequest(BaseModel):
    """Incoming user payload. The plaintext password never leaves this model unhashed."""

    username: str = Field(..., min_length=1, max_length=USERNAME_MAX_LENGTH)
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LENGTH, repr=False, exclude=True)
    admin: bool = False

    def to_db_request(self, hasher: "PasswordHasher") -> "UserDbRequest":
        password_hash, salt = hasher.hash(self.password)
        return UserDbRequest(
            username=self.username,
            password_hash=password_hash,
            salt=salt,
            admin=self.admin,
        )


class UserDbRequest(BaseModel):
    """Row values ready for INSERT/UPDATE."""

    model_config = ConfigDict(frozen=True)

    username: str
    password_hash: str = Field(..., repr=False, exclude=True)
    salt: str = Field(..., repr=False, exclude=True)
    admin: bool

    def as_params(self) -> Tuple[str, str, str, bool]:
        """Bound parameters in column order: username, password, salt, admin."""
        return (self.username, self.password_hash, self.salt, self.admin)


class UserResponse(BaseModel):
    """The only user representation returned to callers (no password, no salt)."""

    id: int
    username: str
    admin: bool

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "UserResponse":
        return cls(id=row["id"], username=row["username"], admin=bool(row["admin"]))


class User(BaseModel):
    """Full stored user, including credentials. Used only inside the repository."""

    id: int
    username: str
    password_hash: str = Field(..., repr=False, exclude=True)
    salt: str = Field(..., repr=False, exclude=True)
    admin: bool

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "User":
        return cls(
            id=row["id"],
            username=row["username"],
            password_hash=row["password"] or "",
            salt=row["salt"] or "",
            admin=bool(row["admin"]),
        )

    def to_response(self) -> UserResponse:
        return UserResponse(id=self.id, username=self.username, admin=self.admin)
