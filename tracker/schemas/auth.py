"""Request/response schemas for registration, login and user administration."""

from datetime import datetime

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str | None = Field(default=None, max_length=255, description="Username")
    password: str | None = Field(default=None, max_length=128, description="Password")


class RegisterRequest(BaseModel):
    """Self-registration. role is honoured only for the four elevated roles."""

    username: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, max_length=128)
    role: str | None = Field(default=None, max_length=32)


class TokenResponse(BaseModel):
    """Signed token returned after successful login. Send it as: Bearer <token>"""

    token: str = Field(..., description="JWT access token")
    role: str
    username: str


class CurrentUser(BaseModel):
    """Authenticated user (id, username, role) for dependency injection."""

    id: int
    username: str
    role: str

    class Config:
        from_attributes = True


class UserListItem(BaseModel):
    """User entry for admin list (no password)."""

    id: int
    username: str
    role: str
    status: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class UsersListResponse(BaseModel):
    """Response for GET /users (super admin only)."""

    users: list[UserListItem]


class UserCreateRequest(BaseModel):
    username: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, max_length=128)
    role: str | None = Field(default=None, max_length=32)


class UserUpdateRequest(BaseModel):
    password: str | None = Field(default=None, max_length=128)
    role: str | None = Field(default=None, max_length=32)


class UserStatusRequest(BaseModel):
    status: str | None = Field(default=None, max_length=16)
