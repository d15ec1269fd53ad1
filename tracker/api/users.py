"""User administration: super admin only."""

from fastapi import APIRouter

from tracker.api.deps import Audit, DbSession, SuperAdmin
from tracker.schemas.auth import (
    UserCreateRequest,
    UserListItem,
    UsersListResponse,
    UserStatusRequest,
    UserUpdateRequest,
)
from tracker.schemas.common import MessageResponse
from tracker.services import users

router = APIRouter()


@router.get("", response_model=UsersListResponse)
def list_users(_admin: SuperAdmin, db: DbSession) -> UsersListResponse:
    return UsersListResponse(users=[UserListItem.model_validate(u) for u in users.list_users(db)])


@router.post("", response_model=MessageResponse, status_code=201)
def create_user(
    body: UserCreateRequest,
    _admin: SuperAdmin,
    db: DbSession,
    audit: Audit,
) -> MessageResponse:
    """Create an account that can log in immediately (status approved)."""
    user = users.admin_create_user(db, body.username, body.password, body.role)
    audit("CREATE_USER_ADMIN", {"username": user.username, "role": user.role})
    return MessageResponse(message="User created")


@router.put("/{user_id}/status", response_model=MessageResponse)
def set_user_status(
    user_id: int,
    body: UserStatusRequest,
    _admin: SuperAdmin,
    db: DbSession,
    audit: Audit,
) -> MessageResponse:
    """Approve, block, or return a user to pending."""
    user = users.set_status(db, user_id, body.status)
    audit("UPDATE_USER_STATUS", {"targetId": user_id, "status": user.status})
    return MessageResponse(message=f"User status updated to {user.status}")


@router.put("/{user_id}", response_model=MessageResponse)
def update_user(
    user_id: int,
    body: UserUpdateRequest,
    _admin: SuperAdmin,
    db: DbSession,
    audit: Audit,
) -> MessageResponse:
    """Change a user's password and/or role."""
    fields = users.update_user(db, user_id, body.password, body.role)
    audit("UPDATE_USER", {"targetId": user_id, "fields": fields})
    return MessageResponse(message="User updated successfully")


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(user_id: int, _admin: SuperAdmin, db: DbSession, audit: Audit) -> MessageResponse:
    users.delete_user(db, user_id)
    audit("DELETE_USER", {"targetId": user_id})
    return MessageResponse(message="User deleted")
