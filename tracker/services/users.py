"""User administration (super admin only at the API layer)."""

from sqlalchemy.orm import Session

from tracker.core.errors import NotFound, ValidationError
from tracker.core.security import hash_password
from tracker.models import User
from tracker.services.access import ROLES
from tracker.services.credentials import (
    USER_STATUSES,
    check_password_policy,
    clean_username,
    create_user,
)


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.id).all()


def _get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def _check_role(role: str | None) -> str:
    if role not in ROLES:
        raise ValidationError("Invalid role")
    return role


def admin_create_user(
    db: Session,
    username: str | None,
    password: str | None,
    role: str | None,
) -> User:
    """Create an account that is approved immediately."""
    if not username or not password or not role:
        raise ValidationError("All fields required")
    username = clean_username(username)
    check_password_policy(password)
    return create_user(db, username, password, role=_check_role(role), status="approved")


def update_user(
    db: Session,
    user_id: int,
    password: str | None = None,
    role: str | None = None,
) -> list[str]:
    """Change password and/or role. Returns the names of the fields changed."""
    if not password and not role:
        raise ValidationError("No changes provided")
    user = _get_user(db, user_id)
    changed: list[str] = []
    if password:
        check_password_policy(password)
        user.password_hash = hash_password(password)
        changed.append("password")
    if role:
        user.role = _check_role(role)
        changed.append("role")
    db.commit()
    return changed


def set_status(db: Session, user_id: int, status: str | None) -> User:
    if status not in USER_STATUSES:
        raise ValidationError("Invalid status")
    user = _get_user(db, user_id)
    user.status = status
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: int) -> None:
    user = _get_user(db, user_id)
    db.delete(user)
    db.commit()
