"""Credential store: self-registration and password login."""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tracker.core.errors import AccessDenied, DuplicateUser, InvalidCredentials, ValidationError
from tracker.core.security import (
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    burn_password_check,
    create_access_token,
    hash_password,
    password_meets_policy,
    verify_password,
)
from tracker.models import User
from tracker.services.access import ELEVATED_ROLES, PUBLIC_VIEWER, can_login
from tracker.services.audit import AuditActor, AuditLogger

logger = logging.getLogger(__name__)

USER_STATUSES = ("pending", "approved", "blocked")
PASSWORD_POLICY_MESSAGE = (
    "Password does not meet complexity requirements: at least 8 characters, "
    "one letter and one number or special character (@$!%*#?&)."
)


def clean_username(username: str | None) -> str:
    """Strip and length-check a username; raises ValidationError."""
    value = (username or "").strip()
    if not (USERNAME_MIN_LEN <= len(value) <= USERNAME_MAX_LEN):
        raise ValidationError("Username is required (1-255 characters).")
    return value


def check_password_policy(password: str | None) -> str:
    if not password_meets_policy(password):
        raise ValidationError(PASSWORD_POLICY_MESSAGE)
    return password


def create_user(db: Session, username: str, password: str, role: str, status: str) -> User:
    """Insert a user with a hashed password. Raises DuplicateUser on a taken username."""
    if db.query(User.id).filter(User.username == username).first() is not None:
        raise DuplicateUser("Username already exists")
    user = User(
        username=username,
        password_hash=hash_password(password),
        role=role,
        status=status,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateUser("Username already exists") from e
    db.refresh(user)
    return user


def register(
    db: Session,
    username: str | None,
    password: str | None,
    requested_role: str | None = None,
) -> User:
    """
    Self-registration. The account starts as 'pending' and needs admin approval.

    Only the elevated roles may be requested; anything else (including no role)
    becomes public_viewer, which can never log in.
    """
    username = clean_username(username)
    check_password_policy(password)
    role = requested_role if requested_role in ELEVATED_ROLES else PUBLIC_VIEWER
    user = create_user(db, username, password, role=role, status="pending")
    logger.info("Registered user id=%s role=%s (pending approval)", user.id, user.role)
    return user


@dataclass(frozen=True)
class LoginResult:
    token: str
    user_id: int
    username: str
    role: str


def authenticate(
    db: Session,
    username: str | None,
    password: str | None,
    *,
    audit: AuditLogger,
    source: str | None = None,
) -> LoginResult:
    """
    Verify credentials and issue a signed token.

    Raises InvalidCredentials for an unknown user or wrong password and
    AccessDenied for viewers and accounts that are not approved. Every
    outcome is audited against the attempted username.
    """
    username = (username or "").strip()
    password = password or ""
    user = db.query(User).filter(User.username == username).first() if username else None

    if user is None:
        burn_password_check(password)
        audit.record(
            "LOGIN_FAIL",
            {"reason": "User not found"},
            actor=AuditActor(None, username),
            source=source,
        )
        raise InvalidCredentials("Invalid credentials")

    actor = AuditActor(user.id, user.username)
    if not verify_password(password, user.password_hash):
        audit.record("LOGIN_FAIL", {"reason": "Bad password"}, actor=actor, source=source)
        raise InvalidCredentials("Invalid credentials")

    if not can_login(user.role):
        audit.record("LOGIN_BLOCK", {"role": user.role}, actor=actor, source=source)
        raise AccessDenied("Public viewers do not have login access.")

    if user.status != "approved":
        audit.record("LOGIN_BLOCK", {"status": user.status}, actor=actor, source=source)
        raise AccessDenied("Account is pending approval or blocked.")

    token = create_access_token(user.id, user.username, user.role)
    audit.record("LOGIN_SUCCESS", {}, actor=actor, source=source)
    return LoginResult(token=token, user_id=user.id, username=user.username, role=user.role)
