"""Shared request dependencies: bearer-token auth, capability checks, cache and audit access."""

import logging
from collections.abc import Callable
from typing import Annotated, Any

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from tracker.core.cache import ResponseCache
from tracker.core.database import get_db
from tracker.core.errors import AccessDenied, TooManyRequests
from tracker.core.ratelimit import FixedWindowLimiter
from tracker.core.security import decode_access_token
from tracker.models import User
from tracker.schemas.auth import CurrentUser
from tracker.services.access import Capability, can_login, require
from tracker.services.audit import ANONYMOUS, AuditActor, AuditLogger

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

AUTH_RATE_LIMIT_MESSAGE = "Too many login/register attempts, please try again later."


def client_address(request: Request) -> str:
    """First X-Forwarded-For hop, else the peer address, else 'unknown'."""
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded.strip():
        return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def get_cache(request: Request) -> ResponseCache:
    return request.app.state.cache


def get_audit(request: Request) -> AuditLogger:
    return request.app.state.audit


def limit_auth_attempts(request: Request) -> None:
    """Dependency: count a login/registration attempt against the client address."""
    limiter: FixedWindowLimiter = request.app.state.auth_limiter
    source = client_address(request)
    if not limiter.hit(source):
        logger.warning("Auth attempts throttled for %s", source)
        raise TooManyRequests(AUTH_RATE_LIMIT_MESSAGE)


def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """
    Dependency: require a valid Bearer token for an approved, login-capable user.

    The role is re-read from the database so role and status changes apply
    to tokens already issued.
    """
    if credentials is None or not credentials.credentials:
        raise AccessDenied("No token provided")
    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.PyJWTError:
        raise AccessDenied("Failed to authenticate token")
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise AccessDenied("Invalid token payload")
    user = db.get(User, user_id)
    if user is None:
        raise AccessDenied("User not found")
    if not can_login(user.role) or user.status != "approved":
        raise AccessDenied("Account is pending approval or blocked.")
    current = CurrentUser(id=user.id, username=user.username, role=user.role)
    request.state.current_user = current
    return current


def require_capability(*capabilities: Capability) -> Callable[..., CurrentUser]:
    """Dependency factory: authenticated user holding every listed capability, else 403."""

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        require(current_user.role, *capabilities)
        return current_user

    return dependency


class RequestAudit:
    """Audit writer bound to one request: actor and source address are filled in."""

    def __init__(self, request: Request, audit: AuditLogger) -> None:
        self._request = request
        self._audit = audit

    @property
    def actor(self) -> AuditActor:
        user = getattr(self._request.state, "current_user", None)
        if user is None:
            return ANONYMOUS
        return AuditActor(user.id, user.username)

    @property
    def source(self) -> str:
        return client_address(self._request)

    def __call__(self, action: str, details: dict[str, Any] | None = None) -> bool:
        return self._audit.record(action, details, actor=self.actor, source=self.source)


def get_request_audit(
    request: Request,
    audit: Annotated[AuditLogger, Depends(get_audit)],
) -> RequestAudit:
    return RequestAudit(request, audit)


DbSession = Annotated[Session, Depends(get_db)]
Cache = Annotated[ResponseCache, Depends(get_cache)]
Audit = Annotated[RequestAudit, Depends(get_request_audit)]
Editor = Annotated[CurrentUser, Depends(require_capability(Capability.EDIT))]
Deleter = Annotated[CurrentUser, Depends(require_capability(Capability.EDIT, Capability.DELETE))]
Uploader = Annotated[CurrentUser, Depends(require_capability(Capability.UPLOAD))]
SuperAdmin = Annotated[CurrentUser, Depends(require_capability(Capability.MANAGE_USERS))]


def validation_message(errors: list[dict[str, Any]]) -> str:
    """One-line summary of the first pydantic error ('field: message')."""
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path")]
    msg = first.get("msg", "Invalid value")
    return f"{'.'.join(loc)}: {msg}" if loc else msg
