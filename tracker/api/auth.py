"""Self-registration and password login."""

from fastapi import APIRouter, Depends, Request

from tracker.api.deps import Audit, DbSession, client_address, get_audit, limit_auth_attempts
from tracker.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from tracker.schemas.common import MessageResponse
from tracker.services import credentials

router = APIRouter()


@router.post(
    "/register",
    response_model=MessageResponse,
    dependencies=[Depends(limit_auth_attempts)],
)
def register(body: RegisterRequest, db: DbSession, audit: Audit) -> MessageResponse:
    """
    Create an account awaiting admin approval. Only super_admin, regional_admin,
    analyst and editor may be requested as a role; anything else registers a
    public viewer, which cannot log in.
    """
    user = credentials.register(db, body.username, body.password, body.role)
    audit("REGISTER", {"username": user.username})
    return MessageResponse(message="Registration successful. Please wait for admin approval.")


@router.post(
    "/login",
    response_model=TokenResponse,
    dependencies=[Depends(limit_auth_attempts)],
)
def login(body: LoginRequest, request: Request, db: DbSession) -> TokenResponse:
    """
    Authenticate with username and password; returns a signed token valid for 24 hours.
    Include the token in the Authorization header as: Bearer <token>
    """
    result = credentials.authenticate(
        db,
        body.username,
        body.password,
        audit=get_audit(request),
        source=client_address(request),
    )
    return TokenResponse(token=result.token, role=result.role, username=result.username)
