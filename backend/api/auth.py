"""Sign-up, login and identity routes."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from api.deps import authenticated
from api.errors import store_errors
from dashboard_core.auth import Identity, Role
from dashboard_core.security import cookie_settings, hash_password, make_access_token, verify_password
from db import get_db
from repositories.user_repository import create_user, get_user_by_email
from schemas.auth import LoginRequest, LoginResponse, SignupRequest, UserEnvelope, UserResponse
from schemas.common import MessageResponse
from utils.config import ACCESS_TTL, SESSION_COOKIE_NAME

LOG = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

MIN_PASSWORD_LENGTH = 6


@router.post("/signup", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def signup(body: SignupRequest, db: Session = Depends(get_db)) -> UserEnvelope:
    """Register a new USER account."""
    if len(body.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
        )
    with store_errors(db, "Failed to create user"):
        if get_user_by_email(db, body.email) is not None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")
        user = create_user(
            db,
            email=body.email,
            password_hash=hash_password(body.password),
            name=body.name,
            role=Role.USER,
        )
    LOG.info("User %s signed up", user.id)
    return UserEnvelope(user=UserResponse(id=user.id, name=user.name, email=user.email, role=user.role.value))


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, response: Response, db: Session = Depends(get_db)) -> LoginResponse:
    """Check credentials, set the session cookie and return a bearer token."""
    with store_errors(db, "Failed to sign in"):
        user = get_user_by_email(db, body.email)
    if user is None or not verify_password(body.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    token = make_access_token(user.id, user.role.value)
    response.set_cookie(SESSION_COOKIE_NAME, token, max_age=ACCESS_TTL, **cookie_settings())
    return LoginResponse(
        user=UserResponse(id=user.id, name=user.name, email=user.email, role=user.role.value),
        token=token,
    )


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response) -> MessageResponse:
    """Clear the session cookie."""
    ck = cookie_settings()
    response.delete_cookie(SESSION_COOKIE_NAME, path=ck["path"])
    return MessageResponse(message="Signed out")


@router.get("/me", response_model=UserEnvelope)
def me(identity: Identity = Depends(authenticated)) -> UserEnvelope:
    """Return the caller's identity."""
    return UserEnvelope(
        user=UserResponse(id=identity.id, name=identity.name, email=identity.email, role=identity.role.value)
    )
