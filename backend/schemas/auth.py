"""Pydantic schemas for sign-up, login and identity."""
from pydantic import BaseModel, EmailStr


class SignupRequest(BaseModel):
    """Payload for POST /auth/signup. Password length is checked in the handler."""

    name: str | None = None
    email: EmailStr
    password: str


class LoginRequest(BaseModel):
    """Payload for POST /auth/login."""

    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """The caller as seen by the dashboard."""

    id: str
    name: str | None = None
    email: str | None = None
    role: str


class LoginResponse(BaseModel):
    """Login result: the user plus a bearer token (also set as cookie)."""

    user: UserResponse
    token: str


class UserEnvelope(BaseModel):
    """Single user wrapped under "user"."""

    user: UserResponse
