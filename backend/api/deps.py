"""Request-scoped dependencies: caller identity, authorization guards, clock."""
import logging
from datetime import datetime
from typing import Optional

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from api.errors import store_errors
from dashboard_core.aggregation import system_now
from dashboard_core.auth import AuthDecision, Identity, Role, require_admin, require_authenticated
from dashboard_core.security import verify_access_token
from db import get_db
from repositories.user_repository import get_user
from utils.config import SESSION_COOKIE_NAME

LOG = logging.getLogger(__name__)


def _token_from_request(request: Request) -> Optional[str]:
    """Bearer token from the Authorization header, else the session cookie."""
    header = request.headers.get("Authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(SESSION_COOKIE_NAME) or None


def get_current_identity(request: Request, db: Session = Depends(get_db)) -> Optional[Identity]:
    """Resolve the caller once per request. None when there is no valid token or the user is gone."""
    token = _token_from_request(request)
    if not token:
        return None
    user_id = verify_access_token(token)
    if user_id is None:
        return None
    with store_errors(db, "Failed to resolve identity"):
        user = get_user(db, user_id)
    if user is None:
        return None
    return Identity(id=user.id, role=Role(user.role), name=user.name, email=user.email)


def _enforce(decision: AuthDecision, request: Request) -> Identity:
    """Return the identity of an authorized decision, else raise its 401/403."""
    if decision.authorized:
        return decision.identity
    LOG.debug("Denied %s %s: %s", request.method, request.url.path, decision.detail)
    headers = {"WWW-Authenticate": "Bearer"} if decision.status_code == 401 else None
    raise HTTPException(status_code=decision.status_code, detail=decision.detail, headers=headers)


def authenticated(
    request: Request,
    identity: Optional[Identity] = Depends(get_current_identity),
) -> Identity:
    """Guard for read routes: any signed-in role."""
    return _enforce(require_authenticated(identity), request)


def admin_only(
    request: Request,
    identity: Optional[Identity] = Depends(get_current_identity),
) -> Identity:
    """Guard for mutating routes: ADMIN only."""
    return _enforce(require_admin(identity), request)


def get_now() -> datetime:
    """Clock used by time-dependent views; overridden in tests."""
    return system_now()
