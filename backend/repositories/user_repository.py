"""User repository: get, create, count."""
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from dashboard_core.auth import Role
from models.user import User


def get_user(session: Session, user_id: str) -> Optional[User]:
    """Return a user by id or None."""
    return session.get(User, user_id)


def get_user_by_email(session: Session, email: str) -> Optional[User]:
    """Return a user by email (case-insensitive) or None."""
    return session.execute(
        select(User).where(User.email == email.strip().lower())
    ).scalar_one_or_none()


def create_user(
    session: Session,
    *,
    email: str,
    password_hash: str,
    name: str | None = None,
    role: Role = Role.USER,
    user_id: str | None = None,
) -> User:
    """Create a user, commit, and return it. Emails are stored lower-cased."""
    user = User(email=email.strip().lower(), password_hash=password_hash, name=name, role=role)
    if user_id:
        user.id = user_id
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def count_users(session: Session) -> int:
    """Return the number of users (for seeding)."""
    result = session.execute(select(func.count()).select_from(User))
    return result.scalar() or 0
