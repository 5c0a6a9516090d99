"""Authentication: user accounts and bearer tokens."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError
from sqlmodel import select

from ..config import BaseConfig
from ..errors import AuthenticationError, ConflictError, ValidationError
from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models.base import utcnow
from ..models.user import User

logger = get_logger(__name__)

_hasher = PasswordHasher()
MIN_PASSWORD_LENGTH = 8


def get_user(user_id: str, session_factory: SessionFactory) -> Optional[User]:
    with session_factory() as session:
        user = session.get(User, user_id)
        if user:
            session.expunge(user)
        return user


def get_user_by_username(username: str, session_factory: SessionFactory) -> Optional[User]:
    """Fetch a user by username."""
    username = username.strip()
    with session_factory() as session:
        user = session.exec(select(User).where(User.username == username)).first()
        if user:
            session.expunge(user)
        return user


def list_users(session_factory: SessionFactory) -> list[User]:
    with session_factory() as session:
        users = list(session.exec(select(User).order_by(User.username)).all())
        for user in users:
            session.expunge(user)
        return users


def create_user(*, username: str, password: str, session_factory: SessionFactory) -> User:
    """Create a new user with hashed password."""

    username = username.strip()
    if not username:
        raise ValidationError("Username is required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    password_hash = _hasher.hash(password)
    with session_factory() as session:
        existing = session.exec(select(User).where(User.username == username)).first()
        if existing:
            raise ConflictError("Username already exists")
        user = User(username=username, password_hash=password_hash)
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
    logger.info("User registered", extra={"user_id": user.id})
    return user


def authenticate(*, username: str, password: str, session_factory: SessionFactory) -> Optional[User]:
    """Validate credentials and return the user when correct."""

    username = username.strip()
    if not username:
        return None
    with session_factory() as session:
        user = session.exec(select(User).where(User.username == username)).first()
        if user is None:
            return None
        try:
            _hasher.verify(user.password_hash, password)
        except (VerifyMismatchError, InvalidHash, VerificationError):
            return None

        user.last_login = utcnow()
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
        return user


def issue_token(user: User, config: BaseConfig, *, now: datetime | None = None) -> str:
    """Return a signed bearer token for ``user``."""

    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": user.id,
        "username": user.username,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=config.TOKEN_TTL_MINUTES),
    }
    return jwt.encode(payload, config.SECRET_KEY, algorithm=config.TOKEN_ALGORITHM)


def decode_token(token: str, config: BaseConfig) -> str:
    """Verify ``token`` and return the user id it was issued for."""

    try:
        payload = jwt.decode(
            token,
            config.SECRET_KEY,
            algorithms=[config.TOKEN_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Token has expired") from exc
    except jwt.PyJWTError as exc:
        raise AuthenticationError("Invalid token") from exc
    return str(payload["sub"])


__all__ = [
    "authenticate",
    "create_user",
    "decode_token",
    "get_user",
    "get_user_by_username",
    "issue_token",
    "list_users",
]
