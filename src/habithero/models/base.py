"""Shared column helpers for SQLModel tables."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4


def new_id() -> str:
    """Return a fresh primary key."""

    return str(uuid4())


def utcnow() -> datetime:
    """Current time as a naive UTC datetime (what SQLite stores and returns)."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Normalize an aware datetime to naive UTC; naive values are assumed UTC."""

    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


__all__ = ["new_id", "to_naive_utc", "utcnow"]
