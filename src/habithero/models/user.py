"""User model backing bearer-token authentication."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from .base import new_id, utcnow


class User(SQLModel, table=True):
    """Application user with credentials."""

    __tablename__: ClassVar[str] = "users"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    username: str = Field(nullable=False, unique=True, index=True, max_length=64)
    password_hash: str = Field(nullable=False, max_length=255)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(), nullable=False)
    last_login: Optional[datetime] = Field(default=None, sa_type=DateTime())
