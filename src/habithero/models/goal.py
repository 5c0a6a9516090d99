"""Goals a user works towards, optionally linked to habits."""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar, Optional

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field, SQLModel

from .base import new_id, utcnow


class Goal(SQLModel, table=True):
    """A user-defined target."""

    __tablename__: ClassVar[str] = "goals"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", nullable=False, index=True, max_length=36)
    name: str = Field(nullable=False, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    notes: Optional[str] = Field(default=None, max_length=1000)

    target_value: Optional[float] = Field(default=None)
    current_value: Optional[float] = Field(default=None)
    start_value: Optional[float] = Field(default=None)

    # [{"habitId": str, "relationship": str, "notes": str | None}, ...]
    related_habits: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    is_completed: bool = Field(default=False, nullable=False)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(), nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(), nullable=False)

    @property
    def related_habit_ids(self) -> list[str]:
        return [item["habitId"] for item in self.related_habits or [] if item.get("habitId")]
