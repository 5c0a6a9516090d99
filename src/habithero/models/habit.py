"""Habit tracking data structures."""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar, Optional

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field, SQLModel

from .base import new_id, utcnow


def default_frequency_value() -> dict[str, Any]:
    return {"days": [], "times": 1}


class Habit(SQLModel, table=True):
    """A recurring user-defined activity with a frequency rule."""

    __tablename__: ClassVar[str] = "habits"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", nullable=False, index=True, max_length=36)
    name: str = Field(nullable=False, max_length=100, index=True)
    description: Optional[str] = Field(default=None, max_length=500)
    category: str = Field(default="other", nullable=False, max_length=32, index=True)
    sub_category: Optional[str] = Field(default=None, max_length=64)
    color: str = Field(default="blue", nullable=False, max_length=16)
    frequency_type: str = Field(default="daily", nullable=False, max_length=16)
    frequency_value: dict[str, Any] = Field(
        default_factory=default_frequency_value,
        sa_column=Column(JSON, nullable=False),
    )

    # Derived from the log history; refreshed after every log mutation.
    streak: int = Field(default=0, nullable=False)
    longest_streak: int = Field(default=0, nullable=False)
    last_completed: Optional[datetime] = Field(default=None, sa_type=DateTime())

    is_active: bool = Field(default=True, nullable=False)
    is_archived: bool = Field(default=False, nullable=False)

    goal: Optional[int] = Field(default=None)
    metric_type: Optional[str] = Field(default=None, max_length=32)
    units: Optional[str] = Field(default=None, max_length=32)
    notes: Optional[str] = Field(default=None, max_length=1000)
    reminder: Optional[datetime] = Field(default=None, sa_type=DateTime())
    reminder_enabled: bool = Field(default=False, nullable=False)

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(), nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(), nullable=False)

    @property
    def frequency_days(self) -> list[int]:
        return list((self.frequency_value or {}).get("days") or [])

    @property
    def frequency_times(self) -> int:
        times = (self.frequency_value or {}).get("times")
        return int(times) if times else 1


class HabitLog(SQLModel, table=True):
    """Single recorded completion of a habit."""

    __tablename__: ClassVar[str] = "habit_logs"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    habit_id: str = Field(foreign_key="habits.id", nullable=False, index=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", nullable=False, index=True, max_length=36)
    completed_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(), nullable=False, index=True)

    value: Optional[int] = Field(default=None)
    notes: Optional[str] = Field(default=None, max_length=1000)
    details: Optional[dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    difficulty: Optional[int] = Field(default=None)
    feeling: Optional[str] = Field(default=None, max_length=64)
    has_photo: bool = Field(default=False, nullable=False)
    photo_url: Optional[str] = Field(default=None, max_length=500)

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(), nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(), nullable=False)
