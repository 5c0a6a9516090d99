"""Habit log repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.habit import HabitLog


class HabitLogRepository(Protocol):
    """Repository for completion events."""

    def get_by_id(self, log_id: str, *, user_id: str) -> Optional[HabitLog]:
        ...

    def list_for_habit(
        self,
        habit_id: str,
        *,
        user_id: str,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[HabitLog]:
        """Logs of one habit, oldest first, optionally bounded by calendar days."""
        ...

    def list_for_user(
        self, *, user_id: str, start_date: date | None = None, end_date: date | None = None
    ) -> list[HabitLog]:
        ...

    def list_on_day(self, habit_id: str, day: date, *, user_id: str) -> list[HabitLog]:
        ...

    def create(self, log: HabitLog, *, user_id: str) -> HabitLog:
        ...

    def delete(self, log_id: str, *, user_id: str) -> bool:
        ...
