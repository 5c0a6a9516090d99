"""SQLModel implementation of HabitLog repository."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional

from sqlmodel import col, select

from ...models.habit import HabitLog
from ..database import SessionFactory


def _day_bounds(start_date: date | None, end_date: date | None) -> tuple[datetime | None, datetime | None]:
    """Translate inclusive calendar days into a half-open datetime window."""

    lower = datetime.combine(start_date, time.min) if start_date else None
    upper = datetime.combine(end_date + timedelta(days=1), time.min) if end_date else None
    return lower, upper


class SQLModelHabitLogRepository:
    """SQLModel-based habit log repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_by_id(self, log_id: str, *, user_id: str) -> Optional[HabitLog]:
        with self.session_factory() as session:
            obj = session.exec(
                select(HabitLog).where(HabitLog.id == log_id, HabitLog.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def _list(
        self,
        *,
        user_id: str,
        habit_id: str | None,
        start_date: date | None,
        end_date: date | None,
    ) -> list[HabitLog]:
        lower, upper = _day_bounds(start_date, end_date)
        with self.session_factory() as session:
            statement = select(HabitLog).where(HabitLog.user_id == user_id)
            if habit_id is not None:
                statement = statement.where(HabitLog.habit_id == habit_id)
            if lower is not None:
                statement = statement.where(HabitLog.completed_at >= lower)
            if upper is not None:
                statement = statement.where(HabitLog.completed_at < upper)
            statement = statement.order_by(col(HabitLog.completed_at))
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_for_habit(
        self,
        habit_id: str,
        *,
        user_id: str,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[HabitLog]:
        """Get logs for a habit, oldest first, within an optional day range."""
        return self._list(
            user_id=user_id, habit_id=habit_id, start_date=start_date, end_date=end_date
        )

    def list_for_user(
        self, *, user_id: str, start_date: date | None = None, end_date: date | None = None
    ) -> list[HabitLog]:
        """Get every log of a user within an optional day range."""
        return self._list(user_id=user_id, habit_id=None, start_date=start_date, end_date=end_date)

    def list_on_day(self, habit_id: str, day: date, *, user_id: str) -> list[HabitLog]:
        return self.list_for_habit(habit_id, user_id=user_id, start_date=day, end_date=day)

    def create(self, log: HabitLog, *, user_id: str) -> HabitLog:
        with self.session_factory() as session:
            log.user_id = user_id
            session.add(log)
            session.commit()
            session.refresh(log)
            session.expunge(log)
            return log

    def delete(self, log_id: str, *, user_id: str) -> bool:
        with self.session_factory() as session:
            log = session.exec(
                select(HabitLog).where(HabitLog.id == log_id, HabitLog.user_id == user_id)
            ).first()
            if log is None:
                return False
            session.delete(log)
            session.commit()
            return True
