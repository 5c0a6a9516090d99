"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import delete
from sqlmodel import col, or_, select

from ...domain.repositories.habit import HabitFilters
from ...models.base import utcnow
from ...models.enums import SortField, SortOrder
from ...models.habit import Habit, HabitLog
from ..database import SessionFactory

_SORT_COLUMNS = {
    SortField.NAME: Habit.name,
    SortField.CREATED_AT: Habit.created_at,
    SortField.CATEGORY: Habit.category,
}


def _escape_like(text: str) -> str:
    """Make LIKE wildcards in user input match literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, habit_id: str, *, user_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_for_user(self, *, user_id: str, filters: HabitFilters | None = None) -> list[Habit]:
        """List a user's habits matching ``filters``."""
        filters = filters or HabitFilters()
        with self.session_factory() as session:
            statement = select(Habit).where(Habit.user_id == user_id)

            if filters.category:
                statement = statement.where(Habit.category == filters.category)
            if filters.is_active is not None:
                statement = statement.where(Habit.is_active == filters.is_active)
            if filters.is_archived is not None:
                statement = statement.where(Habit.is_archived == filters.is_archived)
            if filters.search:
                pattern = f"%{_escape_like(filters.search.strip())}%"
                statement = statement.where(
                    or_(
                        col(Habit.name).ilike(pattern, escape="\\"),
                        col(Habit.description).ilike(pattern, escape="\\"),
                        col(Habit.category).ilike(pattern, escape="\\"),
                    )
                )

            column = col(_SORT_COLUMNS[SortField(filters.sort_by)])
            ordering = column.desc() if SortOrder(filters.sort_order) is SortOrder.DESC else column.asc()
            statement = statement.order_by(ordering, col(Habit.id))

            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, habit: Habit, *, user_id: str) -> Habit:
        """Create a new habit."""
        with self.session_factory() as session:
            habit.user_id = user_id
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def update(self, habit: Habit, *, user_id: str) -> Habit:
        """Update an existing habit."""
        with self.session_factory() as session:
            habit.user_id = user_id
            habit.updated_at = utcnow()
            merged = session.merge(habit)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def delete(self, habit_id: str, *, user_id: str) -> bool:
        """Delete a habit by ID together with its logs."""
        with self.session_factory() as session:
            habit = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if habit is None:
                return False
            session.execute(
                delete(HabitLog).where(
                    col(HabitLog.habit_id) == habit_id, col(HabitLog.user_id) == user_id
                )
            )
            session.delete(habit)
            session.commit()
            return True
