"""Habit repository protocol."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from ...models.enums import SortField, SortOrder
from ...models.habit import Habit


@dataclass(slots=True)
class HabitFilters:
    """Criteria for listing a user's habits."""

    category: Optional[str] = None
    is_active: Optional[bool] = None
    is_archived: Optional[bool] = None
    search: Optional[str] = None
    sort_by: SortField = SortField.NAME
    sort_order: SortOrder = SortOrder.ASC


class HabitRepository(Protocol):
    """Repository for managing habit entities."""

    def get_by_id(self, habit_id: str, *, user_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def list_for_user(self, *, user_id: str, filters: HabitFilters | None = None) -> list[Habit]:
        """List a user's habits matching ``filters``."""
        ...

    def create(self, habit: Habit, *, user_id: str) -> Habit:
        """Create a new habit."""
        ...

    def update(self, habit: Habit, *, user_id: str) -> Habit:
        """Update an existing habit."""
        ...

    def delete(self, habit_id: str, *, user_id: str) -> bool:
        """Delete a habit and its logs; returns False when nothing matched."""
        ...
