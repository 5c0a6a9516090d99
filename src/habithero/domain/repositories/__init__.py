"""Repository protocol definitions for domain layer."""

from .goal import GoalRepository
from .habit import HabitFilters, HabitRepository
from .habit_log import HabitLogRepository

__all__ = [
    "GoalRepository",
    "HabitFilters",
    "HabitLogRepository",
    "HabitRepository",
]
