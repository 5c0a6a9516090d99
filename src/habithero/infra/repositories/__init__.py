"""Concrete repository implementations using SQLModel."""

from .goal import SQLModelGoalRepository
from .habit import SQLModelHabitRepository
from .habit_log import SQLModelHabitLogRepository

__all__ = [
    "SQLModelGoalRepository",
    "SQLModelHabitLogRepository",
    "SQLModelHabitRepository",
]
