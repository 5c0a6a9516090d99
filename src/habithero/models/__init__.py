"""SQLModel table exports."""

from .goal import Goal
from .habit import Habit, HabitLog
from .user import User

__all__ = [
    "Goal",
    "Habit",
    "HabitLog",
    "User",
]
