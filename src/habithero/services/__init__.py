"""Service layer: schedule math, analytics and use-cases."""

from .goal_service import GoalService, goal_progress
from .habit_service import HabitService

__all__ = ["GoalService", "HabitService", "goal_progress"]
