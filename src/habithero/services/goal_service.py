"""Goal use-cases scoped to the authenticated user."""

from __future__ import annotations

from typing import Any, Mapping

from ..domain.repositories import GoalRepository, HabitRepository
from ..errors import NotFoundError, ValidationError
from ..logging_config import get_logger
from ..models.goal import Goal

logger = get_logger(__name__)

GOAL_MUTABLE_FIELDS = frozenset(
    {
        "name",
        "description",
        "notes",
        "target_value",
        "current_value",
        "start_value",
        "related_habits",
        "is_completed",
    }
)


def goal_progress(goal: Goal) -> float | None:
    """Fraction of the way from ``start_value`` to ``target_value``, clamped to [0, 1]."""

    if goal.target_value is None or goal.current_value is None:
        return None
    start = goal.start_value or 0.0
    span = goal.target_value - start
    if span == 0:
        return 1.0 if goal.current_value == goal.target_value else 0.0
    return round(max(0.0, min(1.0, (goal.current_value - start) / span)), 4)


class GoalService:
    """Goal CRUD with ownership checks."""

    def __init__(self, goals: GoalRepository, habits: HabitRepository) -> None:
        self.goals = goals
        self.habits = habits

    def get_goal(self, user_id: str, goal_id: str) -> Goal:
        goal = self.goals.get_by_id(goal_id, user_id=user_id)
        if goal is None:
            raise NotFoundError("Goal", goal_id)
        return goal

    def list_goals(self, user_id: str) -> list[Goal]:
        return self.goals.list_for_user(user_id=user_id)

    def create_goal(self, user_id: str, data: Mapping[str, Any]) -> Goal:
        values = {key: value for key, value in data.items() if key in GOAL_MUTABLE_FIELDS}
        if "related_habits" in values:
            values["related_habits"] = self._check_related_habits(user_id, values["related_habits"])
        goal = self.goals.create(Goal(user_id=user_id, **values), user_id=user_id)
        logger.info("Goal created", extra={"user_id": user_id, "goal_id": goal.id})
        return goal

    def update_goal(self, user_id: str, goal_id: str, data: Mapping[str, Any]) -> Goal:
        goal = self.get_goal(user_id, goal_id)
        for key, value in data.items():
            if key not in GOAL_MUTABLE_FIELDS:
                continue
            if key == "related_habits":
                value = self._check_related_habits(user_id, value)
            setattr(goal, key, value)
        return self.goals.update(goal, user_id=user_id)

    def delete_goal(self, user_id: str, goal_id: str) -> None:
        if not self.goals.delete(goal_id, user_id=user_id):
            raise NotFoundError("Goal", goal_id)
        logger.info("Goal deleted", extra={"user_id": user_id, "goal_id": goal_id})

    def _check_related_habits(
        self, user_id: str, related: list[Mapping[str, Any]] | None
    ) -> list[dict[str, Any]]:
        """Each linked habit must exist and belong to the user."""

        checked: list[dict[str, Any]] = []
        for item in related or []:
            habit_id = item["habitId"]
            if self.habits.get_by_id(habit_id, user_id=user_id) is None:
                raise ValidationError(f"Related habit {habit_id} does not exist")
            checked.append(
                {
                    "habitId": habit_id,
                    "relationship": item["relationship"],
                    "notes": item.get("notes"),
                }
            )
        return checked


__all__ = ["GoalService", "goal_progress"]
