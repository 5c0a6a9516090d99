"""Goal repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.goal import Goal


class GoalRepository(Protocol):
    """Repository for managing goals."""

    def get_by_id(self, goal_id: str, *, user_id: str) -> Optional[Goal]:
        ...

    def list_for_user(self, *, user_id: str) -> list[Goal]:
        ...

    def create(self, goal: Goal, *, user_id: str) -> Goal:
        ...

    def update(self, goal: Goal, *, user_id: str) -> Goal:
        ...

    def delete(self, goal_id: str, *, user_id: str) -> bool:
        ...
