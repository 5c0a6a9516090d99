"""Goal payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import Field, field_validator, model_validator

from ...models.enums import GoalRelationship
from ..common import RequestModel, ResponseModel


class RelatedHabit(RequestModel):
    habit_id: str = Field(min_length=1)
    relationship: GoalRelationship = GoalRelationship.SUPPORTS
    notes: Optional[str] = Field(default=None, max_length=500)

    def as_link(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class GoalFields(RequestModel):
    description: Optional[str] = Field(default=None, max_length=500)
    notes: Optional[str] = Field(default=None, max_length=1000)
    target_value: Optional[float] = None
    current_value: Optional[float] = None
    start_value: Optional[float] = None

    def _links(self, related: Optional[list[RelatedHabit]]) -> Optional[list[dict[str, Any]]]:
        if related is None:
            return None
        return [item.as_link() for item in related]


class GoalCreate(GoalFields):
    name: str = Field(min_length=1, max_length=100)
    related_habits: list[RelatedHabit] = Field(default_factory=list)
    is_completed: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Please provide a goal name.")
        return value

    def values(self) -> dict[str, Any]:
        data = self.model_dump(exclude={"related_habits"})
        data["related_habits"] = self._links(self.related_habits)
        return data


class GoalUpdate(GoalFields):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    related_habits: Optional[list[RelatedHabit]] = None
    is_completed: Optional[bool] = None

    @model_validator(mode="after")
    def validate_update(self) -> "GoalUpdate":
        for name in ("name", "related_habits", "is_completed"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        data = self.model_dump(exclude_unset=True, exclude={"related_habits"})
        if "related_habits" in self.model_fields_set:
            data["related_habits"] = self._links(self.related_habits)
        return data


class RelatedHabitOut(ResponseModel):
    habit_id: str
    relationship: str
    notes: Optional[str] = None


class GoalOut(ResponseModel):
    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    notes: Optional[str] = None
    target_value: Optional[float] = None
    current_value: Optional[float] = None
    start_value: Optional[float] = None
    related_habits: list[RelatedHabitOut] = Field(default_factory=list)
    is_completed: bool
    progress: Optional[float] = None
    created_at: datetime
    updated_at: datetime


__all__ = ["GoalCreate", "GoalOut", "GoalUpdate", "RelatedHabit"]
