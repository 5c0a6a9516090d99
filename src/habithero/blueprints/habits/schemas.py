"""Request and response models for the habits API."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from pydantic import AliasChoices, Field, StrictBool, field_validator, model_validator

from ...models.base import to_naive_utc
from ...models.enums import FrequencyType, GroupBy, HabitCategory, HabitColor, SortField, SortOrder
from ...services.habits import frequency_problem
from ..common import RequestModel, ResponseModel, date_only

# Columns that may be omitted on update but never cleared.
_NON_NULLABLE = (
    "name",
    "category",
    "color",
    "frequency_type",
    "frequency_value",
    "is_active",
    "is_archived",
    "reminder_enabled",
)


class FrequencyValue(RequestModel):
    """Which days a habit is scheduled on, or how often per period."""

    days: list[int] = Field(default_factory=list)
    times: int = Field(default=1, ge=1, le=100)

    @field_validator("days")
    @classmethod
    def unique_days(cls, value: list[int]) -> list[int]:
        return sorted(set(value))


def _naive(value: Optional[datetime]) -> Optional[datetime]:
    return to_naive_utc(value) if value is not None else None


class HabitFields(RequestModel):
    """Fields shared by create and update payloads."""

    description: Optional[str] = Field(default=None, max_length=500)
    sub_category: Optional[str] = Field(default=None, max_length=64)
    goal: Optional[int] = Field(default=None, ge=0)
    metric_type: Optional[str] = Field(default=None, max_length=32)
    units: Optional[str] = Field(default=None, max_length=32)
    notes: Optional[str] = Field(default=None, max_length=1000)
    reminder: Optional[datetime] = None

    @field_validator("reminder")
    @classmethod
    def normalize_reminder(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _naive(value)

    def _check_frequency(self) -> None:
        frequency_type = getattr(self, "frequency_type", None)
        frequency_value = getattr(self, "frequency_value", None)
        if frequency_type is None or frequency_value is None:
            return
        problem = frequency_problem(frequency_type, frequency_value.days)
        if problem:
            raise ValueError(problem)


class HabitCreate(HabitFields):
    name: str = Field(min_length=1, max_length=100)
    category: HabitCategory
    color: HabitColor = HabitColor.BLUE
    frequency_type: FrequencyType = FrequencyType.DAILY
    frequency_value: FrequencyValue = Field(default_factory=FrequencyValue)
    is_active: bool = True
    is_archived: bool = False
    reminder_enabled: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Please provide a habit name.")
        return value

    @model_validator(mode="after")
    def validate_frequency(self) -> "HabitCreate":
        self._check_frequency()
        return self


class HabitUpdate(HabitFields):
    """Partial update; only the keys present in the payload are applied."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    category: Optional[HabitCategory] = None
    color: Optional[HabitColor] = None
    frequency_type: Optional[FrequencyType] = None
    frequency_value: Optional[FrequencyValue] = None
    is_active: Optional[bool] = None
    is_archived: Optional[bool] = None
    reminder_enabled: Optional[bool] = None

    @model_validator(mode="after")
    def validate_update(self) -> "HabitUpdate":
        for name in _NON_NULLABLE:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        self._check_frequency()
        return self

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class HabitQuery(RequestModel):
    """Filters for listing habits, from query parameters or a JSON body."""

    category: Optional[HabitCategory] = None
    is_active: Optional[bool] = None
    is_archived: Optional[bool] = None
    search: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("search", "searchQuery")
    )
    sort_by: SortField = SortField.NAME
    sort_order: SortOrder = SortOrder.ASC

    @field_validator("category", "search", mode="before")
    @classmethod
    def blank_is_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ToggleRequest(RequestModel):
    completed: StrictBool


class LogCreate(RequestModel):
    habit_id: str = Field(min_length=1)
    completed_at: Optional[datetime] = None
    value: Optional[int] = None
    notes: Optional[str] = Field(default=None, max_length=1000)
    details: Optional[dict[str, Any]] = None
    difficulty: Optional[int] = Field(default=None, ge=1, le=5)
    feeling: Optional[str] = Field(default=None, max_length=64)
    has_photo: bool = False
    photo_url: Optional[str] = Field(default=None, max_length=500)

    @field_validator("completed_at")
    @classmethod
    def normalize_completed_at(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _naive(value)

    def values(self) -> dict[str, Any]:
        return self.model_dump(exclude={"habit_id"})


class RangeQuery(RequestModel):
    habit_id: str = Field(min_length=1)
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def strip_time(cls, value: Any) -> Any:
        return date_only(value)


class SummaryQuery(RangeQuery):
    group_by: GroupBy = GroupBy.DAY


class AnalyticsQuery(SummaryQuery):
    type: str = "completion"

    @field_validator("type")
    @classmethod
    def known_type(cls, value: str) -> str:
        if value not in ("completion", "streak"):
            raise ValueError("type must be 'completion' or 'streak'")
        return value


class LogDeleteQuery(RequestModel):
    habit_id: str = Field(min_length=1)
    log_id: str = Field(min_length=1)


class FrequencyValueOut(ResponseModel):
    days: list[int] = Field(default_factory=list)
    times: int = 1


class HabitOut(ResponseModel):
    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    category: str
    sub_category: Optional[str] = None
    color: str
    frequency_type: str
    frequency_value: FrequencyValueOut
    streak: int
    longest_streak: int
    last_completed: Optional[datetime] = None
    is_active: bool
    is_archived: bool
    goal: Optional[int] = None
    metric_type: Optional[str] = None
    units: Optional[str] = None
    notes: Optional[str] = None
    reminder: Optional[datetime] = None
    reminder_enabled: bool
    created_at: datetime
    updated_at: datetime


class TodayHabitOut(HabitOut):
    completed_today: bool = False


class HabitLogOut(ResponseModel):
    id: str
    habit_id: str
    user_id: str
    completed_at: datetime
    value: Optional[int] = None
    notes: Optional[str] = None
    details: Optional[dict[str, Any]] = None
    difficulty: Optional[int] = None
    feeling: Optional[str] = None
    has_photo: bool
    photo_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class CompletionRateOut(ResponseModel):
    total_days: int
    expected: int
    completed_days: int
    rate: float


class CompletionSummaryOut(ResponseModel):
    date: str
    count: int
    log_ids: list[str]


class StreakSummaryOut(ResponseModel):
    date: str
    streak: int
    was_streak_broken: bool


__all__ = [
    "AnalyticsQuery",
    "CompletionRateOut",
    "CompletionSummaryOut",
    "HabitCreate",
    "HabitLogOut",
    "HabitOut",
    "HabitQuery",
    "HabitUpdate",
    "LogCreate",
    "LogDeleteQuery",
    "RangeQuery",
    "StreakSummaryOut",
    "SummaryQuery",
    "TodayHabitOut",
    "ToggleRequest",
]
