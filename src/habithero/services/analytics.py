"""Completion and streak analytics computed from habit logs."""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Sequence

from ..models.enums import GroupBy
from ..models.habit import Habit, HabitLog
from .habits import (
    due_today,
    expected_completions,
    matches_schedule,
    next_period,
    period_start,
    uses_fixed_days,
)

WEEKLY_WINDOW_DAYS = 7


@dataclass(slots=True)
class CompletionRate:
    total_days: int
    expected: int
    completed_days: int
    rate: float


@dataclass(slots=True)
class CompletionSummary:
    date: str
    count: int
    log_ids: list[str] = field(default_factory=list)


@dataclass(slots=True)
class StreakSummary:
    date: str
    streak: int
    was_streak_broken: bool


@dataclass(slots=True)
class DashboardStats:
    total_habits: int
    due_today: int
    completed_today: int
    weekly_progress: int
    current_streak: int
    longest_streak: int


def _log_days(logs: Iterable[HabitLog], start: date, end: date) -> list[date]:
    return [log.completed_at.date() for log in logs if start <= log.completed_at.date() <= end]


def completed_count(habit: Habit, logs: Iterable[HabitLog], start: date, end: date) -> int:
    """Number of completions that count towards the schedule of ``habit``."""

    days = _log_days(logs, start, end)
    if uses_fixed_days(habit):
        return len({day for day in days if matches_schedule(habit, day)})
    per_period = Counter(period_start(day, habit.frequency_type) for day in days)
    return sum(min(count, habit.frequency_times) for count in per_period.values())


def completion_rate(habit: Habit, logs: Iterable[HabitLog], start: date, end: date) -> CompletionRate:
    """Share of the scheduled completions between ``start`` and ``end`` that happened."""

    if end < start:
        return CompletionRate(total_days=0, expected=0, completed_days=0, rate=0.0)
    expected = expected_completions(habit, start, end)
    completed = completed_count(habit, logs, start, end)
    rate = round(min(completed / expected, 1.0), 4) if expected else 0.0
    return CompletionRate(
        total_days=(end - start).days + 1,
        expected=expected,
        completed_days=completed,
        rate=rate,
    )


def _group_key(day: date, group_by: GroupBy) -> str:
    if group_by is GroupBy.WEEK:
        return (day - timedelta(days=day.weekday())).isoformat()
    if group_by is GroupBy.MONTH:
        return f"{day.year:04d}-{day.month:02d}"
    return day.isoformat()


def completion_summaries(
    logs: Iterable[HabitLog], group_by: GroupBy | str = GroupBy.DAY
) -> list[CompletionSummary]:
    """Group logs into day, week (keyed by Monday) or month buckets."""

    group = group_by if isinstance(group_by, GroupBy) else GroupBy(group_by)
    grouped: dict[str, list[HabitLog]] = defaultdict(list)
    for log in sorted(logs, key=lambda item: item.completed_at):
        grouped[_group_key(log.completed_at.date(), group)].append(log)

    return [
        CompletionSummary(date=key, count=len(items), log_ids=[item.id for item in items])
        for key, items in sorted(grouped.items())
    ]


def streak_summaries(habit: Habit, logs: Iterable[HabitLog]) -> list[StreakSummary]:
    """Walk the logs in time order and report the running streak after each one."""

    history: list[StreakSummary] = []
    streak = 0
    previous: date | None = None
    for log in sorted(logs, key=lambda item: item.completed_at):
        current = period_start(log.completed_at.date(), habit.frequency_type)
        broken = False
        if previous is None:
            streak = 1
        elif current == previous:
            pass
        elif current == next_period(previous, habit.frequency_type):
            streak += 1
        else:
            streak = 1
            broken = True
        history.append(
            StreakSummary(
                date=log.completed_at.isoformat(),
                streak=streak,
                was_streak_broken=broken,
            )
        )
        previous = current
    return history


def average_difficulty(logs: Iterable[HabitLog]) -> float:
    """Mean of the recorded difficulties; logs without one are ignored."""

    values = [log.difficulty for log in logs if log.difficulty is not None]
    if not values:
        return 0.0
    return round(sum(values) / len(values), 2)


def dashboard_stats(
    habits: Sequence[Habit], logs: Sequence[HabitLog], *, today: date | None = None
) -> DashboardStats:
    """Headline numbers for the dashboard."""

    today = today or date.today()
    active = [habit for habit in habits if habit.is_active and not habit.is_archived]
    logs_by_habit: dict[str, list[HabitLog]] = defaultdict(list)
    for log in logs:
        logs_by_habit[log.habit_id].append(log)

    completed_today = sum(
        1
        for habit in active
        if any(log.completed_at.date() == today for log in logs_by_habit.get(habit.id, []))
    )

    window_start = today - timedelta(days=WEEKLY_WINDOW_DAYS - 1)
    possible = 0
    done = 0
    for habit in active:
        start = max(window_start, habit.created_at.date()) if habit.created_at else window_start
        possible += expected_completions(habit, start, today)
        done += completed_count(habit, logs_by_habit.get(habit.id, []), start, today)
    weekly_progress = round(min(done / possible, 1.0) * 100) if possible else 0

    return DashboardStats(
        total_habits=len(active),
        due_today=len(due_today(active, today=today)),
        completed_today=completed_today,
        weekly_progress=weekly_progress,
        current_streak=max((habit.streak for habit in active), default=0),
        longest_streak=max((habit.longest_streak for habit in active), default=0),
    )


__all__ = [
    "CompletionRate",
    "CompletionSummary",
    "DashboardStats",
    "StreakSummary",
    "average_difficulty",
    "completed_count",
    "completion_rate",
    "completion_summaries",
    "dashboard_stats",
    "streak_summaries",
]
