"""Habit schedule helpers: frequency matching, periods and streaks."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Iterator

from ..models.enums import FrequencyType
from ..models.habit import Habit


def _frequency(value: FrequencyType | str) -> FrequencyType:
    return value if isinstance(value, FrequencyType) else FrequencyType(value)


def weekday_index(day: date) -> int:
    """Weekday number with Sunday = 0, the convention used by ``frequency_value.days``."""

    return (day.weekday() + 1) % 7


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from ``start`` to ``end`` inclusive."""

    cursor = start
    while cursor <= end:
        yield cursor
        cursor += timedelta(days=1)


def period_start(day: date, frequency_type: FrequencyType | str) -> date:
    """Return the first day of the period containing ``day``.

    Weeks start on Monday.
    """

    frequency = _frequency(frequency_type)
    if frequency is FrequencyType.WEEKLY:
        return day - timedelta(days=day.weekday())
    if frequency is FrequencyType.MONTHLY:
        return day.replace(day=1)
    return day


def previous_period(start: date, frequency_type: FrequencyType | str) -> date:
    frequency = _frequency(frequency_type)
    if frequency is FrequencyType.WEEKLY:
        return start - timedelta(days=7)
    if frequency is FrequencyType.MONTHLY:
        return (start.replace(day=1) - timedelta(days=1)).replace(day=1)
    return start - timedelta(days=1)


def next_period(start: date, frequency_type: FrequencyType | str) -> date:
    frequency = _frequency(frequency_type)
    if frequency is FrequencyType.WEEKLY:
        return start + timedelta(days=7)
    if frequency is FrequencyType.MONTHLY:
        return (start.replace(day=28) + timedelta(days=4)).replace(day=1)
    return start + timedelta(days=1)


def matches_schedule(habit: Habit, day: date) -> bool:
    """Return True when the frequency rule of ``habit`` selects ``day``.

    Weekly and monthly habits without explicit ``days`` are "N times per period"
    habits and may be done on any day.
    """

    frequency = _frequency(habit.frequency_type)
    days = habit.frequency_days
    if frequency is FrequencyType.DAILY:
        return True
    if frequency is FrequencyType.WEEKLY:
        return not days or weekday_index(day) in days
    if frequency is FrequencyType.MONTHLY:
        return not days or day.day in days
    return False


_DAY_RANGES = {
    FrequencyType.WEEKLY: (0, 6),
    FrequencyType.MONTHLY: (1, 31),
}


def frequency_problem(frequency_type: FrequencyType | str, days: Iterable[int]) -> str | None:
    """Describe why ``days`` is not valid for ``frequency_type``, or return None."""

    frequency = _frequency(frequency_type)
    days = list(days)
    if frequency is FrequencyType.DAILY:
        return "Daily habits cannot name specific days" if days else None
    low, high = _DAY_RANGES[frequency]
    for value in days:
        if not low <= value <= high:
            return f"{frequency.value.capitalize()} days must be between {low} and {high}"
    return None


def is_due_on(habit: Habit, day: date) -> bool:
    """Return True when ``habit`` should be shown on ``day``."""

    if not habit.is_active or habit.is_archived:
        return False
    if habit.created_at is not None and habit.created_at.date() > day:
        return False
    return matches_schedule(habit, day)


def due_today(habits: Iterable[Habit], *, today: date | None = None) -> list[Habit]:
    """Filter ``habits`` down to the ones scheduled for ``today``."""

    today = today or date.today()
    return [habit for habit in habits if is_due_on(habit, today)]


def uses_fixed_days(habit: Habit) -> bool:
    """True when the schedule names concrete days rather than a per-period count."""

    return _frequency(habit.frequency_type) is FrequencyType.DAILY or bool(habit.frequency_days)


def expected_completions(habit: Habit, start: date, end: date) -> int:
    """How many completions the schedule asks for between ``start`` and ``end``."""

    if end < start:
        return 0
    if uses_fixed_days(habit):
        return sum(1 for day in iter_days(start, end) if matches_schedule(habit, day))

    periods = {period_start(day, habit.frequency_type) for day in iter_days(start, end)}
    return len(periods) * habit.frequency_times


def compute_streaks(
    completion_days: Iterable[date],
    frequency_type: FrequencyType | str = FrequencyType.DAILY,
    *,
    today: date | None = None,
) -> tuple[int, int]:
    """Return (current_streak, longest_streak) measured in periods.

    A period counts when it holds at least one completion. The current period is
    still open, so when it has no completion yet the current streak is counted
    from the period before it.
    """

    today = today or date.today()
    periods = {period_start(day, frequency_type) for day in completion_days}
    if not periods:
        return 0, 0

    current = 0
    cursor = period_start(today, frequency_type)
    if cursor not in periods:
        cursor = previous_period(cursor, frequency_type)
    while cursor in periods:
        current += 1
        cursor = previous_period(cursor, frequency_type)

    # Longest streak: sweep through sorted periods, counting consecutive runs.
    longest = 0
    run = 0
    last: date | None = None
    for start in sorted(periods):
        if last is not None and start == next_period(last, frequency_type):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        last = start

    return current, longest


__all__ = [
    "compute_streaks",
    "due_today",
    "expected_completions",
    "frequency_problem",
    "is_due_on",
    "iter_days",
    "matches_schedule",
    "next_period",
    "period_start",
    "previous_period",
    "uses_fixed_days",
    "weekday_index",
]
