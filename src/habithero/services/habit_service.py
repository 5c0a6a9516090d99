"""Habit use-cases: CRUD, completion logging, streak upkeep and analytics."""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Any, Callable, Iterable, Mapping

from ..domain.repositories import HabitFilters, HabitLogRepository, HabitRepository
from ..errors import NotFoundError, ValidationError
from ..logging_config import get_logger
from ..models.base import to_naive_utc, utcnow
from ..models.enums import GroupBy
from ..models.habit import Habit, HabitLog
from . import analytics
from .habits import compute_streaks, frequency_problem, is_due_on

logger = get_logger(__name__)

# Fields a client may set; streak bookkeeping and ownership are managed here.
HABIT_MUTABLE_FIELDS = frozenset(
    {
        "name",
        "description",
        "category",
        "sub_category",
        "color",
        "frequency_type",
        "frequency_value",
        "is_active",
        "is_archived",
        "goal",
        "metric_type",
        "units",
        "notes",
        "reminder",
        "reminder_enabled",
    }
)
LOG_FIELDS = frozenset(
    {"completed_at", "value", "notes", "details", "difficulty", "feeling", "has_photo", "photo_url"}
)


class HabitService:
    """Coordinates the habit and habit-log repositories for one request."""

    def __init__(
        self,
        habits: HabitRepository,
        logs: HabitLogRepository,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.habits = habits
        self.logs = logs
        self.clock = clock

    def today(self) -> date:
        return self.clock().date()

    # Habits ---------------------------------------------------------------
    def _owned_habit(self, user_id: str, habit_id: str) -> Habit:
        habit = self.habits.get_by_id(habit_id, user_id=user_id)
        if habit is None:
            raise NotFoundError("Habit", habit_id)
        return habit

    def _with_current_streak(self, habit: Habit, logs: Iterable[HabitLog]) -> Habit:
        """Set the streak fields of ``habit`` as of today without persisting them.

        The stored streak only changes when logs do, so a streak that lapsed
        since the last log would otherwise still be reported.
        """
        habit.streak, habit.longest_streak = compute_streaks(
            (log.completed_at.date() for log in logs),
            habit.frequency_type,
            today=self.today(),
        )
        return habit

    def get_habit(self, user_id: str, habit_id: str) -> Habit:
        habit = self._owned_habit(user_id, habit_id)
        return self._with_current_streak(habit, self.logs.list_for_habit(habit_id, user_id=user_id))

    def list_habits(self, user_id: str, filters: HabitFilters | None = None) -> list[Habit]:
        habits = self.habits.list_for_user(user_id=user_id, filters=filters)
        logs_by_habit: dict[str, list[HabitLog]] = defaultdict(list)
        for log in self.logs.list_for_user(user_id=user_id):
            logs_by_habit[log.habit_id].append(log)
        return [self._with_current_streak(habit, logs_by_habit[habit.id]) for habit in habits]

    def list_due_today(self, user_id: str) -> list[tuple[Habit, bool]]:
        """Habits scheduled for today paired with whether they are already done."""

        today = self.today()
        candidates = self.list_habits(
            user_id=user_id, filters=HabitFilters(is_active=True, is_archived=False)
        )
        done_ids = {log.habit_id for log in self.logs.list_for_user(user_id=user_id, start_date=today, end_date=today)}
        return [(habit, habit.id in done_ids) for habit in candidates if is_due_on(habit, today)]

    def create_habit(self, user_id: str, data: Mapping[str, Any]) -> Habit:
        values = {key: value for key, value in data.items() if key in HABIT_MUTABLE_FIELDS}
        now = self.clock()
        habit = Habit(user_id=user_id, created_at=now, updated_at=now, **values)
        _check_frequency(habit)
        created = self.habits.create(habit, user_id=user_id)
        logger.info("Habit created", extra={"user_id": user_id, "habit_id": created.id})
        return created

    def update_habit(self, user_id: str, habit_id: str, data: Mapping[str, Any]) -> Habit:
        habit = self.get_habit(user_id, habit_id)
        for key, value in data.items():
            if key in HABIT_MUTABLE_FIELDS:
                setattr(habit, key, value)
        _check_frequency(habit)
        updated = self.habits.update(habit, user_id=user_id)
        if "frequency_type" in data:
            # Streak periods depend on the frequency.
            updated = self.refresh_streaks(updated)
        return updated

    def set_archived(self, user_id: str, habit_id: str, archived: bool) -> Habit:
        habit = self.get_habit(user_id, habit_id)
        habit.is_archived = archived
        logger.info(
            "Habit archived" if archived else "Habit restored",
            extra={"user_id": user_id, "habit_id": habit_id},
        )
        return self.habits.update(habit, user_id=user_id)

    def delete_habit(self, user_id: str, habit_id: str) -> None:
        if not self.habits.delete(habit_id, user_id=user_id):
            raise NotFoundError("Habit", habit_id)
        logger.info("Habit deleted", extra={"user_id": user_id, "habit_id": habit_id})

    # Completion -----------------------------------------------------------
    def refresh_streaks(self, habit: Habit) -> Habit:
        """Recompute streak, longest streak and last completion from the logs."""

        logs = self.logs.list_for_habit(habit.id, user_id=habit.user_id)
        self._with_current_streak(habit, logs)
        habit.last_completed = max((log.completed_at for log in logs), default=None)
        return self.habits.update(habit, user_id=habit.user_id)

    def toggle_completion(self, user_id: str, habit_id: str, completed: bool) -> Habit:
        """Mark today's completion on or off; a no-op when already in that state."""

        habit = self.get_habit(user_id, habit_id)
        today = self.today()
        existing = self.logs.list_on_day(habit_id, today, user_id=user_id)

        if completed and not existing:
            if habit.is_archived:
                raise ValidationError("Cannot complete an archived habit")
            self.logs.create(HabitLog(habit_id=habit_id, user_id=user_id, completed_at=self.clock()), user_id=user_id)
        elif not completed and existing:
            for log in existing:
                self.logs.delete(log.id, user_id=user_id)
        else:
            return habit

        logger.info(
            "Habit toggled",
            extra={"user_id": user_id, "habit_id": habit_id, "completed": completed},
        )
        return self.refresh_streaks(habit)

    def add_log(self, user_id: str, habit_id: str, data: Mapping[str, Any]) -> HabitLog:
        habit = self._owned_habit(user_id, habit_id)
        if habit.is_archived:
            raise ValidationError("Cannot log an archived habit")

        values = {key: value for key, value in data.items() if key in LOG_FIELDS and value is not None}
        completed_at = values.pop("completed_at", None)
        completed_at = to_naive_utc(completed_at) if completed_at else self.clock()
        if completed_at.date() > self.today():
            raise ValidationError("completedAt cannot be in the future")

        log = self.logs.create(
            HabitLog(habit_id=habit_id, user_id=user_id, completed_at=completed_at, **values), user_id=user_id
        )
        self.refresh_streaks(habit)
        return log

    def list_logs(
        self,
        user_id: str,
        habit_id: str,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[HabitLog]:
        self._owned_habit(user_id, habit_id)
        _check_range(start_date, end_date)
        return self.logs.list_for_habit(
            habit_id, user_id=user_id, start_date=start_date, end_date=end_date
        )

    def delete_log(self, user_id: str, habit_id: str, log_id: str) -> None:
        habit = self._owned_habit(user_id, habit_id)
        log = self.logs.get_by_id(log_id, user_id=user_id)
        if log is None or log.habit_id != habit_id:
            raise NotFoundError("HabitLog", log_id)
        self.logs.delete(log_id, user_id=user_id)
        self.refresh_streaks(habit)

    def recalculate_streaks(self, user_id: str) -> int:
        """Refresh the stored streak fields of every habit of ``user_id``."""

        habits = self.habits.list_for_user(user_id=user_id)
        for habit in habits:
            self.refresh_streaks(habit)
        return len(habits)

    # Analytics ------------------------------------------------------------
    def _range_logs(
        self, user_id: str, habit_id: str, start_date: date | None, end_date: date | None
    ) -> tuple[Habit, list[HabitLog], date, date]:
        habit = self._owned_habit(user_id, habit_id)
        start = start_date or habit.created_at.date()
        end = end_date or self.today()
        _check_range(start, end)
        logs = self.logs.list_for_habit(habit_id, user_id=user_id, start_date=start, end_date=end)
        return habit, logs, start, end

    def completion_rate(
        self, user_id: str, habit_id: str, start_date: date | None = None, end_date: date | None = None
    ) -> analytics.CompletionRate:
        habit, logs, start, end = self._range_logs(user_id, habit_id, start_date, end_date)
        return analytics.completion_rate(habit, logs, start, end)

    def completion_summaries(
        self,
        user_id: str,
        habit_id: str,
        start_date: date | None = None,
        end_date: date | None = None,
        group_by: GroupBy = GroupBy.DAY,
    ) -> list[analytics.CompletionSummary]:
        _, logs, _, _ = self._range_logs(user_id, habit_id, start_date, end_date)
        return analytics.completion_summaries(logs, group_by)

    def streak_summaries(
        self, user_id: str, habit_id: str, start_date: date | None = None, end_date: date | None = None
    ) -> list[analytics.StreakSummary]:
        habit, logs, _, _ = self._range_logs(user_id, habit_id, start_date, end_date)
        return analytics.streak_summaries(habit, logs)

    def average_difficulty(
        self, user_id: str, habit_id: str, start_date: date | None = None, end_date: date | None = None
    ) -> float:
        _, logs, _, _ = self._range_logs(user_id, habit_id, start_date, end_date)
        return analytics.average_difficulty(logs)

    def dashboard(self, user_id: str) -> analytics.DashboardStats:
        today = self.today()
        habits = self.list_habits(user_id)
        logs = self.logs.list_for_user(
            user_id=user_id,
            start_date=today - timedelta(days=analytics.WEEKLY_WINDOW_DAYS - 1),
            end_date=today,
        )
        return analytics.dashboard_stats(habits, logs, today=today)


def _check_frequency(habit: Habit) -> None:
    problem = frequency_problem(habit.frequency_type, habit.frequency_days)
    if problem:
        raise ValidationError(problem)


def _check_range(start_date: date | None, end_date: date | None) -> None:
    if start_date and end_date and start_date > end_date:
        raise ValidationError("startDate must be on or before endDate")


__all__ = ["HabitService"]
