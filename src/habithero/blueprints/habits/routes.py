"""Habit routes: CRUD, completion toggling, logs and analytics."""

from __future__ import annotations

from ...context import get_context
from ...domain.repositories import HabitFilters
from ...security import current_user_id, login_required
from ..common import dump, dump_many, parse_body, parse_query, respond
from . import bp
from .schemas import (
    AnalyticsQuery,
    CompletionRateOut,
    CompletionSummaryOut,
    HabitCreate,
    HabitLogOut,
    HabitOut,
    HabitQuery,
    HabitUpdate,
    LogCreate,
    LogDeleteQuery,
    RangeQuery,
    StreakSummaryOut,
    SummaryQuery,
    TodayHabitOut,
    ToggleRequest,
)


def _filters(query: HabitQuery) -> HabitFilters:
    return HabitFilters(
        category=query.category,
        is_active=query.is_active,
        is_archived=query.is_archived,
        search=query.search,
        sort_by=query.sort_by,
        sort_order=query.sort_order,
    )


def _habit(habit) -> dict:
    return dump(HabitOut.model_validate(habit))


# Habits -------------------------------------------------------------------


@bp.get("")
@login_required
def list_habits():
    """List the caller's habits, filtered by query parameters."""

    query = parse_query(HabitQuery)
    habits = get_context().habit_service.list_habits(current_user_id(), _filters(query))
    return respond(dump_many(HabitOut, habits))


@bp.post("/filtered")
@login_required
def list_habits_filtered():
    """Same as ``GET /api/habits`` with the filters in a JSON body."""

    query = parse_body(HabitQuery)
    habits = get_context().habit_service.list_habits(current_user_id(), _filters(query))
    return respond(dump_many(HabitOut, habits))


@bp.get("/today")
@login_required
def list_today():
    """Habits due today, each flagged with whether it is already completed."""

    entries = get_context().habit_service.list_due_today(current_user_id())
    payload = [
        dump(TodayHabitOut.model_validate(habit).model_copy(update={"completed_today": done}))
        for habit, done in entries
    ]
    return respond(payload)


@bp.post("")
@login_required
def create_habit():
    form = parse_body(HabitCreate)
    habit = get_context().habit_service.create_habit(current_user_id(), form.model_dump())
    return respond(_habit(habit), 201)


@bp.get("/<habit_id>")
@login_required
def get_habit(habit_id: str):
    return respond(_habit(get_context().habit_service.get_habit(current_user_id(), habit_id)))


@bp.put("/<habit_id>")
@login_required
def update_habit(habit_id: str):
    form = parse_body(HabitUpdate)
    habit = get_context().habit_service.update_habit(current_user_id(), habit_id, form.changes())
    return respond(_habit(habit))


@bp.delete("/<habit_id>")
@login_required
def delete_habit(habit_id: str):
    get_context().habit_service.delete_habit(current_user_id(), habit_id)
    return respond({"id": habit_id, "deleted": True})


@bp.post("/<habit_id>/archive")
@login_required
def archive_habit(habit_id: str):
    habit = get_context().habit_service.set_archived(current_user_id(), habit_id, True)
    return respond(_habit(habit))


@bp.post("/<habit_id>/unarchive")
@login_required
def unarchive_habit(habit_id: str):
    habit = get_context().habit_service.set_archived(current_user_id(), habit_id, False)
    return respond(_habit(habit))


@bp.route("/<habit_id>/toggle", methods=["PUT", "POST"])
@login_required
def toggle_habit(habit_id: str):
    """Set today's completion to the requested state."""

    form = parse_body(ToggleRequest)
    habit = get_context().habit_service.toggle_completion(current_user_id(), habit_id, form.completed)
    return respond(_habit(habit))


# Logs ---------------------------------------------------------------------


@bp.get("/logs")
@login_required
def list_logs():
    query = parse_query(RangeQuery)
    logs = get_context().habit_service.list_logs(
        current_user_id(), query.habit_id, query.start_date, query.end_date
    )
    return respond(dump_many(HabitLogOut, logs))


@bp.post("/logs")
@login_required
def create_log():
    form = parse_body(LogCreate)
    log = get_context().habit_service.add_log(current_user_id(), form.habit_id, form.values())
    return respond(dump(HabitLogOut.model_validate(log)), 201)


@bp.delete("/logs")
@login_required
def delete_log():
    query = parse_query(LogDeleteQuery)
    get_context().habit_service.delete_log(current_user_id(), query.habit_id, query.log_id)
    return respond({"id": query.log_id, "deleted": True})


# Analytics ----------------------------------------------------------------


@bp.get("/logs/completion-rate")
@login_required
def completion_rate():
    query = parse_query(RangeQuery)
    result = get_context().habit_service.completion_rate(
        current_user_id(), query.habit_id, query.start_date, query.end_date
    )
    return respond(dump(CompletionRateOut.model_validate(result)))


@bp.get("/logs/completion-summaries")
@login_required
def completion_summaries():
    query = parse_query(SummaryQuery)
    result = get_context().habit_service.completion_summaries(
        current_user_id(), query.habit_id, query.start_date, query.end_date, query.group_by
    )
    return respond(dump_many(CompletionSummaryOut, result))


@bp.get("/logs/streak-summaries")
@login_required
def streak_summaries():
    query = parse_query(RangeQuery)
    result = get_context().habit_service.streak_summaries(
        current_user_id(), query.habit_id, query.start_date, query.end_date
    )
    return respond(dump_many(StreakSummaryOut, result))


@bp.get("/logs/average-difficulty")
@login_required
def average_difficulty():
    query = parse_query(RangeQuery)
    value = get_context().habit_service.average_difficulty(
        current_user_id(), query.habit_id, query.start_date, query.end_date
    )
    return respond({"habitId": query.habit_id, "averageDifficulty": value})


@bp.get("/analytics")
@login_required
def analytics():
    """Completion summaries or streak history, selected by ``type``."""

    query = parse_query(AnalyticsQuery)
    service = get_context().habit_service
    user_id = current_user_id()
    if query.type == "streak":
        result = service.streak_summaries(user_id, query.habit_id, query.start_date, query.end_date)
        return respond(dump_many(StreakSummaryOut, result))
    result = service.completion_summaries(
        user_id, query.habit_id, query.start_date, query.end_date, query.group_by
    )
    return respond(dump_many(CompletionSummaryOut, result))
