"""Dashboard summary route."""

from __future__ import annotations

from ...context import get_context
from ...security import current_user_id, login_required
from ..common import ResponseModel, dump, respond
from . import bp


class DashboardOut(ResponseModel):
    total_habits: int
    due_today: int
    completed_today: int
    weekly_progress: int
    current_streak: int
    longest_streak: int


@bp.get("")
@login_required
def dashboard():
    """Headline counts for the caller's active habits."""

    stats = get_context().habit_service.dashboard(current_user_id())
    return respond(dump(DashboardOut.model_validate(stats)))
