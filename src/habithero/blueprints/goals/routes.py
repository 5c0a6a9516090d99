"""Goal routes."""

from __future__ import annotations

from ...context import get_context
from ...models.goal import Goal
from ...security import current_user_id, login_required
from ...services import goal_progress
from ..common import dump, parse_body, respond
from . import bp
from .schemas import GoalCreate, GoalOut, GoalUpdate


def _goal(goal: Goal) -> dict:
    out = GoalOut.model_validate(goal).model_copy(update={"progress": goal_progress(goal)})
    return dump(out)


@bp.get("")
@login_required
def list_goals():
    goals = get_context().goal_service.list_goals(current_user_id())
    return respond([_goal(goal) for goal in goals])


@bp.post("")
@login_required
def create_goal():
    form = parse_body(GoalCreate)
    goal = get_context().goal_service.create_goal(current_user_id(), form.values())
    return respond(_goal(goal), 201)


@bp.get("/<goal_id>")
@login_required
def get_goal(goal_id: str):
    return respond(_goal(get_context().goal_service.get_goal(current_user_id(), goal_id)))


@bp.put("/<goal_id>")
@login_required
def update_goal(goal_id: str):
    form = parse_body(GoalUpdate)
    goal = get_context().goal_service.update_goal(current_user_id(), goal_id, form.changes())
    return respond(_goal(goal))


@bp.delete("/<goal_id>")
@login_required
def delete_goal(goal_id: str):
    get_context().goal_service.delete_goal(current_user_id(), goal_id)
    return respond({"id": goal_id, "deleted": True})
