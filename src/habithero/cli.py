"""Flask CLI commands for Habit Hero."""

from __future__ import annotations

from datetime import timedelta

import click

from .context import get_context
from .errors import ConflictError
from .services import auth

DEMO_USERNAME = "demo"

_DEMO_HABITS = (
    {"name": "Morning run", "category": "fitness", "color": "red", "frequency_type": "daily"},
    {
        "name": "Meditate",
        "category": "mindfulness",
        "color": "purple",
        "frequency_type": "weekly",
        "frequency_value": {"days": [1, 3, 5], "times": 1},
    },
    {
        "name": "Meal prep",
        "category": "nutrition",
        "color": "green",
        "frequency_type": "weekly",
        "frequency_value": {"days": [], "times": 2},
    },
)


def run_demo_seed(password: str) -> str | None:
    """Create the demo user with a few habits, two weeks of logs and a goal.

    Returns None when the demo user already exists.
    """

    ctx = get_context()
    try:
        user = auth.create_user(
            username=DEMO_USERNAME, password=password, session_factory=ctx.session_factory
        )
    except ConflictError:
        return None

    service = ctx.habit_service
    now = service.clock()
    habits = []
    for template in _DEMO_HABITS:
        habit = service.create_habit(user.id, template)
        # Back-date so the logs below fall inside the habit's lifetime.
        habit.created_at = now - timedelta(days=14)
        habits.append(ctx.habit_repo.update(habit, user_id=user.id))

    for offset in range(13, -1, -1):
        completed_at = now - timedelta(days=offset)
        for index, habit in enumerate(habits):
            if (offset + index) % 3 == 2:
                continue
            service.add_log(
                user.id,
                habit.id,
                {"completed_at": completed_at, "difficulty": 1 + (offset + index) % 5},
            )

    ctx.goal_service.create_goal(
        user.id,
        {
            "name": "Run 50 km this month",
            "target_value": 50.0,
            "current_value": 18.5,
            "start_value": 0.0,
            "related_habits": [{"habitId": habits[0].id, "relationship": "supports", "notes": None}],
        },
    )
    return user.id


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("habithero-seed")
    @click.option("--password", default="habithero-demo", show_default=True, help="Demo user password")
    def habithero_seed(password: str) -> None:
        """Seed a demo user with habits, logs and a goal."""

        click.echo("Seeding demo data...")
        user_id = run_demo_seed(password)
        if user_id is None:
            raise click.ClickException(f"User '{DEMO_USERNAME}' already exists")
        click.echo(f"Demo data ready for user '{DEMO_USERNAME}' ({user_id}).")

    @app.cli.command("habithero-recalc-streaks")
    def habithero_recalc_streaks() -> None:
        """Recompute stored streaks for every habit from its logs."""

        ctx = get_context()
        total = 0
        for user in auth.list_users(ctx.session_factory):
            total += ctx.habit_service.recalculate_streaks(user.id)
        click.echo(f"Recalculated streaks for {total} habits.")

    @app.cli.command("habithero-token")
    @click.argument("username")
    def habithero_token(username: str) -> None:
        """Print a bearer token for USERNAME."""

        ctx = get_context()
        user = auth.get_user_by_username(username, ctx.session_factory)
        if user is None:
            raise click.ClickException(f"No user named '{username}'")
        click.echo(auth.issue_token(user, ctx.config))
