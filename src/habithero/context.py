"""Application context: the objects a request needs, built once per app."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from flask import current_app
from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, open_database
from .infra.repositories import (
    SQLModelGoalRepository,
    SQLModelHabitLogRepository,
    SQLModelHabitRepository,
)
from .models.base import utcnow
from .services import GoalService, HabitService

EXTENSION_KEY = "habithero"


@dataclass
class AppContext:
    """Centralized application context with repositories and services."""

    config: BaseConfig
    engine: Engine
    session_factory: SessionFactory

    habit_repo: SQLModelHabitRepository
    habit_log_repo: SQLModelHabitLogRepository
    goal_repo: SQLModelGoalRepository

    habit_service: HabitService
    goal_service: GoalService


def create_app_context(
    config: Optional[BaseConfig] = None,
    *,
    clock: Callable[[], datetime] = utcnow,
) -> AppContext:
    """Create the engine, schema, repositories and services."""

    config = config or BaseConfig()
    database = open_database(config)
    session_factory = database.session_factory

    habit_repo = SQLModelHabitRepository(session_factory)
    habit_log_repo = SQLModelHabitLogRepository(session_factory)
    goal_repo = SQLModelGoalRepository(session_factory)

    return AppContext(
        config=config,
        engine=database.engine,
        session_factory=session_factory,
        habit_repo=habit_repo,
        habit_log_repo=habit_log_repo,
        goal_repo=goal_repo,
        habit_service=HabitService(habit_repo, habit_log_repo, clock=clock),
        goal_service=GoalService(goal_repo, habit_repo),
    )


def get_context() -> AppContext:
    """Return the context attached to the running Flask app."""

    return current_app.extensions[EXTENSION_KEY]
