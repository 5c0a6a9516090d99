"""Pytest configuration and shared fixtures for Habit Hero tests.

This module provides database fixtures, test data factories, and helper utilities
for testing schedule math, repositories, services and the HTTP API without
touching a real database.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any

import pytest

from habithero import create_app
from habithero.config import TestConfig
from habithero.infra.database import create_db_engine, create_session_factory, init_database
from habithero.infra.repositories import (
    SQLModelGoalRepository,
    SQLModelHabitLogRepository,
    SQLModelHabitRepository,
)
from habithero.models import Goal, Habit, HabitLog, User
from habithero.services import GoalService, HabitService
from habithero.services import auth

# Wednesday. Weeks start on Monday 2024-03-11.
FROZEN_NOW = datetime(2024, 3, 13, 12, 0)
TODAY = FROZEN_NOW.date()
TEST_PASSWORD = "correct-horse-battery"


def frozen_clock() -> datetime:
    return FROZEN_NOW


def at(day: date, hour: int = 9) -> datetime:
    """Naive UTC timestamp on ``day``."""

    return datetime.combine(day, time(hour=hour))


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def test_config(tmp_path) -> TestConfig:
    return TestConfig(tmp_path)


@pytest.fixture(scope="function")
def db_engine(test_config):
    """Create an isolated SQLite database for each test.

    Yields:
        Engine: SQLModel engine connected to a throwaway database file
    """
    engine = create_db_engine(test_config)
    init_database(engine)

    yield engine

    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the one the app builds."""

    return create_session_factory(db_engine)


@pytest.fixture
def habit_repo(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def log_repo(session_factory) -> SQLModelHabitLogRepository:
    return SQLModelHabitLogRepository(session_factory)


@pytest.fixture
def goal_repo(session_factory) -> SQLModelGoalRepository:
    return SQLModelGoalRepository(session_factory)


@pytest.fixture
def habit_service(habit_repo, log_repo) -> HabitService:
    return HabitService(habit_repo, log_repo, clock=frozen_clock)


@pytest.fixture
def goal_service(goal_repo, habit_repo) -> GoalService:
    return GoalService(goal_repo, habit_repo)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user_factory(session_factory):
    """Factory for creating users with a known password."""

    def _create_user(username: str = "tester") -> User:
        return auth.create_user(
            username=username, password=TEST_PASSWORD, session_factory=session_factory
        )

    return _create_user


@pytest.fixture
def user(user_factory) -> User:
    """Default user for scoping data."""

    return user_factory("tester")


@pytest.fixture
def other_user(user_factory) -> User:
    return user_factory("someone-else")


@pytest.fixture
def habit_factory(habit_repo, user):
    """Factory for creating test habits.

    Returns:
        Callable: Function that creates and persists Habit instances
    """

    def _create_habit(
        name: str = "Exercise",
        frequency_type: str = "daily",
        days: list[int] | None = None,
        times: int = 1,
        owner: User | None = None,
        created_at: datetime | None = None,
        **fields: Any,
    ) -> Habit:
        """Create a test habit with sensible defaults.

        Args:
            name: Habit display name
            frequency_type: daily, weekly or monthly
            days: Scheduled weekdays (0 = Sunday) or days of the month
            times: Completions per period when ``days`` is empty
            created_at: Defaults to two months before the frozen "now"

        Returns:
            Habit: Persisted habit instance
        """
        owner = owner or user
        habit = Habit(
            user_id=owner.id,
            name=name,
            category=fields.pop("category", "fitness"),
            frequency_type=frequency_type,
            frequency_value={"days": days or [], "times": times},
            created_at=created_at or FROZEN_NOW - timedelta(days=60),
            **fields,
        )
        return habit_repo.create(habit, user_id=owner.id)

    return _create_habit


@pytest.fixture
def log_factory(log_repo):
    """Factory for creating habit logs on a given day."""

    def _create_log(habit: Habit, day: date, hour: int = 9, **fields: Any) -> HabitLog:
        log = HabitLog(habit_id=habit.id, user_id=habit.user_id, completed_at=at(day, hour), **fields)
        return log_repo.create(log, user_id=habit.user_id)

    return _create_log


@pytest.fixture
def goal_factory(goal_repo, user):
    def _create_goal(name: str = "Run a marathon", owner: User | None = None, **fields: Any) -> Goal:
        owner = owner or user
        return goal_repo.create(Goal(user_id=owner.id, name=name, **fields), user_id=owner.id)

    return _create_goal


# =============================================================================
# HTTP Fixtures
# =============================================================================


@pytest.fixture
def app(tmp_path):
    application = create_app(config=TestConfig(tmp_path / "app"), clock=frozen_clock)
    yield application
    application.extensions["habithero"].engine.dispose()


@pytest.fixture
def client(app):
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Register a user through the API and return its bearer headers."""

    def _register(username: str = "hero") -> dict[str, str]:
        response = client.post(
            "/api/auth/register", json={"username": username, "password": TEST_PASSWORD}
        )
        assert response.status_code == 201, response.get_json()
        token = response.get_json()["data"]["token"]
        return {"Authorization": f"Bearer {token}"}

    return _register


@pytest.fixture
def auth_headers(register) -> dict[str, str]:
    return register("hero")


@pytest.fixture
def create_habit(client, auth_headers):
    """Create a habit through the API and return its JSON representation."""

    def _create(headers: dict[str, str] | None = None, **payload: Any) -> dict[str, Any]:
        body = {"name": "Read", "category": "productivity", **payload}
        response = client.post("/api/habits", json=body, headers=headers or auth_headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()["data"]

    return _create
