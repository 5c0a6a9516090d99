"""Unit tests for repository implementations."""

from __future__ import annotations

from datetime import date, datetime

import pytest
from sqlalchemy import DateTime
from sqlalchemy.exc import IntegrityError

from habithero.domain.repositories import HabitFilters
from habithero.models import Goal, Habit, HabitLog, User


class TestHabitRepository:
    def test_create_and_get(self, habit_repo, user):
        habit = habit_repo.create(Habit(user_id=user.id, name="Stretch"), user_id=user.id)

        retrieved = habit_repo.get_by_id(habit.id, user_id=user.id)
        assert retrieved is not None
        assert retrieved.name == "Stretch"
        assert retrieved.frequency_value == {"days": [], "times": 1}
        assert len(retrieved.id) == 36

    def test_other_users_habits_are_invisible(self, habit_repo, habit_factory, user, other_user):
        mine = habit_factory(name="Mine")
        habit_factory(name="Theirs", owner=other_user)

        assert [h.name for h in habit_repo.list_for_user(user_id=user.id)] == ["Mine"]
        assert habit_repo.get_by_id(mine.id, user_id=other_user.id) is None

    def test_filters(self, habit_repo, habit_factory, user):
        habit_factory(name="Morning run", category="fitness")
        habit_factory(name="Journal", category="mindfulness", description="Write before a run")
        habit_factory(name="Old habit", category="fitness", is_archived=True)

        by_category = habit_repo.list_for_user(
            user_id=user.id, filters=HabitFilters(category="fitness", is_archived=False)
        )
        assert [h.name for h in by_category] == ["Morning run"]

        searched = habit_repo.list_for_user(user_id=user.id, filters=HabitFilters(search="RUN"))
        assert [h.name for h in searched] == ["Journal", "Morning run"]

    def test_sorting(self, habit_repo, habit_factory, user):
        for name in ("b", "c", "a"):
            habit_factory(name=name)

        rows = habit_repo.list_for_user(
            user_id=user.id, filters=HabitFilters(sort_by="name", sort_order="desc")
        )
        assert [h.name for h in rows] == ["c", "b", "a"]

    def test_update_sets_updated_at(self, habit_repo, habit_factory, user):
        habit = habit_factory(name="Read")
        before = habit.updated_at
        habit.name = "Read more"
        habit.frequency_value = {"days": [], "times": 3}

        updated = habit_repo.update(habit, user_id=user.id)

        assert updated.name == "Read more"
        assert updated.updated_at >= before
        assert habit_repo.get_by_id(habit.id, user_id=user.id).frequency_times == 3

    def test_search_treats_wildcards_literally(self, habit_repo, habit_factory, user):
        habit_factory(name="100% effort")
        habit_factory(name="Plain")
        habit_factory(name="snake_case")
        habit_factory(name="snakeXcase")

        def names(search):
            rows = habit_repo.list_for_user(user_id=user.id, filters=HabitFilters(search=search))
            return [h.name for h in rows]

        assert names("%") == ["100% effort"]
        assert names("_") == ["snake_case"]
        assert names("snake") == ["snakeXcase", "snake_case"]

    def test_timestamps_are_stored_naive(self, habit_repo, user):
        created = datetime(2024, 3, 13, 12, 0)
        habit = habit_repo.create(
            Habit(user_id=user.id, name="Stretch", created_at=created, reminder=datetime(2024, 3, 14, 7)),
            user_id=user.id,
        )

        retrieved = habit_repo.get_by_id(habit.id, user_id=user.id)
        assert retrieved.created_at == created
        assert retrieved.created_at.tzinfo is None
        assert retrieved.reminder == datetime(2024, 3, 14, 7)
        timestamp_columns = [
            Habit.__table__.c.created_at,
            Habit.__table__.c.last_completed,
            Habit.__table__.c.reminder,
            HabitLog.__table__.c.completed_at,
            Goal.__table__.c.updated_at,
            User.__table__.c.last_login,
        ]
        for column in timestamp_columns:
            assert type(column.type) is DateTime, column
            assert column.type.timezone is False, column

    def test_delete(self, habit_repo, habit_factory, user, other_user):
        habit = habit_factory()
        assert habit_repo.delete(habit.id, user_id=other_user.id) is False
        assert habit_repo.delete(habit.id, user_id=user.id) is True
        assert habit_repo.get_by_id(habit.id, user_id=user.id) is None

    def test_delete_removes_logs_of_that_habit_only(
        self, habit_repo, log_repo, habit_factory, log_factory, user
    ):
        habit = habit_factory()
        keep = habit_factory(name="Keep")
        for day in (11, 12, 13):
            log_factory(habit, date(2024, 3, day))
        log_factory(keep, date(2024, 3, 13))

        assert habit_repo.delete(habit.id, user_id=user.id) is True
        assert log_repo.list_for_habit(habit.id, user_id=user.id) == []
        assert len(log_repo.list_for_habit(keep.id, user_id=user.id)) == 1


class TestHabitLogRepository:
    def test_range_is_inclusive_by_day(self, log_repo, habit_factory, log_factory, user):
        habit = habit_factory()
        log_factory(habit, date(2024, 3, 10), hour=23)
        inside = log_factory(habit, date(2024, 3, 11), hour=0)
        late = log_factory(habit, date(2024, 3, 12), hour=23)

        rows = log_repo.list_for_habit(
            habit.id, user_id=user.id, start_date=date(2024, 3, 11), end_date=date(2024, 3, 12)
        )
        assert [row.id for row in rows] == [inside.id, late.id]

    def test_list_on_day(self, log_repo, habit_factory, log_factory, user):
        habit = habit_factory()
        log_factory(habit, date(2024, 3, 12))
        today = log_factory(habit, date(2024, 3, 13))

        assert [row.id for row in log_repo.list_on_day(habit.id, date(2024, 3, 13), user_id=user.id)] == [
            today.id
        ]

    def test_list_for_user_spans_habits(self, log_repo, habit_factory, log_factory, user, other_user):
        first = habit_factory(name="First")
        second = habit_factory(name="Second")
        foreign = habit_factory(name="Foreign", owner=other_user)
        log_factory(first, date(2024, 3, 12))
        log_factory(second, date(2024, 3, 13))
        log_factory(foreign, date(2024, 3, 13))

        rows = log_repo.list_for_user(user_id=user.id)
        assert {row.habit_id for row in rows} == {first.id, second.id}

    def test_log_for_missing_habit_is_refused(self, log_repo, user):
        with pytest.raises(IntegrityError):
            log_repo.create(HabitLog(habit_id="no-such-habit", user_id=user.id), user_id=user.id)

    def test_delete_scoped_to_user(self, log_repo, habit_factory, log_factory, user, other_user):
        log = log_factory(habit_factory(), date(2024, 3, 13))
        assert log_repo.delete(log.id, user_id=other_user.id) is False
        assert log_repo.delete(log.id, user_id=user.id) is True


class TestGoalRepository:
    def test_crud(self, goal_repo, user, other_user):
        goal = goal_repo.create(
            Goal(user_id=user.id, name="Read 12 books", target_value=12, current_value=3),
            user_id=user.id,
        )
        assert goal_repo.get_by_id(goal.id, user_id=other_user.id) is None

        goal.current_value = 4
        assert goal_repo.update(goal, user_id=user.id).current_value == 4

        assert [g.id for g in goal_repo.list_for_user(user_id=user.id)] == [goal.id]
        assert goal_repo.delete(goal.id, user_id=other_user.id) is False
        assert goal_repo.delete(goal.id, user_id=user.id) is True
        assert goal_repo.list_for_user(user_id=user.id) == []
