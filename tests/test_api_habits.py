"""HTTP tests for the habits API."""

from __future__ import annotations

import pytest


def _data(response):
    return response.get_json()["data"]


class TestHabitCrud:
    def test_requires_token(self, client):
        response = client.get("/api/habits")
        assert response.status_code == 401
        assert response.get_json() == {"error": "Unauthorized"}

    def test_rejects_garbage_token(self, client):
        response = client.get("/api/habits", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
        assert response.get_json()["error"] == "Invalid token"

    def test_create_with_defaults(self, client, auth_headers):
        response = client.post(
            "/api/habits",
            json={"name": "  Read  ", "category": "productivity", "userId": "spoofed", "streak": 12},
            headers=auth_headers,
        )

        assert response.status_code == 201
        habit = _data(response)
        assert habit["name"] == "Read"
        assert habit["color"] == "blue"
        assert habit["frequencyType"] == "daily"
        assert habit["frequencyValue"] == {"days": [], "times": 1}
        assert habit["streak"] == 0
        assert habit["isArchived"] is False
        assert habit["userId"] != "spoofed"
        assert habit["createdAt"] == "2024-03-13T12:00:00"

    def test_invalid_category(self, client, auth_headers):
        response = client.post(
            "/api/habits", json={"name": "Read", "category": "hobbies"}, headers=auth_headers
        )
        body = response.get_json()
        assert response.status_code == 400
        assert body["error"] == "Invalid request data"
        assert "category" in body["details"]

    def test_missing_name(self, client, auth_headers):
        response = client.post("/api/habits", json={"category": "fitness"}, headers=auth_headers)
        assert response.status_code == 400
        assert "name" in response.get_json()["details"]

    def test_invalid_weekly_days(self, client, auth_headers):
        response = client.post(
            "/api/habits",
            json={
                "name": "Gym",
                "category": "fitness",
                "frequencyType": "weekly",
                "frequencyValue": {"days": [1, 7], "times": 1},
            },
            headers=auth_headers,
        )
        assert response.status_code == 400

    def test_body_must_be_json_object(self, client, auth_headers):
        response = client.post(
            "/api/habits", data="name=Read", content_type="text/plain", headers=auth_headers
        )
        assert response.status_code == 400
        assert response.get_json()["error"] == "Request body must be a JSON object"

    def test_get_update_delete(self, client, auth_headers, create_habit):
        habit = create_habit()
        url = f"/api/habits/{habit['id']}"

        assert _data(client.get(url, headers=auth_headers))["name"] == "Read"

        response = client.put(url, json={"description": "Ten pages", "color": "green"}, headers=auth_headers)
        updated = _data(response)
        assert response.status_code == 200
        assert updated["description"] == "Ten pages"
        assert updated["color"] == "green"
        assert updated["category"] == "productivity"

        response = client.delete(url, headers=auth_headers)
        assert response.status_code == 200
        assert _data(response) == {"id": habit["id"], "deleted": True}
        assert client.get(url, headers=auth_headers).status_code == 404

    def test_update_rejects_null_name(self, client, auth_headers, create_habit):
        habit = create_habit()
        response = client.put(f"/api/habits/{habit['id']}", json={"name": None}, headers=auth_headers)
        assert response.status_code == 400

    def test_other_users_habit_is_not_found(self, client, register, create_habit):
        habit = create_habit()
        intruder = register("intruder")

        response = client.get(f"/api/habits/{habit['id']}", headers=intruder)

        assert response.status_code == 404
        assert response.get_json()["error"] == f"Habit with id {habit['id']} not found"
        assert client.delete(f"/api/habits/{habit['id']}", headers=intruder).status_code == 404

    def test_archive_and_unarchive(self, client, auth_headers, create_habit):
        habit = create_habit()

        archived = _data(client.post(f"/api/habits/{habit['id']}/archive", headers=auth_headers))
        assert archived["isArchived"] is True

        toggled = client.put(
            f"/api/habits/{habit['id']}/toggle", json={"completed": True}, headers=auth_headers
        )
        assert toggled.status_code == 400

        restored = _data(client.post(f"/api/habits/{habit['id']}/unarchive", headers=auth_headers))
        assert restored["isArchived"] is False


class TestListing:
    @pytest.fixture
    def habits(self, create_habit):
        return [
            create_habit(name="Morning run", category="fitness"),
            create_habit(name="Journal", category="mindfulness", description="Before the run"),
            create_habit(name="Stretch", category="fitness", isArchived=True),
        ]

    def test_query_filters(self, client, auth_headers, habits):
        response = client.get(
            "/api/habits?category=fitness&isArchived=false", headers=auth_headers
        )
        assert [h["name"] for h in _data(response)] == ["Morning run"]

    def test_search_and_sort(self, client, auth_headers, habits):
        response = client.get(
            "/api/habits?search=run&sortBy=name&sortOrder=desc", headers=auth_headers
        )
        assert [h["name"] for h in _data(response)] == ["Morning run", "Journal"]

    def test_invalid_sort_field(self, client, auth_headers, habits):
        response = client.get("/api/habits?sortBy=streak", headers=auth_headers)
        assert response.status_code == 400
        assert "sortBy" in response.get_json()["details"]

    def test_filtered_body(self, client, auth_headers, habits):
        response = client.post(
            "/api/habits/filtered",
            json={"searchQuery": "stretch", "isArchived": True},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert [h["name"] for h in _data(response)] == ["Stretch"]

    def test_only_own_habits(self, client, register, habits):
        assert _data(client.get("/api/habits", headers=register("newcomer"))) == []


class TestToday:
    def test_due_today_with_completion_flag(self, client, auth_headers, create_habit):
        daily = create_habit(name="Daily")
        create_habit(name="Mondays", frequencyType="weekly", frequencyValue={"days": [1]})
        create_habit(name="Wednesdays", frequencyType="weekly", frequencyValue={"days": [3]})
        client.post(f"/api/habits/{daily['id']}/toggle", json={"completed": True}, headers=auth_headers)

        today = {h["name"]: h["completedToday"] for h in _data(client.get("/api/habits/today", headers=auth_headers))}

        assert today == {"Daily": True, "Wednesdays": False}


class TestToggle:
    def test_toggle_on_and_off(self, client, auth_headers, create_habit):
        habit = create_habit()
        url = f"/api/habits/{habit['id']}/toggle"

        done = _data(client.put(url, json={"completed": True}, headers=auth_headers))
        assert done["streak"] == 1
        assert done["longestStreak"] == 1
        assert done["lastCompleted"] == "2024-03-13T12:00:00"

        again = _data(client.post(url, json={"completed": True}, headers=auth_headers))
        assert again["streak"] == 1

        undone = _data(client.put(url, json={"completed": False}, headers=auth_headers))
        assert undone["streak"] == 0
        assert undone["lastCompleted"] is None

    def test_completed_must_be_boolean(self, client, auth_headers, create_habit):
        habit = create_habit()
        response = client.put(
            f"/api/habits/{habit['id']}/toggle", json={"completed": "yes"}, headers=auth_headers
        )
        assert response.status_code == 400
        assert "completed" in response.get_json()["details"]


class TestLogs:
    def test_create_list_delete(self, client, auth_headers, create_habit):
        habit = create_habit()

        response = client.post(
            "/api/habits/logs",
            json={
                "habitId": habit["id"],
                "completedAt": "2024-03-12T08:30:00Z",
                "difficulty": 4,
                "notes": "Felt good",
                "details": {"pages": 12},
            },
            headers=auth_headers,
        )
        assert response.status_code == 201
        log = _data(response)
        assert log["completedAt"] == "2024-03-12T08:30:00"
        assert log["details"] == {"pages": 12}

        listed = _data(
            client.get(
                f"/api/habits/logs?habitId={habit['id']}&startDate=2024-03-12&endDate=2024-03-12",
                headers=auth_headers,
            )
        )
        assert [item["id"] for item in listed] == [log["id"]]

        refreshed = _data(client.get(f"/api/habits/{habit['id']}", headers=auth_headers))
        assert refreshed["streak"] == 1

        deleted = client.delete(
            f"/api/habits/logs?habitId={habit['id']}&logId={log['id']}", headers=auth_headers
        )
        assert deleted.status_code == 200
        assert _data(client.get(f"/api/habits/logs?habitId={habit['id']}", headers=auth_headers)) == []

    def test_future_log_rejected(self, client, auth_headers, create_habit):
        habit = create_habit()
        response = client.post(
            "/api/habits/logs",
            json={"habitId": habit["id"], "completedAt": "2024-03-14T08:00:00Z"},
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert response.get_json()["error"] == "completedAt cannot be in the future"

    def test_difficulty_range(self, client, auth_headers, create_habit):
        habit = create_habit()
        response = client.post(
            "/api/habits/logs", json={"habitId": habit["id"], "difficulty": 6}, headers=auth_headers
        )
        assert response.status_code == 400
        assert "difficulty" in response.get_json()["details"]

    def test_habit_id_required(self, client, auth_headers):
        response = client.get("/api/habits/logs", headers=auth_headers)
        assert response.status_code == 400
        assert "habitId" in response.get_json()["details"]

    def test_inverted_range(self, client, auth_headers, create_habit):
        habit = create_habit()
        response = client.get(
            f"/api/habits/logs?habitId={habit['id']}&startDate=2024-03-13&endDate=2024-03-01",
            headers=auth_headers,
        )
        assert response.status_code == 400


class TestAnalytics:
    @pytest.fixture
    def logged_habit(self, client, auth_headers, create_habit):
        habit = create_habit()
        for stamp, difficulty in (
            ("2024-03-10T08:00:00", 2),
            ("2024-03-11T08:00:00", 3),
            ("2024-03-11T19:00:00", None),
            ("2024-03-13T08:00:00", 5),
        ):
            payload = {"habitId": habit["id"], "completedAt": stamp}
            if difficulty is not None:
                payload["difficulty"] = difficulty
            response = client.post("/api/habits/logs", json=payload, headers=auth_headers)
            assert response.status_code == 201
        return habit

    def test_completion_rate(self, client, auth_headers, logged_habit):
        response = client.get(
            f"/api/habits/logs/completion-rate?habitId={logged_habit['id']}"
            "&startDate=2024-03-10&endDate=2024-03-13",
            headers=auth_headers,
        )
        assert _data(response) == {"totalDays": 4, "expected": 4, "completedDays": 3, "rate": 0.75}

    def test_completion_summaries_by_week(self, client, auth_headers, logged_habit):
        response = client.get(
            f"/api/habits/logs/completion-summaries?habitId={logged_habit['id']}"
            "&startDate=2024-03-01&groupBy=week",
            headers=auth_headers,
        )
        summaries = _data(response)
        assert [(item["date"], item["count"]) for item in summaries] == [
            ("2024-03-04", 1),
            ("2024-03-11", 3),
        ]
        assert len(summaries[1]["logIds"]) == 3

    def test_streak_summaries(self, client, auth_headers, logged_habit):
        response = client.get(
            f"/api/habits/logs/streak-summaries?habitId={logged_habit['id']}&startDate=2024-03-01",
            headers=auth_headers,
        )
        history = _data(response)
        assert [item["streak"] for item in history] == [1, 2, 2, 1]
        assert history[-1]["wasStreakBroken"] is True

    def test_average_difficulty(self, client, auth_headers, logged_habit):
        response = client.get(
            f"/api/habits/logs/average-difficulty?habitId={logged_habit['id']}&startDate=2024-03-01",
            headers=auth_headers,
        )
        assert _data(response) == {"habitId": logged_habit["id"], "averageDifficulty": 3.33}

    def test_combined_analytics(self, client, auth_headers, logged_habit):
        base = f"/api/habits/analytics?habitId={logged_habit['id']}&startDate=2024-03-01T00:00:00.000Z"

        completion = _data(client.get(f"{base}&type=completion", headers=auth_headers))
        streak = _data(client.get(f"{base}&type=streak", headers=auth_headers))

        assert [item["count"] for item in completion] == [1, 2, 1]
        assert [item["streak"] for item in streak] == [1, 2, 2, 1]
        assert client.get(f"{base}&type=bogus", headers=auth_headers).status_code == 400

    def test_analytics_for_other_user(self, client, register, logged_habit):
        response = client.get(
            f"/api/habits/logs/completion-rate?habitId={logged_habit['id']}",
            headers=register("intruder"),
        )
        assert response.status_code == 404
