"""
Integration tests for API endpoints using a SQLite DB.
"""
import uuid
from datetime import date, timedelta

import pytest

TODAY = date(2026, 10, 18)  # same as FROZEN_TODAY in conftest


def _day(days_ago: int) -> str:
    return str(TODAY - timedelta(days=days_ago))


def _create_habit(client, headers, **overrides) -> dict:
    payload = {"name": "Drink water", "habit_type": "water", "target_value": 8}
    payload.update(overrides)
    r = client.post("/habits", json=payload, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def _log(client, headers, habit_id: int, value: float, day: str) -> dict:
    r = client.post(f"/habits/{habit_id}/logs", json={"value": value, "day": day}, headers=headers)
    assert r.status_code in (200, 201), r.text
    return r.json()


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"


class TestUsers:
    def test_register_and_me(self, client):
        email = f"ana-{uuid.uuid4().hex[:8]}@example.com"
        r = client.post("/users", json={"email": email, "full_name": "Ana"})
        assert r.status_code == 201
        body = r.json()
        assert body["email"] == email
        assert body["role"] == "user"

        me = client.get("/users/me", headers={"X-User-Id": str(body["id"])})
        assert me.status_code == 200
        assert me.json()["id"] == body["id"]

    def test_email_is_normalised(self, client):
        local = f"Bob-{uuid.uuid4().hex[:8]}"
        r = client.post("/users", json={"email": f"  {local}@Example.com "})
        assert r.status_code == 201
        assert r.json()["email"] == f"{local}@example.com".lower()


class TestHabits:
    def test_create_habit(self, client, headers):
        body = _create_habit(client, headers)
        assert body["id"] > 0
        assert body["habit_type"] == "water"
        assert body["target_value"] == 8
        assert body["frequency"] == "daily"
        assert body["is_archived"] is False

    def test_list_only_own_habits(self, client, headers):
        mine = _create_habit(client, headers, name="Mine")
        other = client.post("/users", json={"email": f"o-{uuid.uuid4().hex[:8]}@example.com"}).json()
        _create_habit(client, {"X-User-Id": str(other["id"])}, name="Theirs")

        r = client.get("/habits", headers=headers)
        assert r.status_code == 200
        names = [h["name"] for h in r.json()]
        assert names == ["Mine"]
        assert r.json()[0]["id"] == mine["id"]

    def test_get_other_users_habit_is_404(self, client, headers):
        other = client.post("/users", json={"email": f"p-{uuid.uuid4().hex[:8]}@example.com"}).json()
        theirs = _create_habit(client, {"X-User-Id": str(other["id"])})
        r = client.get(f"/habits/{theirs['id']}", headers=headers)
        assert r.status_code == 404
        assert r.json()["code"] == "HABIT_NOT_FOUND"

    def test_patch_habit(self, client, headers):
        habit = _create_habit(client, headers)
        r = client.patch(f"/habits/{habit['id']}", json={"name": "Hydrate", "target_value": 6},
                         headers=headers)
        assert r.status_code == 200
        assert r.json()["name"] == "Hydrate"
        assert r.json()["target_value"] == 6
        assert r.json()["habit_type"] == "water"

    def test_archive_hides_from_list(self, client, headers):
        habit = _create_habit(client, headers)
        r = client.post(f"/habits/{habit['id']}/archive", headers=headers)
        assert r.status_code == 200
        assert r.json()["is_archived"] is True

        assert client.get("/habits", headers=headers).json() == []
        archived = client.get("/habits?include_archived=true", headers=headers).json()
        assert [h["id"] for h in archived] == [habit["id"]]

    def test_delete_habit(self, client, headers):
        habit = _create_habit(client, headers)
        _log(client, headers, habit["id"], 8, _day(0))
        r = client.delete(f"/habits/{habit['id']}", headers=headers)
        assert r.status_code == 204
        assert client.get(f"/habits/{habit['id']}", headers=headers).status_code == 404


class TestLogs:
    def test_log_reaching_target_is_completed(self, client, headers):
        habit = _create_habit(client, headers)
        r = client.post(f"/habits/{habit['id']}/logs",
                        json={"value": 8, "day": _day(0), "notes": "easy"}, headers=headers)
        assert r.status_code == 201
        body = r.json()
        assert body["created"] is True
        assert body["log"]["completed"] is True
        assert body["log"]["date"] == _day(0)
        assert body["log"]["notes"] == "easy"

    def test_log_below_target_is_not_completed(self, client, headers):
        habit = _create_habit(client, headers)
        body = _log(client, headers, habit["id"], 7.5, _day(0))
        assert body["log"]["completed"] is False

    def test_same_day_twice_updates(self, client, headers):
        habit = _create_habit(client, headers)
        first = _log(client, headers, habit["id"], 2, _day(0))
        r = client.post(f"/habits/{habit['id']}/logs",
                        json={"value": 9, "day": _day(0)}, headers=headers)
        assert r.status_code == 200
        second = r.json()
        assert second["created"] is False
        assert second["log"]["id"] == first["log"]["id"]
        assert second["log"]["completed"] is True

        logs = client.get(f"/habits/{habit['id']}/logs", headers=headers).json()
        assert len(logs) == 1

    def test_future_day_is_rejected(self, client, headers):
        habit = _create_habit(client, headers)
        for d in (0, 1, 2):
            _log(client, headers, habit["id"], 8, _day(d))

        future = str(TODAY + timedelta(days=5))
        r = client.post(f"/habits/{habit['id']}/logs",
                        json={"value": 8, "day": future}, headers=headers)
        assert r.status_code == 422
        assert r.json()["code"] == "FUTURE_LOG_DATE"
        assert r.json()["details"] == {"day": future, "today": str(TODAY)}

        stats = client.get(f"/habits/{habit['id']}/stats", headers=headers).json()
        assert stats["streak"] == {"current": 3, "best": 3}
        assert stats["total_logs"] == 3

    def test_archived_habit_rejects_logs(self, client, headers):
        habit = _create_habit(client, headers)
        client.post(f"/habits/{habit['id']}/archive", headers=headers)
        r = client.post(f"/habits/{habit['id']}/logs",
                        json={"value": 8, "day": _day(0)}, headers=headers)
        assert r.status_code == 409
        assert r.json()["code"] == "HABIT_ARCHIVED"

    def test_history_newest_first_and_bounded(self, client, headers):
        habit = _create_habit(client, headers)
        for d in (5, 1, 3):
            _log(client, headers, habit["id"], 8, _day(d))

        logs = client.get(f"/habits/{habit['id']}/logs", headers=headers).json()
        assert [l["date"] for l in logs] == [_day(1), _day(3), _day(5)]

        bounded = client.get(
            f"/habits/{habit['id']}/logs?start_date={_day(4)}&end_date={_day(2)}",
            headers=headers,
        ).json()
        assert [l["date"] for l in bounded] == [_day(3)]


class TestStats:
    def test_stats_streak_and_rate(self, client, headers):
        habit = _create_habit(client, headers)
        for d in (0, 1, 8, 9, 10):
            _log(client, headers, habit["id"], 8, _day(d))
        _log(client, headers, habit["id"], 1, _day(2))

        r = client.get(f"/habits/{habit['id']}/stats?today={TODAY}", headers=headers)
        assert r.status_code == 200
        body = r.json()
        assert body["streak"] == {"current": 2, "best": 3}
        # 5 of 6 logs in the window completed
        assert body["completion_rate"] == 83
        assert body["window_days"] == 30
        assert body["total_logs"] == 6

    def test_stats_stale_streak(self, client, headers):
        habit = _create_habit(client, headers)
        for d in (3, 4):
            _log(client, headers, habit["id"], 8, _day(d))
        body = client.get(f"/habits/{habit['id']}/stats?today={TODAY}", headers=headers).json()
        assert body["streak"] == {"current": 0, "best": 2}

    def test_stats_custom_window(self, client, headers):
        habit = _create_habit(client, headers)
        _log(client, headers, habit["id"], 8, _day(0))
        _log(client, headers, habit["id"], 0, _day(20))
        body = client.get(
            f"/habits/{habit['id']}/stats?today={TODAY}&window_days=7", headers=headers
        ).json()
        assert body["completion_rate"] == 100
        assert body["window_days"] == 7

    def test_stats_empty_habit(self, client, headers):
        habit = _create_habit(client, headers)
        body = client.get(f"/habits/{habit['id']}/stats?today={TODAY}", headers=headers).json()
        assert body["streak"] == {"current": 0, "best": 0}
        assert body["completion_rate"] == 0


class TestDashboard:
    def test_dashboard(self, client, headers):
        a = _create_habit(client, headers, name="A")
        b = _create_habit(client, headers, name="B")
        c = _create_habit(client, headers, name="C")
        _log(client, headers, a["id"], 8, _day(0))
        _log(client, headers, b["id"], 1, _day(0))
        client.post(f"/habits/{c['id']}/archive", headers=headers)

        r = client.get(f"/stats/dashboard?today={TODAY}", headers=headers)
        assert r.status_code == 200
        body = r.json()
        assert body["total_habits"] == 3
        assert body["active_habits"] == 2
        assert body["today_completed"] == 1
        assert body["today_total"] == 2
        assert body["today_completion"] == 50
        assert body["wellness_score"] == 50

    def test_dashboard_no_habits(self, client, headers):
        body = client.get(f"/stats/dashboard?today={TODAY}", headers=headers).json()
        assert body["today_total"] == 0
        assert body["today_completion"] == 0


class TestAchievements:

    @pytest.fixture()
    def streak_achievement(self, client) -> dict:
        r = client.post("/achievements", json={
            "name": "Endpoint Four Day Streak",
            "category": "consistency",
            "criteria_type": "streak",
            "criteria_value": 4,
            "points": 40,
        })
        assert r.status_code == 201
        return r.json()

    def test_catalog_sorted_by_points(self, client, streak_achievement):
        r = client.get("/achievements")
        assert r.status_code == 200
        points = [a["points"] for a in r.json()]
        assert points == sorted(points)
        assert streak_achievement["id"] in [a["id"] for a in r.json()]

    def test_get_one(self, client, streak_achievement):
        r = client.get(f"/achievements/{streak_achievement['id']}")
        assert r.status_code == 200
        assert r.json()["criteria_type"] == "streak"

    def test_logging_unlocks_streak(self, client, headers, streak_achievement):
        habit = _create_habit(client, headers)
        for d in (3, 2, 1):
            body = _log(client, headers, habit["id"], 8, _day(d))
            assert streak_achievement["id"] not in [u["achievement_id"] for u in body["unlocked"]]

        body = _log(client, headers, habit["id"], 8, _day(0))
        unlocked = [u for u in body["unlocked"] if u["achievement_id"] == streak_achievement["id"]]
        assert len(unlocked) == 1
        assert unlocked[0]["progress"] == 100
        assert unlocked[0]["achievement"]["name"] == "Endpoint Four Day Streak"

        mine = client.get("/achievements/me", headers=headers).json()
        assert streak_achievement["id"] in [u["achievement_id"] for u in mine]

        dash = client.get(f"/stats/dashboard?today={TODAY}", headers=headers).json()
        assert dash["total_achievements"] >= 1
        assert dash["total_points"] >= 40

    def test_check_is_idempotent(self, client, headers, streak_achievement):
        habit = _create_habit(client, headers)
        for d in (3, 2, 1, 0):
            _log(client, headers, habit["id"], 8, _day(d))

        r = client.post("/achievements/check", headers=headers)
        assert r.status_code == 200
        assert r.json()["reference_date"] == str(TODAY)
        assert r.json()["unlocked"] == []

        mine = client.get("/achievements/me", headers=headers).json()
        ids = [u["achievement_id"] for u in mine]
        assert ids.count(streak_achievement["id"]) == 1

    def test_backfilled_past_run_does_not_unlock_streak(self, client, headers):
        three_day = client.post("/achievements", json={
            "name": "Endpoint Three Day Streak",
            "category": "consistency",
            "criteria_type": "streak",
            "criteria_value": 3,
            "points": 30,
        }).json()
        habit = _create_habit(client, headers)
        for d in (22, 21, 20):
            body = _log(client, headers, habit["id"], 8, _day(d))
            assert three_day["id"] not in [u["achievement_id"] for u in body["unlocked"]]

        # A client-supplied date is not a reference date
        r = client.post(f"/achievements/check?today={_day(20)}", headers=headers)
        assert r.status_code == 200
        assert r.json()["reference_date"] == str(TODAY)
        assert three_day["id"] not in [u["achievement_id"] for u in r.json()["unlocked"]]

        mine = client.get("/achievements/me", headers=headers).json()
        assert three_day["id"] not in [u["achievement_id"] for u in mine]

    def test_check_with_no_activity(self, client, headers):
        r = client.post("/achievements/check", headers=headers)
        assert r.status_code == 200
        assert r.json()["unlocked"] == []

    def test_unknown_criteria_type_is_accepted_but_never_unlocks(self, client, headers):
        created = client.post("/achievements", json={
            "name": "Endpoint Future Rule",
            "category": "challenge",
            "criteria_type": "perfect_month",
            "criteria_value": 0,
        }).json()
        habit = _create_habit(client, headers)
        body = _log(client, headers, habit["id"], 8, _day(0))
        assert created["id"] not in [u["achievement_id"] for u in body["unlocked"]]
