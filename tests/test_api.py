"""
HTTP tests for the match and live scoring routes.
"""
import pytest
from fastapi.testclient import TestClient

from main import app
from scorebook.auth import create_access_token
from scorebook.database import get_db
from scorebook.models import User, UserRole

TEAM1 = [f"a{i}" for i in range(1, 12)]
TEAM2 = [f"b{i}" for i in range(1, 12)]


@pytest.fixture
def client(test_db):
    for user_id, role in [("admin", UserRole.ADMIN), ("a1", UserRole.MEMBER), ("z9", UserRole.MEMBER)]:
        test_db.add(User(id=user_id, email=f"{user_id}@club.test", name=user_id.upper(), role=role))
    test_db.commit()

    def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture
def match_id(client):
    response = client.post(
        "/api/matches",
        json={"team1": TEAM1, "team2": TEAM2, "format": "T20", "captain1_id": "a1", "captain2_id": "b1"},
        headers=auth("admin"),
    )
    assert response.status_code == 200
    return response.json()["id"]


@pytest.fixture
def live_match(client, match_id):
    response = client.post(f"/api/matches/{match_id}/toss", json={"winner": "team1", "choice": "bat"},
                           headers=auth("a1"))
    assert response.status_code == 200
    response = client.post(
        f"/api/matches/{match_id}/scoring/start",
        json={"striker_id": "a1", "non_striker_id": "a2", "bowler_id": "b1"},
        headers=auth("a1"),
    )
    assert response.status_code == 200
    return match_id


class TestMatches:
    def test_health(self, client):
        assert client.get("/api/health").json() == {"status": "healthy"}

    def test_create_match(self, client, match_id):
        data = client.get(f"/api/matches/{match_id}").json()
        assert data["overs_limit"] == 20
        assert data["status"] == "scheduled"
        assert data["version"] == 0
        assert data["summary"] is None

    def test_create_requires_admin(self, client):
        response = client.post("/api/matches", json={"team1": TEAM1, "team2": TEAM2}, headers=auth("a1"))
        assert response.status_code == 403

    def test_missing_token(self, client):
        response = client.post("/api/matches", json={"team1": TEAM1, "team2": TEAM2})
        assert response.status_code in (401, 403)

    def test_bad_token(self, client):
        response = client.post(
            "/api/matches", json={"team1": TEAM1, "team2": TEAM2},
            headers={"Authorization": "Bearer not-a-token"},
        )
        assert response.status_code == 401

    def test_unknown_match(self, client):
        assert client.get("/api/matches/999").status_code == 404

    def test_toss_by_non_captain(self, client, match_id):
        response = client.post(f"/api/matches/{match_id}/toss", json={"winner": "team1", "choice": "bat"},
                               headers=auth("z9"))
        assert response.status_code == 403


class TestLiveScoring:
    def test_start(self, client, live_match):
        summary = client.get(f"/api/matches/{live_match}").json()["summary"]
        assert summary["striker_id"] == "a1"
        assert summary["bowler_id"] == "b1"
        assert summary["overs"] == "0.0"

    def test_ball(self, client, live_match):
        response = client.post(f"/api/matches/{live_match}/scoring/ball", json={"runs": 1}, headers=auth("a1"))
        assert response.status_code == 200
        data = response.json()
        assert data["over_complete"] is False
        summary = data["match"]["summary"]
        assert summary["runs"] == 1
        assert summary["striker_id"] == "a2"
        assert summary["this_over"] == ["1"]

    def test_wide(self, client, live_match):
        response = client.post(
            f"/api/matches/{live_match}/scoring/ball", json={"runs": 0, "extra": "wide"}, headers=auth("a1")
        )
        summary = response.json()["match"]["summary"]
        assert summary["runs"] == 1
        assert summary["extras"] == 1
        assert summary["overs"] == "0.0"

    def test_wicket_flow(self, client, live_match):
        response = client.post(
            f"/api/matches/{live_match}/scoring/ball",
            json={"is_wicket": True, "dismissal": {"type": "Caught", "fielder": "b3"}},
            headers=auth("a1"),
        )
        data = response.json()
        assert data["wicket_fallen"] is True
        assert data["dismissed_id"] == "a1"

        eligible = client.get(f"/api/matches/{live_match}/scoring/eligible").json()
        assert eligible["batsmen"][0] == "a3"

        blocked = client.post(f"/api/matches/{live_match}/scoring/ball", json={"runs": 1}, headers=auth("a1"))
        assert blocked.status_code == 409

        response = client.post(
            f"/api/matches/{live_match}/scoring/batsman", json={"player_id": "a3"}, headers=auth("a1")
        )
        assert response.status_code == 200
        assert response.json()["summary"]["striker_id"] == "a3"

    def test_runs_out_of_range(self, client, live_match):
        response = client.post(f"/api/matches/{live_match}/scoring/ball", json={"runs": 7}, headers=auth("a1"))
        assert response.status_code == 422

    def test_victim_not_at_crease(self, client, live_match):
        response = client.post(
            f"/api/matches/{live_match}/scoring/ball",
            json={"is_wicket": True, "dismissal": {"type": "Run Out", "who": "a9"}},
            headers=auth("a1"),
        )
        assert response.status_code == 400

    def test_undo_and_reset(self, client, live_match):
        before = client.get(f"/api/matches/{live_match}").json()["scoring"]
        for runs in (4, 1):
            client.post(f"/api/matches/{live_match}/scoring/ball", json={"runs": runs}, headers=auth("a1"))

        response = client.post(f"/api/matches/{live_match}/scoring/undo", headers=auth("a1"))
        assert response.status_code == 200
        assert response.json()["summary"]["runs"] == 4

        response = client.post(f"/api/matches/{live_match}/scoring/reset-over", headers=auth("a1"))
        assert response.status_code == 200
        assert response.json()["scoring"] == before

        response = client.post(f"/api/matches/{live_match}/scoring/undo", headers=auth("a1"))
        assert response.status_code == 409

    def test_stale_version(self, client, live_match):
        version = client.get(f"/api/matches/{live_match}").json()["version"]
        ok = client.post(f"/api/matches/{live_match}/scoring/ball",
                         json={"runs": 2, "expected_version": version}, headers=auth("a1"))
        assert ok.status_code == 200
        assert ok.json()["match"]["version"] == version + 1

        stale = client.post(f"/api/matches/{live_match}/scoring/ball",
                            json={"runs": 2, "expected_version": version}, headers=auth("a1"))
        assert stale.status_code == 409
        assert client.get(f"/api/matches/{live_match}").json()["summary"]["runs"] == 2

    def test_scoring_requires_captain_or_admin(self, client, live_match):
        response = client.post(f"/api/matches/{live_match}/scoring/ball", json={"runs": 1}, headers=auth("z9"))
        assert response.status_code == 403
        response = client.post(f"/api/matches/{live_match}/scoring/ball", json={"runs": 1}, headers=auth("admin"))
        assert response.status_code == 200

    def test_bowler_change(self, client, live_match):
        for _ in range(6):
            client.post(f"/api/matches/{live_match}/scoring/ball", json={"runs": 0}, headers=auth("a1"))

        eligible = client.get(f"/api/matches/{live_match}/scoring/eligible").json()
        assert "b1" not in eligible["bowlers"]

        same = client.post(f"/api/matches/{live_match}/scoring/bowler", json={"player_id": "b1"},
                           headers=auth("a1"))
        assert same.status_code == 409
        response = client.post(f"/api/matches/{live_match}/scoring/bowler", json={"player_id": "b2"},
                               headers=auth("a1"))
        assert response.status_code == 200
        summary = response.json()["summary"]
        assert summary["bowler_id"] == "b2"
        assert summary["overs"] == "1.0"
        assert summary["this_over"] == []

    def test_end_innings(self, client, live_match):
        client.post(f"/api/matches/{live_match}/scoring/ball", json={"runs": 6}, headers=auth("a1"))
        response = client.post(f"/api/matches/{live_match}/scoring/end-innings", headers=auth("a1"))
        assert response.status_code == 200
        data = response.json()
        assert len(data["innings"]) == 1
        assert data["summary"]["innings"] == 2
        assert data["summary"]["target"] == 7
        assert data["summary"]["runs_needed"] == 7
