import pytest
from fastapi.testclient import TestClient

from okr.core.database import session_scope
from okr.main import create_app
from okr.models import Department, KeyResult, Objective

LEVELS_PAYLOAD = {
    "levels": [
        {"name": "Low", "score_value": 0.0, "color": "#aa0000"},
        {"name": "Mid", "score_value": 0.5, "color": "#aaaa00"},
        {"name": "High", "score_value": 1.0, "color": "#00aa00"},
    ]
}


@pytest.fixture
def client(db):
    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def department_id(db):
    with session_scope() as session:
        department = Department(name="Sales")
        objective = Objective(name="Grow revenue", department=department)
        session.add_all(
            [
                department,
                objective,
                KeyResult(
                    objective=objective,
                    name="Quarterly sales",
                    metric_type="HIGHER_BETTER",
                    weight=100,
                    threshold_below=50,
                    threshold_meets=65,
                    threshold_good=95,
                    threshold_very_good=100,
                    threshold_exceptional=200,
                    actual_value="97.5",
                ),
            ]
        )
        session.flush()
        return department.id


def test_health_reports_seeded_levels(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["score_levels"] == 5
    assert body["default_scale"] is False


def test_score_levels_roundtrip(client):
    resp = client.get("/api/score-levels")
    assert [level["name"] for level in resp.json()] == ["Below", "Meets", "Good", "Very Good", "Exceptional"]
    assert all(level["is_default"] for level in resp.json())

    resp = client.put("/api/score-levels", json=LEVELS_PAYLOAD)
    assert resp.status_code == 200
    assert [level["name"] for level in resp.json()] == ["Low", "Mid", "High"]

    resp = client.post("/api/score-levels/reset")
    assert resp.status_code == 200
    assert len(resp.json()) == 5


def test_score_levels_reject_invalid_payloads(client):
    duplicate = {"levels": [LEVELS_PAYLOAD["levels"][0], dict(LEVELS_PAYLOAD["levels"][0], score_value=1.0)]}
    resp = client.put("/api/score-levels", json=duplicate)
    assert resp.status_code == 400
    assert "duplicate level name" in resp.json()["detail"]

    bad_color = {"levels": [{"name": "Low", "score_value": 0.0, "color": "red"}]}
    assert client.put("/api/score-levels", json=bad_color).status_code == 422
    assert client.put("/api/score-levels", json={"levels": []}).status_code == 422


def test_preview_key_result(client):
    payload = {
        "metric_type": "HIGHER_BETTER",
        "actual_value": "97.5",
        "thresholds": {"below": 50, "meets": 65, "good": 95, "very_good": 100, "exceptional": 200},
    }
    resp = client.post("/api/scoring/key-result", json=payload)
    assert resp.status_code == 200
    assert resp.json() == {"score": 0.63, "level": "good", "color": "#5cb85c", "percentage": 63.0}


def test_department_score_not_found(client):
    resp = client.get("/api/departments/999/score")
    assert resp.status_code == 404


def test_department_score_with_evaluations(client, department_id):
    resp = client.post(
        "/api/evaluations",
        json={"evaluator_id": 1, "evaluator_type": "DIRECTOR", "target_id": department_id, "star_rating": 5},
    )
    assert resp.status_code == 201
    assert resp.json()["status"] == "SUBMITTED"
    resp = client.post(
        "/api/evaluations",
        json={"evaluator_id": 2, "evaluator_type": "HR", "target_id": department_id, "letter_rating": "a"},
    )
    assert resp.status_code == 201
    assert resp.json()["letter_rating"] == "A"

    body = client.get(f"/api/departments/{department_id}/score").json()
    assert body["name"] == "Sales"
    score = body["score"]
    assert score["automatic"]["score"] == 0.63
    assert score["policy"] == "WITHOUT_BUSINESS_BLOCK"
    # 0.6 * 0.63 + 0.2 * 1.0 + 0.2 * 1.0
    assert score["final_score"] == 0.78
    assert score["level"] == "very_good"
    assert score["has_director_evaluation"] is True
    assert score["has_business_block_evaluation"] is False

    listing = client.get("/api/departments/scores").json()
    assert [item["department_id"] for item in listing] == [department_id]


def test_evaluation_errors(client, department_id):
    payload = {"evaluator_id": 1, "evaluator_type": "DIRECTOR", "target_id": department_id, "star_rating": 9}
    resp = client.post("/api/evaluations", json=payload)
    assert resp.status_code == 400
    assert "between 1 and 5" in resp.json()["detail"]

    resp = client.put("/api/evaluations/999", json={"evaluator_id": 1, "star_rating": 3})
    assert resp.status_code == 404


def test_evaluation_update_and_listing(client, department_id):
    created = client.post(
        "/api/evaluations",
        json={"evaluator_id": 7, "evaluator_type": "BUSINESS_BLOCK", "target_id": department_id, "star_rating": 2},
    ).json()
    resp = client.put(f"/api/evaluations/{created['id']}", json={"evaluator_id": 8, "star_rating": 4})
    assert resp.status_code == 400
    resp = client.put(f"/api/evaluations/{created['id']}", json={"evaluator_id": 7, "star_rating": 4})
    assert resp.json()["star_rating"] == 4

    listing = client.get("/api/evaluations", params={"target_id": department_id}).json()
    assert [item["id"] for item in listing] == [created["id"]]

    resp = client.delete(f"/api/evaluations/{created['id']}", params={"evaluator_id": 7})
    assert resp.status_code == 400


def test_draft_evaluation_submit_and_delete(client, department_id):
    base = {"evaluator_type": "DIRECTOR", "target_id": department_id, "star_rating": 4, "draft": True}
    first = client.post("/api/evaluations", json=dict(base, evaluator_id=21)).json()
    second = client.post("/api/evaluations", json=dict(base, evaluator_id=22)).json()
    assert first["status"] == "DRAFT"

    resp = client.delete(f"/api/evaluations/{first['id']}", params={"evaluator_id": 21})
    assert resp.status_code == 204

    resp = client.post(f"/api/evaluations/{second['id']}/submit", params={"evaluator_id": 22})
    assert resp.status_code == 200
    assert resp.json()["status"] == "SUBMITTED"
    resp = client.post(f"/api/evaluations/{second['id']}/submit", params={"evaluator_id": 22})
    assert resp.status_code == 400
    assert client.post("/api/evaluations/999/submit", params={"evaluator_id": 22}).status_code == 404

    listing = client.get("/api/evaluations", params={"target_id": department_id}).json()
    assert [item["id"] for item in listing] == [second["id"]]
