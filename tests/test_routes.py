"""
API tests for lesson and lesson-progress routes

TestClient against the real app with DynamoDB mocked by moto and
signed tokens for each role.
"""
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from lesson_service.deps import get_db_client, get_progress_service
from lesson_service.main import app
from lesson_service.schemas import LessonCreate
from lesson_service.seed_data import default_lessons
from shared.auth import create_access_token


@pytest.fixture
def client(auth_env, db_client, greetings_payload, numbers_payload):
    """Client with two active lessons and one inactive lesson, created through the admin API"""
    app.dependency_overrides[get_db_client] = lambda: db_client
    with TestClient(app) as test_client:
        admin = auth_header("admin-1", "admin")
        retired = LessonCreate(
            lesson_id="lesson-retired",
            name="Retired",
            description="No longer offered",
            signs=["Old"],
            difficulty="Advanced",
            order=3,
            is_active=False,
        )
        for payload in (greetings_payload, numbers_payload, retired):
            response = test_client.post("/api/v1/lessons", json=payload.model_dump(), headers=admin)
            assert response.status_code == 201
        yield test_client
    app.dependency_overrides.clear()


def auth_header(user_id="learner-1", role="user"):
    token = create_access_token(user_id=user_id, role_name=role, email=f"{user_id}@example.com")
    return {"Authorization": f"Bearer {token}"}


class TestAuth:

    def test_missing_token(self, client):
        response = client.get("/api/v1/lessons")
        assert response.status_code == 401
        assert response.json()["detail"] == "Authentication Token Required"

    def test_invalid_token(self, client):
        response = client.get("/api/v1/lessons", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401

    def test_expired_token(self, client):
        token = create_access_token(user_id="learner-1", role_name="user", expires_minutes=-5)
        response = client.get("/api/v1/lessons", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_admin_blocked_from_learning(self, client):
        response = client.get("/api/v1/lessons", headers=auth_header("admin-1", "admin"))
        assert response.status_code == 403

        response = client.post(
            "/api/v1/lessons/lesson-greetings/progress",
            json={"sign": "Hello"},
            headers=auth_header("admin-1", "admin"),
        )
        assert response.status_code == 403

    def test_instructor_cannot_submit_progress(self, client):
        response = client.post(
            "/api/v1/lessons/lesson-greetings/progress",
            json={"sign": "Hello"},
            headers=auth_header("instructor-1", "instructor"),
        )
        assert response.status_code == 403


class TestLessonRoutes:

    def test_list_lessons(self, client):
        response = client.get("/api/v1/lessons", headers=auth_header())
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [lesson["lesson_id"] for lesson in data["lessons"]] == ["lesson-numbers", "lesson-greetings"]

    def test_list_lessons_by_difficulty(self, client):
        response = client.get("/api/v1/lessons?difficulty=Beginner", headers=auth_header())
        assert response.status_code == 200
        assert [lesson["lesson_id"] for lesson in response.json()["lessons"]] == ["lesson-greetings"]

    def test_get_lesson(self, client):
        response = client.get("/api/v1/lessons/lesson-greetings", headers=auth_header())
        assert response.status_code == 200
        assert response.json()["signs"] == ["Hello", "Thanks", "Please"]

    def test_get_inactive_lesson_is_404(self, client):
        response = client.get("/api/v1/lessons/lesson-retired", headers=auth_header())
        assert response.status_code == 404

    def test_admin_creates_lesson(self, client):
        payload = default_lessons()[0].model_dump()
        response = client.post("/api/v1/lessons", json=payload, headers=auth_header("admin-1", "admin"))
        assert response.status_code == 201
        assert response.json()["lesson_id"] == "lesson-001"

        duplicate = client.post("/api/v1/lessons", json=payload, headers=auth_header("admin-1", "admin"))
        assert duplicate.status_code == 409

    def test_learner_cannot_create_lesson(self, client):
        payload = default_lessons()[0].model_dump()
        response = client.post("/api/v1/lessons", json=payload, headers=auth_header())
        assert response.status_code == 403


class TestProgressRoutes:

    def test_submit_attempt(self, client):
        response = client.post(
            "/api/v1/lessons/lesson-greetings/progress",
            json={"sign": "Hello", "accuracy": "80", "timeSpent": 5},
            headers=auth_header(),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["current_sign_index"] == 1
        assert data["is_completed"] is False
        assert data["completed_signs"][0]["sign"] == "Hello"
        assert data["completed_signs"][0]["accuracy"] == 80
        assert data["progress_percentage"] == pytest.approx(33.33, abs=0.01)

    def test_default_accuracy(self, client):
        response = client.post(
            "/api/v1/lessons/lesson-greetings/progress",
            json={"sign": "Thanks"},
            headers=auth_header(),
        )
        assert response.status_code == 200
        assert response.json()["completed_signs"][0]["accuracy"] == 70

    def test_invalid_sign_is_400(self, client):
        response = client.post(
            "/api/v1/lessons/lesson-greetings/progress",
            json={"sign": "Goodbye"},
            headers=auth_header(),
        )
        assert response.status_code == 400
        assert "Goodbye" in response.json()["detail"]

    def test_unknown_lesson_is_404(self, client):
        response = client.post(
            "/api/v1/lessons/lesson-missing/progress",
            json={"sign": "Hello"},
            headers=auth_header(),
        )
        assert response.status_code == 404

    def test_out_of_range_accuracy_is_422(self, client):
        response = client.post(
            "/api/v1/lessons/lesson-greetings/progress",
            json={"sign": "Hello", "accuracy": 150},
            headers=auth_header(),
        )
        assert response.status_code == 422

    @pytest.mark.parametrize("time_spent", ["1e400", 1e200, 86401])
    def test_unstorable_time_spent_is_422(self, client, time_spent):
        response = client.post(
            "/api/v1/lessons/lesson-greetings/progress",
            json={"sign": "Hello", "accuracy": 80, "timeSpent": time_spent},
            headers=auth_header(),
        )
        assert response.status_code == 422

        lookup = client.get("/api/v1/lessons/lesson-greetings/progress", headers=auth_header())
        assert lookup.status_code == 404

    def test_lesson_progress_lookup(self, client):
        response = client.get("/api/v1/lessons/lesson-greetings/progress", headers=auth_header())
        assert response.status_code == 404

        client.post(
            "/api/v1/lessons/lesson-greetings/progress",
            json={"sign": "Hello", "accuracy": 90},
            headers=auth_header(),
        )
        response = client.get("/api/v1/lessons/lesson-greetings/progress", headers=auth_header())
        assert response.status_code == 200
        assert response.json()["total_attempts"] == 1

    def test_lesson_progress_unknown_lesson_is_404(self, client):
        response = client.get("/api/v1/lessons/lesson-missing/progress", headers=auth_header())
        assert response.status_code == 404
        assert "lesson-missing" in response.json()["detail"]

    def test_lesson_progress_unexpected_error_is_500(self, client):
        service = AsyncMock()
        service.get_lesson_progress.side_effect = RuntimeError("boom")
        app.dependency_overrides[get_progress_service] = lambda: service

        response = client.get("/api/v1/lessons/lesson-greetings/progress", headers=auth_header())

        assert response.status_code == 500
        assert response.json()["detail"] == "Error retrieving lesson progress"

    def test_complete_lesson_and_summary(self, client):
        headers = auth_header()
        for sign, accuracy in [("Hello", 80), ("Hello", 60), ("Thanks", 90), ("Please", 95)]:
            response = client.post(
                "/api/v1/lessons/lesson-greetings/progress",
                json={"sign": sign, "accuracy": accuracy},
                headers=headers,
            )
            assert response.status_code == 200

        final = response.json()
        assert final["is_completed"] is True
        assert final["progress_percentage"] == 100.0
        assert final["total_attempts"] == 4

        summary = client.get("/api/v1/lessons/user/progress", headers=headers)
        assert summary.status_code == 200
        data = summary.json()
        assert data["user_id"] == "learner-1"
        assert data["total_lessons_started"] == 1
        assert data["total_lessons_completed"] == 1
        assert data["lessons"][0]["lesson_name"] == "Greetings"
        assert data["lessons"][0]["completed_sign_count"] == 3

    def test_progress_is_per_user(self, client):
        client.post(
            "/api/v1/lessons/lesson-greetings/progress",
            json={"sign": "Hello"},
            headers=auth_header("learner-1"),
        )
        response = client.get("/api/v1/lessons/user/progress", headers=auth_header("learner-2"))
        assert response.status_code == 200
        assert response.json()["lessons"] == []

    def test_storage_outage_is_503(self, client, db_client):
        db_client.progress_table.delete()
        response = client.post(
            "/api/v1/lessons/lesson-greetings/progress",
            json={"sign": "Hello"},
            headers=auth_header(),
        )
        assert response.status_code == 503
        assert response.headers["Retry-After"] == "1"


class TestServiceShell:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["service"] == "lesson-service"

    def test_request_id_is_echoed(self, client):
        response = client.get("/", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"

    def test_health_with_dynamodb(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "dynamodb": "connected"}

    def test_health_survives_missing_table(self, client, db_client):
        db_client.progress_table.delete()
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["dynamodb"] == "unavailable"
