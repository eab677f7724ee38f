"""Tests for the JSON API."""

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from coachbook.web import create_app

ADMIN = {"X-User-Id": "admin", "X-Trainer-Id": "t1", "X-Admin": "true"}
TRAINER = {"X-User-Id": "u1", "X-Trainer-Id": "t1"}


@pytest.fixture
def client(seeded_db):
    with TestClient(create_app(seeded_db)) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_list_trainers(client):
    response = client.get("/trainers")

    assert [t["id"] for t in response.json()] == ["t1", "t2"]


def test_packages_with_next_package(client):
    response = client.get("/clients/c1/packages")
    body = response.json()

    assert len(body["packages"]) == 2
    assert body["next_package"]["private"] == "p-old"
    assert body["next_package"]["class_pass"] is None


def test_save_slot_is_normalized(client):
    response = client.post(
        "/trainers/t1/slots",
        json={"day": "2030-03-11", "start": "2030-03-11T09:15:00"},
        headers=TRAINER,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["start"] == "2030-03-11T09:00:00"
    assert body["end"] == "2030-03-11T10:00:00"

    slots = client.get("/trainers/t1/slots?week_of=2030-03-11", headers=TRAINER).json()
    assert len(slots) == 1


def test_save_slot_with_utc_offset(client):
    response = client.post(
        "/trainers/t1/slots",
        json={
            "day": "2030-03-11",
            "start": "2030-03-11T12:00:00Z",
            "end": "2030-03-11T15:00:00Z",
        },
        headers=TRAINER,
    )

    assert response.status_code == 200
    body = response.json()
    start = datetime.fromisoformat(body["start"])
    end = datetime.fromisoformat(body["end"])
    assert start.tzinfo is None
    assert end - start == timedelta(hours=3)
    assert response.json()["count"] == 3


def test_non_admin_cannot_edit_other_trainer(client):
    response = client.post(
        "/trainers/t2/slots",
        json={"day": "2030-03-11", "start": "2030-03-11T09:00:00"},
        headers=TRAINER,
    )

    assert response.status_code == 400


def test_recurring(client):
    response = client.post(
        "/trainers/t1/recurring",
        json={
            "days_of_week": [1, 3],
            "daily_start_hour": 9,
            "daily_end_hour": 12,
            "start_date": "2030-03-10",
            "end_date": "2030-03-23",
        },
        headers=TRAINER,
    )

    assert response.status_code == 200
    assert response.json()["count"] == 12


def test_recurring_without_days(client):
    response = client.post(
        "/trainers/t1/recurring",
        json={"days_of_week": [], "start_date": "2030-03-10"},
        headers=TRAINER,
    )

    assert response.status_code == 400
    assert response.json()["detail"]["message"] == "select at least one day"


def test_recurring_bad_weekday(client):
    response = client.post(
        "/trainers/t1/recurring",
        json={"days_of_week": [7], "start_date": "2030-03-10"},
        headers=TRAINER,
    )

    assert response.status_code == 422


class TestBookings:
    """Tests for POST /bookings."""

    def test_book_lesson(self, client):
        response = client.post(
            "/bookings",
            json={"trainer_id": "t1", "client_id": "c1", "start_time": "2030-03-11T09:30:00"},
            headers=ADMIN,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["package_id"] == "p-old"
        assert body["start_time"] == "2030-03-11T09:00:00"
        assert body["message"] == "Lesson booked successfully!"

    def test_book_lesson_with_utc_offset(self, client):
        response = client.post(
            "/bookings",
            json={"trainer_id": "t1", "client_id": "c1", "start_time": "2030-03-11T12:00:00Z"},
            headers=ADMIN,
        )

        assert response.status_code == 200
        start = datetime.fromisoformat(response.json()["start_time"])
        assert start.tzinfo is None
        assert start.minute == 0

    def test_client_bookings(self, client):
        client.post(
            "/bookings",
            json={"trainer_id": "t1", "client_id": "c1", "start_time": "2030-03-11T09:00:00"},
            headers=ADMIN,
        )

        bookings = client.get("/clients/c1/bookings").json()

        assert len(bookings) == 1
        assert bookings[0]["start_time"] == "2030-03-11T09:00:00"
        assert bookings[0]["client_name"] == "Casey Lee"

    def test_requires_admin(self, client):
        response = client.post(
            "/bookings",
            json={"trainer_id": "t1", "client_id": "c1", "start_time": "2030-03-11T09:00:00"},
            headers=TRAINER,
        )

        assert response.status_code == 403

    def test_unknown_client(self, client):
        response = client.post(
            "/bookings",
            json={"trainer_id": "t1", "client_id": "ghost", "start_time": "2030-03-11T09:00:00"},
            headers=ADMIN,
        )

        assert response.status_code == 404

    def test_no_package_of_type(self, client):
        response = client.post(
            "/bookings",
            json={
                "trainer_id": "t1",
                "client_id": "c1",
                "start_time": "2030-03-11T09:00:00",
                "package_type": "class_pass",
            },
            headers=ADMIN,
        )

        assert response.status_code == 409

    def test_slot_taken(self, client):
        body = {"trainer_id": "t1", "client_id": "c1", "start_time": "2030-03-11T09:00:00"}

        first = client.post("/bookings", json=body, headers=ADMIN)
        second = client.post("/bookings", json=body, headers=ADMIN)

        assert first.status_code == 200
        assert second.status_code == 409
        assert "not available" in second.json()["detail"]["message"]
