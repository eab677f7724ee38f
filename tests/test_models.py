"""Tests for data models."""

from datetime import date, datetime

import pytest

from coachbook.models import (
    BookingRequest,
    Client,
    LessonPackage,
    PackageType,
    RecurrenceRule,
    ScheduleSlot,
    SlotStatus,
    Trainer,
)


class TestPackageType:
    """Tests for PackageType."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("private", PackageType.PRIVATE),
            ("2_athlete", PackageType.TWO_ATHLETE),
            ("two_athlete", PackageType.TWO_ATHLETE),
            ("three_athlete", PackageType.THREE_ATHLETE),
            (PackageType.CLASS_PASS, PackageType.CLASS_PASS),
        ],
    )
    def test_parse(self, value, expected):
        assert PackageType.parse(value) == expected

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            PackageType.parse("yoga")


class TestLessonPackage:
    """Tests for LessonPackage."""

    def test_remaining_never_negative(self):
        package = LessonPackage(
            id="p", package_type=PackageType.PRIVATE, total_lessons=2,
            purchase_date=datetime(2024, 1, 1), lessons_used=3,
        )

        assert package.lessons_remaining == 0

    def test_status_text(self):
        package = LessonPackage(
            id="p", package_type=PackageType.PRIVATE, total_lessons=10,
            purchase_date=datetime(2024, 1, 1), lessons_used=4,
            expiration_date=datetime(2025, 1, 1),
        )

        assert package.status_text(datetime(2024, 6, 1)) == "6 of 10 remaining"
        assert package.status_text(datetime(2025, 6, 1)) == "Expired"

        package.lessons_used = 10
        assert package.status_text(datetime(2024, 6, 1)) == "Used"

    def test_from_dict_accepts_alias(self):
        package = LessonPackage.from_dict(
            {
                "id": "p",
                "package_type": "three_athlete",
                "total_lessons": 5,
                "purchase_date": "2024-01-01T00:00:00",
            }
        )

        assert package.package_type == PackageType.THREE_ATHLETE
        assert package.expiration_date is None


class TestRecurrenceRule:
    """Tests for RecurrenceRule payloads."""

    def test_payload_keys(self):
        rule = RecurrenceRule(
            weekdays=frozenset({5, 1}),
            daily_start_hour=9,
            daily_end_hour=17,
            start_date=date(2025, 3, 10),
        )
        payload = rule.to_payload()

        assert payload["daysOfWeek"] == [1, 5]
        assert payload["startDate"] == "2025-03-10"
        assert payload["endDate"] is None
        assert payload["status"] == "open"
        assert RecurrenceRule.from_payload(payload) == rule

    def test_weekday_names(self):
        rule = RecurrenceRule(
            weekdays=frozenset({0, 6}),
            daily_start_hour=9,
            daily_end_hour=10,
            start_date=date(2025, 3, 10),
        )

        assert rule.weekday_names() == ["Sunday", "Saturday"]


class TestScheduleSlot:
    """Tests for ScheduleSlot."""

    def test_client_marks_slot_booked(self):
        slot = ScheduleSlot(
            trainer_id="t1",
            start_time=datetime(2025, 3, 10, 9),
            end_time=datetime(2025, 3, 10, 10),
            client_id="c1",
            client_name="Casey Lee",
        )

        assert slot.is_booked
        assert slot.display_title == "Casey Lee"

    def test_open_slot(self):
        slot = ScheduleSlot(
            trainer_id="t1",
            start_time=datetime(2025, 3, 10, 9),
            end_time=datetime(2025, 3, 10, 10),
        )

        assert slot.display_title == "Open"
        assert slot.to_dict()["status"] == SlotStatus.OPEN.value


def test_booking_request_payload_uses_epoch_seconds():
    request = BookingRequest(
        client_id="c1",
        start_time=datetime(2025, 3, 10, 9),
        end_time=datetime(2025, 3, 10, 10),
        package_id="p1",
    )
    payload = request.to_payload()

    assert isinstance(payload["startTime"], int)
    assert BookingRequest.from_payload(payload) == request


def test_client_full_name():
    assert Client(id="c1", first_name="Casey").full_name == "Casey"


class TestPeopleFromDict:
    """Building trainers and clients from stored rows."""

    def test_trainer_from_row(self):
        trainer = Trainer.from_dict(
            {"id": "t1", "display_name": "Alex Smith", "email": None, "active": 0}
        )

        assert trainer.email == ""
        assert trainer.active is False

    def test_client_from_row(self):
        client = Client.from_dict(
            {
                "id": "c1",
                "trainer_id": "t1",
                "first_name": "Casey",
                "last_name": None,
                "email_address": None,
                "phone_number": "555-0100",
                "photo_url": None,
            }
        )

        assert client.full_name == "Casey"
        assert client.email_address == ""
        assert client.phone_number == "555-0100"
