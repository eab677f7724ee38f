"""Integration tests for availability and booking on a real database.

These run the services against SQLite files on disk, including
concurrent bookings racing for the same slot.
"""

import asyncio
from datetime import date, datetime

import pytest

from coachbook.backends.local import LocalBackend
from coachbook.db import (
    ClientRepository,
    LessonPackageRepository,
    TrainerRepository,
    init_db,
)
from coachbook.models.packages import LessonPackage, PackageType
from coachbook.models.people import Client, SessionContext, Trainer
from coachbook.rules.booking_validator import lesson_window
from coachbook.rules.recurrence import RecurrenceRuleBuilder
from coachbook.services.availability import AvailabilityService
from coachbook.services.booking_flow import BookingFlow, BookingPhase

pytestmark = pytest.mark.integration

ADMIN = SessionContext(user_id="admin", trainer_id="t1", is_admin=True)


@pytest.fixture
def studio_db(tmp_path):
    """A studio with one trainer, two clients and their packages."""
    db_path = tmp_path / "studio.db"

    async def seed():
        await init_db(db_path)
        await TrainerRepository(db_path).create(Trainer(id="t1", display_name="Alex Smith"))
        clients = ClientRepository(db_path)
        packages = LessonPackageRepository(db_path)
        for client_id, first_name in [("c1", "Casey"), ("c2", "Drew")]:
            await clients.create(Client(id=client_id, first_name=first_name), trainer_id="t1")
        await packages.create(
            LessonPackage(
                id="c1-expiring",
                client_id="c1",
                package_type=PackageType.PRIVATE,
                total_lessons=1,
                purchase_date=datetime(2024, 6, 1),
                expiration_date=datetime(2099, 1, 1),
            )
        )
        await packages.create(
            LessonPackage(
                id="c1-plain",
                client_id="c1",
                package_type=PackageType.PRIVATE,
                total_lessons=10,
                purchase_date=datetime(2024, 1, 1),
            )
        )
        await packages.create(
            LessonPackage(
                id="c2-plain",
                client_id="c2",
                package_type=PackageType.PRIVATE,
                total_lessons=10,
                purchase_date=datetime(2024, 1, 1),
            )
        )

    asyncio.run(seed())
    return db_path


class TestPipelineIntegration:
    """Availability through to bookings."""

    def test_recurring_availability_then_bookings(self, studio_db):
        backend = LocalBackend(studio_db)
        service = AvailabilityService(backend, backend, ADMIN)

        async def run():
            builder = RecurrenceRuleBuilder(date(2030, 3, 10), default_hour=9)
            builder.set_weekdays({1})
            builder.set_daily_end_hour(12)
            applied = await service.apply_recurring(builder)

            flow = BookingFlow(backend, backend, ADMIN, "t1", poll_interval=0.01)
            await flow.load_clients()
            used = []
            for hour in (9, 10):
                await flow.select_client("c1")
                used.append(flow.package_id)
                assert await flow.book(*lesson_window(date(2030, 3, 11), hour))

            week = await service.week_slots(date(2030, 3, 11))
            packages = {p.id: p for p in await backend.fetch_packages("c1")}
            return applied, used, week, packages

        applied, used, week, packages = asyncio.run(run())

        # Default end date is one month out: five Mondays, three hours each
        assert applied.count == 15
        assert used == ["c1-expiring", "c1-plain"]
        assert [s.is_booked for s in week] == [True, True, False]
        assert packages["c1-expiring"].lessons_remaining == 0
        assert packages["c1-plain"].lessons_used == 1

    def test_concurrent_bookings_for_one_slot(self, studio_db):
        backend = LocalBackend(studio_db)
        start, end = lesson_window(date(2030, 3, 11), 9)

        async def book_for(client_id):
            flow = BookingFlow(LocalBackend(studio_db), backend, ADMIN, "t1")
            await flow.select_client(client_id)
            ok = await flow.book(start, end)
            return ok, flow

        async def run():
            results = await asyncio.gather(book_for("c1"), book_for("c2"))
            c1 = await backend.fetch_packages("c1")
            c2 = await backend.fetch_packages("c2")
            return results, sum(p.lessons_used for p in c1 + c2)

        results, total_used = asyncio.run(run())

        outcomes = sorted(ok for ok, _ in results)
        assert outcomes == [False, True]
        loser = next(flow for ok, flow in results if not ok)
        assert loser.phase == BookingPhase.ERROR
        assert "not available" in loser.error_message
        assert total_used == 1
