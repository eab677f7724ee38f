"""Data access layer for coachbook."""

import logging
from datetime import datetime
from pathlib import Path
from uuid import uuid4

import aiosqlite

from ..errors import BookingError, NotFoundError
from ..models.booking import BookingRequest
from ..models.packages import LessonPackage, PackageType
from ..models.people import Client, Trainer
from ..models.slots import ScheduleSlot, SlotStatus
from .engine import get_db_path

logger = logging.getLogger(__name__)


def _ts(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _parse_ts(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


class TrainerRepository:
    """Repository for trainers."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, trainer: Trainer) -> str:
        """Create a trainer."""
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                "INSERT INTO trainers (id, display_name, email, active) VALUES (?, ?, ?, ?)",
                (trainer.id, trainer.display_name, trainer.email, int(trainer.active)),
            )
            await db.commit()
        return trainer.id

    async def get(self, trainer_id: str) -> Trainer | None:
        """Get a trainer by ID."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT * FROM trainers WHERE id = ?", (trainer_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_trainer(row)

    async def list_all(self, active_only: bool = False) -> list[Trainer]:
        """List trainers ordered by name."""
        query = "SELECT * FROM trainers"
        if active_only:
            query += " WHERE active = 1"
        query += " ORDER BY display_name"
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(query)
            rows = await cursor.fetchall()
            return [self._row_to_trainer(row) for row in rows]

    def _row_to_trainer(self, row: aiosqlite.Row) -> Trainer:
        return Trainer.from_dict(dict(row))


class ClientRepository:
    """Repository for clients."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, client: Client, trainer_id: str | None = None) -> str:
        """Create a client, optionally assigned to a trainer."""
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                """
                INSERT INTO clients
                (id, trainer_id, first_name, last_name, email_address, phone_number, photo_url)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    client.id,
                    trainer_id,
                    client.first_name,
                    client.last_name,
                    client.email_address,
                    client.phone_number,
                    client.photo_url,
                ),
            )
            await db.commit()
        return client.id

    async def get(self, client_id: str) -> Client | None:
        """Get a client by ID."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute("SELECT * FROM clients WHERE id = ?", (client_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_client(row)

    async def list_for_trainer(self, trainer_id: str | None = None) -> list[Client]:
        """List a trainer's clients, or every client when no trainer is given."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            if trainer_id:
                cursor = await db.execute(
                    """
                    SELECT * FROM clients WHERE trainer_id = ?
                    ORDER BY first_name, last_name
                    """,
                    (trainer_id,),
                )
            else:
                cursor = await db.execute(
                    "SELECT * FROM clients ORDER BY first_name, last_name"
                )
            rows = await cursor.fetchall()
            return [self._row_to_client(row) for row in rows]

    def _row_to_client(self, row: aiosqlite.Row) -> Client:
        return Client.from_dict(dict(row))


class LessonPackageRepository:
    """Repository for lesson packages."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, package: LessonPackage) -> str:
        """Store a purchased package."""
        if package.client_id is None:
            raise ValueError("Package must belong to a client")

        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                """
                INSERT INTO lesson_packages
                (id, client_id, package_type, total_lessons, lessons_used,
                 purchase_date, expiration_date, transaction_id)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    package.id,
                    package.client_id,
                    package.package_type.value,
                    package.total_lessons,
                    package.lessons_used,
                    _ts(package.purchase_date),
                    _ts(package.expiration_date),
                    package.transaction_id,
                ),
            )
            await db.commit()
        return package.id

    async def get(self, package_id: str) -> LessonPackage | None:
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT * FROM lesson_packages WHERE id = ?", (package_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_package(row)

    async def list_for_client(self, client_id: str) -> list[LessonPackage]:
        """List a client's packages, newest purchase first."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                """
                SELECT * FROM lesson_packages WHERE client_id = ?
                ORDER BY purchase_date DESC
                """,
                (client_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_package(row) for row in rows]

    @staticmethod
    def _row_to_package(row: aiosqlite.Row) -> LessonPackage:
        return LessonPackage(
            id=row["id"],
            client_id=row["client_id"],
            package_type=PackageType.parse(row["package_type"]),
            total_lessons=row["total_lessons"],
            lessons_used=row["lessons_used"],
            purchase_date=datetime.fromisoformat(row["purchase_date"]),
            expiration_date=_parse_ts(row["expiration_date"]),
            transaction_id=row["transaction_id"],
        )


class ScheduleSlotRepository:
    """Repository for trainer schedule slots."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def upsert(
        self,
        trainer_id: str,
        start_time: datetime,
        end_time: datetime,
        status: SlotStatus,
    ) -> int:
        """Create or overwrite the slot starting at ``start_time``.

        A booked slot is left alone.

        Returns:
            1 if the slot was written, 0 if it was booked
        """
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT INTO schedule_slots (trainer_id, start_time, end_time, status)
                VALUES (?, ?, ?, ?)
                ON CONFLICT (trainer_id, start_time) DO UPDATE SET
                    end_time = excluded.end_time,
                    status = excluded.status,
                    updated_at = CURRENT_TIMESTAMP
                WHERE schedule_slots.status != 'booked'
                """,
                (trainer_id, _ts(start_time), _ts(end_time), status.value),
            )
            await db.commit()
            return cursor.rowcount

    async def insert_missing(
        self, trainer_id: str, slots: list[tuple[datetime, datetime]], status: SlotStatus
    ) -> int:
        """Insert slots that do not exist yet.

        Returns:
            Number of slots added
        """
        added = 0
        async with aiosqlite.connect(self.db_path) as db:
            for start_time, end_time in slots:
                cursor = await db.execute(
                    """
                    INSERT OR IGNORE INTO schedule_slots
                    (trainer_id, start_time, end_time, status)
                    VALUES (?, ?, ?, ?)
                    """,
                    (trainer_id, _ts(start_time), _ts(end_time), status.value),
                )
                added += cursor.rowcount
            await db.commit()
        return added

    async def get_at(self, trainer_id: str, start_time: datetime) -> ScheduleSlot | None:
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT * FROM schedule_slots WHERE trainer_id = ? AND start_time = ?",
                (trainer_id, _ts(start_time)),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_slot(row)

    async def list_range(
        self, trainer_id: str, start: datetime, end: datetime
    ) -> list[ScheduleSlot]:
        """List slots starting in [start, end)."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                """
                SELECT * FROM schedule_slots
                WHERE trainer_id = ? AND start_time >= ? AND start_time < ?
                ORDER BY start_time
                """,
                (trainer_id, _ts(start), _ts(end)),
            )
            rows = await cursor.fetchall()
            return [self._row_to_slot(row) for row in rows]

    async def delete_at(self, trainer_id: str, start_time: datetime) -> bool:
        """Delete the slot at ``start_time``; booked slots are kept."""
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                """
                DELETE FROM schedule_slots
                WHERE trainer_id = ? AND start_time = ? AND status != 'booked'
                """,
                (trainer_id, _ts(start_time)),
            )
            await db.commit()
            return cursor.rowcount > 0

    @staticmethod
    def _row_to_slot(row: aiosqlite.Row) -> ScheduleSlot:
        return ScheduleSlot(
            id=row["id"],
            trainer_id=row["trainer_id"],
            start_time=datetime.fromisoformat(row["start_time"]),
            end_time=datetime.fromisoformat(row["end_time"]),
            status=SlotStatus(row["status"]),
            client_id=row["client_id"],
            client_name=row["client_name"],
            booked_at=_parse_ts(row["booked_at"]),
        )


class BookingRepository:
    """Repository for bookings.

    ``book`` debits the package, claims the slot and records the booking
    in a single transaction.
    """

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def book(
        self, trainer_id: str, request: BookingRequest, now: datetime | None = None
    ) -> str:
        """Book a lesson.

        Args:
            trainer_id: Trainer whose slot is booked
            request: The booking request
            now: Instant used for the package expiry check

        Returns:
            The new booking ID

        Raises:
            NotFoundError: If the trainer, client or package does not exist
            BookingError: If the package is used up or expired, or the
                slot is not open
        """
        now = now or datetime.now(tz=request.start_time.tzinfo)
        booking_id = uuid4().hex

        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            try:
                await db.execute("BEGIN IMMEDIATE")

                trainer = await self._fetch_one(
                    db, "SELECT * FROM trainers WHERE id = ?", trainer_id
                )
                if trainer is None:
                    raise NotFoundError("Trainer profile not found.")

                client = await self._fetch_one(
                    db, "SELECT * FROM clients WHERE id = ?", request.client_id
                )
                if client is None:
                    raise NotFoundError("Client not found.")

                package_row = await self._fetch_one(
                    db,
                    "SELECT * FROM lesson_packages WHERE id = ? AND client_id = ?",
                    request.package_id,
                    request.client_id,
                )
                if package_row is None:
                    raise NotFoundError("Specified lesson package not found.")

                package = LessonPackageRepository._row_to_package(package_row)
                if package.lessons_remaining <= 0:
                    raise BookingError("Lesson package has no lessons remaining.")
                if package.is_expired_at(now):
                    raise BookingError("Lesson package has expired and cannot be used.")

                slot_row = await self._fetch_one(
                    db,
                    "SELECT * FROM schedule_slots WHERE trainer_id = ? AND start_time = ?",
                    trainer_id,
                    _ts(request.start_time),
                )
                if slot_row is not None and (
                    slot_row["status"] != SlotStatus.OPEN.value
                    or slot_row["client_id"] is not None
                ):
                    raise BookingError(
                        "The requested trainer slot is not available or already booked."
                    )

                client_name = f"{client['first_name']} {client['last_name'] or ''}".strip()
                booked_at = _ts(now)

                if slot_row is None:
                    cursor = await db.execute(
                        """
                        INSERT INTO schedule_slots
                        (trainer_id, start_time, end_time, status, client_id, client_name, booked_at)
                        VALUES (?, ?, ?, 'booked', ?, ?, ?)
                        """,
                        (
                            trainer_id,
                            _ts(request.start_time),
                            _ts(request.end_time),
                            request.client_id,
                            client_name,
                            booked_at,
                        ),
                    )
                    slot_id = cursor.lastrowid
                else:
                    slot_id = slot_row["id"]
                    await db.execute(
                        """
                        UPDATE schedule_slots SET
                            status = 'booked', client_id = ?, client_name = ?,
                            booked_at = ?, updated_at = CURRENT_TIMESTAMP
                        WHERE id = ?
                        """,
                        (request.client_id, client_name, booked_at, slot_id),
                    )

                await db.execute(
                    "UPDATE lesson_packages SET lessons_used = lessons_used + 1 WHERE id = ?",
                    (request.package_id,),
                )

                await db.execute(
                    """
                    INSERT INTO bookings
                    (id, trainer_id, trainer_name, client_id, client_name, package_id,
                     slot_id, start_time, end_time, status, booked_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, 'confirmed', ?)
                    """,
                    (
                        booking_id,
                        trainer_id,
                        trainer["display_name"],
                        request.client_id,
                        client_name,
                        request.package_id,
                        slot_id,
                        _ts(request.start_time),
                        _ts(request.end_time),
                        booked_at,
                    ),
                )
                await db.commit()
            except Exception:
                await db.rollback()
                raise

        logger.info(
            "Booked lesson %s for client %s with trainer %s at %s",
            booking_id,
            request.client_id,
            trainer_id,
            request.start_time.isoformat(),
        )
        return booking_id

    async def get(self, booking_id: str) -> dict | None:
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute("SELECT * FROM bookings WHERE id = ?", (booking_id,))
            row = await cursor.fetchone()
            return dict(row) if row else None

    async def list_for_client(self, client_id: str) -> list[dict]:
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT * FROM bookings WHERE client_id = ? ORDER BY start_time",
                (client_id,),
            )
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]

    @staticmethod
    async def _fetch_one(db: aiosqlite.Connection, query: str, *params):
        cursor = await db.execute(query, params)
        return await cursor.fetchone()
