"""Pytest configuration and fixtures."""

import asyncio
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from coachbook.db import (
    ClientRepository,
    LessonPackageRepository,
    TrainerRepository,
    init_db,
)
from coachbook.models.packages import LessonPackage, PackageType
from coachbook.models.people import Client, Trainer


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
def now():
    """A fixed 'current time' for expiry checks."""
    return datetime(2024, 12, 1, 12, 0)


@pytest.fixture
def sample_packages():
    """Packages of one client covering the allocation cases."""
    return [
        LessonPackage(
            id="fifo-new",
            package_type=PackageType.PRIVATE,
            total_lessons=10,
            purchase_date=datetime(2024, 6, 1),
        ),
        LessonPackage(
            id="fifo-old",
            package_type=PackageType.PRIVATE,
            total_lessons=10,
            purchase_date=datetime(2024, 1, 1),
        ),
        LessonPackage(
            id="expiring",
            package_type=PackageType.PRIVATE,
            total_lessons=5,
            purchase_date=datetime(2024, 9, 1),
            expiration_date=datetime(2025, 1, 1),
        ),
        LessonPackage(
            id="class",
            package_type=PackageType.CLASS_PASS,
            total_lessons=8,
            purchase_date=datetime(2024, 3, 1),
        ),
    ]


@pytest.fixture
def seeded_db(temp_db_path):
    """A database with one trainer, one client and two packages."""

    async def seed():
        await init_db(temp_db_path)
        await TrainerRepository(temp_db_path).create(
            Trainer(id="t1", display_name="Alex Smith", email="alex@example.com")
        )
        await TrainerRepository(temp_db_path).create(
            Trainer(id="t2", display_name="Blair Jones")
        )
        await ClientRepository(temp_db_path).create(
            Client(id="c1", first_name="Casey", last_name="Lee"), trainer_id="t1"
        )
        packages = LessonPackageRepository(temp_db_path)
        await packages.create(
            LessonPackage(
                id="p-old",
                client_id="c1",
                package_type=PackageType.PRIVATE,
                total_lessons=2,
                purchase_date=datetime(2024, 1, 1),
            )
        )
        await packages.create(
            LessonPackage(
                id="p-used",
                client_id="c1",
                package_type=PackageType.PRIVATE,
                total_lessons=3,
                lessons_used=3,
                purchase_date=datetime(2023, 1, 1),
            )
        )

    asyncio.run(seed())
    return temp_db_path
