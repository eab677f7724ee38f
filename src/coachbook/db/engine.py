"""Database engine setup and initialization."""

import logging
from pathlib import Path

import aiosqlite

logger = logging.getLogger(__name__)

# Default data directory
DATA_DIR = Path(__file__).parent.parent.parent.parent / "data"


def get_db_path(data_dir: Path | None = None) -> Path:
    """Get the database file path."""
    if data_dir is None:
        data_dir = DATA_DIR
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / "coachbook.db"


async def init_db(db_path: Path | None = None) -> None:
    """Initialize the database schema."""
    if db_path is None:
        db_path = get_db_path()

    async with aiosqlite.connect(db_path) as db:
        await db.execute("""
            CREATE TABLE IF NOT EXISTS trainers (
                id TEXT PRIMARY KEY,
                display_name TEXT NOT NULL,
                email TEXT DEFAULT '',
                active INTEGER DEFAULT 1,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS clients (
                id TEXT PRIMARY KEY,
                trainer_id TEXT,
                first_name TEXT NOT NULL,
                last_name TEXT DEFAULT '',
                email_address TEXT DEFAULT '',
                phone_number TEXT DEFAULT '',
                photo_url TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (trainer_id) REFERENCES trainers(id)
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS lesson_packages (
                id TEXT PRIMARY KEY,
                client_id TEXT NOT NULL,
                package_type TEXT NOT NULL,
                total_lessons INTEGER NOT NULL,
                lessons_used INTEGER DEFAULT 0,
                purchase_date TIMESTAMP NOT NULL,
                expiration_date TIMESTAMP,
                transaction_id TEXT,
                FOREIGN KEY (client_id) REFERENCES clients(id) ON DELETE CASCADE
            )
        """)

        # One slot per trainer and start hour
        await db.execute("""
            CREATE TABLE IF NOT EXISTS schedule_slots (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                trainer_id TEXT NOT NULL,
                start_time TIMESTAMP NOT NULL,
                end_time TIMESTAMP NOT NULL,
                status TEXT NOT NULL DEFAULT 'open',
                client_id TEXT,
                client_name TEXT,
                booked_at TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                UNIQUE (trainer_id, start_time),
                FOREIGN KEY (trainer_id) REFERENCES trainers(id) ON DELETE CASCADE
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS bookings (
                id TEXT PRIMARY KEY,
                trainer_id TEXT NOT NULL,
                trainer_name TEXT DEFAULT '',
                client_id TEXT NOT NULL,
                client_name TEXT DEFAULT '',
                package_id TEXT NOT NULL,
                slot_id INTEGER,
                start_time TIMESTAMP NOT NULL,
                end_time TIMESTAMP NOT NULL,
                status TEXT DEFAULT 'confirmed',
                booked_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_clients_trainer
            ON clients(trainer_id)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_packages_client
            ON lesson_packages(client_id)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_slots_trainer_start
            ON schedule_slots(trainer_id, start_time)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_bookings_client
            ON bookings(client_id)
        """)

        await db.commit()

    logger.debug("Initialized database at %s", db_path)
