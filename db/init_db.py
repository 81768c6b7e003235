"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

import psycopg2

from db.connection import Database
from utils.errors import StartupError, StorageError
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Subscriptions table: one row per recurring payment being tracked
CREATE TABLE IF NOT EXISTS subscriptions (
    id              SERIAL PRIMARY KEY,
    name            TEXT NOT NULL,
    category        TEXT NOT NULL,
    cost            DECIMAL(10,2) NOT NULL,
    billing_cycle   TEXT NOT NULL,
    next_billing    DATE NOT NULL,
    description     TEXT
);

-- List and upcoming-bill queries both sort/filter on the billing date
CREATE INDEX IF NOT EXISTS idx_subscriptions_next_billing ON subscriptions(next_billing);
"""


def create_tables(database: Database) -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).

    Raises:
        StartupError: If the schema cannot be created.
    """
    try:
        with database.connection() as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute(SCHEMA_SQL)
                conn.commit()
            except psycopg2.Error:
                conn.rollback()
                raise
    except (psycopg2.Error, StorageError) as e:
        logger.error(f"Failed to initialize schema: {e}")
        raise StartupError(f"Error initializing database: {e}") from e
    logger.info("Database tables initialized")


if __name__ == "__main__":
    db = Database()
    db.open()
    try:
        create_tables(db)
    finally:
        db.close()
    print("Database schema created successfully.")
