"""
repositories/subscription_repo.py
---------------------------------
Data access layer for tracked subscriptions.
All SQL queries related to the `subscriptions` table live here.
"""

from typing import Any, Optional, Sequence

import psycopg2

from db.connection import Database
from models.subscription import CategoryTotal, Subscription
from utils.errors import NotFoundError, StorageError
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = "id, name, category, cost, billing_cycle, next_billing, description"


class SubscriptionRepository:
    """
    Repository for CRUD and aggregate queries on the subscriptions table.

    Every public method runs exactly one parameterized statement and either
    commits it or rolls it back. Driver errors surface as StorageError, a
    missing row as NotFoundError. Nothing is retried.
    """

    def __init__(self, database: Database):
        self.database = database

    # ── CREATE ────────────────────────────────────────────

    def add(self, subscription: Subscription) -> Subscription:
        """
        Insert a new subscription.

        Args:
            subscription: The record to persist; its `id` is ignored.

        Returns:
            The stored record, including the id assigned by the database.
        """
        sql = f"""
            INSERT INTO subscriptions (name, category, cost, billing_cycle, next_billing, description)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING {_COLUMNS};
        """
        rows, _ = self._execute(sql, self._params(subscription), write=True)
        saved = self._row_to_subscription(rows[0])
        logger.info(f"Added subscription '{saved.name}' #{saved.id}")
        return saved

    # ── READ ──────────────────────────────────────────────

    def list_all(self) -> list[Subscription]:
        """Get every subscription, soonest next billing date first."""
        sql = f"SELECT {_COLUMNS} FROM subscriptions ORDER BY next_billing ASC, id ASC;"
        rows, _ = self._execute(sql)
        return [self._row_to_subscription(r) for r in rows]

    def get_by_id(self, subscription_id: int) -> Subscription:
        """
        Fetch a single subscription by ID.

        Raises:
            NotFoundError: If no row has this id.
        """
        sql = f"SELECT {_COLUMNS} FROM subscriptions WHERE id = %s;"
        rows, _ = self._execute(sql, (subscription_id,))
        if not rows:
            raise NotFoundError("Subscription not found")
        return self._row_to_subscription(rows[0])

    def category_totals(self) -> list[CategoryTotal]:
        """
        Get total cost grouped by category, largest total first.

        Returns:
            List of CategoryTotal; empty when the table is empty.
        """
        sql = """
            SELECT category, SUM(cost) AS total_cost
            FROM subscriptions
            GROUP BY category
            ORDER BY total_cost DESC;
        """
        rows, _ = self._execute(sql)
        return [CategoryTotal(category=r[0], cost=float(r[1])) for r in rows]

    def get_due_within(self, days: int) -> list[Subscription]:
        """
        Get subscriptions billing between today and today + `days`, both inclusive.

        Args:
            days: Number of days to look ahead.

        Returns:
            Matching subscriptions ordered by next billing date ascending.
        """
        sql = f"""
            SELECT {_COLUMNS}
            FROM subscriptions
            WHERE next_billing BETWEEN CURRENT_DATE AND CURRENT_DATE + %s
            ORDER BY next_billing ASC, id ASC;
        """
        rows, _ = self._execute(sql, (days,))
        return [self._row_to_subscription(r) for r in rows]

    # ── UPDATE ────────────────────────────────────────────

    def update(self, subscription_id: int, subscription: Subscription) -> Subscription:
        """
        Replace every mutable field of an existing subscription.

        Args:
            subscription_id: Row to replace; the record's own `id` is ignored.
            subscription: New field values.

        Returns:
            The stored record after the update.

        Raises:
            NotFoundError: If no row has this id.
        """
        sql = f"""
            UPDATE subscriptions
            SET name = %s, category = %s, cost = %s, billing_cycle = %s,
                next_billing = %s, description = %s
            WHERE id = %s
            RETURNING {_COLUMNS};
        """
        rows, _ = self._execute(sql, (*self._params(subscription), subscription_id), write=True)
        if not rows:
            raise NotFoundError("Subscription not found")
        logger.info(f"Updated subscription #{subscription_id}")
        return self._row_to_subscription(rows[0])

    # ── DELETE ────────────────────────────────────────────

    def delete(self, subscription_id: int) -> None:
        """
        Delete a subscription by ID.

        Raises:
            NotFoundError: If no row has this id.
        """
        sql = "DELETE FROM subscriptions WHERE id = %s;"
        _, rowcount = self._execute(sql, (subscription_id,), write=True, fetch=False)
        if rowcount == 0:
            raise NotFoundError("Subscription not found")
        logger.info(f"Deleted subscription #{subscription_id}")

    # ── HELPERS ───────────────────────────────────────────

    def _execute(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None,
        write: bool = False,
        fetch: bool = True,
    ) -> tuple[list[tuple], int]:
        """Run one statement on a pooled connection and return (rows, rowcount)."""
        with self.database.connection() as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute(sql, params)
                    rows = cur.fetchall() if fetch else []
                    rowcount = cur.rowcount
                if write:
                    conn.commit()
                else:
                    conn.rollback()
                return rows, rowcount
            except psycopg2.Error as e:
                # A dropped connection is already closed; rolling it back raises again.
                if not conn.closed:
                    try:
                        conn.rollback()
                    except psycopg2.Error as rollback_err:
                        logger.warning(f"Rollback failed: {rollback_err}")
                logger.error(f"Database error: {e}")
                raise StorageError(str(e).strip()) from e

    @staticmethod
    def _params(subscription: Subscription) -> tuple:
        return (
            subscription.name,
            subscription.category,
            subscription.cost,
            subscription.billing_cycle,
            subscription.next_billing,
            subscription.description,
        )

    @staticmethod
    def _row_to_subscription(row: tuple) -> Subscription:
        """Convert a database row tuple to a Subscription domain object."""
        return Subscription(
            id=row[0],
            name=row[1],
            category=row[2],
            cost=float(row[3]),
            billing_cycle=row[4],
            next_billing=Subscription.format_date(row[5]),
            description=row[6] or "",
        )
