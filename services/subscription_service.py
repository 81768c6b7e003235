"""
services/subscription_service.py
--------------------------------
Business logic for tracked subscriptions: input validation, id parsing
and the spending statistics shown on the dashboard.
"""

import re
from numbers import Real
from typing import Any

from config import UPCOMING_DAYS
from models.subscription import Subscription
from repositories.subscription_repo import SubscriptionRepository
from utils.errors import NotFoundError, ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)

# Upper bound of a PostgreSQL SERIAL column.
_MAX_ID = 2_147_483_647
_ID_PATTERN = re.compile(r"-?[0-9]+")


class SubscriptionService:
    """
    Handles all business logic for subscriptions.

    Responsibilities:
        - Validate incoming records before they reach the database.
        - Turn raw path parameters into integer ids.
        - Assemble the stats payload from the repository aggregates.
    """

    def __init__(self, repo: SubscriptionRepository):
        self.repo = repo

    # ── Validation ────────────────────────────────────────

    @staticmethod
    def parse_id(raw: str) -> int:
        """
        Parse a path parameter into a subscription id.

        Raises:
            ValidationError: If `raw` is not an integer.
            NotFoundError: If `raw` is an integer outside the SERIAL range,
                which no row can carry (e.g. "0", "-3").
        """
        raw = (raw or "").strip()
        if not _ID_PATTERN.fullmatch(raw):
            raise ValidationError("Invalid ID")
        subscription_id = int(raw)
        if not 1 <= subscription_id <= _MAX_ID:
            raise NotFoundError("Subscription not found")
        return subscription_id

    @staticmethod
    def validate(subscription: Subscription) -> None:
        """
        Check presence of required fields and that cost is positive.
        The date string is not parsed here; the database rejects bad dates.

        Raises:
            ValidationError: With "Missing required fields" on any failure.
        """
        required = (
            subscription.name,
            subscription.category,
            subscription.billing_cycle,
            subscription.next_billing,
        )
        if any(not isinstance(v, str) or not v.strip() for v in required):
            raise ValidationError("Missing required fields")

        cost = subscription.cost
        if isinstance(cost, bool) or not isinstance(cost, Real) or not cost > 0:
            raise ValidationError("Missing required fields")

    # ── CRUD ──────────────────────────────────────────────

    def list_subscriptions(self) -> list[Subscription]:
        return self.repo.list_all()

    def get_subscription(self, subscription_id: int) -> Subscription:
        return self.repo.get_by_id(subscription_id)

    def create_subscription(self, subscription: Subscription) -> Subscription:
        """Validate and insert; the returned record carries the new id."""
        self.validate(subscription)
        logger.debug(f"Parsed subscription: {subscription!r}")
        return self.repo.add(subscription)

    def update_subscription(self, subscription_id: int, subscription: Subscription) -> Subscription:
        """Validate and replace all fields. The id always comes from the path."""
        self.validate(subscription)
        return self.repo.update(subscription_id, subscription)

    def delete_subscription(self, subscription_id: int) -> None:
        self.repo.delete(subscription_id)

    # ── Stats ─────────────────────────────────────────────

    def get_stats(self, days: int = UPCOMING_DAYS) -> dict[str, Any]:
        """
        Build the dashboard stats.

        Args:
            days: How far ahead to look for upcoming bills (inclusive).

        Returns:
            Dict with 'totalMonthly' (sum of every category total),
            'byCategory' (list, largest first) and 'upcoming' (list,
            soonest first). Both lists are empty rather than missing.
        """
        by_category = self.repo.category_totals()
        upcoming = self.repo.get_due_within(days)
        total = round(sum(c.cost for c in by_category), 2)
        return {
            "totalMonthly": total,
            "byCategory": [c.to_dict() for c in by_category],
            "upcoming": [s.to_dict() for s in upcoming],
        }
