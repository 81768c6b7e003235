import sys
from dataclasses import replace
from datetime import date, timedelta
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Ensure project root on sys.path
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from models.subscription import CategoryTotal, Subscription  # noqa: E402
from utils.errors import NotFoundError, StorageError  # noqa: E402


class InMemorySubscriptionRepository:
    """Stand-in for SubscriptionRepository backed by a dict."""

    def __init__(self):
        self.rows: dict[int, Subscription] = {}
        self._next_id = 1
        self.fail_with: StorageError | None = None

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    def add(self, subscription):
        self._check()
        saved = replace(subscription, id=self._next_id)
        self.rows[saved.id] = saved
        self._next_id += 1
        return replace(saved)

    def list_all(self):
        self._check()
        return sorted(
            (replace(s) for s in self.rows.values()),
            key=lambda s: (date.fromisoformat(s.next_billing), s.id),
        )

    def get_by_id(self, subscription_id):
        self._check()
        if subscription_id not in self.rows:
            raise NotFoundError("Subscription not found")
        return replace(self.rows[subscription_id])

    def update(self, subscription_id, subscription):
        self._check()
        if subscription_id not in self.rows:
            raise NotFoundError("Subscription not found")
        self.rows[subscription_id] = replace(subscription, id=subscription_id)
        return replace(self.rows[subscription_id])

    def delete(self, subscription_id):
        self._check()
        if subscription_id not in self.rows:
            raise NotFoundError("Subscription not found")
        del self.rows[subscription_id]

    def category_totals(self):
        self._check()
        totals: dict[str, float] = {}
        for s in self.rows.values():
            totals[s.category] = totals.get(s.category, 0) + s.cost
        return [
            CategoryTotal(category=c, cost=round(v, 2))
            for c, v in sorted(totals.items(), key=lambda x: -x[1])
        ]

    def get_due_within(self, days):
        self._check()
        today = date.today()
        end = today + timedelta(days=days)
        return [s for s in self.list_all() if today <= date.fromisoformat(s.next_billing) <= end]


class FakeDatabase:
    """Stand-in for db.connection.Database that never touches the network."""

    def __init__(self, healthy: bool = True):
        self.healthy = healthy
        self.opened = False
        self.closed = False

    def open(self):
        self.opened = True

    def ping(self):
        if not self.healthy:
            raise StorageError("connection refused")

    def close(self):
        self.closed = True


def make_subscription(**overrides) -> Subscription:
    fields = {
        "name": "Netflix",
        "category": "Streaming",
        "cost": 15.99,
        "billing_cycle": "monthly",
        "next_billing": "2024-07-01",
        "description": "",
    }
    fields.update(overrides)
    return Subscription(**fields)


def days_from_today(n: int) -> str:
    return (date.today() + timedelta(days=n)).isoformat()


@pytest.fixture()
def repo():
    return InMemorySubscriptionRepository()


@pytest.fixture()
def fake_db():
    return FakeDatabase()


@pytest.fixture()
def client(repo, fake_db):
    from fastapi.testclient import TestClient

    from handlers.dependencies import get_subscription_service
    from main import create_app
    from services.subscription_service import SubscriptionService

    app = create_app(fake_db)
    app.dependency_overrides[get_subscription_service] = lambda: SubscriptionService(repo)
    # No `with`: lifespan (pool + schema) is not run for route tests.
    return TestClient(app)


@pytest.fixture()
def mock_db():
    """
    A MagicMock Database whose connection() yields `conn`, whose cursor()
    yields `cur`. Returns (database, conn, cur).
    """
    database = MagicMock()
    conn = MagicMock()
    conn.closed = 0
    cur = MagicMock()
    database.connection.return_value.__enter__.return_value = conn
    conn.cursor.return_value.__enter__.return_value = cur
    return database, conn, cur
