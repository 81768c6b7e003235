"""
models/subscription.py
----------------------
Domain model for tracked subscriptions and their per-category totals.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Union


@dataclass
class Subscription:
    """
    Represents one recurring payment being tracked.

    Attributes:
        name: Friendly name (e.g., 'Netflix').
        category: Free-form grouping label (e.g., 'Streaming').
        cost: Amount charged per billing cycle. Currency is not tracked.
        billing_cycle: Free-form cycle label (e.g., 'monthly'). Informational only.
        next_billing: Next billing date as an ISO-8601 'YYYY-MM-DD' string.
            Never advanced by the system.
        description: Optional note, empty string when absent.
        id: Database primary key (None for new records).
    """
    name: str
    category: str
    cost: float
    billing_cycle: str
    next_billing: str
    description: str = ""
    id: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON shape used on the wire."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "cost": self.cost,
            "billingCycle": self.billing_cycle,
            "nextBilling": self.next_billing,
            "description": self.description,
        }

    @staticmethod
    def format_date(value: Union[date, str, None]) -> str:
        """Render a DATE column value as 'YYYY-MM-DD'."""
        if isinstance(value, date):
            return value.isoformat()
        return value or ""

    def __str__(self) -> str:
        return f"#{self.id} {self.name}: {self.cost:.2f} ({self.billing_cycle}) - Next: {self.next_billing}"


@dataclass
class CategoryTotal:
    """Sum of subscription costs for one category."""
    category: str
    cost: float

    def to_dict(self) -> dict[str, Any]:
        return {"category": self.category, "cost": self.cost}
