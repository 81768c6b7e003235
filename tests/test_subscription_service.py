from __future__ import annotations

import pytest

from conftest import days_from_today, make_subscription
from services.subscription_service import SubscriptionService
from utils.errors import NotFoundError, ValidationError


@pytest.fixture()
def service(repo):
    return SubscriptionService(repo)


class TestParseId:

    @pytest.mark.parametrize("raw,expected", [("1", 1), ("42", 42), (" 7 ", 7), ("2147483647", 2147483647)])
    def test_valid(self, raw, expected):
        assert SubscriptionService.parse_id(raw) == expected

    @pytest.mark.parametrize("raw", ["", "abc", "3.5", "1e3", "+4", "1_000", "٣"])
    def test_non_numeric(self, raw):
        with pytest.raises(ValidationError, match="Invalid ID"):
            SubscriptionService.parse_id(raw)

    @pytest.mark.parametrize("raw", ["0", "-1", "-3", "2147483648"])
    def test_numeric_but_unassignable_is_not_found(self, raw):
        with pytest.raises(NotFoundError):
            SubscriptionService.parse_id(raw)


class TestValidate:

    def test_accepts_complete_record(self):
        SubscriptionService.validate(make_subscription())

    def test_description_is_optional(self):
        SubscriptionService.validate(make_subscription(description=""))

    def test_billing_cycle_is_free_text(self):
        SubscriptionService.validate(make_subscription(billing_cycle="every full moon"))

    @pytest.mark.parametrize("field", ["name", "category", "billing_cycle", "next_billing"])
    def test_rejects_blank_required_field(self, field):
        with pytest.raises(ValidationError, match="Missing required fields"):
            SubscriptionService.validate(make_subscription(**{field: " "}))

    @pytest.mark.parametrize("cost", [0, 0.0, -0.01, -10])
    def test_rejects_non_positive_cost(self, cost):
        with pytest.raises(ValidationError):
            SubscriptionService.validate(make_subscription(cost=cost))

    @pytest.mark.parametrize("cost", [True, "15", None])
    def test_rejects_non_numeric_cost(self, cost):
        with pytest.raises(ValidationError):
            SubscriptionService.validate(make_subscription(cost=cost))


def test_create_assigns_id_and_persists(service, repo):
    saved = service.create_subscription(make_subscription())
    assert saved.id == 1
    assert service.get_subscription(1) == saved


def test_invalid_create_persists_nothing(service, repo):
    with pytest.raises(ValidationError):
        service.create_subscription(make_subscription(name=""))
    assert repo.rows == {}


def test_update_uses_path_id(service):
    first = service.create_subscription(make_subscription())
    updated = service.update_subscription(first.id, make_subscription(name="Hulu", id=55))
    assert updated.id == first.id
    assert service.get_subscription(first.id).name == "Hulu"


def test_update_unknown_id(service):
    with pytest.raises(NotFoundError):
        service.update_subscription(3, make_subscription())


def test_delete_then_get(service):
    saved = service.create_subscription(make_subscription())
    service.delete_subscription(saved.id)
    with pytest.raises(NotFoundError):
        service.get_subscription(saved.id)


def test_list_puts_earliest_first(service):
    service.create_subscription(make_subscription(name="later", next_billing="2030-01-01"))
    service.create_subscription(make_subscription(name="earliest", next_billing="2020-01-01"))
    assert [s.name for s in service.list_subscriptions()][0] == "earliest"


def test_stats_total_matches_category_sums(service):
    costs = [("Streaming", 15.99), ("Streaming", 9.99), ("Music", 10.99), ("Cloud", 2.99)]
    for category, cost in costs:
        service.create_subscription(make_subscription(category=category, cost=cost))

    stats = service.get_stats()
    assert stats["totalMonthly"] == pytest.approx(sum(c["cost"] for c in stats["byCategory"]))
    assert stats["totalMonthly"] == pytest.approx(sum(cost for _, cost in costs))
    assert [c["category"] for c in stats["byCategory"]] == ["Streaming", "Music", "Cloud"]


def test_stats_window_boundaries(service):
    for offset in (8, 7, 3, 0, -1):
        service.create_subscription(make_subscription(name=f"d{offset}", next_billing=days_from_today(offset)))
    upcoming = service.get_stats()["upcoming"]
    assert [s["name"] for s in upcoming] == ["d0", "d3", "d7"]


def test_stats_custom_window(service):
    service.create_subscription(make_subscription(name="soon", next_billing=days_from_today(2)))
    service.create_subscription(make_subscription(name="month", next_billing=days_from_today(20)))
    assert [s["name"] for s in service.get_stats(days=30)["upcoming"]] == ["soon", "month"]
    assert service.get_stats(days=1)["upcoming"] == []
