from shelfwise.services import dashboard
from shelfwise.utils.cache import DashboardCache
from shelfwise.version import API_PREFIX

from helpers import intake, listed_item, stored_item

STATS = f"{API_PREFIX}/reports/dashboard-stats"


class Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_cache_slot_honours_ttl():
    clock = Clock()
    cache = DashboardCache(ttl_seconds=30, clock=clock)
    assert cache.get() is None

    cache.set({"total_items": 1})
    clock.now = 29.9
    assert cache.get() == {"total_items": 1}
    clock.now = 30.0
    assert cache.get() is None
    assert (cache.hits, cache.misses) == (1, 2)


def test_invalidate_clears_slot():
    cache = DashboardCache(clock=Clock())
    cache.set({"x": 1})
    cache.invalidate()
    assert cache.get() is None
    assert not cache.is_valid()


def _count_computations(monkeypatch):
    calls = []
    real = dashboard.compute_dashboard_stats

    def counting():
        calls.append(1)
        return real()

    monkeypatch.setattr(dashboard, "compute_dashboard_stats", counting)
    return calls


def test_second_call_within_ttl_is_a_hit(client, app, monkeypatch):
    intake(client)
    calls = _count_computations(monkeypatch)

    first = client.get(STATS).get_json()["data"]
    second = client.get(STATS).get_json()["data"]
    assert len(calls) == 1
    assert first["cached"] is False
    assert second["cached"] is True
    assert second["total_items"] == 1


def test_delete_invalidates_and_next_call_recomputes(client, app, monkeypatch):
    item_id = intake(client)
    calls = _count_computations(monkeypatch)

    assert client.get(STATS).get_json()["data"]["total_items"] == 1
    assert client.delete(f"{API_PREFIX}/items/{item_id}").status_code == 200
    data = client.get(STATS).get_json()["data"]
    assert len(calls) == 2
    assert data["cached"] is False
    assert data["total_items"] == 0


def test_ttl_expiry_recomputes(client, app, clock, monkeypatch):
    calls = _count_computations(monkeypatch)
    client.get(STATS)
    clock.advance(31)
    client.get(STATS)
    assert len(calls) == 2


def test_failed_mutation_keeps_cache(client, app, monkeypatch):
    item_id = listed_item(client)
    calls = _count_computations(monkeypatch)
    client.get(STATS)
    assert client.delete(f"{API_PREFIX}/items/{item_id}").status_code == 400
    client.get(STATS)
    assert len(calls) == 1


def test_stats_content(client, app):
    stored_item(client, location="A-1")
    listed_item(client, location="A-1")
    intake(client)
    data = client.get(STATS).get_json()["data"]
    assert data["total_items"] == 3
    assert data["status_breakdown"]["INTAKE"] == 1
    assert data["status_breakdown"]["STORED"] == 1
    assert data["status_breakdown"]["LISTED"] == 1
    assert data["status_breakdown"]["SOLD"] == 0
    assert data["location_breakdown"] == {"A-1": 2}
    assert data["total_listed_value_cents"] == 1299
