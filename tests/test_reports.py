from datetime import timedelta

from shelfwise.models import db
from shelfwise.models.item import Item
from shelfwise.utils.time import utcnow
from shelfwise.version import API_PREFIX

from helpers import list_item, listed_item, sell, stored_item

REPORTS = f"{API_PREFIX}/reports"


def _age(item_id, days):
    db.session.get(Item, item_id).updated_at = utcnow() - timedelta(days=days)
    db.session.commit()


def test_aging_stock_lists_old_stored_items(client, app):
    a = stored_item(client, location="A-1")
    b = stored_item(client, location="B-2")
    stored_item(client, location="C-3")
    old_listed = listed_item(client)
    _age(a, 40)
    _age(b, 35)
    _age(old_listed, 50)

    data = client.get(f"{REPORTS}/aging-stock").get_json()["data"]
    assert [i["id"] for i in data["items"]] == [a, b]
    assert [i["age_days"] for i in data["items"]] == [40, 35]
    assert data["summary"] == {
        "total_items": 2,
        "average_age_days": 37.5,
        "by_location": {"A-1": 1, "B-2": 1},
    }

    data = client.get(f"{REPORTS}/aging-stock?days=45").get_json()["data"]
    assert data["summary"]["total_items"] == 0
    assert data["summary"]["average_age_days"] == 0.0

    assert client.get(f"{REPORTS}/aging-stock?days=0").status_code == 400


def test_listed_and_sold_today(client, app):
    a = listed_item(client)
    b = stored_item(client)
    list_item(client, b, channel="AMAZON", price=850)

    listed = client.get(f"{REPORTS}/listed-today").get_json()["data"]
    assert listed["summary"] == {
        "total": 2,
        "total_value_cents": 2149,
        "by_channel": {"EBAY": 1, "AMAZON": 1},
    }
    assert {row["item"]["id"] for row in listed["items"]} == {a, b}

    sell(client, [a], utcnow().date().isoformat())
    sold = client.get(f"{REPORTS}/sold-today").get_json()["data"]
    assert sold["summary"] == {"total": 1, "total_value_cents": 1299, "by_channel": {"DATE_UPDATE": 1}}
    assert sold["items"][0]["item_id"] == a


def test_channel_performance(client, app):
    a = listed_item(client)
    b = stored_item(client)
    list_item(client, b, channel="AMAZON", price=850)
    sell(client, [a], utcnow().date().isoformat())

    data = client.get(f"{REPORTS}/channel-performance?days=7").get_json()["data"]
    assert data["period_days"] == 7
    assert data["performance"] == [
        {"channel": "AMAZON", "total_listed": 1, "total_listed_value_cents": 850, "sold_count": 0,
         "conversion_rate": 0.0},
        {"channel": "EBAY", "total_listed": 1, "total_listed_value_cents": 1299, "sold_count": 1,
         "conversion_rate": 100.0},
    ]
