from shelfwise.models import db
from shelfwise.models.item import Item, ItemStatus, ItemStatusHistory
from shelfwise.models.listing import Listing, ListingStatus
from shelfwise.version import API_PREFIX

from helpers import intake, list_item, listed_item, putaway, stored_item


def test_putaway_moves_to_stored_and_second_putaway_fails(client, app):
    item_id = intake(client)
    resp = putaway(client, item_id, "B-02-03")
    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "STORED"

    item = db.session.get(Item, item_id)
    assert item.location == "B-02-03"
    last = ItemStatusHistory.query.filter_by(item_id=item_id).order_by(ItemStatusHistory.id.desc()).first()
    assert (last.from_status, last.to_status, last.channel) == (ItemStatus.INTAKE, ItemStatus.STORED, "PUTAWAY")
    assert last.note == "Moved to location: B-02-03"

    again = putaway(client, item_id, "C-01-01")
    assert again.status_code == 400
    assert again.get_json()["error"] == "Item must be in INTAKE status for putaway"
    assert db.session.get(Item, item_id).location == "B-02-03"


def test_putaway_missing_item_and_bad_location(client, app):
    assert putaway(client, 999).status_code == 404
    item_id = intake(client)
    resp = putaway(client, item_id, "X" * 21)
    assert resp.status_code == 400
    assert resp.get_json()["details"]
    assert putaway(client, item_id, "").status_code == 400


def test_list_requires_stored_and_creates_active_listing(client, app):
    item_id = intake(client)
    resp = list_item(client, item_id)
    assert resp.status_code == 400
    assert "STORED" in resp.get_json()["error"]

    putaway(client, item_id, "A-01-01")
    resp = list_item(client, item_id, channel="AMAZON", price=850)
    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["sku"] == f"A-01-01-{item_id}"
    assert data["listing"]["status"] == "ACTIVE"
    assert data["item"]["status"] == "LISTED"
    assert data["item"]["listed_date"] is not None

    last = ItemStatusHistory.query.filter_by(item_id=item_id).order_by(ItemStatusHistory.id.desc()).first()
    assert last.channel == "AMAZON"


def test_list_rejects_non_positive_price(client, app):
    item_id = stored_item(client)
    resp = client.post(f"{API_PREFIX}/items/{item_id}/list", json={"channel": "EBAY", "priceCents": 0})
    assert resp.status_code == 400
    assert Listing.query.count() == 0


def test_generic_status_change_writes_exactly_one_history_row(client, app):
    item_id = stored_item(client)
    before = ItemStatusHistory.query.filter_by(item_id=item_id).count()

    resp = client.put(f"{API_PREFIX}/items/{item_id}/status", json={"toStatus": "RESERVED", "note": "held for Ana"})
    assert resp.status_code == 200

    rows = ItemStatusHistory.query.filter_by(item_id=item_id).order_by(ItemStatusHistory.id).all()
    assert len(rows) == before + 1
    assert rows[-1].from_status == ItemStatus.STORED
    assert rows[-1].to_status == ItemStatus.RESERVED
    assert rows[-1].channel == "MANUAL"
    assert rows[-1].note == "held for Ana"


def test_status_change_to_sold_sets_calendar_fields_only_with_date(client, app):
    item_id = listed_item(client)
    client.put(f"{API_PREFIX}/items/{item_id}/status", json={"toStatus": "SOLD"})
    item = db.session.get(Item, item_id)
    assert item.status == ItemStatus.SOLD
    assert item.sold_year is None and item.sold_month is None


def test_status_change_rejects_unknown_status(client, app):
    item_id = intake(client)
    resp = client.put(f"{API_PREFIX}/items/{item_id}/status", json={"toStatus": "LOST"})
    assert resp.status_code == 400
    assert resp.get_json()["details"][0]["type"] == "enum"


def test_patch_requires_a_field(client, app):
    item_id = intake(client)
    resp = client.patch(f"{API_PREFIX}/items/{item_id}", json={})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "No valid fields to update"


def test_patch_location_promotes_intake_item(client, app):
    item_id = intake(client)
    resp = client.patch(f"{API_PREFIX}/items/{item_id}", json={"currentLocation": "D-04-01"})
    assert resp.status_code == 200
    item = db.session.get(Item, item_id)
    assert item.status == ItemStatus.STORED
    assert item.location == "D-04-01"
    last = ItemStatusHistory.query.filter_by(item_id=item_id).order_by(ItemStatusHistory.id.desc()).first()
    assert last.note == "Location assigned: D-04-01 - Status auto-updated to STORED"
    assert last.channel == "PUTAWAY"


def test_patch_with_explicit_status_does_not_auto_promote(client, app):
    item_id = intake(client)
    resp = client.patch(
        f"{API_PREFIX}/items/{item_id}",
        json={"location": "D-04-01", "status": "DISCARDED", "conditionNotes": "water damage"},
    )
    assert resp.status_code == 200
    item = db.session.get(Item, item_id)
    assert item.status == ItemStatus.DISCARDED
    assert item.condition_notes == "water damage"


def test_patch_condition_only_writes_no_history(client, app):
    item_id = intake(client)
    before = ItemStatusHistory.query.filter_by(item_id=item_id).count()
    resp = client.patch(f"{API_PREFIX}/items/{item_id}", json={"conditionGrade": "GOOD"})
    assert resp.status_code == 200
    assert ItemStatusHistory.query.filter_by(item_id=item_id).count() == before


def test_bulk_location_skips_unknown_ids(client, app):
    a = intake(client)
    b = stored_item(client)
    resp = client.patch(f"{API_PREFIX}/items/bulk-location", json={"itemIds": [a, b, 4040], "location": "E-01"})
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["updated_count"] == 2
    assert sorted(data["item_ids"]) == sorted([a, b])
    assert db.session.get(Item, a).status == ItemStatus.STORED
    assert db.session.get(Item, b).location == "E-01"
    last = ItemStatusHistory.query.filter_by(item_id=b).order_by(ItemStatusHistory.id.desc()).first()
    assert last.channel == "BULK_PUTAWAY"

    resp = client.patch(f"{API_PREFIX}/items/bulk-location", json={"itemIds": [5050], "location": "E-01"})
    assert resp.status_code == 404


def test_delete_with_active_listing_is_refused(client, app):
    item_id = listed_item(client)
    resp = client.delete(f"{API_PREFIX}/items/{item_id}")
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["success"] is False
    assert "active listings" in body["error"]
    item = db.session.get(Item, item_id)
    assert item is not None
    assert item.status == ItemStatus.LISTED


def test_delete_with_order_line_is_refused(client, app):
    item_id = stored_item(client)
    client.post("/__orders/seed", json={"lines": [{"item_id": item_id, "sale_cents": 1500}]})
    resp = client.delete(f"{API_PREFIX}/items/{item_id}")
    assert resp.status_code == 400
    assert "sold" in resp.get_json()["error"]


def test_delete_removes_item_history_and_listings(client, app):
    item_id = listed_item(client)
    listing = Listing.query.filter_by(item_id=item_id).first()
    listing.status = ListingStatus.EXPIRED
    db.session.commit()

    resp = client.delete(f"{API_PREFIX}/items/{item_id}")
    assert resp.status_code == 200
    assert db.session.get(Item, item_id) is None
    assert ItemStatusHistory.query.filter_by(item_id=item_id).count() == 0
    assert Listing.query.filter_by(item_id=item_id).count() == 0
    assert client.delete(f"{API_PREFIX}/items/{item_id}").status_code == 404


def test_item_detail_and_history(client, app):
    item_id = listed_item(client)
    resp = client.get(f"{API_PREFIX}/items/{item_id}")
    data = resp.get_json()["data"]
    assert data["catalog"]["barcode"] == "9780140283334"
    assert [h["to_status"] for h in data["history"]] == ["LISTED", "STORED", "INTAKE"]
    assert len(data["listings"]) == 1

    resp = client.get(f"{API_PREFIX}/items/{item_id}/history")
    assert [h["to_status"] for h in resp.get_json()["data"]] == ["INTAKE", "STORED", "LISTED"]
    assert client.get(f"{API_PREFIX}/items/31337").status_code == 404


def test_search_filters_and_caps_page_size(client, app):
    ids = [intake(client) for _ in range(3)]
    putaway(client, ids[0], "S-1")

    resp = client.get(f"{API_PREFIX}/items?status=STORED")
    assert [i["id"] for i in resp.get_json()["data"]["items"]] == [ids[0]]

    resp = client.get(f"{API_PREFIX}/items?sort=id_asc&limit=500")
    data = resp.get_json()["data"]
    assert data["pagination"]["limit"] == 100
    assert [i["id"] for i in data["items"]] == ids

    resp = client.get(f"{API_PREFIX}/items?search={ids[1]}")
    assert ids[1] in [i["id"] for i in resp.get_json()["data"]["items"]]

    assert client.get(f"{API_PREFIX}/items?status=NOPE").status_code == 400
