import logging

from shelfwise.models import db
from shelfwise.models.item import Item, ItemStatus, ItemStatusHistory
from shelfwise.services.lifecycle import ALLOWED_TRANSITIONS, can_transition
from shelfwise.version import API_PREFIX

from helpers import listed_item, stored_item


def test_table_covers_every_status():
    assert set(ALLOWED_TRANSITIONS) == set(ItemStatus)


def test_guarded_paths_are_in_table():
    assert can_transition(ItemStatus.INTAKE, ItemStatus.STORED)
    assert can_transition(ItemStatus.STORED, ItemStatus.LISTED)
    assert can_transition(ItemStatus.LISTED, ItemStatus.SOLD)
    assert can_transition(ItemStatus.SOLD, ItemStatus.RETURNED)
    assert can_transition(ItemStatus.DISCARDED, ItemStatus.DISCARDED)
    assert not can_transition(ItemStatus.SOLD, ItemStatus.INTAKE)
    assert not can_transition(ItemStatus.DISCARDED, ItemStatus.STORED)


def test_out_of_table_move_is_accepted_and_flagged_by_default(client, app, caplog):
    item_id = listed_item(client)
    client.put(f"{API_PREFIX}/items/{item_id}/status", json={"toStatus": "SOLD"})
    caplog.set_level(logging.WARNING)

    resp = client.put(f"{API_PREFIX}/items/{item_id}/status", json={"toStatus": "INTAKE", "channel": "ADMIN"})
    assert resp.status_code == 200
    assert db.session.get(Item, item_id).status == ItemStatus.INTAKE
    overrides = [r for r in caplog.records if isinstance(r.msg, dict) and r.msg.get("event") == "status_override"]
    assert overrides and overrides[0].msg["from_status"] == "SOLD"


def test_strict_mode_requires_override(client, app):
    app.config["STRICT_STATUS_TRANSITIONS"] = True
    item_id = stored_item(client)
    client.put(f"{API_PREFIX}/items/{item_id}/status", json={"toStatus": "DISCARDED"})
    before = ItemStatusHistory.query.filter_by(item_id=item_id).count()

    resp = client.put(f"{API_PREFIX}/items/{item_id}/status", json={"toStatus": "STORED"})
    assert resp.status_code == 400
    assert "override" in resp.get_json()["error"]
    assert ItemStatusHistory.query.filter_by(item_id=item_id).count() == before

    resp = client.put(f"{API_PREFIX}/items/{item_id}/status", json={"toStatus": "STORED", "override": True})
    assert resp.status_code == 200
    assert db.session.get(Item, item_id).status == ItemStatus.STORED


def test_history_rows_are_append_only(client, app):
    item_id = stored_item(client)
    row = ItemStatusHistory.query.filter_by(item_id=item_id).first()
    row.note = "rewritten"
    try:
        db.session.commit()
        raised = False
    except Exception as e:
        raised = "append-only" in str(e)
        db.session.rollback()
    assert raised
    assert ItemStatusHistory.query.filter_by(item_id=item_id).first().note == "Item created during intake process"
