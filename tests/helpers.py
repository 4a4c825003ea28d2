from shelfwise.version import API_PREFIX

GATSBY = "9780140283334"


def intake(client, barcode=GATSBY, cost=500, **extra):
    payload = {"barcode": barcode, "costCents": cost}
    payload.update(extra)
    resp = client.post(f"{API_PREFIX}/intake", json=payload)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["data"]["id"]


def putaway(client, item_id, location="A-01-01"):
    return client.put(f"{API_PREFIX}/items/{item_id}/putaway", json={"location": location})


def list_item(client, item_id, channel="EBAY", price=1299):
    return client.post(f"{API_PREFIX}/items/{item_id}/list", json={"channel": channel, "priceCents": price})


def stored_item(client, location="A-01-01", **kw):
    item_id = intake(client, **kw)
    assert putaway(client, item_id, location).status_code == 200
    return item_id


def listed_item(client, **kw):
    item_id = stored_item(client, **kw)
    assert list_item(client, item_id).status_code == 201
    return item_id


def create_lot(client, lot_number, item_ids):
    return client.post(f"{API_PREFIX}/lots", json={"lotNumber": lot_number, "itemIds": item_ids})


def sell(client, item_ids, when):
    resp = client.post(
        f"{API_PREFIX}/items/update-dates",
        json={"itemIds": item_ids, "dateType": "sold", "date": when},
    )
    assert resp.status_code == 200, resp.get_json()
    return resp
