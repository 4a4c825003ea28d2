from flask import Blueprint, request

from shelfwise.schemas.lots import CreateLotRequest, RemoveFromLotRequest
from shelfwise.services import lots
from shelfwise.services.lots import Lot
from shelfwise.utils import ok, transactional, validate_schema
from shelfwise.version import API_PREFIX

lots_bp = Blueprint("lots", __name__, url_prefix=f"{API_PREFIX}/lots")

NO_STORE = {"Cache-Control": "no-store"}


@lots_bp.route("", methods=["GET"])
def list_lots():
    return ok(lots.lot_summaries(), headers=NO_STORE)


@lots_bp.route("/<int:lot_number>", methods=["GET"])
def get_lot(lot_number):
    return ok(Lot.get(lot_number, lock=False).to_dict(), headers=NO_STORE)


@lots_bp.route("", methods=["POST"])
@validate_schema(CreateLotRequest)
def create_lot():
    body = request.validated_data
    with transactional("Failed to create lot", invalidates_dashboard=True):
        lot = lots.create_lot(body.lot_number, body.item_ids)
        data = {"lot_number": lot.number, "item_count": len(lot), "item_ids": lot.item_ids}
    added = len(set(body.item_ids))
    return ok(data, message=f"Lot #{lot.number} created with {added} items", status=201)


@lots_bp.route("/<int:lot_number>", methods=["DELETE"])
def dissolve_lot(lot_number):
    with transactional("Failed to dissolve lot", invalidates_dashboard=True):
        count = lots.dissolve_lot(lot_number)
    headers = dict(NO_STORE, **{"X-Lot-Invalidated": str(lot_number)})
    return ok(
        {"lot_number": lot_number, "item_count": count},
        message=f"Lot #{lot_number} ungrouped ({count} items)",
        headers=headers,
    )


@lots_bp.route("/<int:lot_number>/remove", methods=["POST"])
@validate_schema(RemoveFromLotRequest)
def remove_from_lot(lot_number):
    body = request.validated_data
    with transactional("Failed to remove item from lot", invalidates_dashboard=True):
        lot_empty = lots.remove_from_lot(lot_number, body.item_id)
    headers = dict(NO_STORE, **{"X-Lot-Invalidated": str(lot_number)})
    return ok(
        {"lot_number": lot_number, "item_id": body.item_id, "lot_empty": lot_empty},
        message=f"Item {body.item_id} removed from lot #{lot_number}",
        headers=headers,
    )
