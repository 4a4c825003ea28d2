from flask import Blueprint, current_app, request

from shelfwise.extensions import limiter
from shelfwise.schemas.items import (
    BulkLocationRequest,
    ItemSearchQuery,
    ListItemRequest,
    PatchItemRequest,
    PutawayRequest,
    StatusChangeRequest,
    UpdateDatesRequest,
)
from shelfwise.services import lifecycle
from shelfwise.utils import ok, transactional, validate_query, validate_schema
from shelfwise.version import API_PREFIX

items_bp = Blueprint("items", __name__, url_prefix=f"{API_PREFIX}/items")


def _page_size(requested):
    return min(requested, current_app.config.get("MAX_PAGE_SIZE", 100))


@items_bp.route("", methods=["GET"])
@validate_query(ItemSearchQuery)
def search_items():
    q = request.validated_query
    data = lifecycle.search_items(
        status=q.status,
        location=q.location,
        barcode=q.barcode,
        search=q.search,
        lot_number=q.lot_number,
        sort=q.sort,
        page=q.page,
        limit=_page_size(q.limit),
    )
    return ok(data)


@items_bp.route("/<int:item_id>", methods=["GET"])
def get_item(item_id):
    return ok(lifecycle.item_detail(item_id))


@items_bp.route("/<int:item_id>/history", methods=["GET"])
def get_item_history(item_id):
    return ok(lifecycle.item_history(item_id))


@items_bp.route("/<int:item_id>/putaway", methods=["PUT"])
@validate_schema(PutawayRequest)
def putaway(item_id):
    body = request.validated_data
    with transactional("Failed to put item away", invalidates_dashboard=True):
        item = lifecycle.putaway(item_id, body.location)
        data = item.to_dict()
    return ok(data, message=f"Item moved to {data['location']}")


@items_bp.route("/<int:item_id>/list", methods=["POST"])
@validate_schema(ListItemRequest)
def list_item(item_id):
    body = request.validated_data
    with transactional("Failed to list item", invalidates_dashboard=True):
        item, listing = lifecycle.list_item(
            item_id,
            channel=body.channel,
            price_cents=body.price_cents,
            external_id=body.external_id,
        )
        data = {"item": item.to_dict(), "listing": listing.to_dict(), "sku": item.sku}
    return ok(data, message=f"Item listed on {body.channel}", status=201)


@items_bp.route("/<int:item_id>/status", methods=["PUT"])
@validate_schema(StatusChangeRequest)
def change_status(item_id):
    body = request.validated_data
    with transactional("Failed to change item status", invalidates_dashboard=True):
        item = lifecycle.change_status(
            item_id,
            body.to_status,
            channel=body.channel,
            note=body.note,
            override=body.override,
        )
        data = item.to_dict()
    return ok(data, message=f"Status updated to {data['status']}")


@items_bp.route("/<int:item_id>", methods=["PATCH"])
@validate_schema(PatchItemRequest)
def patch_item(item_id):
    body = request.validated_data
    with transactional("Failed to update item", invalidates_dashboard=True):
        item, affected = lifecycle.patch_item(
            item_id,
            location=body.location,
            status=body.status,
            condition_grade=body.condition_grade,
            condition_notes=body.condition_notes,
            override=body.override,
        )
        data = item.to_dict()
        data["affected_item_ids"] = [i.id for i in affected]
    message = "Item updated"
    if len(data["affected_item_ids"]) > 1:
        message = f"Item updated ({len(data['affected_item_ids'])} lot members relocated)"
    return ok(data, message=message)


@items_bp.route("/bulk-location", methods=["PATCH"])
@limiter.limit(lambda: current_app.config["MUTATION_LIMIT_PER_IP"])
@validate_schema(BulkLocationRequest)
def bulk_location():
    body = request.validated_data
    with transactional("Failed bulk location update", invalidates_dashboard=True):
        affected = lifecycle.bulk_location(body.item_ids, body.location)
        ids = [i.id for i in affected]
    return ok(
        {"updated_count": len(ids), "location": body.location, "item_ids": ids},
        message=f"Updated location for {len(ids)} items",
    )


@items_bp.route("/update-dates", methods=["POST"])
@limiter.limit(lambda: current_app.config["MUTATION_LIMIT_PER_IP"])
@validate_schema(UpdateDatesRequest)
def update_dates():
    body = request.validated_data
    with transactional("Failed bulk date update", invalidates_dashboard=True):
        affected, recorded, failures = lifecycle.update_dates(body.item_ids, body.date_type, body.date)
        ids = [i.id for i in affected]
    data = {
        "updated_count": len(ids),
        "item_ids": ids,
        "date_type": body.date_type,
        "cogs_recorded": len(recorded),
        "cogs_failures": failures,
    }
    return ok(data, message=f"Updated {body.date_type} date for {len(ids)} items")


@items_bp.route("/<int:item_id>", methods=["DELETE"])
def delete_item(item_id):
    with transactional("Failed to delete item", invalidates_dashboard=True):
        lifecycle.delete_item(item_id)
    return ok({"id": item_id}, message="Item deleted")
