"""
Item lifecycle engine.

Guarded transitions (putaway, list), the generic status change with its
transition table, patch and bulk updates with lot-wide cascades, and delete.
Every function here works inside the caller's unit of work and does NOT
commit.
"""
import logging

from flask import current_app
from sqlalchemy import or_

from shelfwise.errors import Conflict, NotFound, PreconditionFailed, ValidationError
from shelfwise.metrics import STATUS_OVERRIDES
from shelfwise.models import db
from shelfwise.models.cogs import COGSRecord
from shelfwise.models.item import Item, ItemStatus, ItemStatusHistory
from shelfwise.models.listing import Listing, ListingStatus
from shelfwise.models.order import OrderLine
from shelfwise.services import cogs
from shelfwise.services.history import record_history
from shelfwise.services.lots import Lot
from shelfwise.utils.db import lock_item, lock_items
from shelfwise.utils.time import parse_iso_datetime, utcnow

logger = logging.getLogger(__name__)

MAX_LOCATION_LENGTH = 20

S = ItemStatus
ALLOWED_TRANSITIONS = {
    S.INTAKE: frozenset({S.STORED, S.DISCARDED}),
    S.STORED: frozenset({S.LISTED, S.RESERVED, S.DISCARDED}),
    S.LISTED: frozenset({S.STORED, S.RESERVED, S.SOLD, S.DISCARDED}),
    S.RESERVED: frozenset({S.LISTED, S.STORED, S.SOLD}),
    S.SOLD: frozenset({S.RETURNED}),
    S.RETURNED: frozenset({S.INTAKE, S.STORED, S.DISCARDED}),
    S.DISCARDED: frozenset(),
}


def can_transition(from_status, to_status):
    if from_status == to_status:
        return True
    return to_status in ALLOWED_TRANSITIONS.get(from_status, frozenset())


def _get_locked(item_id):
    item = lock_item(item_id)
    if item is None:
        raise NotFound("Item not found")
    return item


def _clean_location(location):
    location = (location or "").strip()
    if not location:
        raise ValidationError(
            "Location is required",
            details=[{"field": "location", "message": "Location is required", "type": "missing"}],
        )
    if len(location) > MAX_LOCATION_LENGTH:
        raise ValidationError(
            f"Location must be at most {MAX_LOCATION_LENGTH} characters",
            details=[{"field": "location", "message": "Location too long", "type": "string_too_long"}],
        )
    return location


def _set_status(item, to_status):
    item.status = to_status
    item.sync_sale_fields()


def putaway(item_id, location):
    location = _clean_location(location)
    item = _get_locked(item_id)
    if item.status != ItemStatus.INTAKE:
        raise PreconditionFailed("Item must be in INTAKE status for putaway")

    item.location = location
    _set_status(item, ItemStatus.STORED)
    record_history(
        item,
        ItemStatus.STORED,
        from_status=ItemStatus.INTAKE,
        channel="PUTAWAY",
        note=f"Moved to location: {location}",
    )
    return item


def list_item(item_id, *, channel, price_cents, external_id=None):
    item = _get_locked(item_id)
    if item.status != ItemStatus.STORED:
        raise PreconditionFailed("Item must be in STORED status for listing")

    listing = Listing(
        item_id=item.id,
        channel=channel,
        external_id=external_id,
        price_cents=price_cents,
        status=ListingStatus.ACTIVE,
    )
    db.session.add(listing)
    item.listed_date = utcnow()
    _set_status(item, ItemStatus.LISTED)
    record_history(
        item,
        ItemStatus.LISTED,
        from_status=ItemStatus.STORED,
        channel=channel,
        note=f"Listed for {price_cents / 100:.2f}",
    )
    db.session.flush()
    return item, listing


def change_status(item_id, to_status, *, channel=None, note=None, override=False, item=None):
    """
    Move an item to any status, recording exactly one history entry.

    Moves outside ``ALLOWED_TRANSITIONS`` are administrative overrides. They
    are accepted and flagged unless STRICT_STATUS_TRANSITIONS is on, in which
    case the caller must pass ``override=True``.
    """
    try:
        to_status = ItemStatus(to_status)
    except ValueError:
        raise ValidationError(f"Unknown status: {to_status}")
    item = item or _get_locked(item_id)
    from_status = item.status
    channel = channel or "MANUAL"

    if not can_transition(from_status, to_status):
        if current_app.config.get("STRICT_STATUS_TRANSITIONS") and not override:
            raise PreconditionFailed(
                f"Transition {from_status.value} -> {to_status.value} is not allowed without override"
            )
        STATUS_OVERRIDES.labels(from_status.value, to_status.value).inc()
        logger.warning({
            "event": "status_override",
            "item_id": item.id,
            "from_status": from_status.value,
            "to_status": to_status.value,
            "channel": channel,
        })

    _set_status(item, to_status)
    record_history(item, to_status, from_status=from_status, channel=channel, note=note)
    return item


def patch_item(item_id, *, location=None, status=None, condition_grade=None, condition_notes=None,
               override=False):
    fields = (location, status, condition_grade, condition_notes)
    if all(f is None for f in fields):
        raise ValidationError("No valid fields to update")

    item = _get_locked(item_id)
    if condition_grade is not None:
        item.condition_grade = condition_grade
    if condition_notes is not None:
        item.condition_notes = condition_notes
    if status is not None:
        change_status(item.id, status, channel="PATCH", override=override, item=item)

    affected = [item]
    if location is not None:
        location = _clean_location(location)
        if location != item.location:
            members = Lot.expand([item])
            lot_wide = item.lot_number is not None and len(members) > 1
            # members already at the target have nothing to record
            affected = [m for m in members if m.location != location]
            for member in affected:
                _relocate(
                    member,
                    location,
                    promote=status is None,
                    channel="PUTAWAY",
                    moved_note=(
                        f"Lot #{item.lot_number} location updated to {location}"
                        if lot_wide else f"Location updated to {location}"
                    ),
                    promoted_note=(
                        f"Lot #{item.lot_number} location assigned: {location} - Status auto-updated to STORED"
                        if lot_wide else f"Location assigned: {location} - Status auto-updated to STORED"
                    ),
                )
    return item, affected


def _relocate(item, location, *, promote, channel, moved_note, promoted_note):
    previous = item.status
    item.location = location
    if promote and previous == ItemStatus.INTAKE:
        _set_status(item, ItemStatus.STORED)
        record_history(item, ItemStatus.STORED, from_status=previous, channel=channel, note=promoted_note)
    else:
        record_history(item, previous, from_status=previous, channel=channel, note=moved_note)


def bulk_location(item_ids, location):
    location = _clean_location(location)
    found = lock_items(item_ids)
    if not found:
        raise NotFound("No items found")
    skipped = sorted(set(item_ids) - {i.id for i in found})
    if skipped:
        logger.info({"event": "bulk_location_skipped", "item_ids": skipped})

    affected = Lot.expand(found)
    for item in affected:
        _relocate(
            item,
            location,
            promote=True,
            channel="BULK_PUTAWAY",
            moved_note=f"Bulk location update to {location}",
            promoted_note=f"Bulk location assigned: {location} - Status auto-updated to STORED",
        )
    return affected


def update_dates(item_ids, date_type, when):
    """
    Set listed or sold dates across items, widened to whole lots.

    For ``sold`` every affected item gets a COGS record; per-item COGS
    failures are returned rather than raised.
    """
    if date_type not in ("listed", "sold"):
        raise ValidationError("dateType must be 'listed' or 'sold'")
    try:
        when = parse_iso_datetime(when)
    except ValueError:
        raise ValidationError(
            "date must be an ISO-8601 date",
            details=[{"field": "date", "message": "Invalid date", "type": "datetime_parsing"}],
        )
    if when is None:
        raise ValidationError("date is required")

    found = lock_items(item_ids)
    if not found:
        raise NotFound("No items found")
    affected = Lot.expand(found)

    target = ItemStatus.LISTED if date_type == "listed" else ItemStatus.SOLD
    for item in affected:
        previous = item.status
        if date_type == "listed":
            item.listed_date = when
        else:
            item.sold_date = when
            for listing in item.listings:
                if listing.status == ListingStatus.ACTIVE:
                    listing.status = ListingStatus.SOLD
        _set_status(item, target)
        record_history(
            item,
            target,
            from_status=previous,
            channel="DATE_UPDATE",
            note=f"{date_type.capitalize()} date set to {when.date().isoformat()}",
        )
    db.session.flush()

    recorded, failures = [], []
    if date_type == "sold":
        recorded, failures = cogs.record_sales(affected, when)
    return affected, recorded, failures


def delete_item(item_id):
    item = _get_locked(item_id)
    active = Listing.query.filter_by(item_id=item.id, status=ListingStatus.ACTIVE).count()
    if active:
        raise Conflict("Cannot delete item with active listings")
    sold = (
        OrderLine.query.filter_by(item_id=item.id).count()
        or COGSRecord.query.filter_by(item_id=item.id).count()
    )
    if sold:
        raise Conflict("Cannot delete item that has been sold")

    ItemStatusHistory.query.filter_by(item_id=item.id).delete(synchronize_session="fetch")
    Listing.query.filter_by(item_id=item.id).delete(synchronize_session="fetch")
    db.session.delete(item)
    logger.info({"event": "item_deleted", "item_id": item_id})
    return item_id


# --- read side -------------------------------------------------------------

SORTS = {
    "id_asc": (Item.id.asc(),),
    "id_desc": (Item.id.desc(),),
    "lot": (Item.lot_number.asc().nullslast(), Item.id.desc()),
}


def get_item(item_id):
    item = db.session.get(Item, item_id)
    if item is None:
        raise NotFound("Item not found")
    return item


def item_detail(item_id, history_limit=10):
    item = get_item(item_id)
    history = (
        ItemStatusHistory.query.filter_by(item_id=item.id)
        .order_by(ItemStatusHistory.id.desc())
        .limit(history_limit)
        .all()
    )
    listings = Listing.query.filter_by(item_id=item.id, status=ListingStatus.ACTIVE).all()
    data = item.to_dict()
    data["catalog"] = item.catalog.to_dict() if item.catalog else None
    data["history"] = [h.to_dict() for h in history]
    data["listings"] = [lst.to_dict() for lst in listings]
    return data


def item_history(item_id):
    item = get_item(item_id)
    rows = ItemStatusHistory.query.filter_by(item_id=item.id).order_by(ItemStatusHistory.id.asc()).all()
    return [h.to_dict() for h in rows]


def search_items(*, status=None, location=None, barcode=None, search=None, lot_number=None,
                 sort=None, page=1, limit=50):
    query = Item.query
    if status is not None:
        query = query.filter(Item.status == ItemStatus(status))
    if location:
        query = query.filter(Item.location == location)
    if barcode:
        query = query.filter(Item.barcode == barcode)
    if lot_number is not None:
        query = query.filter(Item.lot_number == lot_number)
    if search:
        term = search.strip()
        clauses = [Item.barcode.ilike(f"%{term}%")]
        if term.isdigit():
            clauses.append(Item.id == int(term))
        query = query.filter(or_(*clauses))

    total = query.count()
    rows = (
        query.order_by(*SORTS.get(sort or "lot", SORTS["lot"]))
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "items": [i.to_dict() for i in rows],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": (total + limit - 1) // limit if limit else 0,
        },
    }
