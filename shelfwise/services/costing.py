"""
Cost runs.

A purchase total is spread evenly, in whole cents, over every item taken in
during an inclusive date range. Items sold earlier keep the cost captured in
their COGS record; only ``Item.cost_cents`` changes. Nothing here commits.
"""
import logging
from datetime import timedelta
from decimal import Decimal, ROUND_HALF_UP

from shelfwise.errors import NotFound, ValidationError
from shelfwise.models import db
from shelfwise.models.cost_run import CostRun
from shelfwise.models.item import Item
from shelfwise.utils.time import parse_iso_datetime

logger = logging.getLogger(__name__)


def _parse_day(value, field):
    try:
        parsed = parse_iso_datetime(value)
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(
            f"Invalid {field}",
            details=[{"field": field, "message": "Expected an ISO-8601 date", "type": "date_parsing"}],
        )
    return parsed.date()


def _items_in_range(start_day, end_day, *, lock=False):
    lo = parse_iso_datetime(start_day)
    hi = parse_iso_datetime(end_day) + timedelta(days=1)
    query = Item.query.filter(Item.intake_date >= lo, Item.intake_date < hi).order_by(Item.id)
    if lock:
        query = query.with_for_update(of=Item)
    return query.all()


def even_share(total_cents, count):
    """Per-item share, rounded half up to a whole cent."""
    return int((Decimal(total_cents) / count).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def apply_cost_run(start_date, end_date, total_cents):
    start_day = _parse_day(start_date, "start_date")
    end_day = _parse_day(end_date, "end_date")
    if start_day > end_day:
        raise ValidationError("Start date cannot be after end date")

    items = _items_in_range(start_day, end_day, lock=True)
    if not items:
        raise ValidationError("No items found in the specified date range")

    average = even_share(total_cents, len(items))
    for item in items:
        item.cost_cents = average

    run = CostRun(
        start_date=start_day,
        end_date=end_day,
        total_cents=total_cents,
        items_updated=len(items),
        average_cents=average,
    )
    db.session.add(run)
    db.session.flush()
    logger.info({
        "event": "cost_run_applied",
        "cost_run_id": run.id,
        "items_updated": len(items),
        "average_cents": average,
    })
    return run


def revert_cost_run(run_id):
    """Reset the cost of every item in the run's range to zero and drop the run."""
    run = db.session.get(CostRun, run_id)
    if run is None:
        raise NotFound("Cost run not found")
    items = _items_in_range(run.start_date, run.end_date, lock=True)
    for item in items:
        item.cost_cents = 0
    data = run.to_dict()
    db.session.delete(run)
    logger.info({"event": "cost_run_reverted", "cost_run_id": run_id, "items_reset": len(items)})
    return data, len(items)


def cost_runs(page=1, limit=50):
    query = CostRun.query.order_by(CostRun.created_at.desc(), CostRun.id.desc())
    total = query.count()
    rows = query.offset((page - 1) * limit).limit(limit).all()
    return {
        "records": [r.to_dict() for r in rows],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": (total + limit - 1) // limit,
        },
    }
