import logging
from datetime import date

from sqlalchemy import func

from shelfwise.errors import InvalidState, NotFound
from shelfwise.metrics import COGS_RECORDS_CREATED
from shelfwise.models import db
from shelfwise.models.cogs import COGSRecord
from shelfwise.models.item import Item, ItemStatus
from shelfwise.utils.time import (
    financial_year,
    financial_year_bounds,
    financial_year_month,
    parse_iso_datetime,
    utcnow,
)

logger = logging.getLogger(__name__)

FY_MONTH_NAMES = (
    "July", "August", "September", "October", "November", "December",
    "January", "February", "March", "April", "May", "June",
)


def record_sale(item_id, sold_date=None):
    """
    Write the COGS record for a SOLD item, snapshotting its current cost.

    Idempotent: an existing record is returned untouched. Does NOT commit.
    """
    item = db.session.get(Item, item_id)
    if item is None:
        raise NotFound(f"Item {item_id} not found")
    if item.status != ItemStatus.SOLD:
        raise InvalidState(f"Item {item_id} must be SOLD to record COGS (is {item.status.value})")

    existing = COGSRecord.query.filter_by(item_id=item_id).first()
    if existing is not None:
        logger.info({"event": "cogs_exists", "item_id": item_id, "cogs_id": existing.id})
        return existing

    when = parse_iso_datetime(sold_date) or item.sold_date or utcnow()
    record = COGSRecord(
        item_id=item.id,
        cost_cents=item.cost_cents,
        sold_date=when,
        sold_month=financial_year_month(when.month),
        sold_year=when.year,
        financial_year=financial_year(when),
    )
    db.session.add(record)
    db.session.flush()
    COGS_RECORDS_CREATED.inc()
    logger.info({
        "event": "cogs_recorded",
        "item_id": item.id,
        "cost_cents": item.cost_cents,
        "financial_year": record.financial_year,
    })
    return record


def record_sales(items, sold_date):
    """
    Record COGS for each item in its own savepoint.

    One item's failure is logged and reported, the rest carry on.
    """
    recorded, failures = [], []
    for item in items:
        try:
            with db.session.begin_nested():
                recorded.append(record_sale(item.id, sold_date).id)
        except Exception as e:
            logger.warning({"event": "cogs_failed", "item_id": item.id, "error": str(e)})
            failures.append({"item_id": item.id, "error": str(e)})
    return recorded, failures


def _totals(query):
    total, count = query.with_entities(
        func.coalesce(func.sum(COGSRecord.cost_cents), 0), func.count(COGSRecord.id)
    ).one()
    total = int(total or 0)
    return {
        "total_cost_cents": total,
        "total_items": count,
        "average_cost_cents": round(total / count) if count else 0,
    }


def summary(as_of=None):
    as_of = as_of or date.today()
    fy = financial_year(as_of)
    start, end = financial_year_bounds(fy)

    all_time = _totals(COGSRecord.query)
    current = _totals(COGSRecord.query.filter(COGSRecord.financial_year == fy))
    previous = _totals(COGSRecord.query.filter(COGSRecord.financial_year == fy - 1))

    prev_total = previous["total_cost_cents"]
    growth = 0.0
    if prev_total > 0:
        growth = round((current["total_cost_cents"] - prev_total) / prev_total * 100, 2)

    return {
        "all_time": all_time,
        "current_financial_year": {
            "year": fy,
            **current,
            "previous_year_total_cents": prev_total,
            "yoy_growth_percent": growth,
            "period_start": start.date().isoformat(),
            "period_end": date(fy, 6, 30).isoformat(),
        },
    }


def monthly(fy=None):
    fy = fy or financial_year(date.today())
    rows = (
        db.session.query(
            COGSRecord.sold_month,
            func.coalesce(func.sum(COGSRecord.cost_cents), 0),
            func.count(COGSRecord.id),
        )
        .filter(COGSRecord.financial_year == fy)
        .group_by(COGSRecord.sold_month)
        .all()
    )
    by_month = {m: (int(total or 0), count) for m, total, count in rows}

    months = []
    for idx, name in enumerate(FY_MONTH_NAMES, start=1):
        total, count = by_month.get(idx, (0, 0))
        months.append({
            "month": idx,
            "month_name": name,
            "total_cost_cents": total,
            "item_count": count,
            "average_cost_cents": round(total / count) if count else 0,
        })
    return {
        "financial_year": fy,
        "months": months,
        "year_total_cents": sum(m["total_cost_cents"] for m in months),
        "year_item_count": sum(m["item_count"] for m in months),
    }


def records(page=1, limit=50, year=None, month=None):
    query = COGSRecord.query
    if year is not None:
        query = query.filter(COGSRecord.sold_year == year)
    if month is not None:
        query = query.filter(COGSRecord.sold_month == month)
    total = query.count()
    rows = (
        query.order_by(COGSRecord.sold_date.desc(), COGSRecord.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "records": [r.to_dict() for r in rows],
        "pagination": _pagination(page, limit, total),
    }


def backfill_candidates():
    """SOLD items with a sale date and no COGS record yet."""
    return (
        Item.query.outerjoin(COGSRecord, COGSRecord.item_id == Item.id)
        .filter(Item.status == ItemStatus.SOLD, Item.sold_date.isnot(None), COGSRecord.id.is_(None))
        .order_by(Item.id)
        .all()
    )


def backfill():
    return record_sales(backfill_candidates(), None)


def _pagination(page, limit, total):
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": (total + limit - 1) // limit if limit else 0,
    }
