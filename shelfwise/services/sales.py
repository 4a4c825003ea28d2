"""
Sales views by item count.

These count SOLD items by their sale date; money lives in the COGS views.
"""
from datetime import datetime, timedelta

from sqlalchemy import func

from shelfwise.models import db
from shelfwise.models.catalog import CatalogRecord
from shelfwise.models.item import Item, ItemStatus
from shelfwise.services.cogs import FY_MONTH_NAMES
from shelfwise.utils.time import financial_year, financial_year_bounds, financial_year_month, utcnow


def _sold():
    return Item.query.filter(Item.status == ItemStatus.SOLD)


def _sold_between(start, end):
    return _sold().filter(Item.sold_date >= start, Item.sold_date < end)


def summary(as_of=None):
    now = as_of or utcnow()
    fy = financial_year(now)
    current = _sold_between(*financial_year_bounds(fy)).count()
    previous = _sold_between(*financial_year_bounds(fy - 1)).count()
    if previous > 0:
        growth = round((current - previous) / previous * 100, 1)
    else:
        growth = 100.0 if current > 0 else 0.0

    month_start = datetime(now.year, now.month, 1)
    month_end = datetime(now.year + now.month // 12, now.month % 12 + 1, 1)
    return {
        "all_time": {"total_items_sold": _sold().count()},
        "current_financial_year": {
            "financial_year": fy,
            "total_items_sold": current,
            "yoy_growth_percent": growth,
        },
        "current_month": {
            "month": month_start.strftime("%B"),
            "year": now.year,
            "total_items_sold": _sold_between(month_start, month_end).count(),
        },
    }


def monthly(fy=None):
    fy = fy or financial_year(utcnow())
    start, end = financial_year_bounds(fy)
    rows = (
        _sold_between(start, end)
        .with_entities(Item.sold_month, func.count(Item.id))
        .group_by(Item.sold_month)
        .all()
    )
    counts = {financial_year_month(m): n for m, n in rows if m}
    months = [
        {"month": i, "month_name": name, "total_items_sold": counts.get(i, 0)}
        for i, name in enumerate(FY_MONTH_NAMES, start=1)
    ]
    return {
        "financial_year": fy,
        "months": months,
        "total_items_sold": sum(m["total_items_sold"] for m in months),
    }


def recent(days=30, limit=50, as_of=None):
    """Latest sales plus a zero-filled per-day timeline ending today."""
    now = as_of or utcnow()
    today = now.date()
    first_day = today - timedelta(days=days - 1)
    rows = (
        db.session.query(Item, CatalogRecord)
        .outerjoin(CatalogRecord, CatalogRecord.barcode == Item.barcode)
        .filter(Item.status == ItemStatus.SOLD, Item.sold_date >= datetime.combine(first_day, datetime.min.time()))
        .order_by(Item.sold_date.desc(), Item.id.desc())
        .limit(limit)
        .all()
    )

    timeline = {first_day + timedelta(days=i): 0 for i in range(days)}
    sales = []
    for item, catalog in rows:
        day = item.sold_date.date()
        if day in timeline:
            timeline[day] += 1
        sales.append({
            "id": item.id,
            "barcode": item.barcode or "",
            "title": catalog.title if catalog else "Unknown Title",
            "author": (catalog.author if catalog else None) or "Unknown Author",
            "sold_date": item.sold_date.isoformat(),
        })

    return {
        "recent_sales": sales,
        "timeline": [{"date": d.isoformat(), "count": n} for d, n in sorted(timeline.items())],
        "total_recent_count": len(sales),
    }
