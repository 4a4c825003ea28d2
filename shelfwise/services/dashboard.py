import logging
from datetime import date

from sqlalchemy import func

from shelfwise.metrics import DASHBOARD_CACHE_LOOKUPS
from shelfwise.models import db
from shelfwise.models.cogs import COGSRecord
from shelfwise.models.item import Item, ItemStatus
from shelfwise.models.listing import Listing, ListingStatus
from shelfwise.utils.time import financial_year, utcnow

logger = logging.getLogger(__name__)


def compute_dashboard_stats():
    """Aggregate counts shown on the dashboard. Hits the database every call."""
    status_rows = db.session.query(Item.status, func.count(Item.id)).group_by(Item.status).all()
    status_breakdown = {s.value: 0 for s in ItemStatus}
    for status, count in status_rows:
        status_breakdown[status.value] = count

    location_rows = (
        db.session.query(Item.location, func.count(Item.id))
        .filter(Item.location.isnot(None))
        .group_by(Item.location)
        .order_by(Item.location)
        .all()
    )

    listed_value = (
        db.session.query(func.coalesce(func.sum(Listing.price_cents), 0))
        .filter(Listing.status == ListingStatus.ACTIVE)
        .scalar()
    )
    lot_count = (
        db.session.query(func.count(func.distinct(Item.lot_number)))
        .filter(Item.lot_number.isnot(None))
        .scalar()
    )
    fy = financial_year(date.today())
    fy_cogs = (
        db.session.query(func.coalesce(func.sum(COGSRecord.cost_cents), 0))
        .filter(COGSRecord.financial_year == fy)
        .scalar()
    )

    return {
        "total_items": sum(status_breakdown.values()),
        "status_breakdown": status_breakdown,
        "location_breakdown": {loc: count for loc, count in location_rows},
        "lot_count": lot_count or 0,
        "total_listed_value_cents": int(listed_value or 0),
        "financial_year": fy,
        "financial_year_cogs_cents": int(fy_cogs or 0),
        "last_updated": utcnow().isoformat(),
    }


def get_dashboard_stats(cache):
    """Return ``(stats, cached)``, recomputing only on a cache miss."""
    data = cache.get()
    if data is not None:
        DASHBOARD_CACHE_LOOKUPS.labels("hit").inc()
        return data, True
    DASHBOARD_CACHE_LOOKUPS.labels("miss").inc()
    data = compute_dashboard_stats()
    cache.set(data)
    logger.debug("dashboard stats recomputed")
    return data, False
