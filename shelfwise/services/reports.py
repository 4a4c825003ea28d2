"""Operational reports: aging stock, today's listings and sales, channel performance."""
from datetime import datetime, timedelta

from shelfwise.models.item import Item, ItemStatus, ItemStatusHistory
from shelfwise.models.listing import Listing, ListingStatus
from shelfwise.utils.time import utcnow

UNLOCATED = "UNLOCATED"


def _today_bounds(as_of):
    start = datetime(as_of.year, as_of.month, as_of.day)
    return start, start + timedelta(days=1)


def _count_by(values):
    counts = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1
    return counts


def aging_stock(days=30, as_of=None):
    """STORED items untouched for at least ``days`` days, oldest first."""
    now = as_of or utcnow()
    cutoff = now - timedelta(days=days)
    items = (
        Item.query.filter(Item.status == ItemStatus.STORED, Item.updated_at < cutoff)
        .order_by(Item.updated_at.asc(), Item.id.asc())
        .all()
    )
    rows = []
    for item in items:
        data = item.to_dict()
        data["age_days"] = (now - item.updated_at).days
        rows.append(data)

    total_age = sum(r["age_days"] for r in rows)
    return {
        "items": rows,
        "summary": {
            "total_items": len(rows),
            "average_age_days": round(total_age / max(len(rows), 1), 1),
            "by_location": _count_by(r["location"] or UNLOCATED for r in rows),
        },
        "days": days,
    }


def _moved_today(to_status, listing_status, as_of):
    start, end = _today_bounds(as_of or utcnow())
    entries = (
        ItemStatusHistory.query.filter(
            ItemStatusHistory.to_status == to_status,
            ItemStatusHistory.changed_at >= start,
            ItemStatusHistory.changed_at < end,
        )
        .order_by(ItemStatusHistory.changed_at.desc(), ItemStatusHistory.id.desc())
        .all()
    )
    rows = []
    for entry in entries:
        listing = (
            Listing.query.filter_by(item_id=entry.item_id, status=listing_status)
            .order_by(Listing.id.desc())
            .first()
        )
        data = entry.to_dict()
        data["item"] = entry.item.to_dict()
        data["price_cents"] = listing.price_cents if listing else 0
        rows.append(data)

    return {
        "items": rows,
        "summary": {
            "total": len(rows),
            "total_value_cents": sum(r["price_cents"] for r in rows),
            "by_channel": _count_by(r["channel"] or "UNKNOWN" for r in rows),
        },
    }


def listed_today(as_of=None):
    return _moved_today(ItemStatus.LISTED, ListingStatus.ACTIVE, as_of)


def sold_today(as_of=None):
    return _moved_today(ItemStatus.SOLD, ListingStatus.SOLD, as_of)


def channel_performance(days=30, as_of=None):
    """
    Listings opened in the window, per channel, and how many of them sold.

    Conversion is sold / listed as a percentage with two decimals.
    """
    now = as_of or utcnow()
    cutoff = now - timedelta(days=days)
    listings = Listing.query.filter(Listing.listed_at >= cutoff).all()

    per_channel = {}
    for listing in listings:
        stats = per_channel.setdefault(
            listing.channel, {"total_listed": 0, "total_listed_value_cents": 0, "sold_count": 0}
        )
        stats["total_listed"] += 1
        stats["total_listed_value_cents"] += listing.price_cents
        if listing.status == ListingStatus.SOLD:
            stats["sold_count"] += 1

    performance = []
    for channel in sorted(per_channel):
        stats = per_channel[channel]
        conversion = stats["sold_count"] / stats["total_listed"] * 100
        performance.append({"channel": channel, **stats, "conversion_rate": round(conversion, 2)})

    return {"performance": performance, "period_days": days, "last_updated": now.isoformat()}
