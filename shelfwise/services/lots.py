"""
Lot aggregate.

A lot has no table of its own: it is the set of items sharing a non-null
``lot_number``. ``Lot`` gathers the membership rules in one place so that
items never end up in two lots and lot-wide cascades always see the whole
membership. Nothing here commits; callers wrap calls in ``transactional``.
"""
import logging

from sqlalchemy import func

from shelfwise.errors import Conflict, NotFound, ValidationError
from shelfwise.models import db
from shelfwise.models.item import Item
from shelfwise.services.history import record_history
from shelfwise.utils.db import lock_items

logger = logging.getLogger(__name__)

SAMPLE_TITLE_COUNT = 3


class Lot:
    def __init__(self, number, members):
        self.number = number
        self.members = list(members)

    def __len__(self):
        return len(self.members)

    @property
    def item_ids(self):
        return [m.id for m in self.members]

    @classmethod
    def load(cls, number, *, lock=True):
        query = Item.query.filter(Item.lot_number == number).order_by(Item.id)
        if lock:
            query = query.with_for_update(of=Item)
        return cls(number, query.all())

    @classmethod
    def get(cls, number, *, lock=True):
        lot = cls.load(number, lock=lock)
        if not lot.members:
            raise NotFound("Lot not found")
        return lot

    @classmethod
    def create(cls, number, item_ids):
        """
        Stamp ``number`` on every item or on none of them.

        Lot-free items may join a number that is already in use; the
        returned lot holds the old members plus the new ones.
        """
        ids = list(dict.fromkeys(item_ids))
        if number is None or number < 1:
            raise ValidationError("Lot number must be a positive integer")
        if not ids:
            raise ValidationError("At least one item is required to create a lot")

        items = lock_items(ids)
        if len(items) != len(ids):
            found = {i.id for i in items}
            missing = [i for i in ids if i not in found]
            raise NotFound(
                "One or more items not found",
                details=[{"field": "itemIds", "message": f"Item {i} not found", "type": "not_found"} for i in missing],
            )

        already = [i for i in items if i.lot_number is not None]
        if already:
            listing = ", ".join(f"#{i.id} (lot {i.lot_number})" for i in already)
            raise Conflict(f"Items already in lot: {listing}")

        existing = cls.load(number).members

        for item in items:
            item.lot_number = number
            record_history(item, item.status, channel="LOT_CREATION", note=f"Added to lot #{number}")

        logger.info({
            "event": "lot_created" if not existing else "lot_extended",
            "lot_number": number,
            "item_count": len(items),
        })
        return cls(number, existing + items)

    @staticmethod
    def expand(items):
        """
        Widen ``items`` to every member of every lot they belong to.

        Returns locked items ordered by id, each once.
        """
        by_id = {i.id: i for i in items}
        numbers = {i.lot_number for i in items if i.lot_number is not None}
        for number in sorted(numbers):
            for member in Lot.load(number).members:
                by_id.setdefault(member.id, member)
        if len(by_id) > len(items):
            logger.info({
                "event": "lot_cascade",
                "lots": sorted(numbers),
                "requested": len(items),
                "affected": len(by_id),
            })
        return [by_id[k] for k in sorted(by_id)]

    def dissolve(self):
        for item in self.members:
            item.lot_number = None
            record_history(item, item.status, channel="LOT_DELETION", note=f"Removed from lot #{self.number}")
        logger.info({"event": "lot_dissolved", "lot_number": self.number, "item_count": len(self.members)})
        count = len(self.members)
        self.members = []
        return count

    def remove(self, item_id):
        """Take one item out of the lot. Returns True when the lot is now empty."""
        item = next((m for m in self.members if m.id == item_id), None)
        if item is None:
            if db.session.get(Item, item_id) is None:
                raise NotFound("Item not found")
            raise Conflict("Item is not in this lot")
        item.lot_number = None
        record_history(item, item.status, channel="LOT_REMOVAL", note=f"Removed from lot #{self.number}")
        self.members.remove(item)
        return not self.members

    def to_dict(self):
        created = [m.created_at for m in self.members if m.created_at]
        return {
            "lot_number": self.number,
            "item_count": len(self.members),
            "created_at": min(created).isoformat() if created else None,
            "items": [m.to_dict() for m in self.members],
        }


def lot_summaries():
    """One row per lot, newest lot number first."""
    rows = (
        db.session.query(Item.lot_number, func.count(Item.id), func.min(Item.created_at))
        .filter(Item.lot_number.isnot(None))
        .group_by(Item.lot_number)
        .order_by(Item.lot_number.desc())
        .all()
    )
    result = []
    for number, count, created_at in rows:
        sample = (
            Item.query.filter(Item.lot_number == number)
            .order_by(Item.id)
            .limit(SAMPLE_TITLE_COUNT)
            .all()
        )
        result.append({
            "lot_number": number,
            "item_count": count,
            "created_at": created_at.isoformat() if created_at else None,
            "sample_titles": [i.title for i in sample if i.title],
        })
    return result


def create_lot(number, item_ids):
    return Lot.create(number, item_ids)


def dissolve_lot(number):
    return Lot.get(number).dissolve()


def remove_from_lot(number, item_id):
    return Lot.load(number).remove(item_id)
