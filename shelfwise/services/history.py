import logging

from shelfwise.metrics import STATUS_TRANSITIONS
from shelfwise.models import db
from shelfwise.models.item import ItemStatusHistory

logger = logging.getLogger(__name__)


def record_history(item, to_status, *, channel, note=None, from_status=None):
    """
    Append one status history row for ``item``.

    ``from_status`` is passed explicitly because several flows (intake, lot
    membership) deliberately record no source status. Does NOT commit.
    """
    entry = ItemStatusHistory(
        item_id=item.id,
        from_status=from_status,
        to_status=to_status,
        channel=channel,
        note=note,
    )
    db.session.add(entry)
    STATUS_TRANSITIONS.labels(
        from_status.value if from_status else "NONE",
        to_status.value,
        channel or "NONE",
    ).inc()
    logger.debug({
        "event": "item_status_history",
        "item_id": item.id,
        "from_status": from_status.value if from_status else None,
        "to_status": to_status.value,
        "channel": channel,
    })
    return entry
