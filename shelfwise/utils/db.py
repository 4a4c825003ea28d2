from contextlib import contextmanager
import logging

from shelfwise.models import db
from shelfwise.models.item import Item
from shelfwise.utils.cache import get_cache


@contextmanager
def transactional(message="DB transaction failed", *, invalidates_dashboard=False):
    """
    Context manager to wrap a database transaction.

    Everything inside commits together or rolls back together. When
    ``invalidates_dashboard`` is set the dashboard cache is dropped after a
    successful commit.
    """
    from shelfwise.errors import LifecycleError

    try:
        yield
        db.session.commit()
    except LifecycleError as e:
        logging.info(f"{message}: %s", e.message)
        db.session.rollback()
        raise
    except Exception as e:
        logging.error(f"{message}: %s", e, exc_info=True)
        db.session.rollback()
        raise
    if invalidates_dashboard:
        get_cache().invalidate()


def lock_items(item_ids):
    """Load items by id with a row lock, ordered by id. Missing ids are skipped."""
    ids = sorted(set(item_ids))
    if not ids:
        return []
    return Item.query.filter(Item.id.in_(ids)).order_by(Item.id).with_for_update(of=Item).all()


def lock_item(item_id):
    return Item.query.filter_by(id=item_id).with_for_update(of=Item).first()
