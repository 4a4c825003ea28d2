from flask import Blueprint, request
import logging

from shelfwise.models import db
from shelfwise.models.order import Order, OrderLine
from shelfwise.utils.cache import get_cache
from shelfwise.utils.responses import ok, error


test_support_bp = Blueprint("test_support_bp", __name__)


@test_support_bp.route("/__ok", methods=["GET"])
def __ok():
    return ok({"ping": "pong"})


@test_support_bp.route("/__boom", methods=["GET"])
def __boom():
    raise RuntimeError("boom")


@test_support_bp.route("/__log", methods=["GET"])
def __log():
    logging.getLogger(__name__).info("test log line")
    return ok({"logged": True})


@test_support_bp.route("/__orders/seed", methods=["POST"])
def __seed_order():
    """
    Body: {"channel": "EBAY", "lines": [{"item_id": 1, "sale_cents": 1500, "qty": 1}]}
    Writes an order the way a channel integration would.
    """
    j = request.get_json() or {}
    lines = j.get("lines") or []
    if not lines:
        return error("lines required", 400)
    order = Order(channel=j.get("channel", "EBAY"), external_ref=j.get("external_ref"))
    db.session.add(order)
    db.session.flush()
    for line in lines:
        db.session.add(OrderLine(
            order_id=order.id,
            item_id=line["item_id"],
            sale_cents=line.get("sale_cents", 0),
            qty=line.get("qty", 1),
        ))
    db.session.commit()
    return ok({"order_id": order.id, "lines": len(lines)}, status=201)


@test_support_bp.route("/__cache", methods=["GET"])
def __cache_state():
    cache = get_cache()
    return ok({"valid": cache.is_valid(), "hits": cache.hits, "misses": cache.misses})
