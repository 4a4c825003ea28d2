from flask import Blueprint, request

from shelfwise.schemas.reports import WindowQuery
from shelfwise.services import reports
from shelfwise.services.dashboard import get_dashboard_stats
from shelfwise.utils import ok, validate_query
from shelfwise.utils.cache import get_cache
from shelfwise.version import API_PREFIX

reports_bp = Blueprint("reports", __name__, url_prefix=f"{API_PREFIX}/reports")


@reports_bp.route("/dashboard-stats", methods=["GET"])
def dashboard_stats():
    data, cached = get_dashboard_stats(get_cache())
    return ok({**data, "cached": cached})


@reports_bp.route("/aging-stock", methods=["GET"])
@validate_query(WindowQuery)
def aging_stock():
    return ok(reports.aging_stock(days=request.validated_query.days))


@reports_bp.route("/listed-today", methods=["GET"])
def listed_today():
    return ok(reports.listed_today())


@reports_bp.route("/sold-today", methods=["GET"])
def sold_today():
    return ok(reports.sold_today())


@reports_bp.route("/channel-performance", methods=["GET"])
@validate_query(WindowQuery)
def channel_performance():
    return ok(reports.channel_performance(days=request.validated_query.days))
