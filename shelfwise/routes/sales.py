from flask import Blueprint, request

from shelfwise.schemas.reports import RecentSalesQuery, SalesMonthlyQuery
from shelfwise.services import sales
from shelfwise.utils import ok, validate_query
from shelfwise.version import API_PREFIX

sales_bp = Blueprint("sales", __name__, url_prefix=f"{API_PREFIX}/sales")


def _max_age(seconds):
    return {"Cache-Control": f"public, max-age={seconds}"}


@sales_bp.route("/summary", methods=["GET"])
def summary():
    return ok(sales.summary(), headers=_max_age(300))


@sales_bp.route("/monthly", methods=["GET"])
@validate_query(SalesMonthlyQuery)
def monthly():
    return ok(sales.monthly(request.validated_query.year), headers=_max_age(900))


@sales_bp.route("/recent", methods=["GET"])
@validate_query(RecentSalesQuery)
def recent():
    q = request.validated_query
    return ok(sales.recent(days=q.days, limit=q.limit), headers=_max_age(180))
