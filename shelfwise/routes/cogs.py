from flask import Blueprint, current_app, request

from shelfwise.schemas.cogs import MonthlyQuery, RecordsQuery
from shelfwise.services import cogs
from shelfwise.utils import ok, validate_query
from shelfwise.version import API_PREFIX

cogs_bp = Blueprint("cogs", __name__, url_prefix=f"{API_PREFIX}/cogs")


def _max_age(seconds):
    return {"Cache-Control": f"public, max-age={seconds}"}


@cogs_bp.route("/summary", methods=["GET"])
def summary():
    return ok(cogs.summary(), headers=_max_age(300))


@cogs_bp.route("/monthly", methods=["GET"])
@validate_query(MonthlyQuery)
def monthly():
    return ok(cogs.monthly(request.validated_query.year), headers=_max_age(900))


@cogs_bp.route("/records", methods=["GET"])
@validate_query(RecordsQuery)
def records():
    q = request.validated_query
    limit = min(q.limit, current_app.config.get("MAX_PAGE_SIZE", 100))
    return ok(cogs.records(page=q.page, limit=limit, year=q.year, month=q.month), headers=_max_age(300))
