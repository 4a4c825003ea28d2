from flask import Blueprint, current_app, request

from shelfwise.extensions import limiter
from shelfwise.schemas.reports import CostRunRequest, PageQuery
from shelfwise.services import costing
from shelfwise.utils import ok, transactional, validate_query, validate_schema
from shelfwise.version import API_PREFIX

costing_bp = Blueprint("costing", __name__, url_prefix=f"{API_PREFIX}/cog")


@costing_bp.route("/calculate", methods=["POST"])
@limiter.limit(lambda: current_app.config["MUTATION_LIMIT_PER_IP"])
@validate_schema(CostRunRequest)
def calculate():
    """Spread a purchase total over the items taken in during a date range."""
    body = request.validated_data
    with transactional("Cost run failed", invalidates_dashboard=True):
        run = costing.apply_cost_run(body.start_date, body.end_date, body.total_cents)
        data = run.to_dict()
    return ok(data, message=f"Updated cost for {data['items_updated']} items", status=201)


@costing_bp.route("/records", methods=["GET"])
@validate_query(PageQuery)
def records():
    q = request.validated_query
    limit = min(q.limit, current_app.config.get("MAX_PAGE_SIZE", 100))
    return ok(costing.cost_runs(page=q.page, limit=limit))


@costing_bp.route("/records/<int:run_id>", methods=["DELETE"])
def revert(run_id):
    with transactional("Cost run revert failed", invalidates_dashboard=True):
        run, reset = costing.revert_cost_run(run_id)
    return ok({"deleted_record_id": run_id, "items_reset": reset, "record": run},
              message=f"Cost run {run_id} reverted ({reset} items reset)")
