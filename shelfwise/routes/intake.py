from flask import Blueprint, current_app, request

from shelfwise.extensions import limiter
from shelfwise.services.intake import intake_item
from shelfwise.schemas.items import IntakeRequest
from shelfwise.utils import ok, transactional, validate_schema
from shelfwise.version import API_PREFIX

intake_bp = Blueprint("intake", __name__, url_prefix=API_PREFIX)


@intake_bp.route("/intake", methods=["POST"])
@limiter.limit(lambda: current_app.config["MUTATION_LIMIT_PER_IP"], error_message="Too many intake requests")
@validate_schema(IntakeRequest)
def create_item():
    """Create a new item in INTAKE from a barcode or a manual entry."""
    body = request.validated_data
    with transactional("Failed to intake item", invalidates_dashboard=True):
        item, duplicates = intake_item(**body.model_dump())
        data = item.to_dict()
        data["catalog"] = item.catalog.to_dict()

    if duplicates:
        data["duplicate_warning"] = {
            "count": len(duplicates),
            "existing_items": [
                {"id": d.id, "status": d.status.value, "location": d.location} for d in duplicates
            ],
        }
    return ok(data, message="Item created", status=201)
