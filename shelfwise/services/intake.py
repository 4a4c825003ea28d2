import logging
import re
import time

from shelfwise.errors import ValidationError
from shelfwise.models import db
from shelfwise.models.catalog import CatalogRecord
from shelfwise.models.item import Item, ItemStatus
from shelfwise.services.history import record_history

logger = logging.getLogger(__name__)

BARCODE_RE = re.compile(r"^\d{8,14}$")
MANUAL_PREFIX = {"BOOK": "MB", "CD": "MC", "DVD": "MD"}
CATALOG_FIELDS = ("title", "author", "publisher", "pub_year", "binding", "image_url", "categories")


def manual_identifier(product_type):
    return f"{MANUAL_PREFIX[product_type]}{int(time.time() * 1000)}"


def _resolve_barcode(barcode, product_type, title):
    barcode = (barcode or "").strip() or None
    if barcode is None:
        if product_type == "DVD":
            raise ValidationError(
                "A barcode is required for DVD intake",
                details=[{"field": "barcode", "message": "Barcode is required for DVDs", "type": "missing"}],
            )
        if not title:
            raise ValidationError(
                "Title is required for manual entries without a barcode",
                details=[{"field": "title", "message": "Title is required", "type": "missing"}],
            )
        return manual_identifier(product_type), True
    if not BARCODE_RE.match(barcode):
        raise ValidationError(
            "Barcode must be 8 to 14 digits",
            details=[{"field": "barcode", "message": "Barcode must be 8 to 14 digits", "type": "pattern"}],
        )
    return barcode, False


def _upsert_catalog(barcode, product_type, fields):
    record = CatalogRecord.query.filter_by(barcode=barcode).first()
    provided = {k: v for k, v in fields.items() if v is not None}
    if record is None:
        if not provided.get("title"):
            label = {"BOOK": "Book", "DVD": "DVD", "CD": "CD"}[product_type]
            kind = "ISBN" if product_type == "BOOK" else "UPC"
            provided["title"] = f"Unknown {label} ({kind}: {barcode})"
        record = CatalogRecord(barcode=barcode, product_type=product_type, **provided)
        db.session.add(record)
    else:
        for key, value in provided.items():
            setattr(record, key, value)
        record.product_type = product_type
    db.session.flush()
    return record


def intake_item(*, barcode=None, product_type="BOOK", cost_cents=0, condition_grade=None,
                condition_notes=None, **catalog_fields):
    """
    Create an item in INTAKE with its catalog record and first history entry.

    Returns ``(item, duplicates)`` where ``duplicates`` lists earlier items
    sharing the barcode. Does NOT commit.
    """
    product_type = (product_type or "BOOK").upper()
    if product_type not in MANUAL_PREFIX:
        raise ValidationError(f"Unknown product type: {product_type}")
    if cost_cents is None or cost_cents < 0:
        raise ValidationError("Cost must be a non-negative integer")

    unknown = set(catalog_fields) - set(CATALOG_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown catalog fields: {', '.join(sorted(unknown))}")

    barcode, manual = _resolve_barcode(barcode, product_type, catalog_fields.get("title"))
    catalog = _upsert_catalog(barcode, product_type, catalog_fields)

    duplicates = (
        Item.query.filter(Item.barcode == barcode)
        .order_by(Item.id)
        .all()
    )

    item = Item(
        barcode=catalog.barcode,
        cost_cents=cost_cents,
        condition_grade=condition_grade,
        condition_notes=condition_notes,
        status=ItemStatus.INTAKE,
    )
    db.session.add(item)
    db.session.flush()
    record_history(item, ItemStatus.INTAKE, channel="INTAKE", note="Item created during intake process")

    logger.info({
        "event": "item_intake",
        "item_id": item.id,
        "barcode": barcode,
        "manual": manual,
        "duplicates": len(duplicates),
    })
    return item, duplicates
