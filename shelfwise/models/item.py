from enum import Enum

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, CheckConstraint, event
from sqlalchemy.sql import func

from shelfwise.models import db, BIGINT


class ItemStatus(str, Enum):
    INTAKE = "INTAKE"
    STORED = "STORED"
    LISTED = "LISTED"
    RESERVED = "RESERVED"
    SOLD = "SOLD"
    RETURNED = "RETURNED"
    DISCARDED = "DISCARDED"


class HistoryImmutable(RuntimeError):
    """Raised when code tries to rewrite an item status history row."""


_status_type = db.Enum(
    ItemStatus,
    name="item_status",
    native_enum=False,
    length=20,
    validate_strings=True,
    values_callable=lambda e: [m.value for m in e],
)


class Item(db.Model):
    __tablename__ = "item"
    __table_args__ = (
        CheckConstraint("cost_cents >= 0", name="ck_item_cost_non_negative"),
        db.Index("ix_item_lot_number", "lot_number"),
        db.Index("ix_item_status_location", "status", "location"),
        db.Index("ix_item_intake_date", "intake_date"),
    )

    id = Column(BIGINT, primary_key=True)
    barcode = Column(String(32), ForeignKey("catalog_record.barcode"), nullable=True, index=True)

    condition_grade = Column(String(20), nullable=True)   # LIKE_NEW, VERY_GOOD, GOOD, ACCEPTABLE
    condition_notes = Column(Text, nullable=True)
    cost_cents = Column(Integer, nullable=False, default=0)

    intake_date = Column(DateTime, default=func.now())
    listed_date = Column(DateTime, nullable=True)
    sold_date = Column(DateTime, nullable=True)
    sold_year = Column(Integer, nullable=True)
    sold_month = Column(Integer, nullable=True)           # calendar month

    status = Column(_status_type, nullable=False, default=ItemStatus.INTAKE)
    location = Column(String(20), nullable=True)
    lot_number = Column(Integer, nullable=True)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    catalog = db.relationship("CatalogRecord", lazy=True)
    history = db.relationship(
        "ItemStatusHistory",
        backref="item",
        cascade="all, delete-orphan",
        order_by="ItemStatusHistory.id",
        lazy=True,
    )
    listings = db.relationship("Listing", backref="item", cascade="all, delete-orphan", lazy=True)

    @property
    def title(self):
        return self.catalog.title if self.catalog else None

    @property
    def sku(self):
        return f"{self.location}-{self.id}"

    def sync_sale_fields(self):
        """Keep the calendar sale columns consistent with status and sold_date."""
        if self.status == ItemStatus.SOLD and self.sold_date is not None:
            self.sold_year = self.sold_date.year
            self.sold_month = self.sold_date.month
        else:
            self.sold_year = None
            self.sold_month = None

    def to_dict(self):
        return {
            "id": self.id,
            "barcode": self.barcode,
            "title": self.title,
            "condition_grade": self.condition_grade,
            "condition_notes": self.condition_notes,
            "cost_cents": self.cost_cents,
            "intake_date": self.intake_date.isoformat() if self.intake_date else None,
            "listed_date": self.listed_date.isoformat() if self.listed_date else None,
            "sold_date": self.sold_date.isoformat() if self.sold_date else None,
            "sold_year": self.sold_year,
            "sold_month": self.sold_month,
            "status": self.status.value if self.status else None,
            "location": self.location,
            "lot_number": self.lot_number,
        }


class ItemStatusHistory(db.Model):
    __tablename__ = "item_status_history"

    id = Column(BIGINT, primary_key=True)
    item_id = Column(BIGINT, ForeignKey("item.id"), nullable=False, index=True)
    from_status = Column(_status_type, nullable=True)
    to_status = Column(_status_type, nullable=False)
    channel = Column(String(50), nullable=True)
    note = Column(Text, nullable=True)
    changed_at = Column(DateTime, default=func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "item_id": self.item_id,
            "from_status": self.from_status.value if self.from_status else None,
            "to_status": self.to_status.value,
            "channel": self.channel,
            "note": self.note,
            "changed_at": self.changed_at.isoformat() if self.changed_at else None,
        }


@event.listens_for(ItemStatusHistory, "before_update")
def _reject_history_update(mapper, connection, target):
    raise HistoryImmutable(f"Status history entry {target.id} is append-only")
