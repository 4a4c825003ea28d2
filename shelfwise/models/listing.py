from enum import Enum

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.sql import func

from shelfwise.models import db, BIGINT


class ListingStatus(str, Enum):
    ACTIVE = "ACTIVE"
    SOLD = "SOLD"
    EXPIRED = "EXPIRED"
    REMOVED = "REMOVED"


class Listing(db.Model):
    """A sales-channel offer for one item. At most one ACTIVE per item by convention."""

    __tablename__ = "listing"
    __table_args__ = (
        CheckConstraint("price_cents >= 1", name="ck_listing_price_positive"),
        db.Index("ix_listing_item_status", "item_id", "status"),
    )

    id = Column(BIGINT, primary_key=True)
    item_id = Column(BIGINT, ForeignKey("item.id"), nullable=False)
    channel = Column(String(50), nullable=False)
    external_id = Column(String(100), nullable=True)
    price_cents = Column(Integer, nullable=False)
    status = Column(
        db.Enum(
            ListingStatus,
            name="listing_status",
            native_enum=False,
            length=20,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=ListingStatus.ACTIVE,
    )
    listed_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "item_id": self.item_id,
            "channel": self.channel,
            "external_id": self.external_id,
            "price_cents": self.price_cents,
            "status": self.status.value,
            "listed_at": self.listed_at.isoformat() if self.listed_at else None,
        }
