from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func

from shelfwise.models import db, BIGINT


class Order(db.Model):
    """Sales ledger header. Written by channel integrations, read here only."""

    __tablename__ = "sales_order"

    id = Column(BIGINT, primary_key=True)
    channel = Column(String(50), nullable=False)
    external_ref = Column(String(100), nullable=True)
    ordered_at = Column(DateTime, default=func.now())
    created_at = Column(DateTime, default=func.now())

    lines = db.relationship("OrderLine", backref="order", cascade="all, delete-orphan", lazy=True)


class OrderLine(db.Model):
    __tablename__ = "order_line"

    id = Column(BIGINT, primary_key=True)
    order_id = Column(BIGINT, ForeignKey("sales_order.id"), nullable=False)
    # no FK: a line must keep pointing at the item id even if the ledger is archived
    item_id = Column(BIGINT, nullable=False, index=True)
    sale_cents = Column(Integer, nullable=False)
    qty = Column(Integer, nullable=False, default=1)

    def to_dict(self):
        return {
            "id": self.id,
            "order_id": self.order_id,
            "item_id": self.item_id,
            "sale_cents": self.sale_cents,
            "qty": self.qty,
        }
