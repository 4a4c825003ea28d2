from sqlalchemy import Column, Integer, DateTime, ForeignKey
from sqlalchemy.sql import func

from shelfwise.models import db, BIGINT


class COGSRecord(db.Model):
    __tablename__ = "cogs_record"
    __table_args__ = (
        db.Index("ix_cogs_financial_year_month", "financial_year", "sold_month"),
    )

    id = Column(BIGINT, primary_key=True)
    item_id = Column(BIGINT, ForeignKey("item.id"), nullable=False, unique=True)
    cost_cents = Column(Integer, nullable=False)          # snapshot at sale time
    sold_date = Column(DateTime, nullable=False)
    sold_month = Column(Integer, nullable=False)          # financial-year month, 1 = July
    sold_year = Column(Integer, nullable=False)           # calendar year
    financial_year = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "item_id": self.item_id,
            "cost_cents": self.cost_cents,
            "sold_date": self.sold_date.isoformat() if self.sold_date else None,
            "sold_month": self.sold_month,
            "sold_year": self.sold_year,
            "financial_year": self.financial_year,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
