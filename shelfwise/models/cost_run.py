from sqlalchemy import Column, Integer, Date, DateTime, CheckConstraint
from sqlalchemy.sql import func

from shelfwise.models import db, BIGINT


class CostRun(db.Model):
    """One purchase total spread evenly over the items taken in during a date range."""

    __tablename__ = "cost_run"
    __table_args__ = (
        CheckConstraint("total_cents > 0", name="ck_cost_run_total_positive"),
        CheckConstraint("start_date <= end_date", name="ck_cost_run_range"),
    )

    id = Column(BIGINT, primary_key=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)             # inclusive
    total_cents = Column(Integer, nullable=False)
    items_updated = Column(Integer, nullable=False)
    average_cents = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "total_cents": self.total_cents,
            "items_updated": self.items_updated,
            "average_cents": self.average_cents,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
