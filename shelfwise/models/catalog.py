from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func

from shelfwise.models import db, BIGINT


PRODUCT_TYPES = ("BOOK", "DVD", "CD")


class CatalogRecord(db.Model):
    """Bibliographic metadata shared by every physical copy of a barcode."""

    __tablename__ = "catalog_record"

    id = Column(BIGINT, primary_key=True)
    barcode = Column(String(32), unique=True, nullable=False, index=True)
    title = Column(Text, nullable=False)
    author = Column(Text, nullable=True)
    publisher = Column(Text, nullable=True)
    pub_year = Column(Integer, nullable=True)
    binding = Column(String(50), nullable=True)
    image_url = Column(Text, nullable=True)
    categories = Column(db.JSON, nullable=True)
    product_type = Column(String(10), nullable=False, default="BOOK")

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def to_dict(self):
        return {
            "barcode": self.barcode,
            "title": self.title,
            "author": self.author,
            "publisher": self.publisher,
            "pub_year": self.pub_year,
            "binding": self.binding,
            "image_url": self.image_url,
            "categories": self.categories or [],
            "product_type": self.product_type,
        }
