from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import BigInteger, Integer

# Use BigInteger in production but fall back to Integer for SQLite
BIGINT = BigInteger().with_variant(Integer, "sqlite")

db = SQLAlchemy()

# Re-export common models for convenience
from .catalog import CatalogRecord  # noqa: F401,E402
from .item import Item, ItemStatus, ItemStatusHistory  # noqa: F401,E402
from .listing import Listing, ListingStatus  # noqa: F401,E402
from .order import Order, OrderLine  # noqa: F401,E402
from .cogs import COGSRecord  # noqa: F401,E402
from .cost_run import CostRun  # noqa: F401,E402
