from .intake import intake_bp
from .items import items_bp
from .lots import lots_bp
from .cogs import cogs_bp
from .costing import costing_bp
from .reports import reports_bp
from .sales import sales_bp


__all__ = [
    'intake_bp',
    'items_bp',
    'lots_bp',
    'cogs_bp',
    'costing_bp',
    'reports_bp',
    'sales_bp',
]
