from shelfwise.routes import (
    intake_bp,
    items_bp,
    lots_bp,
    cogs_bp,
    costing_bp,
    reports_bp,
    sales_bp,
)


def register_api(app):
    """Register blueprint routes under the API prefix."""
    app.register_blueprint(intake_bp)
    app.register_blueprint(items_bp)
    app.register_blueprint(lots_bp)
    app.register_blueprint(cogs_bp)
    app.register_blueprint(costing_bp)
    app.register_blueprint(reports_bp)
    app.register_blueprint(sales_bp)
