from flask import Flask, request, g
from dotenv import load_dotenv
from shelfwise.config import get_config_class
from shelfwise.logging import configure_logging
from shelfwise.errors import errors_bp
from shelfwise.cli import register_cli
from shelfwise.api import register_api
from shelfwise.version import API_PREFIX
from shelfwise.extensions import limiter
from shelfwise.utils import cache as dashboard_cache
from shelfwise import metrics as domain_metrics
from flask_cors import CORS
from flasgger import Swagger
from prometheus_client import CollectorRegistry
from prometheus_flask_exporter import PrometheusMetrics
from flask_migrate import Migrate
import logging
import os
import time
import uuid
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator
from shelfwise.telemetry import init_tracing
from shelfwise.models import db

__version__ = "1.0.0"

EXPOSED_HEADERS = ("X-Request-ID", "X-Lot-Invalidated", "traceparent")

SWAGGER_TAGS = [
    {"name": "Items", "description": "Intake, putaway, listing and status changes"},
    {"name": "Lots", "description": "Grouping items that move together"},
    {"name": "COGS", "description": "Cost of goods sold by financial year"},
    {"name": "Reports", "description": "Dashboard statistics"},
]


def create_app(config_object=None, clock=None):
    """Application factory.

    ``clock`` replaces the monotonic clock of the dashboard cache; tests pass a
    controllable one.
    """
    load_dotenv()
    app = Flask(__name__)
    app.config.from_object(config_object or get_config_class())

    configure_logging(app)
    register_cli(app)

    limiter.init_app(app)
    Migrate(app, db, compare_type=True, render_as_batch=True)
    _init_docs(app)
    _init_prometheus(app)
    CORS(app, origins=_cors_origins(app.config.get("CORS_ALLOWED_ORIGINS", "*")),
         expose_headers=list(EXPOSED_HEADERS[:2]))

    app.register_blueprint(errors_bp)
    if app.config.get("TESTING"):
        from shelfwise.test_support import test_support_bp
        app.register_blueprint(test_support_bp)
    register_api(app)

    dashboard_cache.init_app(app, clock=clock or time.monotonic)
    _register_request_hooks(app)

    db.init_app(app)
    domain_metrics.init_app(app)
    init_tracing(app)
    if app.config.get("DEBUG") or app.config.get("TESTING"):
        with app.app_context():
            db.create_all()
            logging.info("tables created")

    @app.route("/health")
    def health():
        return {"status": "ok"}, 200

    return app


def _cors_origins(value):
    if not isinstance(value, str):
        return value or "*"
    value = value.strip()
    if value == "*":
        return "*"
    return [o.strip() for o in value.split(",") if o.strip()]


def _init_docs(app):
    Swagger(
        app,
        config={
            "headers": [],
            "specs": [{
                "endpoint": "apispec",
                "route": "/apispec.json",
                "rule_filter": lambda rule: rule.rule.startswith(f"{API_PREFIX}/"),
                "model_filter": lambda tag: True,
            }],
            "swagger_ui": True,
            "specs_route": "/docs/",
        },
        template={
            "info": {"title": "Shelfwise API", "version": __version__},
            "tags": SWAGGER_TAGS,
        },
    )


def _init_prometheus(app):
    # a fresh registry per test app avoids duplicate collector errors
    registry = CollectorRegistry(auto_describe=True) if app.config.get("TESTING") else None
    metrics = PrometheusMetrics(app, path="/metrics", registry=registry)
    if not app.config.get("TESTING") and not os.environ.get("METRICS_APP_INFO_SET"):
        metrics.info("app_info", "Application info", version=__version__)
        os.environ["METRICS_APP_INFO_SET"] = "1"


def _register_request_hooks(app):
    @app.before_request
    def _set_request_id():
        incoming = request.headers.get("X-Request-ID")
        g.request_id = (incoming or uuid.uuid4().hex)[:100]
        app.logger.debug(f"request start {request.method} {request.path}")

    @app.after_request
    def _decorate_response(resp):
        rid = getattr(g, "request_id", None)
        if rid:
            resp.headers["X-Request-ID"] = rid

        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")

        exposed = [h.strip() for h in resp.headers.get("Access-Control-Expose-Headers", "").split(",") if h.strip()]
        exposed += [h for h in EXPOSED_HEADERS if h not in exposed]
        resp.headers["Access-Control-Expose-Headers"] = ",".join(exposed)

        carrier = {}
        TraceContextTextMapPropagator().inject(carrier)
        if carrier.get("traceparent"):
            resp.headers["traceparent"] = carrier["traceparent"]
        return resp
