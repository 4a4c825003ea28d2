import logging
from flask import Blueprint, current_app
from werkzeug.exceptions import HTTPException
from shelfwise.utils.responses import error

errors_bp = Blueprint("errors_bp", __name__)


class LifecycleError(Exception):
    """Base for expected domain failures. Carries the HTTP status it maps to."""

    status_code = 400

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(LifecycleError):
    status_code = 400


class NotFound(LifecycleError):
    status_code = 404


class PreconditionFailed(LifecycleError):
    status_code = 400


class InvalidState(LifecycleError):
    status_code = 400


class Conflict(LifecycleError):
    status_code = 400


@errors_bp.app_errorhandler(LifecycleError)
def handle_lifecycle_error(e):
    return error(e.message, status=e.status_code, details=e.details)


@errors_bp.app_errorhandler(HTTPException)
def handle_http_exception(e):
    msg = e.description or getattr(e, "name", "HTTP Error")
    return error(msg, status=e.code)


@errors_bp.app_errorhandler(Exception)
def handle_unexpected_exception(e):
    logging.exception("Unhandled exception")
    detail = None
    if current_app.config.get("EXPOSE_ERROR_DETAILS"):
        detail = f"{type(e).__name__}: {e}"
    return error(
        "An unexpected error occurred. Please try again later.",
        status=500,
        message=detail,
    )
