from .responses import ok, error, validation_error_response
from .validation import validate_schema, validate_query
from .db import transactional, lock_items

__all__ = [
    'ok',
    'error',
    'validation_error_response',
    'validate_schema',
    'validate_query',
    'transactional',
    'lock_items',
]
