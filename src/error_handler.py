"""
Error Handler for Crime Scene

Provides the decorator that turns exceptions raised inside HTTP route
handlers into standardized JSON error responses.
"""

import logging
from functools import wraps

from flask import jsonify

from src.core.errors import ValidationError
from src.services.error_response_factory import ErrorResponseFactory

logger = logging.getLogger(__name__)


def with_error_handling(func):
    """
    Decorator for Flask route handlers to provide consistent error handling.

    Args:
        func: Route handler function

    Returns:
        Wrapped function with error handling
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        factory = ErrorResponseFactory()
        try:
            return func(*args, **kwargs)
        except ValidationError as e:
            logger.warning(f"Rejected {func.__name__}: {e.code.value} - {e.message}")
            body = factory.create_error_response(e.code, e.message, e.details)
            return jsonify(body), factory.status_for(e.code)
        except Exception as e:
            error_code, error_message = factory.handle_exception(e, func.__name__)
            body = factory.create_error_response(error_code, error_message)
            return jsonify(body), factory.status_for(error_code)

    return wrapper
