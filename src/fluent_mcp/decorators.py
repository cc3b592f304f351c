"""Decorators for tool dispatch.

This module provides decorators for common handler patterns like error handling.
"""

import logging
from functools import wraps
from typing import Any, Awaitable, Callable, ParamSpec

from .constants import ErrorCode, ErrorMessage, ResponseStatus
from .errors import ToolNotFoundError

logger = logging.getLogger(__name__)

P = ParamSpec("P")


def _error_response(error: str, code: ErrorCode, function: str) -> dict[str, Any]:
    return {
        "status": ResponseStatus.ERROR.value,
        "error": error,
        "error_code": code.value,
        "function": function,
    }


def handle_errors(
    func: Callable[P, Awaitable[Any]],
) -> Callable[P, Awaitable[dict[str, Any]]]:
    """Decorator to handle errors in async handler functions.

    Automatically catches exceptions and returns consistent error response format.
    Removes need for repetitive try-except blocks in handlers.

    Args:
        func: Async handler function to wrap

    Returns:
        Wrapped function that returns dict with status and error info on exception
    """
    @wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> dict[str, Any]:
        try:
            result = await func(*args, **kwargs)
            if not isinstance(result, dict):
                logger.warning(
                    f"Handler {func.__name__} returned non-dict result: {type(result)}"
                )
                return {
                    "status": ResponseStatus.SUCCESS.value,
                    "result": result,
                }
            return result
        except ToolNotFoundError as e:
            logger.error(f"Unknown tool in {func.__name__}: {e}", exc_info=False)
            return _error_response(str(e), ErrorCode.TOOL_NOT_FOUND, func.__name__)
        except (ValueError, TypeError) as e:
            logger.error(f"Invalid input in {func.__name__}: {e}", exc_info=False)
            return _error_response(str(e), ErrorCode.INVALID_INPUT, func.__name__)
        except RuntimeError as e:
            logger.error(f"Runtime error in {func.__name__}: {e}", exc_info=False)
            return _error_response(str(e), ErrorCode.RUNTIME_ERROR, func.__name__)
        except Exception as e:
            logger.error(
                f"Unexpected error in {func.__name__}: {e}",
                exc_info=True
            )
            return _error_response(
                f"{ErrorMessage.UNEXPECTED_ERROR}: {e}",
                ErrorCode.UNEXPECTED_ERROR,
                func.__name__,
            )

    return wrapper
