"""
Utility decorators for store operation logging.
"""

import functools
import inspect
import time
import uuid
from collections.abc import Awaitable, Callable
from typing import Any

from loguru import logger

# Arguments worth recording in the log context
_CONTEXT_PARAMS = ("item_id", "draft", "patch")


def _serialize_parameter_value(value: Any) -> Any:
    """Serialize parameter value for logging."""
    if hasattr(value, "model_dump"):
        return value.model_dump(exclude_unset=True)  # Pydantic payloads
    if hasattr(value, "value") and hasattr(value, "name"):
        return str(value.value)  # Enum values
    return value


def _setup_logging_context(
    func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]
) -> dict[str, Any]:
    """Build the log context for a store operation."""
    sig = inspect.signature(func)
    bound_args = sig.bind(*args, **kwargs)
    bound_args.apply_defaults()

    context: dict[str, Any] = {"correlation_id": str(uuid.uuid4())[:8]}

    store = bound_args.arguments.get("self")
    collection = getattr(store, "collection", None)
    if collection:
        context["collection"] = collection

    for param_name in _CONTEXT_PARAMS:
        if param_name in bound_args.arguments:
            context[param_name] = _serialize_parameter_value(bound_args.arguments[param_name])

    return context


def log_store_operation[F: Callable[..., Awaitable[Any]]](func: F) -> F:
    """Decorator to log async store operations with correlation IDs and timing."""

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        context = _setup_logging_context(func, args, kwargs)
        func_name = func.__name__

        logger.debug(f"Store operation started: {func_name}", extra=context)
        start_time = time.perf_counter()

        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            execution_time_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"Store operation failed: {func_name}",
                extra={
                    **context,
                    "success": False,
                    "execution_time_ms": round(execution_time_ms, 2),
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            raise

        execution_time_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"Store operation completed: {func_name}",
            extra={
                **context,
                "success": True,
                "execution_time_ms": round(execution_time_ms, 2),
                "result_type": type(result).__name__,
            },
        )
        return result

    return wrapper  # type: ignore
