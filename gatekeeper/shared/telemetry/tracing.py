"""Tracing decorators and span helpers (OpenTelemetry API).

Without an SDK tracer provider installed by the embedding application these
are no-ops, so the engine carries only the opentelemetry-api dependency.
"""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

T = TypeVar("T")

# Allowlist of argument names recorded as span attributes (case-insensitive).
# Constraint context and free-text reasons are never recorded.
_SAFE_SPAN_ATTR_KEYS = frozenset({
    "role_id", "user_id", "tenant_id", "delegation_id", "permission_key",
    "menu_key", "action_key", "resource", "action", "space", "page", "limit",
    "entity_type", "entity_id", "include_inactive",
})


def _set_safe_span_attrs(span: trace.Span, arguments: dict[str, Any]) -> None:
    """Set span attributes from call arguments; only allowlisted names are recorded."""
    for key, value in arguments.items():
        if not key.startswith("_") and key.lower() in _SAFE_SPAN_ATTR_KEYS:
            span.set_attribute(f"arg.{key}", str(value))


def _call_arguments(
    signature: inspect.Signature | None, args: tuple[Any, ...], kwargs: dict[str, Any]
) -> dict[str, Any]:
    """Map positional and keyword arguments to parameter names."""
    if signature is None:
        return kwargs
    try:
        return dict(signature.bind_partial(*args, **kwargs).arguments)
    except TypeError:
        return kwargs


def _setup_span(
    span: trace.Span,
    attributes: dict[str, str | int | float | bool] | None,
    arguments: dict[str, Any],
) -> None:
    if attributes:
        for key, value in attributes.items():
            span.set_attribute(key, value)
    _set_safe_span_attrs(span, arguments)


def _run_in_span_sync(span: trace.Span, run: Callable[[], T]) -> T:
    try:
        result = run()
    except Exception as e:
        span.set_status(Status(StatusCode.ERROR, str(e)))
        span.record_exception(e)
        raise
    span.set_status(Status(StatusCode.OK))
    return result


async def _run_in_span_async(span: trace.Span, run: Callable[[], Any]) -> Any:
    try:
        result = await run()
    except Exception as e:
        span.set_status(Status(StatusCode.ERROR, str(e)))
        span.record_exception(e)
        raise
    span.set_status(Status(StatusCode.OK))
    return result


def traced(
    operation_name: str | None = None,
    attributes: dict[str, str | int | float | bool] | None = None,
) -> Callable:
    """Decorator to create a span for a function (sync or async).

    Args:
        operation_name: Span name (defaults to module.funcname).
        attributes: Optional dict of attributes to set on the span.

    Returns:
        Decorated function.
    """

    def decorator(func: Callable) -> Callable:
        tracer = trace.get_tracer(__name__)
        span_name = operation_name or f"{func.__module__}.{func.__name__}"
        try:
            signature: inspect.Signature | None = inspect.signature(func)
        except (TypeError, ValueError):
            signature = None

        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(span_name) as span:
                _setup_span(span, attributes, _call_arguments(signature, args, kwargs))
                return await _run_in_span_async(span, lambda: func(*args, **kwargs))

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(span_name) as span:
                _setup_span(span, attributes, _call_arguments(signature, args, kwargs))
                return _run_in_span_sync(span, lambda: func(*args, **kwargs))

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


def add_span_attributes(**attributes: str | int | float | bool) -> None:
    """Add attributes to the current span."""
    span = trace.get_current_span()
    if span and span.is_recording():
        for key, value in attributes.items():
            span.set_attribute(key, value)


def set_span_error(exception: Exception) -> None:
    """Mark the current span as error and record the exception."""
    span = trace.get_current_span()
    if span and span.is_recording():
        span.set_status(Status(StatusCode.ERROR, str(exception)))
        span.record_exception(exception)
