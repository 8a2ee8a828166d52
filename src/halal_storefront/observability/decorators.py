"""OpenTelemetry tracing decorators."""

import functools
import inspect
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Span

F = TypeVar("F", bound=Callable[..., Any])


def traced(
    span_name: str | None = None,
    service_name: str = "storefront-svc",
    record_args: tuple[str, ...] = (),
) -> Callable[[F], F]:
    """Decorator to add OpenTelemetry tracing to a function.

    Creates a span per call, marks it with success or the raised error, and
    copies the named arguments onto the span as ``arg.<name>`` attributes.
    Works for both sync and async functions.

    Args:
        span_name: Name for the span (defaults to the function name)
        service_name: Service name for span attributes
        record_args: Names of arguments to record on the span

    Returns:
        Decorated function with tracing

    Example:
        @traced("place_order", record_args=("user_id",))
        async def place_order(self, user_id: str) -> CheckoutResult:
            ...
    """

    def decorator(func: F) -> F:
        name = span_name or func.__name__
        tracer = trace.get_tracer(service_name)
        signature = inspect.signature(func)

        def argument_attributes(args: tuple, kwargs: dict) -> dict[str, str]:
            if not record_args:
                return {}
            bound = signature.bind_partial(*args, **kwargs)
            return {
                f"arg.{arg}": str(bound.arguments[arg])
                for arg in record_args
                if arg in bound.arguments
            }

        @contextmanager
        def span_for(args: tuple, kwargs: dict) -> Iterator[Span]:
            with tracer.start_as_current_span(name) as span:
                span.set_attribute("service.name", service_name)
                if span_name:
                    span.set_attribute("function.name", func.__name__)
                for key, value in argument_attributes(args, kwargs).items():
                    span.set_attribute(key, value)

                try:
                    yield span
                    span.set_attribute("success", True)
                except Exception as e:
                    span.set_attribute("success", False)
                    span.set_attribute("error.type", type(e).__name__)
                    span.set_attribute("error.message", str(e))
                    span.record_exception(e)
                    raise

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with span_for(args, kwargs):
                return await func(*args, **kwargs)

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with span_for(args, kwargs):
                return func(*args, **kwargs)

        if inspect.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        return sync_wrapper  # type: ignore

    return decorator
