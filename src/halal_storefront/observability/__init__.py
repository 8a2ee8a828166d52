"""OpenTelemetry instrumentation, JSON logging and tracing helpers."""

from halal_storefront.observability.config import configure_logging, setup_observability
from halal_storefront.observability.decorators import traced

__all__ = ["setup_observability", "configure_logging", "traced"]
