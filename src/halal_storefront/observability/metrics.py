"""Custom metrics for the storefront service."""

from opentelemetry import metrics

meter = metrics.get_meter("storefront-svc")

orders_placed_counter = meter.create_counter(
    name="orders_placed_total",
    description="Total number of orders placed by payment method",
    unit="1",
)

order_value_histogram = meter.create_histogram(
    name="order_value",
    description="Order totals including tax",
    unit="USD",
)

checkout_rejected_counter = meter.create_counter(
    name="checkout_rejected_total",
    description="Checkout attempts rejected before an order was created, by reason",
    unit="1",
)

cart_operations_counter = meter.create_counter(
    name="cart_operations_total",
    description="Cart mutations by operation (add, update, remove, clear)",
    unit="1",
)

contact_messages_counter = meter.create_counter(
    name="contact_messages_total",
    description="Contact form submissions received",
    unit="1",
)


def record_order_placed(payment_method: str, total: float) -> None:
    """Record a successfully placed order.

    Args:
        payment_method: Payment method chosen at checkout
        total: Order total including tax
    """
    orders_placed_counter.add(1, {"payment_method": payment_method})
    order_value_histogram.record(total, {"payment_method": payment_method})


def record_checkout_rejected(reason: str) -> None:
    """Record a checkout that did not produce an order.

    Args:
        reason: Short machine-readable reason (e.g. "empty_cart")
    """
    checkout_rejected_counter.add(1, {"reason": reason})


def record_cart_operation(operation: str) -> None:
    """Record a cart mutation.

    Args:
        operation: One of "add", "update", "remove", "clear"
    """
    cart_operations_counter.add(1, {"operation": operation})


def record_contact_message() -> None:
    """Record a contact form submission."""
    contact_messages_counter.add(1)
