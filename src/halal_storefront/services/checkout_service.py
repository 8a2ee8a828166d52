"""Checkout service: cart pricing and order placement."""

import logging
import os
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from halal_storefront.models.catalog_models import Product
from halal_storefront.models.order_models import (
    CartItem,
    Order,
    OrderCreate,
    OrderItem,
    OrderItemCreate,
    PaymentMethodEnum,
)
from halal_storefront.observability.decorators import traced
from halal_storefront.observability.metrics import (
    record_checkout_rejected,
    record_order_placed,
)
from halal_storefront.repositories.storage import Storage

logger = logging.getLogger(__name__)

DEFAULT_TAX_RATE = Decimal("0.05")
CENTS = Decimal("0.01")


def load_tax_rate() -> Decimal:
    """Read TAX_RATE as a fraction of the subtotal, defaulting to 5%."""
    return Decimal(os.getenv("TAX_RATE", str(DEFAULT_TAX_RATE)))


def to_cents(amount: Decimal) -> Decimal:
    """Round a money amount to cents, half-up."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass
class CartLine:
    """A cart item joined with its product.

    Attributes:
        item: The stored cart item
        product: The product, or None if it no longer exists
        line_total: Unit price times quantity (zero for a missing product)
    """

    item: CartItem
    product: Product | None
    line_total: Decimal


@dataclass
class CartSummary:
    """Priced view of a user's cart."""

    lines: list[CartLine]
    subtotal: Decimal
    tax: Decimal
    total: Decimal


@dataclass
class CheckoutResult:
    """Result of a checkout attempt.

    Attributes:
        success: Whether an order was created
        order: The created order on success
        items: The created order items on success
        error_message: Reason for failure, None on success
    """

    success: bool
    order: Order | None = None
    items: list[OrderItem] = field(default_factory=list)
    error_message: str | None = None


class CheckoutService:
    """Service that fulfils the caller-side obligations of order creation.

    The store accepts any order total and any items. This service prices the
    cart from current product prices, applies tax, enforces stock, minimum
    order quantity and option rules, and only then calls create_order.
    """

    def __init__(self, storage: Storage, tax_rate: Decimal = DEFAULT_TAX_RATE) -> None:
        """Initialize the CheckoutService.

        Args:
            storage: Catalog and order store
            tax_rate: Fraction of the subtotal added as tax
        """
        self.storage = storage
        self.tax_rate = tax_rate

    def validate_line(
        self,
        product: Product,
        quantity: Decimal,
        selected_options: dict[str, str] | None = None,
    ) -> str | None:
        """Check a prospective cart line against the product's rules.

        Args:
            product: Product being ordered
            quantity: Requested quantity
            selected_options: Chosen option values

        Returns:
            Error message if the line is not orderable, None otherwise
        """
        if not product.in_stock:
            return f"{product.name} is out of stock"

        if quantity < product.minimum_order_quantity:
            return (
                f"The minimum order quantity for {product.name} is "
                f"{product.minimum_order_quantity} {product.unit}"
            )

        return product.option_error(selected_options)

    def _summarize(self, items: list[CartItem]) -> CartSummary:
        lines = []
        for item in items:
            product = self.storage.get_product_by_id(item.product_id)
            line_total = product.price * item.quantity if product else Decimal("0")
            lines.append(CartLine(item=item, product=product, line_total=line_total))

        subtotal = to_cents(sum((line.line_total for line in lines), Decimal("0")))
        tax = to_cents(subtotal * self.tax_rate)
        return CartSummary(lines=lines, subtotal=subtotal, tax=tax, total=subtotal + tax)

    @traced("summarize_cart", record_args=("user_id",))
    async def summarize_cart(self, user_id: str) -> CartSummary:
        """Price the user's current cart.

        Args:
            user_id: Cart owner

        Returns:
            CartSummary with one line per cart item
        """
        return self._summarize(self.storage.get_cart_items(user_id))

    @traced("place_order", record_args=("user_id", "payment_method"))
    async def place_order(
        self,
        user_id: str,
        shipping_address: str,
        payment_method: PaymentMethodEnum,
        billing_address: str | None = None,
    ) -> CheckoutResult:
        """Turn the user's cart into an order.

        Prices are snapshotted from the live catalog. The cart is cleared by
        the store once the order is recorded. Nothing is written on failure.

        Args:
            user_id: Customer placing the order
            shipping_address: Delivery address
            payment_method: Chosen payment method
            billing_address: Billing address, defaults to the shipping address

        Returns:
            CheckoutResult describing the created order or the failure
        """
        summary = self._summarize(self.storage.get_cart_items(user_id))

        if not summary.lines:
            record_checkout_rejected("empty_cart")
            return CheckoutResult(success=False, error_message="Cart is empty")

        order_items: list[OrderItemCreate] = []
        for line in summary.lines:
            if line.product is None:
                record_checkout_rejected("missing_product")
                return CheckoutResult(
                    success=False,
                    error_message=f"Product {line.item.product_id} is no longer available",
                )

            error = self.validate_line(line.product, line.item.quantity, line.item.selected_options)
            if error:
                record_checkout_rejected("invalid_line")
                return CheckoutResult(success=False, error_message=error)

            order_items.append(
                OrderItemCreate(
                    product_id=line.product.id,
                    quantity=line.item.quantity,
                    price=line.product.price,
                    selected_options=line.item.selected_options,
                )
            )

        order = self.storage.create_order(
            OrderCreate(
                user_id=user_id,
                total=summary.total,
                shipping_address=shipping_address,
                billing_address=billing_address or shipping_address,
                payment_method=payment_method.value,
            ),
            order_items,
        )

        record_order_placed(payment_method.value, float(order.total))
        logger.info(f"Checkout complete for user {user_id}: order {order.id}, total {order.total}")

        return CheckoutResult(
            success=True,
            order=order,
            items=self.storage.get_order_items(order.id),
        )
