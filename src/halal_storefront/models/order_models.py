"""Cart, order and order item models."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from halal_storefront.models.base_models import StoredRecord


class InvalidStatusTransitionError(ValueError):
    """Raised when an order status change is not allowed."""

    def __init__(self, current: "OrderStatusEnum", requested: "OrderStatusEnum") -> None:
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot change order status from '{current.value}' to '{requested.value}'"
        )


class OrderStatusEnum(str, Enum):
    """Enumeration of order status values."""

    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    def can_transition_to(self, new_status: "OrderStatusEnum") -> bool:
        """Check whether an order in this status may move to new_status."""
        return new_status in _ALLOWED_TRANSITIONS[self]


_ALLOWED_TRANSITIONS: dict[OrderStatusEnum, frozenset[OrderStatusEnum]] = {
    OrderStatusEnum.PENDING: frozenset({OrderStatusEnum.PROCESSING, OrderStatusEnum.CANCELLED}),
    OrderStatusEnum.PROCESSING: frozenset({OrderStatusEnum.SHIPPED, OrderStatusEnum.CANCELLED}),
    OrderStatusEnum.SHIPPED: frozenset({OrderStatusEnum.COMPLETED}),
    OrderStatusEnum.COMPLETED: frozenset(),
    OrderStatusEnum.CANCELLED: frozenset(),
}


class PaymentMethodEnum(str, Enum):
    """Payment methods offered at checkout."""

    CREDIT_CARD = "credit_card"
    BANK_TRANSFER = "bank_transfer"
    CASH_ON_DELIVERY = "cash_on_delivery"


class CartItemCreate(BaseModel):
    """Input for adding a product to a user's cart."""

    user_id: str = Field(..., description="Owner of the cart")
    product_id: int = Field(..., description="Product being ordered")
    quantity: Decimal = Field(..., description="Quantity in the product's unit", gt=0)
    selected_options: dict[str, str] | None = Field(
        None, description="Chosen value per product option axis"
    )


class CartItem(CartItemCreate, StoredRecord):
    """Stored cart line. Unique per (user_id, product_id)."""

    id: int = Field(..., description="Serial identifier assigned by the store")
    created_at: datetime = Field(..., description="When the product was first added")
    updated_at: datetime = Field(..., description="Last quantity or option change")


class OrderCreate(BaseModel):
    """Input for creating an order. The total is computed by the caller."""

    user_id: str = Field(..., description="Customer placing the order")
    status: OrderStatusEnum = Field(default=OrderStatusEnum.PENDING, description="Order status")
    total: Decimal = Field(..., description="Order total including tax", ge=0)
    shipping_address: str | None = Field(None, description="Delivery address")
    billing_address: str | None = Field(None, description="Billing address")
    payment_method: str | None = Field(None, description="Payment method identifier")


class Order(OrderCreate, StoredRecord):
    """Stored order."""

    id: int = Field(..., description="Serial identifier assigned by the store")
    created_at: datetime = Field(..., description="Checkout timestamp")
    updated_at: datetime = Field(..., description="Last status change")


class OrderItemCreate(BaseModel):
    """Point-in-time snapshot of one ordered product."""

    product_id: int = Field(..., description="Ordered product")
    quantity: Decimal = Field(..., description="Ordered quantity", gt=0)
    price: Decimal = Field(..., description="Unit price at order time", ge=0)
    selected_options: dict[str, str] | None = Field(
        None, description="Chosen value per product option axis"
    )


class OrderItem(OrderItemCreate, StoredRecord):
    """Stored order line."""

    id: int = Field(..., description="Serial identifier assigned by the store")
    order_id: int = Field(..., description="Order this line belongs to")
