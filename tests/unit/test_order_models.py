"""Unit tests for cart and order models."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from halal_storefront.models.account_models import ContactMessageCreate, UserUpdate
from halal_storefront.models.order_models import (
    CartItemCreate,
    InvalidStatusTransitionError,
    OrderCreate,
    OrderStatusEnum,
)


@pytest.mark.unit
class TestOrderStatusTransitions:
    """Test suite for the order lifecycle."""

    @pytest.mark.parametrize(
        ("current", "requested"),
        [
            (OrderStatusEnum.PENDING, OrderStatusEnum.PROCESSING),
            (OrderStatusEnum.PENDING, OrderStatusEnum.CANCELLED),
            (OrderStatusEnum.PROCESSING, OrderStatusEnum.SHIPPED),
            (OrderStatusEnum.PROCESSING, OrderStatusEnum.CANCELLED),
            (OrderStatusEnum.SHIPPED, OrderStatusEnum.COMPLETED),
        ],
    )
    def test_allowed(self, current: OrderStatusEnum, requested: OrderStatusEnum) -> None:
        assert current.can_transition_to(requested) is True

    @pytest.mark.parametrize(
        ("current", "requested"),
        [
            (OrderStatusEnum.PENDING, OrderStatusEnum.PENDING),
            (OrderStatusEnum.PENDING, OrderStatusEnum.SHIPPED),
            (OrderStatusEnum.SHIPPED, OrderStatusEnum.CANCELLED),
            (OrderStatusEnum.COMPLETED, OrderStatusEnum.PENDING),
            (OrderStatusEnum.CANCELLED, OrderStatusEnum.PROCESSING),
        ],
    )
    def test_rejected(self, current: OrderStatusEnum, requested: OrderStatusEnum) -> None:
        assert current.can_transition_to(requested) is False

    @pytest.mark.parametrize("terminal", [OrderStatusEnum.COMPLETED, OrderStatusEnum.CANCELLED])
    def test_terminal_statuses_have_no_exits(self, terminal: OrderStatusEnum) -> None:
        assert not any(terminal.can_transition_to(status) for status in OrderStatusEnum)

    def test_error_message_names_both_statuses(self) -> None:
        error = InvalidStatusTransitionError(OrderStatusEnum.SHIPPED, OrderStatusEnum.PENDING)

        assert str(error) == "Cannot change order status from 'shipped' to 'pending'"
        assert error.current == OrderStatusEnum.SHIPPED
        assert error.requested == OrderStatusEnum.PENDING
        assert isinstance(error, ValueError)


@pytest.mark.unit
class TestOrderInputs:
    """Test suite for cart and order input validation."""

    def test_order_defaults_to_pending(self) -> None:
        order = OrderCreate(user_id="u1", total=Decimal("62.89"))

        assert order.status == OrderStatusEnum.PENDING

    def test_order_total_cannot_be_negative(self) -> None:
        with pytest.raises(ValidationError):
            OrderCreate(user_id="u1", total=Decimal("-0.01"))

    @pytest.mark.parametrize("quantity", ["0", "-2"])
    def test_cart_quantity_must_be_positive(self, quantity: str) -> None:
        with pytest.raises(ValidationError):
            CartItemCreate(user_id="u1", product_id=1, quantity=Decimal(quantity))

    def test_fractional_quantities_are_allowed(self) -> None:
        item = CartItemCreate(user_id="u1", product_id=1, quantity=Decimal("2.5"))

        assert item.quantity == Decimal("2.5")


@pytest.mark.unit
class TestAccountInputs:
    """Test suite for user and contact inputs."""

    def test_user_update_tracks_only_set_fields(self) -> None:
        update = UserUpdate(restaurant_name="Lahore Tikka House")

        assert update.model_dump(exclude_unset=True) == {"restaurant_name": "Lahore Tikka House"}

    def test_user_update_rejects_null_restaurant_flag(self) -> None:
        with pytest.raises(ValidationError):
            UserUpdate(is_restaurant=None)

    def test_contact_message_requires_valid_email(self) -> None:
        with pytest.raises(ValidationError):
            ContactMessageCreate(
                restaurant_name="Karachi Grill",
                contact_person="Amina Khan",
                email="not-an-email",
                phone_number="555-0100",
                message="Hello",
            )

    def test_contact_message_requires_non_empty_fields(self) -> None:
        with pytest.raises(ValidationError):
            ContactMessageCreate(
                restaurant_name="",
                contact_person="Amina Khan",
                email="amina@karachigrill.com",
                phone_number="555-0100",
                message="Hello",
            )
