"""Shared pytest fixtures and configuration for all tests."""

import os

# Entry point modules skip building the real application in test mode
os.environ.setdefault("ENVIRONMENT", "test")

from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402

from halal_storefront.models.account_models import ContactMessageCreate, UpsertUser  # noqa: E402
from halal_storefront.models.catalog_models import ProductCreate, ProductOption  # noqa: E402
from halal_storefront.repositories.memory_storage import MemStorage  # noqa: E402
from halal_storefront.repositories.seed_data import create_seeded_storage  # noqa: E402


@pytest.fixture
def mock_user_id() -> str:
    """Fixture providing a standard test user ID."""
    return "u1"


@pytest.fixture
def storage() -> MemStorage:
    """Fixture providing an empty in-memory store."""
    return MemStorage()


@pytest.fixture
def seeded_storage() -> MemStorage:
    """Fixture providing an in-memory store populated with the seed catalog."""
    return create_seeded_storage()


@pytest.fixture
def mock_upsert_user(mock_user_id: str) -> UpsertUser:
    """Fixture providing identity provider data for the test user."""
    return UpsertUser(
        id=mock_user_id,
        email="owner@karachigrill.com",
        first_name="Amina",
        last_name="Khan",
        is_restaurant=True,
        restaurant_name="Karachi Grill",
    )


@pytest.fixture
def mock_product_create() -> ProductCreate:
    """Fixture providing a product with an option axis and an MOQ."""
    return ProductCreate(
        name="Chicken Wings",
        description="Delicious chicken wings",
        slug="chicken-wings",
        price=Decimal("6.49"),
        category_id=1,
        minimum_order_quantity=Decimal("3"),
        unit="kg",
        options=[ProductOption(name="Type", values=["Regular", "Jumbo"])],
    )


@pytest.fixture
def mock_contact_message() -> ContactMessageCreate:
    """Fixture providing a valid contact form submission."""
    return ContactMessageCreate(
        restaurant_name="Karachi Grill",
        contact_person="Amina Khan",
        email="amina@karachigrill.com",
        phone_number="555-0100",
        message="Do you deliver on Sundays?",
    )
