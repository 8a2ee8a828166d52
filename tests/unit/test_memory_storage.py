"""Unit tests for the in-memory store."""

from decimal import Decimal

import pytest

from halal_storefront.models.account_models import ContactMessageCreate, UpsertUser, UserUpdate
from halal_storefront.models.catalog_models import CategoryCreate, ProductCreate
from halal_storefront.models.order_models import (
    CartItemCreate,
    InvalidStatusTransitionError,
    OrderCreate,
    OrderItemCreate,
    OrderStatusEnum,
)
from halal_storefront.repositories.memory_storage import MemStorage
from halal_storefront.repositories.seed_data import SEED_CATEGORIES, SEED_PRODUCTS


def add(storage: MemStorage, user_id: str, product_id: int, quantity: str) -> None:
    storage.add_to_cart(
        CartItemCreate(user_id=user_id, product_id=product_id, quantity=Decimal(quantity))
    )


@pytest.mark.unit
class TestUsers:
    """Test suite for user operations."""

    def test_get_missing_user(self, storage: MemStorage) -> None:
        assert storage.get_user("nobody") is None

    def test_upsert_creates_user(self, storage: MemStorage, mock_upsert_user: UpsertUser) -> None:
        user = storage.upsert_user(mock_upsert_user)

        assert user.id == "u1"
        assert user.restaurant_name == "Karachi Grill"
        assert user.created_at == user.updated_at
        assert storage.get_user("u1") == user

    def test_upsert_preserves_created_at(
        self, storage: MemStorage, mock_upsert_user: UpsertUser
    ) -> None:
        first = storage.upsert_user(mock_upsert_user)

        second = storage.upsert_user(mock_upsert_user.model_copy(update={"first_name": "Sara"}))

        assert second.created_at == first.created_at
        assert second.updated_at >= first.updated_at
        assert second.first_name == "Sara"
        assert len(storage.user_map) == 1

    def test_get_user_by_email(self, storage: MemStorage, mock_upsert_user: UpsertUser) -> None:
        storage.upsert_user(mock_upsert_user)

        assert storage.get_user_by_email("owner@karachigrill.com").id == "u1"
        assert storage.get_user_by_email("other@karachigrill.com") is None

    def test_update_user_applies_only_set_fields(
        self, storage: MemStorage, mock_upsert_user: UpsertUser
    ) -> None:
        storage.upsert_user(mock_upsert_user)

        updated = storage.update_user("u1", UserUpdate(phone_number="555-0199"))

        assert updated is not None
        assert updated.phone_number == "555-0199"
        assert updated.restaurant_name == "Karachi Grill"
        assert updated.first_name == "Amina"

    def test_update_user_clears_optional_field(
        self, storage: MemStorage, mock_upsert_user: UpsertUser
    ) -> None:
        storage.upsert_user(mock_upsert_user)

        updated = storage.update_user("u1", UserUpdate(restaurant_name=None))

        assert updated is not None
        assert updated.restaurant_name is None
        assert updated.is_restaurant is True
        assert storage.get_user("u1") == updated

    def test_update_missing_user(self, storage: MemStorage) -> None:
        assert storage.update_user("nobody", UserUpdate(first_name="X")) is None


@pytest.mark.unit
class TestCatalog:
    """Test suite for category and product operations."""

    def test_identifiers_start_at_one(self, storage: MemStorage) -> None:
        first = storage.create_category(CategoryCreate(name="A", slug="a"))
        second = storage.create_category(CategoryCreate(name="B", slug="b"))

        assert (first.id, second.id) == (1, 2)

    def test_seeded_slugs_resolve_to_exactly_one_record(self, seeded_storage: MemStorage) -> None:
        for category in SEED_CATEGORIES:
            found = seeded_storage.get_category_by_slug(category.slug)
            assert found is not None
            assert found.slug == category.slug
            assert [c.slug for c in seeded_storage.get_categories()].count(category.slug) == 1

        for product in SEED_PRODUCTS:
            found = seeded_storage.get_product_by_slug(product.slug)
            assert found is not None
            assert found.slug == product.slug
            assert [p.slug for p in seeded_storage.get_products()].count(product.slug) == 1

    def test_whole_chicken_seed_values(self, seeded_storage: MemStorage) -> None:
        product = seeded_storage.get_product_by_slug("whole-chicken")

        assert product is not None
        assert product.price == Decimal("5.99")
        assert product.unit == "kg"
        assert product.minimum_order_quantity == Decimal("5")

    def test_unknown_slugs(self, seeded_storage: MemStorage) -> None:
        assert seeded_storage.get_category_by_slug("lamb") is None
        assert seeded_storage.get_product_by_slug("lamb-chops") is None

    def test_products_by_category(self, seeded_storage: MemStorage) -> None:
        marinated = seeded_storage.get_category_by_slug("marinated-ready-to-cook")

        products = seeded_storage.get_products_by_category(marinated.id)

        assert [p.slug for p in products] == ["spicy-chicken-tikka", "bbq-chicken-wings"]

    def test_empty_category_has_no_products(self, seeded_storage: MemStorage) -> None:
        eggs = seeded_storage.get_category_by_slug("eggs-add-ons")

        assert seeded_storage.get_products_by_category(eggs.id) == []

    def test_featured_products(self, seeded_storage: MemStorage) -> None:
        featured = seeded_storage.get_featured_products()

        assert {p.slug for p in featured} == {
            "whole-chicken",
            "spicy-chicken-tikka",
            "bbq-chicken-wings",
            "chicken-seekh-kabab",
        }

    def test_search_wing(self, seeded_storage: MemStorage) -> None:
        names = {p.name for p in seeded_storage.search_products("wing")}

        assert {"Chicken Wings", "BBQ Chicken Wings"} <= names

    def test_search_is_case_insensitive(self, seeded_storage: MemStorage) -> None:
        slugs = [p.slug for p in seeded_storage.search_products("KABAB")]

        assert slugs == ["chicken-mince-kheema", "chicken-seekh-kabab"]

    def test_search_matches_description(self, seeded_storage: MemStorage) -> None:
        slugs = {p.slug for p in seeded_storage.search_products("catering")}

        assert "5kg-boneless-breast-pack" in slugs

    def test_search_without_matches(self, seeded_storage: MemStorage) -> None:
        assert seeded_storage.search_products("beef") == []

    def test_product_timestamps(self, storage: MemStorage, mock_product_create: ProductCreate) -> None:
        product = storage.create_product(mock_product_create)

        assert product.id == 1
        assert product.created_at == product.updated_at


@pytest.mark.unit
class TestCart:
    """Test suite for cart operations."""

    def test_empty_cart(self, storage: MemStorage) -> None:
        assert storage.get_cart_items("u1") == []

    def test_add_then_update_quantity(self, storage: MemStorage) -> None:
        add(storage, "u1", 1, "5")

        storage.update_cart_item("u1", 1, Decimal("10"))

        items = storage.get_cart_items("u1")
        assert len(items) == 1
        assert items[0].quantity == Decimal("10")

    def test_add_is_idempotent_by_key(self, storage: MemStorage) -> None:
        add(storage, "u1", 1, "5")
        add(storage, "u1", 1, "8")

        items = storage.get_cart_items("u1")
        assert len(items) == 1
        assert items[0].quantity == Decimal("8")

    def test_replacement_keeps_identity_and_replaces_options(self, storage: MemStorage) -> None:
        first = storage.add_to_cart(
            CartItemCreate(
                user_id="u1",
                product_id=1,
                quantity=Decimal("5"),
                selected_options={"Type": "With Skin"},
            )
        )

        second = storage.add_to_cart(
            CartItemCreate(
                user_id="u1",
                product_id=1,
                quantity=Decimal("6"),
                selected_options={"Type": "Skinless"},
            )
        )

        assert second.id == first.id
        assert second.created_at == first.created_at
        assert second.selected_options == {"Type": "Skinless"}

    def test_replacement_does_not_consume_an_identifier(self, storage: MemStorage) -> None:
        add(storage, "u1", 1, "5")
        add(storage, "u1", 1, "6")

        other = storage.add_to_cart(
            CartItemCreate(user_id="u1", product_id=2, quantity=Decimal("2"))
        )

        assert other.id == 2

    def test_carts_are_per_user(self, storage: MemStorage) -> None:
        add(storage, "u1", 1, "5")
        add(storage, "u2", 1, "7")

        assert storage.get_cart_items("u1")[0].quantity == Decimal("5")
        assert storage.get_cart_items("u2")[0].quantity == Decimal("7")

    def test_insertion_order_is_kept(self, storage: MemStorage) -> None:
        add(storage, "u1", 3, "3")
        add(storage, "u1", 1, "5")

        assert [i.product_id for i in storage.get_cart_items("u1")] == [3, 1]

    def test_returned_list_is_a_copy(self, storage: MemStorage) -> None:
        add(storage, "u1", 1, "5")

        storage.get_cart_items("u1").clear()

        assert len(storage.get_cart_items("u1")) == 1

    def test_update_missing_line(self, storage: MemStorage) -> None:
        assert storage.update_cart_item("u1", 1, Decimal("2")) is None

        add(storage, "u1", 1, "5")
        assert storage.update_cart_item("u1", 2, Decimal("2")) is None

    def test_remove(self, storage: MemStorage) -> None:
        add(storage, "u1", 1, "5")
        add(storage, "u1", 2, "2")

        assert storage.remove_from_cart("u1", 1) is True
        assert [i.product_id for i in storage.get_cart_items("u1")] == [2]

    def test_remove_missing_pair_leaves_cart_alone(self, storage: MemStorage) -> None:
        add(storage, "u1", 1, "5")

        assert storage.remove_from_cart("u1", 99) is False
        assert storage.remove_from_cart("u2", 1) is False
        assert len(storage.get_cart_items("u1")) == 1

    def test_clear(self, storage: MemStorage) -> None:
        add(storage, "u1", 1, "5")

        assert storage.clear_cart("u1") is True
        assert storage.get_cart_items("u1") == []

    def test_clear_without_cart(self, storage: MemStorage) -> None:
        assert storage.clear_cart("never-shopped") is True
        assert storage.get_cart_items("never-shopped") == []


@pytest.mark.unit
class TestOrders:
    """Test suite for order operations."""

    @pytest.fixture
    def order_items(self) -> list[OrderItemCreate]:
        return [
            OrderItemCreate(product_id=1, quantity=Decimal("5"), price=Decimal("5.99")),
            OrderItemCreate(
                product_id=3,
                quantity=Decimal("3"),
                price=Decimal("6.49"),
                selected_options={"Type": "Jumbo"},
            ),
        ]

    def test_create_order(self, storage: MemStorage, order_items: list[OrderItemCreate]) -> None:
        add(storage, "u1", 1, "5")
        add(storage, "u1", 3, "3")

        order = storage.create_order(
            OrderCreate(user_id="u1", total=Decimal("51.89"), shipping_address="1 Main St"),
            order_items,
        )

        assert order.id == 1
        assert order.status == OrderStatusEnum.PENDING
        assert storage.get_orders_by_user("u1") == [order]
        items = storage.get_order_items(order.id)
        assert [i.id for i in items] == [1, 2]
        assert all(i.order_id == order.id for i in items)
        assert items[1].selected_options == {"Type": "Jumbo"}
        assert storage.get_cart_items("u1") == []

    def test_order_totals_are_not_checked(self, storage: MemStorage) -> None:
        order = storage.create_order(
            OrderCreate(user_id="u1", total=Decimal("0")),
            [OrderItemCreate(product_id=1, quantity=Decimal("5"), price=Decimal("5.99"))],
        )

        assert order.total == Decimal("0")

    def test_item_ids_continue_across_orders(
        self, storage: MemStorage, order_items: list[OrderItemCreate]
    ) -> None:
        storage.create_order(OrderCreate(user_id="u1", total=Decimal("1")), order_items)
        second = storage.create_order(OrderCreate(user_id="u2", total=Decimal("1")), order_items)

        assert [i.id for i in storage.get_order_items(second.id)] == [3, 4]
        assert [o.id for o in storage.get_orders_by_user("u2")] == [second.id]

    def test_missing_order(self, storage: MemStorage) -> None:
        assert storage.get_order_by_id(42) is None
        assert storage.get_order_items(42) == []

    def test_update_status(self, storage: MemStorage, order_items: list[OrderItemCreate]) -> None:
        order = storage.create_order(OrderCreate(user_id="u1", total=Decimal("1")), order_items)

        updated = storage.update_order_status(order.id, OrderStatusEnum.PROCESSING)

        assert updated.status == OrderStatusEnum.PROCESSING
        assert storage.get_order_by_id(order.id).status == OrderStatusEnum.PROCESSING

    def test_illegal_status_change(
        self, storage: MemStorage, order_items: list[OrderItemCreate]
    ) -> None:
        order = storage.create_order(OrderCreate(user_id="u1", total=Decimal("1")), order_items)

        with pytest.raises(InvalidStatusTransitionError):
            storage.update_order_status(order.id, OrderStatusEnum.COMPLETED)

        assert storage.get_order_by_id(order.id).status == OrderStatusEnum.PENDING

    def test_status_change_of_missing_order(self, storage: MemStorage) -> None:
        assert storage.update_order_status(7, OrderStatusEnum.CANCELLED) is None


@pytest.mark.unit
class TestContactMessages:
    """Test suite for contact inbox operations."""

    def test_create_contact_message(
        self, storage: MemStorage, mock_contact_message: ContactMessageCreate
    ) -> None:
        first = storage.create_contact_message(mock_contact_message)
        second = storage.create_contact_message(mock_contact_message)

        assert (first.id, second.id) == (1, 2)
        assert first.email == "amina@karachigrill.com"
        assert first.created_at is not None
        assert len(storage.contact_message_map) == 2
