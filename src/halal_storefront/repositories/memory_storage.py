"""In-memory implementation of the catalog and order store.

One dict per entity type keyed by identifier, plus per-user cart lists and
per-order item lists. Serial identifiers come from one counter per entity.
State lives for the lifetime of the instance and is lost on restart.
"""

import itertools
import logging
from datetime import UTC, datetime
from decimal import Decimal

from halal_storefront.models.account_models import (
    ContactMessage,
    ContactMessageCreate,
    UpsertUser,
    User,
    UserUpdate,
)
from halal_storefront.models.catalog_models import (
    Category,
    CategoryCreate,
    Product,
    ProductCreate,
)
from halal_storefront.models.order_models import (
    CartItem,
    CartItemCreate,
    InvalidStatusTransitionError,
    Order,
    OrderCreate,
    OrderItem,
    OrderItemCreate,
    OrderStatusEnum,
)
from halal_storefront.repositories.storage import Storage

logger = logging.getLogger(__name__)


class MemStorage(Storage):
    """Process-local store backed by plain dictionaries."""

    def __init__(self) -> None:
        """Initialize empty collections and identifier counters."""
        self.user_map: dict[str, User] = {}
        self.category_map: dict[int, Category] = {}
        self.product_map: dict[int, Product] = {}
        self.cart_item_map: dict[str, list[CartItem]] = {}
        self.order_map: dict[int, Order] = {}
        self.order_item_map: dict[int, list[OrderItem]] = {}
        self.contact_message_map: dict[int, ContactMessage] = {}

        self._category_ids = itertools.count(1)
        self._product_ids = itertools.count(1)
        self._cart_item_ids = itertools.count(1)
        self._order_ids = itertools.count(1)
        self._order_item_ids = itertools.count(1)
        self._contact_message_ids = itertools.count(1)

    # User operations

    def get_user(self, user_id: str) -> User | None:
        return self.user_map.get(user_id)

    def get_user_by_email(self, email: str) -> User | None:
        for user in self.user_map.values():
            if user.email == email:
                return user
        return None

    def upsert_user(self, user: UpsertUser) -> User:
        now = datetime.now(UTC)
        existing = self.user_map.get(user.id)

        record = User(
            **user.model_dump(),
            created_at=existing.created_at if existing else now,
            updated_at=now,
        )
        self.user_map[user.id] = record
        return record

    def update_user(self, user_id: str, user_data: UserUpdate) -> User | None:
        existing = self.user_map.get(user_id)
        if existing is None:
            return None

        changes = user_data.model_dump(exclude_unset=True)
        updated = User.model_validate(
            {**existing.model_dump(), **changes, "updated_at": datetime.now(UTC)}
        )
        self.user_map[user_id] = updated
        return updated

    # Category operations

    def get_categories(self) -> list[Category]:
        return list(self.category_map.values())

    def get_category_by_slug(self, slug: str) -> Category | None:
        for category in self.category_map.values():
            if category.slug == slug:
                return category
        return None

    def get_category_by_id(self, category_id: int) -> Category | None:
        return self.category_map.get(category_id)

    def create_category(self, category: CategoryCreate) -> Category:
        record = Category(id=next(self._category_ids), **category.model_dump())
        self.category_map[record.id] = record
        return record

    # Product operations

    def get_products(self) -> list[Product]:
        return list(self.product_map.values())

    def get_products_by_category(self, category_id: int) -> list[Product]:
        return [p for p in self.product_map.values() if p.category_id == category_id]

    def get_product_by_slug(self, slug: str) -> Product | None:
        for product in self.product_map.values():
            if product.slug == slug:
                return product
        return None

    def get_product_by_id(self, product_id: int) -> Product | None:
        return self.product_map.get(product_id)

    def get_featured_products(self) -> list[Product]:
        return [p for p in self.product_map.values() if p.featured]

    def create_product(self, product: ProductCreate) -> Product:
        now = datetime.now(UTC)
        record = Product(
            id=next(self._product_ids),
            **product.model_dump(),
            created_at=now,
            updated_at=now,
        )
        self.product_map[record.id] = record
        return record

    def search_products(self, query: str) -> list[Product]:
        return [p for p in self.product_map.values() if p.matches(query)]

    # Cart operations

    def get_cart_items(self, user_id: str) -> list[CartItem]:
        return list(self.cart_item_map.get(user_id, []))

    def add_to_cart(self, cart_item: CartItemCreate) -> CartItem:
        now = datetime.now(UTC)
        user_cart = self.cart_item_map.setdefault(cart_item.user_id, [])

        for index, existing in enumerate(user_cart):
            if existing.product_id == cart_item.product_id:
                updated = existing.model_copy(
                    update={
                        "quantity": cart_item.quantity,
                        "selected_options": cart_item.selected_options,
                        "updated_at": now,
                    }
                )
                user_cart[index] = updated
                logger.debug(
                    f"Replaced cart line for product {cart_item.product_id} "
                    f"of user {cart_item.user_id}"
                )
                return updated

        record = CartItem(
            id=next(self._cart_item_ids),
            **cart_item.model_dump(),
            created_at=now,
            updated_at=now,
        )
        user_cart.append(record)
        return record

    def update_cart_item(
        self, user_id: str, product_id: int, quantity: Decimal
    ) -> CartItem | None:
        user_cart = self.cart_item_map.get(user_id)
        if user_cart is None:
            return None

        for index, existing in enumerate(user_cart):
            if existing.product_id == product_id:
                updated = existing.model_copy(
                    update={"quantity": quantity, "updated_at": datetime.now(UTC)}
                )
                user_cart[index] = updated
                return updated

        return None

    def remove_from_cart(self, user_id: str, product_id: int) -> bool:
        user_cart = self.cart_item_map.get(user_id)
        if user_cart is None:
            return False

        remaining = [item for item in user_cart if item.product_id != product_id]
        if len(remaining) == len(user_cart):
            return False

        self.cart_item_map[user_id] = remaining
        return True

    def clear_cart(self, user_id: str) -> bool:
        self.cart_item_map[user_id] = []
        return True

    # Order operations

    def create_order(self, order: OrderCreate, items: list[OrderItemCreate]) -> Order:
        now = datetime.now(UTC)
        order_id = next(self._order_ids)

        record = Order(id=order_id, **order.model_dump(), created_at=now, updated_at=now)
        order_items = [
            OrderItem(id=next(self._order_item_ids), order_id=order_id, **item.model_dump())
            for item in items
        ]

        self.order_map[order_id] = record
        self.order_item_map[order_id] = order_items
        self.clear_cart(order.user_id)

        logger.info(
            f"Created order {order_id} for user {order.user_id} with {len(order_items)} items"
        )
        return record

    def get_orders_by_user(self, user_id: str) -> list[Order]:
        return [o for o in self.order_map.values() if o.user_id == user_id]

    def get_order_by_id(self, order_id: int) -> Order | None:
        return self.order_map.get(order_id)

    def get_order_items(self, order_id: int) -> list[OrderItem]:
        return list(self.order_item_map.get(order_id, []))

    def update_order_status(self, order_id: int, status: OrderStatusEnum) -> Order | None:
        existing = self.order_map.get(order_id)
        if existing is None:
            return None

        if not existing.status.can_transition_to(status):
            raise InvalidStatusTransitionError(existing.status, status)

        updated = existing.model_copy(update={"status": status, "updated_at": datetime.now(UTC)})
        self.order_map[order_id] = updated
        logger.info(f"Order {order_id} moved from {existing.status.value} to {status.value}")
        return updated

    # Contact operations

    def create_contact_message(self, message: ContactMessageCreate) -> ContactMessage:
        record = ContactMessage(
            id=next(self._contact_message_ids),
            **message.model_dump(),
            created_at=datetime.now(UTC),
        )
        self.contact_message_map[record.id] = record
        return record
