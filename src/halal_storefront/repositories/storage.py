"""Storage contract for the catalog and order store.

Every backend (in-memory, DynamoDB) implements this abstract base class.
Following the repository pattern, lookups return None (or an empty list)
for expected misses rather than raising exceptions.
"""

from abc import ABC, abstractmethod
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
    Order,
    OrderCreate,
    OrderItem,
    OrderItemCreate,
    OrderStatusEnum,
)


class StorageError(Exception):
    """Raised when a persistent backend fails to write."""


class Storage(ABC):
    """Abstract catalog and order store.

    The store owns every collection. Entities reference each other by
    identifier only; the store never enforces referential integrity, so
    deleting or omitting a referenced entity leaves orphans without error.
    """

    # User operations

    @abstractmethod
    def get_user(self, user_id: str) -> User | None:
        """Look up a user by identity provider id."""

    @abstractmethod
    def get_user_by_email(self, email: str) -> User | None:
        """Return the first user whose e-mail matches exactly (case-sensitive)."""

    @abstractmethod
    def upsert_user(self, user: UpsertUser) -> User:
        """Create or overwrite a user, preserving the original created_at.

        Args:
            user: Full user data from an identity event

        Returns:
            User: The stored record
        """

    @abstractmethod
    def update_user(self, user_id: str, user_data: UserUpdate) -> User | None:
        """Merge the explicitly set fields of a patch onto an existing user.

        Args:
            user_id: User to update
            user_data: Partial profile patch

        Returns:
            Updated user, or None if no such user exists
        """

    # Category operations

    @abstractmethod
    def get_categories(self) -> list[Category]:
        """List all categories in identifier order."""

    @abstractmethod
    def get_category_by_slug(self, slug: str) -> Category | None:
        """Look up a category by slug."""

    @abstractmethod
    def get_category_by_id(self, category_id: int) -> Category | None:
        """Look up a category by id."""

    @abstractmethod
    def create_category(self, category: CategoryCreate) -> Category:
        """Store a new category under the next identifier."""

    # Product operations

    @abstractmethod
    def get_products(self) -> list[Product]:
        """List all products in identifier order."""

    @abstractmethod
    def get_products_by_category(self, category_id: int) -> list[Product]:
        """List products whose category_id matches exactly."""

    @abstractmethod
    def get_product_by_slug(self, slug: str) -> Product | None:
        """Look up a product by slug."""

    @abstractmethod
    def get_product_by_id(self, product_id: int) -> Product | None:
        """Look up a product by id."""

    @abstractmethod
    def get_featured_products(self) -> list[Product]:
        """List products flagged as featured."""

    @abstractmethod
    def create_product(self, product: ProductCreate) -> Product:
        """Store a new product under the next identifier."""

    @abstractmethod
    def search_products(self, query: str) -> list[Product]:
        """Case-insensitive substring search over product name and description."""

    # Cart operations

    @abstractmethod
    def get_cart_items(self, user_id: str) -> list[CartItem]:
        """Return the user's cart, or an empty list if they have none."""

    @abstractmethod
    def add_to_cart(self, cart_item: CartItemCreate) -> CartItem:
        """Add a product to a cart, replacing any line for the same product.

        An existing (user_id, product_id) line keeps its id and takes the new
        quantity and selected options; it is not incremented.

        Args:
            cart_item: Cart line to add

        Returns:
            CartItem: The created or replaced line
        """

    @abstractmethod
    def update_cart_item(
        self, user_id: str, product_id: int, quantity: Decimal
    ) -> CartItem | None:
        """Set the quantity of an existing cart line.

        Returns:
            Updated line, or None if the user has no such line
        """

    @abstractmethod
    def remove_from_cart(self, user_id: str, product_id: int) -> bool:
        """Remove a cart line. Returns True if a line was removed."""

    @abstractmethod
    def clear_cart(self, user_id: str) -> bool:
        """Empty the user's cart. Always succeeds."""

    # Order operations

    @abstractmethod
    def create_order(self, order: OrderCreate, items: list[OrderItemCreate]) -> Order:
        """Store an order with its items and clear the customer's cart.

        Neither the items nor the total are checked against the cart; that is
        the caller's obligation.

        Args:
            order: Order header with caller-computed total
            items: Order line snapshots

        Returns:
            Order: The stored order (items are available via get_order_items)
        """

    @abstractmethod
    def get_orders_by_user(self, user_id: str) -> list[Order]:
        """List a user's orders in identifier order."""

    @abstractmethod
    def get_order_by_id(self, order_id: int) -> Order | None:
        """Look up an order by id."""

    @abstractmethod
    def get_order_items(self, order_id: int) -> list[OrderItem]:
        """Return an order's lines, or an empty list if none were recorded."""

    @abstractmethod
    def update_order_status(self, order_id: int, status: OrderStatusEnum) -> Order | None:
        """Move an order to a new status.

        Returns:
            Updated order, or None if the order does not exist

        Raises:
            InvalidStatusTransitionError: If the transition is not allowed
        """

    # Contact operations

    @abstractmethod
    def create_contact_message(self, message: ContactMessageCreate) -> ContactMessage:
        """Store a contact form submission."""
