"""DynamoDB implementation of the catalog and order store.

Each entity type lives in its own table named ``{prefix}-{entity}``. Serial
identifiers are allocated from a counters table with atomic ADD updates.
Reads follow the repository convention of returning None (or an empty list)
on ClientError; writes cannot honour the contract's return types on failure,
so they raise StorageError instead. Cart reads that feed a delete also raise.
"""

import logging
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from boto3.dynamodb.conditions import Attr, Key
from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

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
from halal_storefront.repositories.storage import Storage, StorageError

logger = logging.getLogger(__name__)

# TransactWriteItems limit: the order, its items and the cart line deletes
MAX_TRANSACT_ACTIONS = 100


class DynamoDBStorage(Storage):
    """Persistent store backed by one DynamoDB table per entity type.

    Expected table layout (partition key / sort key, indexes):

    - users: id; GSI email-index on email
    - categories: id
    - products: id; GSI category_id-index on category_id
    - cart_items: user_id / product_id
    - orders: id; GSI user_id-index on user_id
    - order_items: order_id / id
    - contact_messages: id
    - counters: name
    """

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_prefix: str) -> None:
        """Initialize storage.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_prefix: Prefix shared by all table names
        """
        self.dynamodb = dynamodb_resource
        self.table_prefix = table_prefix
        self.serializer = TypeSerializer()

        self.users_table: Table = dynamodb_resource.Table(self.table_name("users"))
        self.categories_table: Table = dynamodb_resource.Table(self.table_name("categories"))
        self.products_table: Table = dynamodb_resource.Table(self.table_name("products"))
        self.cart_items_table: Table = dynamodb_resource.Table(self.table_name("cart_items"))
        self.orders_table: Table = dynamodb_resource.Table(self.table_name("orders"))
        self.order_items_table: Table = dynamodb_resource.Table(self.table_name("order_items"))
        self.contact_messages_table: Table = dynamodb_resource.Table(
            self.table_name("contact_messages")
        )
        self.counters_table: Table = dynamodb_resource.Table(self.table_name("counters"))

    def table_name(self, entity: str) -> str:
        """Return the full table name for an entity type."""
        return f"{self.table_prefix}-{entity}"

    # Low-level helpers

    def _next_id(self, counter_name: str) -> int:
        """Atomically allocate the next serial identifier for an entity type.

        Raises:
            StorageError: If the counter update fails
        """
        try:
            response = self.counters_table.update_item(
                Key={"name": counter_name},
                UpdateExpression="ADD current_value :one",
                ExpressionAttributeValues={":one": 1},
                ReturnValues="UPDATED_NEW",
            )
            return int(response["Attributes"]["current_value"])

        except ClientError as e:
            logger.error(f"Failed to allocate {counter_name} id: {e}")
            raise StorageError(f"Failed to allocate {counter_name} id") from e

    def _put(self, table: Table, item: dict[str, Any], description: str) -> None:
        """Write an item, raising StorageError on failure."""
        try:
            table.put_item(Item=item)
        except ClientError as e:
            logger.error(f"Failed to save {description}: {e}")
            raise StorageError(f"Failed to save {description}") from e

    def _get(self, table: Table, key: dict[str, Any]) -> dict[str, Any] | None:
        """Fetch one item by key, returning None when missing or on error."""
        try:
            response = table.get_item(Key=key)
            return response.get("Item")

        except ClientError as e:
            logger.error(f"Failed to get item {key} from {table.name}: {e}")  # pragma: no cover
            return None

    def _scan_all(self, table: Table, **kwargs: Any) -> list[dict[str, Any]]:
        """Scan a table following pagination. Returns [] on error."""
        items: list[dict[str, Any]] = []
        try:
            while True:
                response = table.scan(**kwargs)
                items.extend(response.get("Items", []))
                if "LastEvaluatedKey" not in response:
                    return items
                kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]

        except ClientError as e:
            logger.error(f"Failed to scan {table.name}: {e}")  # pragma: no cover
            return []

    def _query_all(self, table: Table, **kwargs: Any) -> list[dict[str, Any]]:
        """Query a table or index following pagination. Returns [] on error."""
        items: list[dict[str, Any]] = []
        try:
            while True:
                response = table.query(**kwargs)
                items.extend(response.get("Items", []))
                if "LastEvaluatedKey" not in response:
                    return items
                kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]

        except ClientError as e:
            logger.error(f"Failed to query {table.name}: {e}")  # pragma: no cover
            return []

    def _cart_keys(self, user_id: str) -> list[dict[str, Any]]:
        """Return the key of every line in a user's cart.

        Raises:
            StorageError: If the cart cannot be read
        """
        kwargs: dict[str, Any] = {
            "KeyConditionExpression": Key("user_id").eq(user_id),
            "ProjectionExpression": "user_id, product_id",
        }
        keys: list[dict[str, Any]] = []
        try:
            while True:
                response = self.cart_items_table.query(**kwargs)
                keys.extend(
                    {"user_id": item["user_id"], "product_id": item["product_id"]}
                    for item in response.get("Items", [])
                )
                if "LastEvaluatedKey" not in response:
                    return keys
                kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]

        except ClientError as e:
            logger.error(f"Failed to read cart for user {user_id}: {e}")
            raise StorageError(f"Failed to read cart for user {user_id}") from e

    def _serialize(self, item: dict[str, Any]) -> dict[str, Any]:
        """Convert a resource-level item to low-level client attribute values."""
        return {key: self.serializer.serialize(value) for key, value in item.items()}

    # User operations

    def get_user(self, user_id: str) -> User | None:
        item = self._get(self.users_table, {"id": user_id})
        return User.from_dynamodb_item(item) if item else None

    def get_user_by_email(self, email: str) -> User | None:
        items = self._query_all(
            self.users_table,
            IndexName="email-index",
            KeyConditionExpression=Key("email").eq(email),
        )
        return User.from_dynamodb_item(items[0]) if items else None

    def upsert_user(self, user: UpsertUser) -> User:
        # if_not_exists keeps the first created_at without a prior read
        profile = user.model_dump(exclude={"id"})
        present = {key: value for key, value in profile.items() if value is not None}
        missing = [key for key, value in profile.items() if value is None]

        update_expression = "SET " + ", ".join(
            [f"#{key} = :{key}" for key in present]
            + ["created_at = if_not_exists(created_at, :now)", "updated_at = :now"]
        )
        if missing:
            update_expression += " REMOVE " + ", ".join(f"#{key}" for key in missing)

        values = {f":{key}": value for key, value in present.items()}
        values[":now"] = datetime.now(UTC).isoformat()

        try:
            response = self.users_table.update_item(
                Key={"id": user.id},
                UpdateExpression=update_expression,
                ExpressionAttributeNames={f"#{key}": key for key in profile},
                ExpressionAttributeValues=values,
                ReturnValues="ALL_NEW",
            )
            return User.from_dynamodb_item(response["Attributes"])

        except ClientError as e:
            logger.error(f"Failed to save user {user.id}: {e}")
            raise StorageError(f"Failed to save user {user.id}") from e

    def update_user(self, user_id: str, user_data: UserUpdate) -> User | None:
        existing = self.get_user(user_id)
        if existing is None:
            return None

        changes = user_data.model_dump(exclude_unset=True)
        updated = User.model_validate(
            {**existing.model_dump(), **changes, "updated_at": datetime.now(UTC)}
        )
        self._put(self.users_table, updated.to_dynamodb_item(), f"user {user_id}")
        return updated

    # Category operations

    def get_categories(self) -> list[Category]:
        items = self._scan_all(self.categories_table)
        return sorted((Category.from_dynamodb_item(i) for i in items), key=lambda c: c.id)

    def get_category_by_slug(self, slug: str) -> Category | None:
        items = self._scan_all(self.categories_table, FilterExpression=Attr("slug").eq(slug))
        categories = sorted((Category.from_dynamodb_item(i) for i in items), key=lambda c: c.id)
        return categories[0] if categories else None

    def get_category_by_id(self, category_id: int) -> Category | None:
        item = self._get(self.categories_table, {"id": category_id})
        return Category.from_dynamodb_item(item) if item else None

    def create_category(self, category: CategoryCreate) -> Category:
        record = Category(id=self._next_id("categories"), **category.model_dump())
        self._put(self.categories_table, record.to_dynamodb_item(), f"category {record.slug}")
        return record

    # Product operations

    def _products(self, items: list[dict[str, Any]]) -> list[Product]:
        return sorted((Product.from_dynamodb_item(i) for i in items), key=lambda p: p.id)

    def get_products(self) -> list[Product]:
        return self._products(self._scan_all(self.products_table))

    def get_products_by_category(self, category_id: int) -> list[Product]:
        return self._products(
            self._query_all(
                self.products_table,
                IndexName="category_id-index",
                KeyConditionExpression=Key("category_id").eq(category_id),
            )
        )

    def get_product_by_slug(self, slug: str) -> Product | None:
        products = self._products(
            self._scan_all(self.products_table, FilterExpression=Attr("slug").eq(slug))
        )
        return products[0] if products else None

    def get_product_by_id(self, product_id: int) -> Product | None:
        item = self._get(self.products_table, {"id": product_id})
        return Product.from_dynamodb_item(item) if item else None

    def get_featured_products(self) -> list[Product]:
        return self._products(
            self._scan_all(self.products_table, FilterExpression=Attr("featured").eq(True))
        )

    def create_product(self, product: ProductCreate) -> Product:
        now = datetime.now(UTC)
        record = Product(
            id=self._next_id("products"),
            **product.model_dump(),
            created_at=now,
            updated_at=now,
        )
        self._put(self.products_table, record.to_dynamodb_item(), f"product {record.slug}")
        return record

    def search_products(self, query: str) -> list[Product]:
        # DynamoDB "contains" is case-sensitive, so match client-side
        return [p for p in self.get_products() if p.matches(query)]

    # Cart operations

    def _get_cart_item(self, user_id: str, product_id: int) -> CartItem | None:
        item = self._get(self.cart_items_table, {"user_id": user_id, "product_id": product_id})
        return CartItem.from_dynamodb_item(item) if item else None

    def get_cart_items(self, user_id: str) -> list[CartItem]:
        items = self._query_all(
            self.cart_items_table, KeyConditionExpression=Key("user_id").eq(user_id)
        )
        return sorted((CartItem.from_dynamodb_item(i) for i in items), key=lambda c: c.id)

    def add_to_cart(self, cart_item: CartItemCreate) -> CartItem:
        now = datetime.now(UTC)
        existing = self._get_cart_item(cart_item.user_id, cart_item.product_id)

        if existing is not None:
            record = existing.model_copy(
                update={
                    "quantity": cart_item.quantity,
                    "selected_options": cart_item.selected_options,
                    "updated_at": now,
                }
            )
        else:
            record = CartItem(
                id=self._next_id("cart_items"),
                **cart_item.model_dump(),
                created_at=now,
                updated_at=now,
            )

        self._put(self.cart_items_table, record.to_dynamodb_item(), f"cart item {record.id}")
        return record

    def update_cart_item(
        self, user_id: str, product_id: int, quantity: Decimal
    ) -> CartItem | None:
        existing = self._get_cart_item(user_id, product_id)
        if existing is None:
            return None

        updated = existing.model_copy(update={"quantity": quantity, "updated_at": datetime.now(UTC)})
        self._put(self.cart_items_table, updated.to_dynamodb_item(), f"cart item {updated.id}")
        return updated

    def remove_from_cart(self, user_id: str, product_id: int) -> bool:
        try:
            response = self.cart_items_table.delete_item(
                Key={"user_id": user_id, "product_id": product_id},
                ReturnValues="ALL_OLD",
            )
            return "Attributes" in response

        except ClientError as e:
            logger.error(f"Failed to remove cart item: {e}")  # pragma: no cover
            return False

    def clear_cart(self, user_id: str) -> bool:
        keys = self._cart_keys(user_id)
        try:
            with self.cart_items_table.batch_writer() as batch:
                for key in keys:
                    batch.delete_item(Key=key)
            return True

        except ClientError as e:
            logger.error(f"Failed to clear cart for user {user_id}: {e}")
            raise StorageError(f"Failed to clear cart for user {user_id}") from e

    # Order operations

    def create_order(self, order: OrderCreate, items: list[OrderItemCreate]) -> Order:
        cart_keys = self._cart_keys(order.user_id)
        if 1 + len(items) + len(cart_keys) > MAX_TRANSACT_ACTIONS:
            raise StorageError(
                f"Order with {len(items)} items and {len(cart_keys)} cart lines exceeds "
                f"the {MAX_TRANSACT_ACTIONS}-action transaction limit"
            )

        now = datetime.now(UTC)
        order_id = self._next_id("orders")

        record = Order(id=order_id, **order.model_dump(), created_at=now, updated_at=now)
        order_items = [
            OrderItem(id=self._next_id("order_items"), order_id=order_id, **item.model_dump())
            for item in items
        ]

        actions = [
            {
                "Put": {
                    "TableName": self.table_name("orders"),
                    "Item": self._serialize(record.to_dynamodb_item()),
                }
            }
        ]
        actions.extend(
            {
                "Put": {
                    "TableName": self.table_name("order_items"),
                    "Item": self._serialize(order_item.to_dynamodb_item()),
                }
            }
            for order_item in order_items
        )
        actions.extend(
            {"Delete": {"TableName": self.table_name("cart_items"), "Key": self._serialize(key)}}
            for key in cart_keys
        )

        try:
            self.dynamodb.meta.client.transact_write_items(TransactItems=actions)
        except ClientError as e:
            logger.error(f"Failed to save order {order_id}: {e}")
            raise StorageError(f"Failed to save order {order_id}") from e

        logger.info(
            f"Created order {order_id} for user {order.user_id} with {len(order_items)} items"
        )
        return record

    def get_orders_by_user(self, user_id: str) -> list[Order]:
        items = self._query_all(
            self.orders_table,
            IndexName="user_id-index",
            KeyConditionExpression=Key("user_id").eq(user_id),
        )
        return sorted((Order.from_dynamodb_item(i) for i in items), key=lambda o: o.id)

    def get_order_by_id(self, order_id: int) -> Order | None:
        item = self._get(self.orders_table, {"id": order_id})
        return Order.from_dynamodb_item(item) if item else None

    def get_order_items(self, order_id: int) -> list[OrderItem]:
        items = self._query_all(
            self.order_items_table, KeyConditionExpression=Key("order_id").eq(order_id)
        )
        return sorted((OrderItem.from_dynamodb_item(i) for i in items), key=lambda o: o.id)

    def update_order_status(self, order_id: int, status: OrderStatusEnum) -> Order | None:
        existing = self.get_order_by_id(order_id)
        if existing is None:
            return None

        if not existing.status.can_transition_to(status):
            raise InvalidStatusTransitionError(existing.status, status)

        updated = existing.model_copy(update={"status": status, "updated_at": datetime.now(UTC)})
        try:
            self.orders_table.put_item(
                Item=updated.to_dynamodb_item(),
                ConditionExpression=Attr("status").eq(existing.status.value),
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                current = self.get_order_by_id(order_id)
                raise InvalidStatusTransitionError(
                    current.status if current else existing.status, status
                ) from e
            logger.error(f"Failed to save order {order_id}: {e}")
            raise StorageError(f"Failed to save order {order_id}") from e

        logger.info(f"Order {order_id} moved from {existing.status.value} to {status.value}")
        return updated

    # Contact operations

    def create_contact_message(self, message: ContactMessageCreate) -> ContactMessage:
        record = ContactMessage(
            id=self._next_id("contact_messages"),
            **message.model_dump(),
            created_at=datetime.now(UTC),
        )
        self._put(
            self.contact_messages_table,
            record.to_dynamodb_item(),
            f"contact message {record.id}",
        )
        return record
