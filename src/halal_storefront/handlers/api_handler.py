"""FastAPI application exposing the storefront API."""

import logging
from decimal import Decimal

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from halal_storefront.auth.api_dependencies import (
    get_api_key_from_header,
    get_user_id_from_header,
)
from halal_storefront.auth.api_key_validator import APIKeyValidator
from halal_storefront.models.account_models import (
    ContactMessage,
    ContactMessageCreate,
    UpsertUser,
    User,
    UserUpdate,
)
from halal_storefront.models.catalog_models import Category, Product
from halal_storefront.models.order_models import (
    CartItem,
    CartItemCreate,
    InvalidStatusTransitionError,
    Order,
    OrderItem,
    OrderStatusEnum,
    PaymentMethodEnum,
)
from halal_storefront.observability.metrics import record_cart_operation, record_contact_message
from halal_storefront.repositories.storage import Storage, StorageError
from halal_storefront.services.checkout_service import CartSummary, CheckoutService

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


class SuccessResponse(BaseModel):
    """Acknowledgement for operations without a resource body."""

    success: bool


class AddToCartRequest(BaseModel):
    """Request body for adding a product to the current user's cart."""

    product_id: int
    quantity: Decimal = Field(..., gt=0)
    selected_options: dict[str, str] | None = None


class UpdateCartItemRequest(BaseModel):
    """Request body for changing a cart line's quantity."""

    quantity: Decimal = Field(..., gt=0)


class CartLineResponse(BaseModel):
    """Cart item joined with its product and line total."""

    item: CartItem
    product: Product | None
    line_total: Decimal


class CartResponse(BaseModel):
    """Priced cart."""

    items: list[CartLineResponse]
    subtotal: Decimal
    tax: Decimal
    total: Decimal


class CheckoutRequest(BaseModel):
    """Request body for placing an order from the current cart."""

    shipping_address: str = Field(..., min_length=5)
    billing_address: str | None = None
    payment_method: PaymentMethodEnum = PaymentMethodEnum.CREDIT_CARD


class OrderDetailResponse(BaseModel):
    """An order together with its line items."""

    order: Order
    items: list[OrderItem]


class OrderStatusUpdateRequest(BaseModel):
    """Request body for an order status transition."""

    status: OrderStatusEnum


def _cart_response(summary: CartSummary) -> CartResponse:
    return CartResponse(
        items=[
            CartLineResponse(item=line.item, product=line.product, line_total=line.line_total)
            for line in summary.lines
        ],
        subtotal=summary.subtotal,
        tax=summary.tax,
        total=summary.total,
    )


def create_app(
    storage: Storage,
    checkout_service: CheckoutService,
    api_keys: list[str],
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        storage: Catalog and order store shared by all routes
        checkout_service: Service for cart pricing and order placement
        api_keys: List of valid API keys for service and admin routes

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Halal Storefront API",
        description="Catalog, cart, checkout and order history for restaurant customers",
        version="1.0.0",
    )

    app.state.storage = storage
    app.state.checkout_service = checkout_service
    app.state.api_key_validator = APIKeyValidator(api_keys=api_keys)

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
        logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=503, content={"detail": "Storage unavailable"})

    def validate_api_key(x_api_key: str | None = Header(None)) -> str:
        """Dependency to validate API key."""
        return get_api_key_from_header(x_api_key=x_api_key, validator=app.state.api_key_validator)

    def require_product(product_id: int) -> Product:
        product = app.state.storage.get_product_by_id(product_id)
        if product is None:
            raise HTTPException(status_code=404, detail=f"Product {product_id} not found")
        return product

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy")

    # Catalog

    @app.get("/api/categories", response_model=list[Category], tags=["Catalog"])
    async def list_categories() -> list[Category]:
        return app.state.storage.get_categories()

    @app.get("/api/categories/{slug}", response_model=Category, tags=["Catalog"])
    async def get_category(slug: str) -> Category:
        category = app.state.storage.get_category_by_slug(slug)
        if category is None:
            raise HTTPException(status_code=404, detail=f"Category '{slug}' not found")
        return category

    @app.get("/api/products", response_model=list[Product], tags=["Catalog"])
    async def list_products(
        category: str | None = None,
        search: str | None = None,
        featured: bool | None = None,
    ) -> list[Product]:
        """List products, optionally filtered.

        Filters are exclusive and applied in order: category slug, search
        text, featured flag.
        """
        if category:
            found = app.state.storage.get_category_by_slug(category)
            if found is None:
                raise HTTPException(status_code=404, detail=f"Category '{category}' not found")
            return app.state.storage.get_products_by_category(found.id)

        if search:
            return app.state.storage.search_products(search)

        if featured:
            return app.state.storage.get_featured_products()

        return app.state.storage.get_products()

    @app.get("/api/products/{slug}", response_model=Product, tags=["Catalog"])
    async def get_product(slug: str) -> Product:
        product = app.state.storage.get_product_by_slug(slug)
        if product is None:
            raise HTTPException(status_code=404, detail=f"Product '{slug}' not found")
        return product

    # Cart

    @app.get("/api/cart", response_model=CartResponse, tags=["Cart"])
    async def get_cart(user_id: str = Depends(get_user_id_from_header)) -> CartResponse:
        summary = await app.state.checkout_service.summarize_cart(user_id)
        return _cart_response(summary)

    @app.post("/api/cart", response_model=CartItem, status_code=201, tags=["Cart"])
    async def add_to_cart(
        request: AddToCartRequest,
        user_id: str = Depends(get_user_id_from_header),
    ) -> CartItem:
        """Add a product to the cart, replacing any existing line for it."""
        product = require_product(request.product_id)

        error = app.state.checkout_service.validate_line(
            product, request.quantity, request.selected_options
        )
        if error:
            raise HTTPException(status_code=400, detail=error)

        item = app.state.storage.add_to_cart(
            CartItemCreate(
                user_id=user_id,
                product_id=request.product_id,
                quantity=request.quantity,
                selected_options=request.selected_options,
            )
        )
        record_cart_operation("add")
        return item

    @app.put("/api/cart/{product_id}", response_model=CartItem, tags=["Cart"])
    async def update_cart_item(
        product_id: int,
        request: UpdateCartItemRequest,
        user_id: str = Depends(get_user_id_from_header),
    ) -> CartItem:
        product = app.state.storage.get_product_by_id(product_id)
        if product is not None:
            error = app.state.checkout_service.validate_line(product, request.quantity)
            if error:
                raise HTTPException(status_code=400, detail=error)

        item = app.state.storage.update_cart_item(user_id, product_id, request.quantity)
        if item is None:
            raise HTTPException(status_code=404, detail=f"Product {product_id} is not in the cart")

        record_cart_operation("update")
        return item

    @app.delete("/api/cart/{product_id}", response_model=SuccessResponse, tags=["Cart"])
    async def remove_from_cart(
        product_id: int,
        user_id: str = Depends(get_user_id_from_header),
    ) -> SuccessResponse:
        if not app.state.storage.remove_from_cart(user_id, product_id):
            raise HTTPException(status_code=404, detail=f"Product {product_id} is not in the cart")

        record_cart_operation("remove")
        return SuccessResponse(success=True)

    @app.delete("/api/cart", response_model=SuccessResponse, tags=["Cart"])
    async def clear_cart(user_id: str = Depends(get_user_id_from_header)) -> SuccessResponse:
        app.state.storage.clear_cart(user_id)
        record_cart_operation("clear")
        return SuccessResponse(success=True)

    # Orders

    @app.post("/api/orders", response_model=OrderDetailResponse, status_code=201, tags=["Orders"])
    async def place_order(
        request: CheckoutRequest,
        user_id: str = Depends(get_user_id_from_header),
    ) -> OrderDetailResponse:
        """Place an order from the current cart.

        Raises:
            HTTPException: 400 if the cart is empty or contains an unorderable line
        """
        result = await app.state.checkout_service.place_order(
            user_id=user_id,
            shipping_address=request.shipping_address,
            payment_method=request.payment_method,
            billing_address=request.billing_address,
        )

        if not result.success:
            raise HTTPException(status_code=400, detail=result.error_message)

        return OrderDetailResponse(order=result.order, items=result.items)

    @app.get("/api/orders", response_model=list[Order], tags=["Orders"])
    async def list_orders(user_id: str = Depends(get_user_id_from_header)) -> list[Order]:
        return app.state.storage.get_orders_by_user(user_id)

    @app.get("/api/orders/{order_id}", response_model=OrderDetailResponse, tags=["Orders"])
    async def get_order(
        order_id: int,
        user_id: str = Depends(get_user_id_from_header),
    ) -> OrderDetailResponse:
        order = app.state.storage.get_order_by_id(order_id)
        # Other users' orders are reported as missing
        if order is None or order.user_id != user_id:
            raise HTTPException(status_code=404, detail=f"Order {order_id} not found")

        return OrderDetailResponse(order=order, items=app.state.storage.get_order_items(order_id))

    # Contact

    @app.post("/api/contact", response_model=ContactMessage, status_code=201, tags=["Contact"])
    async def create_contact_message(message: ContactMessageCreate) -> ContactMessage:
        created = app.state.storage.create_contact_message(message)
        record_contact_message()
        logger.info(f"Contact message {created.id} received from {created.restaurant_name}")
        return created

    # Auth and profile

    @app.get("/api/auth/user", response_model=User, tags=["Auth"])
    async def get_current_user(user_id: str = Depends(get_user_id_from_header)) -> User:
        user = app.state.storage.get_user(user_id)
        if user is None:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    @app.post("/api/auth/user", response_model=User, tags=["Auth"])
    async def upsert_user(
        user: UpsertUser,
        _api_key: str = Depends(validate_api_key),
    ) -> User:
        """Record a login from the identity provider, creating or refreshing the user."""
        logger.info(f"Upserting user {user.id} from identity provider")
        return app.state.storage.upsert_user(user)

    @app.post("/api/auth/profile", response_model=User, tags=["Auth"])
    async def update_profile(
        user_data: UserUpdate,
        user_id: str = Depends(get_user_id_from_header),
    ) -> User:
        user = app.state.storage.update_user(user_id, user_data)
        if user is None:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    # Administration

    @app.patch(
        "/api/admin/orders/{order_id}/status",
        response_model=Order,
        tags=["Administration"],
    )
    async def update_order_status(
        order_id: int,
        request: OrderStatusUpdateRequest,
        _api_key: str = Depends(validate_api_key),
    ) -> Order:
        """Move an order through its lifecycle.

        Raises:
            HTTPException: 404 if the order does not exist, 409 if the
                transition is not allowed
        """
        try:
            order = app.state.storage.update_order_status(order_id, request.status)
        except InvalidStatusTransitionError as e:
            raise HTTPException(status_code=409, detail=str(e)) from e

        if order is None:
            raise HTTPException(status_code=404, detail=f"Order {order_id} not found")

        return order

    return app
