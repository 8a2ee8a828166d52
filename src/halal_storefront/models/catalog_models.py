"""Catalog models: categories, products and their option axes."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from halal_storefront.models.base_models import StoredRecord


class ProductOption(BaseModel):
    """A named variation axis of a product (e.g. "Type": With Skin / Skinless)."""

    name: str = Field(..., description="Axis name")
    values: list[str] = Field(default_factory=list, description="Allowed values for the axis")


class CategoryCreate(BaseModel):
    """Input for creating a category."""

    name: str = Field(..., description="Category name")
    description: str | None = Field(None, description="Category description")
    slug: str = Field(..., description="URL slug used for lookups")


class Category(CategoryCreate, StoredRecord):
    """Product category."""

    id: int = Field(..., description="Serial identifier assigned by the store")


class ProductCreate(BaseModel):
    """Input for creating a product."""

    name: str = Field(..., description="Product name")
    description: str | None = Field(None, description="Product description")
    slug: str = Field(..., description="URL slug used for lookups")
    price: Decimal = Field(..., description="Unit price", ge=0)
    image_url: str | None = Field(None, description="URL to product image")
    category_id: int = Field(..., description="Category this product belongs to")
    featured: bool = Field(default=False, description="Shown on the home page")
    in_stock: bool = Field(default=True, description="Whether the product can be ordered")
    minimum_order_quantity: Decimal = Field(
        default=Decimal("1"), description="Minimum orderable quantity", ge=0
    )
    unit: str = Field(default="kg", description="Unit the quantity is measured in")
    options: list[ProductOption] = Field(default_factory=list, description="Variation axes")

    @field_validator("options", mode="before")
    @classmethod
    def validate_options(cls, v: list | None) -> list:
        """Treat a missing options value as no axes."""
        return [] if v is None else v


class Product(ProductCreate, StoredRecord):
    """Catalog product."""

    id: int = Field(..., description="Serial identifier assigned by the store")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match against name or description.

        Args:
            query: Search text

        Returns:
            bool: True if the name or description contains the query
        """
        needle = query.lower()
        if needle in self.name.lower():
            return True
        return self.description is not None and needle in self.description.lower()

    def option_error(self, selected_options: dict[str, str] | None) -> str | None:
        """Check a selection against this product's option axes.

        Axes left unselected are allowed.

        Args:
            selected_options: Mapping from axis name to chosen value

        Returns:
            Error message if the selection is invalid, None otherwise
        """
        if not selected_options:
            return None

        axes = {option.name: option.values for option in self.options}
        for name, value in selected_options.items():
            if name not in axes:
                return f"{self.name} has no option '{name}'"
            if value not in axes[name]:
                return f"'{value}' is not a valid {name} for {self.name}"
        return None
