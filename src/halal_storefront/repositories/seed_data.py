"""Fixed storefront catalog loaded at startup."""

import logging
from decimal import Decimal

from halal_storefront.models.catalog_models import CategoryCreate, ProductCreate, ProductOption
from halal_storefront.repositories.memory_storage import MemStorage
from halal_storefront.repositories.storage import Storage

logger = logging.getLogger(__name__)

SEED_CATEGORIES: list[CategoryCreate] = [
    CategoryCreate(
        name="Fresh Chicken Cuts",
        description="High-quality fresh cuts of halal chicken",
        slug="fresh-chicken-cuts",
    ),
    CategoryCreate(
        name="Processed Chicken Products",
        description="Ready-to-use processed chicken items",
        slug="processed-chicken-products",
    ),
    CategoryCreate(
        name="Marinated & Ready-to-Cook",
        description="Pre-marinated and ready-to-cook chicken items",
        slug="marinated-ready-to-cook",
    ),
    CategoryCreate(
        name="Bulk Pack Options",
        description="Bulk packs for restaurant needs",
        slug="bulk-pack-options",
    ),
    CategoryCreate(
        name="Value-Added Services",
        description="Additional services for processing and packaging",
        slug="value-added-services",
    ),
    CategoryCreate(
        name="Eggs & Add-ons",
        description="Eggs and other poultry products",
        slug="eggs-add-ons",
    ),
]

_UNSPLASH = "?ixlib=rb-4.0.3&auto=format&fit=crop&w=600&h=400&q=80"
_PIXABAY = "https://pixabay.com/get/"

# category_id values refer to SEED_CATEGORIES positions (1-based)
SEED_PRODUCTS: list[ProductCreate] = [
    ProductCreate(
        name="Whole Chicken",
        description="Fresh whole chicken, carefully processed according to halal standards.",
        slug="whole-chicken",
        price=Decimal("5.99"),
        image_url=_PIXABAY + "geb4ae53284bfd5c8e540b77e8ec0c18be1c59454c4481ca08ad768b405e850ae7ae09646d11598cf81e5ce01a63cb9fa24b844a8f393137eda13b3c492b0cb6d_1280.jpg",
        category_id=1,
        featured=True,
        minimum_order_quantity=Decimal("5"),
        unit="kg",
        options=[ProductOption(name="Type", values=["With Skin", "Skinless"])],
    ),
    ProductCreate(
        name="Chicken Breast Boneless",
        description="Premium quality boneless chicken breast cuts, perfect for a variety of dishes.",
        slug="chicken-breast-boneless",
        price=Decimal("7.99"),
        image_url="https://images.unsplash.com/photo-1602470520998-f4a52199a3d6" + _UNSPLASH,
        category_id=1,
        minimum_order_quantity=Decimal("2"),
        unit="kg",
        options=[ProductOption(name="Grade", values=["Premium"])],
    ),
    ProductCreate(
        name="Chicken Wings",
        description="Delicious chicken wings, perfect for restaurants and catering businesses.",
        slug="chicken-wings",
        price=Decimal("6.49"),
        image_url=_PIXABAY + "gdbaef659900510c6e613638027971d141109583e0ecb0db084b62e9f0af3aa5c8fdeeb54294deaf730a2de148bc371abf2b1d435d798bee547f33add664a094d_1280.jpg",
        category_id=1,
        minimum_order_quantity=Decimal("3"),
        unit="kg",
        options=[ProductOption(name="Type", values=["Regular", "Jumbo"])],
    ),
    ProductCreate(
        name="Chicken Drumsticks",
        description="Juicy and tender chicken drumsticks, cut and processed to perfection.",
        slug="chicken-drumsticks",
        price=Decimal("5.49"),
        image_url="https://images.unsplash.com/photo-1587593810167-a84920ea0781" + _UNSPLASH,
        category_id=1,
        minimum_order_quantity=Decimal("2"),
        unit="kg",
        options=[ProductOption(name="Size", values=["Standard"])],
    ),
    ProductCreate(
        name="Chicken Thigh Boneless",
        description="Boneless chicken thighs, perfect for curries, grills, and more.",
        slug="chicken-thigh-boneless",
        price=Decimal("7.29"),
        image_url=_PIXABAY + "g00bd64e6489782f7ef7d060b0a572518b00dec02fffcf6c9da1dc5f848a9a35dd7a3d574b0278599d0b58118b9bc35cc79f55412de3eab9934d9d2a0bc9f6ffa_1280.jpg",
        category_id=1,
        minimum_order_quantity=Decimal("2"),
        unit="kg",
        options=[ProductOption(name="Quality", values=["Premium"])],
    ),
    ProductCreate(
        name="Chicken Mince (Kheema)",
        description="Finely minced chicken meat, ideal for kababs, koftas, and more.",
        slug="chicken-mince-kheema",
        price=Decimal("6.99"),
        image_url="https://images.unsplash.com/photo-1627662168223-7df99068099a" + _UNSPLASH,
        category_id=1,
        minimum_order_quantity=Decimal("2"),
        unit="kg",
        options=[ProductOption(name="Fat %", values=["Regular", "Lean"])],
    ),
    ProductCreate(
        name="Chicken Liver",
        description="Fresh chicken liver, cleaned and processed according to halal standards.",
        slug="chicken-liver",
        price=Decimal("4.99"),
        image_url="https://images.unsplash.com/photo-1588168333986-5078d3ae3976" + _UNSPLASH,
        category_id=1,
        minimum_order_quantity=Decimal("1"),
        unit="kg",
        options=[ProductOption(name="Processing", values=["Clean & Trimmed"])],
    ),
    ProductCreate(
        name="Chicken Gizzard",
        description="Fresh chicken gizzards, cleaned and processed to perfection.",
        slug="chicken-gizzard",
        price=Decimal("4.49"),
        image_url="https://images.unsplash.com/photo-1516684669134-de6f7c473a2a" + _UNSPLASH,
        category_id=1,
        minimum_order_quantity=Decimal("1"),
        unit="kg",
        options=[ProductOption(name="Cleaning", values=["Cleaned"])],
    ),
    ProductCreate(
        name="Spicy Chicken Tikka",
        description=(
            "Pre-marinated tender chicken pieces in our special blend of spices. "
            "Ready to cook, perfect for grilling or tandoor."
        ),
        slug="spicy-chicken-tikka",
        price=Decimal("9.99"),
        image_url=_PIXABAY + "g031bfb398738079b6eae52adc2a1b2c2661d18713964391d0a101acaf96c78150a0e012ee33811a6e60e9009f0caad7e08f8e22bb2d3393f98bca3a675e740d6_1280.jpg",
        category_id=3,
        featured=True,
        minimum_order_quantity=Decimal("2"),
        unit="kg",
    ),
    ProductCreate(
        name="BBQ Chicken Wings",
        description=(
            "Marinated chicken wings in smoky BBQ sauce. "
            "Ready to cook, perfect for grilling, frying or baking."
        ),
        slug="bbq-chicken-wings",
        price=Decimal("8.99"),
        image_url="https://images.unsplash.com/photo-1527477396000-e27163b481c2" + _UNSPLASH,
        category_id=3,
        featured=True,
        minimum_order_quantity=Decimal("2"),
        unit="kg",
    ),
    ProductCreate(
        name="Chicken Seekh Kabab",
        description=(
            "Ready-to-cook minced chicken skewers with aromatic spices. "
            "Perfect for grilling or pan-frying."
        ),
        slug="chicken-seekh-kabab",
        price=Decimal("11.99"),
        image_url="https://images.unsplash.com/photo-1555939594-58d7cb561ad1" + _UNSPLASH,
        category_id=2,
        featured=True,
        minimum_order_quantity=Decimal("2"),
        unit="kg",
    ),
    ProductCreate(
        name="5 kg Boneless Breast Pack",
        description=(
            "Bulk pack of 5 kg boneless chicken breast. "
            "Perfect for restaurants and catering services."
        ),
        slug="5kg-boneless-breast-pack",
        price=Decimal("37.95"),
        image_url="https://images.unsplash.com/photo-1602470520998-f4a52199a3d6" + _UNSPLASH,
        category_id=4,
        minimum_order_quantity=Decimal("1"),
        unit="pack",
    ),
]


def seed_catalog(storage: Storage) -> None:
    """Create the fixed categories and products in order.

    Args:
        storage: Store to populate
    """
    for category in SEED_CATEGORIES:
        storage.create_category(category)

    for product in SEED_PRODUCTS:
        storage.create_product(product)

    logger.info(
        f"Seeded catalog with {len(SEED_CATEGORIES)} categories "
        f"and {len(SEED_PRODUCTS)} products"
    )


def seed_catalog_if_empty(storage: Storage) -> bool:
    """Seed the catalog unless categories already exist.

    Args:
        storage: Store to populate

    Returns:
        bool: True if the catalog was seeded, False if it was already present
    """
    if storage.get_categories():
        logger.info("Catalog already present, skipping seed")
        return False

    seed_catalog(storage)
    return True


def create_seeded_storage() -> MemStorage:
    """Build a fresh in-memory store populated with the seed catalog."""
    storage = MemStorage()
    seed_catalog(storage)
    return storage
