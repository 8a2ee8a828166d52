"""Unit tests for the seed catalog."""

from decimal import Decimal

import pytest

from halal_storefront.repositories.memory_storage import MemStorage
from halal_storefront.repositories.seed_data import (
    SEED_CATEGORIES,
    SEED_PRODUCTS,
    create_seeded_storage,
    seed_catalog,
    seed_catalog_if_empty,
)


@pytest.mark.unit
class TestSeedCatalog:
    """Test suite for catalog seeding."""

    def test_catalog_size(self) -> None:
        assert len(SEED_CATEGORIES) == 6
        assert len(SEED_PRODUCTS) == 12

    def test_slugs_are_unique(self) -> None:
        assert len({c.slug for c in SEED_CATEGORIES}) == len(SEED_CATEGORIES)
        assert len({p.slug for p in SEED_PRODUCTS}) == len(SEED_PRODUCTS)

    def test_products_reference_seeded_categories(self) -> None:
        assert all(1 <= p.category_id <= len(SEED_CATEGORIES) for p in SEED_PRODUCTS)

    def test_seed_assigns_ids_in_order(self, storage: MemStorage) -> None:
        seed_catalog(storage)

        assert [c.id for c in storage.get_categories()] == [1, 2, 3, 4, 5, 6]
        assert storage.get_product_by_id(1).slug == "whole-chicken"
        assert storage.get_product_by_id(12).slug == "5kg-boneless-breast-pack"

    def test_bulk_pack_is_sold_per_pack(self) -> None:
        pack = create_seeded_storage().get_product_by_slug("5kg-boneless-breast-pack")

        assert pack.unit == "pack"
        assert pack.price == Decimal("37.95")

    def test_seed_if_empty_runs_once(self, storage: MemStorage) -> None:
        assert seed_catalog_if_empty(storage) is True
        assert seed_catalog_if_empty(storage) is False

        assert len(storage.get_products()) == 12
