"""
Catalog repository backed by Supabase.
Reads the category, manufacturer, product and topic tables.
"""

from typing import List, Optional
from storemap.database.entities import (
    Category,
    Manufacturer,
    Product,
    Topic,
    sort_products,
    visible_in_store,
)
from storemap.config import AppConfig
from storemap.logging_config import get_logger

logger = get_logger("database.repository")


class Repository:
    """
    Data access layer for catalog reads.
    All database interactions go through this class.
    """

    def __init__(self, db=None, config: Optional[AppConfig] = None):
        if db is None:
            from storemap.database.supabase_client import get_supabase
            db = get_supabase(config)
        self.db = db

    # ==================== CATEGORIES ====================

    def get_categories_by_parent(self, parent_category_id: int) -> List[Category]:
        """Get published child categories of a parent (0 = root)."""
        result = self.db.table("categories").select("*").eq(
            "parent_category_id", parent_category_id
        ).eq("published", True).eq("deleted", False).order("display_order").order("id").execute()

        categories = [Category.from_row(row) for row in result.data]
        return sorted(categories, key=lambda c: (c.display_order, c.id))

    # ==================== MANUFACTURERS ====================

    def get_all_manufacturers(self, store_id: int = 0) -> List[Manufacturer]:
        """Get published manufacturers visible in a store."""
        result = self.db.table("manufacturers").select("*").eq(
            "published", True
        ).eq("deleted", False).order("display_order").order("id").execute()

        # Store mappings are an array column, so the store filter runs here
        manufacturers = [
            m for m in (Manufacturer.from_row(row) for row in result.data)
            if visible_in_store(m, store_id)
        ]
        logger.debug(f"Loaded {len(manufacturers)} manufacturers", extra={"store": store_id})
        return sorted(manufacturers, key=lambda m: (m.display_order, m.id))

    # ==================== PRODUCTS ====================

    def search_products(
        self,
        store_id: int = 0,
        visible_individually_only: bool = True,
        batch_size: int = 1000
    ) -> List[Product]:
        """
        Get published products visible in a store, newest first.

        Args:
            store_id: Store ID (0 = all stores)
            visible_individually_only: Skip products shown only as part of another product
            batch_size: Rows fetched per request

        Returns:
            List of Product
        """
        products: List[Product] = []
        offset = 0

        # Supabase caps rows per response, so page through the table
        while True:
            query = self.db.table("products").select("*").eq(
                "published", True
            ).eq("deleted", False)
            if visible_individually_only:
                query = query.eq("visible_individually", True)
            # id breaks creation-time ties so pages never overlap
            result = query.order("created_on_utc", desc=True).order("id", desc=True).range(
                offset, offset + batch_size - 1
            ).execute()

            rows = result.data or []
            products.extend(Product.from_row(row) for row in rows)
            if len(rows) < batch_size:
                break
            offset += batch_size

        products = [p for p in products if visible_in_store(p, store_id)]
        logger.debug(f"Loaded {len(products)} products", extra={"store": store_id})
        return sort_products(products)

    # ==================== TOPICS ====================

    def get_all_topics(self, store_id: int = 0) -> List[Topic]:
        """Get published topics visible in a store."""
        result = self.db.table("topics").select("*").eq("published", True).order("system_name").order("id").execute()
        return [
            t for t in (Topic.from_row(row) for row in result.data)
            if visible_in_store(t, store_id)
        ]
