"""
Catalog read from a YAML document.
Same read operations as the Supabase repository, for stores exported to a file.
"""

from pathlib import Path
from typing import List, Dict, Any, Union
import yaml

from storemap.database.entities import (
    Category,
    Manufacturer,
    Product,
    Topic,
    sort_products,
    visible_in_store,
)
from storemap.logging_config import get_logger

logger = get_logger("database.file_catalog")


class FileCatalog:
    """
    In-memory catalog loaded from YAML.

    Expected layout:
        categories: [{id, name, se_name, parent_category_id, ...}]
        manufacturers: [...]
        products: [...]
        topics: [...]
    """

    def __init__(
        self,
        categories: List[Category],
        manufacturers: List[Manufacturer],
        products: List[Product],
        topics: List[Topic],
    ):
        self.categories = categories
        self.manufacturers = manufacturers
        self.products = products
        self.topics = topics

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileCatalog":
        return cls(
            categories=[Category.from_row(row) for row in data.get("categories") or []],
            manufacturers=[Manufacturer.from_row(row) for row in data.get("manufacturers") or []],
            products=[Product.from_row(row) for row in data.get("products") or []],
            topics=[Topic.from_row(row) for row in data.get("topics") or []],
        )

    @classmethod
    def load(cls, path: Union[str, Path]) -> "FileCatalog":
        """Load a catalog file. A missing file raises FileNotFoundError."""
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        catalog = cls.from_dict(data)
        logger.info(
            f"Loaded catalog file with {len(catalog.categories)} categories, "
            f"{len(catalog.manufacturers)} manufacturers, {len(catalog.products)} products, "
            f"{len(catalog.topics)} topics",
            extra={"url": str(path)}
        )
        return catalog

    def get_categories_by_parent(self, parent_category_id: int) -> List[Category]:
        children = [
            c for c in self.categories
            if c.parent_category_id == parent_category_id and c.published and not c.deleted
        ]
        return sorted(children, key=lambda c: (c.display_order, c.id))

    def get_all_manufacturers(self, store_id: int = 0) -> List[Manufacturer]:
        manufacturers = [
            m for m in self.manufacturers
            if m.published and not m.deleted and visible_in_store(m, store_id)
        ]
        return sorted(manufacturers, key=lambda m: (m.display_order, m.id))

    def search_products(self, store_id: int = 0, visible_individually_only: bool = True) -> List[Product]:
        products = [
            p for p in self.products
            if p.published and not p.deleted and visible_in_store(p, store_id)
            and (p.visible_individually or not visible_individually_only)
        ]
        return sort_products(products)

    def get_all_topics(self, store_id: int = 0) -> List[Topic]:
        return [t for t in self.topics if t.published and visible_in_store(t, store_id)]
