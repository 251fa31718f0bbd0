# Catalog sources
from typing import List, Protocol

from storemap.config import AppConfig
from storemap.database.entities import Category, Manufacturer, Product, Topic
from storemap.database.file_catalog import FileCatalog


class Catalog(Protocol):
    """Read operations the sitemap generator needs from a catalog."""

    def get_categories_by_parent(self, parent_category_id: int) -> List[Category]: ...

    def get_all_manufacturers(self, store_id: int = 0) -> List[Manufacturer]: ...

    def search_products(self, store_id: int = 0, visible_individually_only: bool = True) -> List[Product]: ...

    def get_all_topics(self, store_id: int = 0) -> List[Topic]: ...


def get_catalog(config: AppConfig) -> Catalog:
    """Build the catalog source selected by configuration."""
    if config.catalog_source == "supabase":
        from storemap.database.repository import Repository
        return Repository(config=config)
    if not config.catalog_file:
        raise ValueError("catalog_file must be set when the catalog source is 'file'")
    return FileCatalog.load(config.catalog_file)


__all__ = ["Catalog", "Category", "Manufacturer", "Product", "Topic", "FileCatalog", "get_catalog"]
