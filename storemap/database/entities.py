"""
Catalog entities shared by every catalog source.
"""

from datetime import datetime, timezone
from typing import List, Dict, Any, Optional, Union
from dataclasses import dataclass, field
from dateutil.parser import parse as parse_date


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse a stored timestamp into an aware UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = parse_date(str(value))
    if parsed.tzinfo is None:
        # Catalog timestamps are stored in UTC
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _store_ids(value: Any) -> List[int]:
    if not value:
        return []
    return [int(v) for v in value]


@dataclass
class Category:
    """Category entity."""
    id: int = 0
    name: str = ""
    se_name: Optional[str] = None
    parent_category_id: int = 0
    display_order: int = 0
    published: bool = True
    deleted: bool = False
    updated_on_utc: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Category":
        return cls(
            id=int(row["id"]),
            name=row.get("name") or "",
            se_name=row.get("se_name"),
            parent_category_id=int(row.get("parent_category_id") or 0),
            display_order=int(row.get("display_order") or 0),
            published=bool(row.get("published", True)),
            deleted=bool(row.get("deleted", False)),
            updated_on_utc=parse_timestamp(row.get("updated_on_utc")),
        )


@dataclass
class Manufacturer:
    """Manufacturer entity."""
    id: int = 0
    name: str = ""
    se_name: Optional[str] = None
    display_order: int = 0
    published: bool = True
    deleted: bool = False
    limited_to_stores: bool = False
    store_ids: List[int] = field(default_factory=list)
    updated_on_utc: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Manufacturer":
        return cls(
            id=int(row["id"]),
            name=row.get("name") or "",
            se_name=row.get("se_name"),
            display_order=int(row.get("display_order") or 0),
            published=bool(row.get("published", True)),
            deleted=bool(row.get("deleted", False)),
            limited_to_stores=bool(row.get("limited_to_stores", False)),
            store_ids=_store_ids(row.get("store_ids")),
            updated_on_utc=parse_timestamp(row.get("updated_on_utc")),
        )


@dataclass
class Product:
    """Product entity."""
    id: int = 0
    name: str = ""
    se_name: Optional[str] = None
    visible_individually: bool = True
    published: bool = True
    deleted: bool = False
    limited_to_stores: bool = False
    store_ids: List[int] = field(default_factory=list)
    created_on_utc: Optional[datetime] = None
    updated_on_utc: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Product":
        return cls(
            id=int(row["id"]),
            name=row.get("name") or "",
            se_name=row.get("se_name"),
            visible_individually=bool(row.get("visible_individually", True)),
            published=bool(row.get("published", True)),
            deleted=bool(row.get("deleted", False)),
            limited_to_stores=bool(row.get("limited_to_stores", False)),
            store_ids=_store_ids(row.get("store_ids")),
            created_on_utc=parse_timestamp(row.get("created_on_utc")),
            updated_on_utc=parse_timestamp(row.get("updated_on_utc")),
        )


@dataclass
class Topic:
    """Topic (content page) entity."""
    id: int = 0
    system_name: str = ""
    title: str = ""
    se_name: Optional[str] = None
    include_in_sitemap: bool = False
    published: bool = True
    limited_to_stores: bool = False
    store_ids: List[int] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.title or self.system_name

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Topic":
        return cls(
            id=int(row["id"]),
            system_name=row.get("system_name") or "",
            title=row.get("title") or "",
            se_name=row.get("se_name"),
            include_in_sitemap=bool(row.get("include_in_sitemap", False)),
            published=bool(row.get("published", True)),
            limited_to_stores=bool(row.get("limited_to_stores", False)),
            store_ids=_store_ids(row.get("store_ids")),
        )


def visible_in_store(entity: Union[Manufacturer, Product, Topic], store_id: int) -> bool:
    """Check store mapping. store_id 0 means no store filter."""
    if not entity.limited_to_stores or store_id == 0:
        return True
    return store_id in entity.store_ids


def _creation_key(product: Product):
    created = product.created_on_utc or datetime.min.replace(tzinfo=timezone.utc)
    return (created, product.id)


def sort_products(products: List[Product]) -> List[Product]:
    """Order products by creation date, newest first."""
    return sorted(products, key=_creation_key, reverse=True)
