from datetime import datetime, timezone

import pytest

from storemap.config import StoreSettings
from storemap.database.file_catalog import FileCatalog
from storemap.sitemap.generator import SitemapGenerator
from storemap.sitemap.routes import UrlHelper

FIXED_NOW = datetime(2024, 7, 15, 12, 30, tzinfo=timezone.utc)

ENV_VARS = [
    "STOREMAP_CONFIG",
    "STORE_URL",
    "STORE_ID",
    "FORCE_SSL",
    "CATALOG_SOURCE",
    "CATALOG_FILE",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_KEY",
    "MAX_URLS_PER_SITEMAP",
    "LOG_LEVEL",
]

CATALOG_DATA = {
    "categories": [
        {"id": 1, "name": "Computers", "se_name": "computers", "parent_category_id": 0,
         "display_order": 1, "updated_on_utc": "2024-05-02T10:00:00Z"},
        {"id": 2, "name": "Desktops", "se_name": "desktops", "parent_category_id": 1,
         "display_order": 1, "updated_on_utc": "2024-05-03T10:00:00Z"},
        {"id": 3, "name": "Notebooks", "se_name": "notebooks", "parent_category_id": 1,
         "display_order": 2, "updated_on_utc": "2024-05-04T10:00:00Z"},
        {"id": 4, "name": "Camera & Photo", "parent_category_id": 0, "display_order": 2},
        {"id": 5, "name": "Hidden", "parent_category_id": 0, "display_order": 3, "published": False},
        {"id": 6, "name": "Tablets", "se_name": "tablets", "parent_category_id": 3,
         "display_order": 1, "updated_on_utc": "2024-05-05T10:00:00Z"},
    ],
    "manufacturers": [
        {"id": 1, "name": "Apple", "se_name": "apple", "display_order": 1,
         "updated_on_utc": "2024-03-01T00:00:00Z"},
        {"id": 2, "name": "HP", "se_name": "hp", "display_order": 2,
         "limited_to_stores": True, "store_ids": [2]},
        {"id": 3, "name": "Dell", "se_name": "dell", "display_order": 3, "deleted": True},
    ],
    "products": [
        {"id": 1, "name": "Apple MacBook Pro 13-inch",
         "created_on_utc": "2024-01-10T09:00:00Z", "updated_on_utc": "2024-06-01T09:00:00Z"},
        {"id": 2, "name": "HP Spectre XT Pro UltraBook", "se_name": "hp-spectre-xt-pro-ultrabook",
         "created_on_utc": "2024-02-10T09:00:00Z", "updated_on_utc": "2024-06-02T09:00:00Z"},
        {"id": 3, "name": "Warranty add-on", "visible_individually": False,
         "created_on_utc": "2024-02-11T09:00:00Z"},
        {"id": 4, "name": "Store One Exclusive", "se_name": "store-one-exclusive",
         "limited_to_stores": True, "store_ids": [1],
         "created_on_utc": "2024-03-01T09:00:00Z", "updated_on_utc": "2024-06-03T09:00:00Z"},
    ],
    "topics": [
        {"id": 1, "system_name": "AboutUs", "title": "About us", "se_name": "about-us",
         "include_in_sitemap": True},
        {"id": 2, "system_name": "PrivacyInfo", "title": "Privacy notice", "se_name": "privacy-notice",
         "include_in_sitemap": True, "limited_to_stores": True, "store_ids": [2]},
        {"id": 3, "system_name": "CheckoutAsGuestOrRegister", "include_in_sitemap": False},
    ],
}

EXPECTED_LOCATIONS = [
    "http://shop.example.com/",
    "http://shop.example.com/search",
    "http://shop.example.com/contactus",
    "http://shop.example.com/news",
    "http://shop.example.com/blog",
    "http://shop.example.com/computers",
    "http://shop.example.com/desktops",
    "http://shop.example.com/notebooks",
    "http://shop.example.com/tablets",
    "http://shop.example.com/camera-photo",
    "http://shop.example.com/apple",
    "http://shop.example.com/store-one-exclusive",
    "http://shop.example.com/hp-spectre-xt-pro-ultrabook",
    "http://shop.example.com/apple-macbook-pro-13-inch",
    "http://shop.example.com/about-us",
    "http://shop.example.com/shipping-returns",
    "http://shop.example.com/gift-cards",
    "https://blog.example.com/",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove configuration variables and reset the config singleton."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("storemap.config._config", None)


@pytest.fixture
def catalog():
    return FileCatalog.from_dict(CATALOG_DATA)


@pytest.fixture
def settings():
    return StoreSettings(
        store_url="http://shop.example.com/",
        store_id=1,
        sitemap_include_products=True,
        sitemap_custom_urls=["shipping-returns", "/gift-cards", "https://blog.example.com/"],
    )


@pytest.fixture
def url_helper():
    return UrlHelper("http://shop.example.com/")


@pytest.fixture
def generator(catalog, url_helper, settings):
    return SitemapGenerator(catalog, url_helper, settings, clock=lambda: FIXED_NOW)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def expected_locations():
    return list(EXPECTED_LOCATIONS)


@pytest.fixture
def catalog_data():
    return CATALOG_DATA
