"""
Configuration loader for the storefront sitemap generator.
Handles environment variables and the YAML store configuration.
Catalog data itself lives in Supabase or in a YAML catalog file.
"""

import os
from pathlib import Path
from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field
import yaml
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Search engines reject sitemap files holding more URLs than this
MAX_SITEMAP_URLS = 50000

CATALOG_SOURCES = ("file", "supabase")

DEFAULT_ROUTES: Dict[str, str] = {
    "home_page": "",
    "product_search": "search",
    "contact_us": "contactus",
    "news_archive": "news",
    "blog": "blog",
    "boards": "boards",
    "category": "{se_name}",
    "manufacturer": "{se_name}",
    "product": "{se_name}",
    "topic": "{se_name}",
    "sitemap": "sitemap-{id}.xml",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean flag from the environment."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {raw!r}")


@dataclass
class StoreSettings:
    """Store-level settings that decide what goes into the sitemap."""
    store_url: str = "http://localhost/"
    store_id: int = 0  # 0 = not limited to a store
    force_ssl_for_all_pages: bool = False
    sitemap_enabled: bool = True
    sitemap_include_categories: bool = True
    sitemap_include_manufacturers: bool = True
    sitemap_include_products: bool = False
    sitemap_custom_urls: List[str] = field(default_factory=list)

    # Optional storefront sections
    news_enabled: bool = True
    blog_enabled: bool = True
    forums_enabled: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoreSettings":
        return cls(
            store_url=data.get("store_url", "http://localhost/"),
            store_id=int(data.get("store_id", 0)),
            force_ssl_for_all_pages=bool(data.get("force_ssl_for_all_pages", False)),
            sitemap_enabled=bool(data.get("sitemap_enabled", True)),
            sitemap_include_categories=bool(data.get("sitemap_include_categories", True)),
            sitemap_include_manufacturers=bool(data.get("sitemap_include_manufacturers", True)),
            sitemap_include_products=bool(data.get("sitemap_include_products", False)),
            sitemap_custom_urls=list(data.get("sitemap_custom_urls") or []),
            news_enabled=bool(data.get("news_enabled", True)),
            blog_enabled=bool(data.get("blog_enabled", True)),
            forums_enabled=bool(data.get("forums_enabled", False)),
        )

    @property
    def http_protocol(self) -> str:
        """Protocol used for every generated URL."""
        return "https" if self.force_ssl_for_all_pages else "http"


@dataclass
class AppConfig:
    """Main application configuration."""
    store: StoreSettings = field(default_factory=StoreSettings)

    # Catalog source
    catalog_source: str = "file"
    catalog_file: Optional[str] = None

    # Supabase settings (catalog_source == "supabase")
    supabase_url: Optional[str] = None
    supabase_service_key: Optional[str] = None

    # Output
    max_urls_per_sitemap: int = MAX_SITEMAP_URLS
    routes: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_ROUTES))

    # Logging
    log_level: str = "INFO"

    def validate(self) -> None:
        """Raise ValueError for settings that cannot produce a sitemap."""
        if self.catalog_source not in CATALOG_SOURCES:
            raise ValueError(
                f"Unknown catalog source '{self.catalog_source}', "
                f"expected one of {', '.join(CATALOG_SOURCES)}"
            )
        if self.catalog_source == "supabase" and not all([self.supabase_url, self.supabase_service_key]):
            raise ValueError("Missing required Supabase environment variables")
        if not 1 <= self.max_urls_per_sitemap <= MAX_SITEMAP_URLS:
            raise ValueError(
                f"max_urls_per_sitemap must be between 1 and {MAX_SITEMAP_URLS}, "
                f"got {self.max_urls_per_sitemap}"
            )

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "AppConfig":
        """Load configuration from the YAML file, then apply environment overrides."""
        if config_path is None:
            config_path = os.getenv("STOREMAP_CONFIG")
        if config_path is None:
            config_path = Path(__file__).parent.parent / "config" / "store.yaml"
        else:
            config_path = Path(config_path)

        yaml_config: Dict[str, Any] = {}
        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f) or {}

        store_data = dict(yaml_config.get("store") or {})
        if os.getenv("STORE_URL"):
            store_data["store_url"] = os.getenv("STORE_URL")
        if os.getenv("STORE_ID"):
            store_data["store_id"] = int(os.getenv("STORE_ID"))
        store = StoreSettings.from_dict(store_data)
        store.force_ssl_for_all_pages = _env_bool("FORCE_SSL", store.force_ssl_for_all_pages)

        catalog = yaml_config.get("catalog") or {}
        catalog_source = os.getenv("CATALOG_SOURCE") or catalog.get("source", "file")
        catalog_file = os.getenv("CATALOG_FILE") or None
        if catalog_file is None and catalog.get("file"):
            # Relative to the YAML file that names it
            catalog_file = str(config_path.parent / catalog["file"])

        routes = dict(DEFAULT_ROUTES)
        routes.update(yaml_config.get("routes") or {})

        config = cls(
            store=store,
            catalog_source=catalog_source,
            catalog_file=catalog_file,
            supabase_url=os.getenv("SUPABASE_URL") or None,
            supabase_service_key=os.getenv("SUPABASE_SERVICE_KEY") or None,
            max_urls_per_sitemap=int(
                os.getenv("MAX_URLS_PER_SITEMAP") or yaml_config.get("max_urls_per_sitemap", MAX_SITEMAP_URLS)
            ),
            routes=routes,
            log_level=os.getenv("LOG_LEVEL") or yaml_config.get("log_level", "INFO"),
        )
        config.validate()
        return config


# Global config instance
_config: Optional[AppConfig] = None


def get_config(config_path: Optional[str] = None) -> AppConfig:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = AppConfig.load(config_path)
    return _config


def reload_config(config_path: Optional[str] = None) -> AppConfig:
    """Force reload the configuration."""
    global _config
    _config = AppConfig.load(config_path)
    return _config
