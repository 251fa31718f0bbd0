"""
Storefront URL building.
Turns route names and SEO names into absolute storefront URLs.
"""

import re
from typing import Dict, Optional
from urllib.parse import urlsplit, quote

from storemap.config import DEFAULT_ROUTES

_ALLOWED_SE_CHARS = re.compile(r"[^a-z0-9_-]")
_DASH_RUNS = re.compile(r"-{2,}")


def get_se_name(name: str) -> str:
    """
    Build a search engine friendly name from a display name.

    "Apple MacBook Pro 13-inch" -> "apple-macbook-pro-13-inch"
    """
    if not name:
        return ""
    slug = name.strip().lower().replace(" ", "-")
    slug = _ALLOWED_SE_CHARS.sub("", slug)
    return _DASH_RUNS.sub("-", slug)


def entity_se_name(entity) -> str:
    """Stored SEO name of an entity, or one derived from its name."""
    se_name = getattr(entity, "se_name", None)
    if se_name:
        return se_name
    return get_se_name(entity.name)


class UrlHelper:
    """
    Resolves named routes against the store URL.
    """

    def __init__(self, store_url: str, routes: Optional[Dict[str, str]] = None):
        parts = urlsplit(store_url)
        if not parts.netloc:
            raise ValueError(f"Store URL must be absolute: {store_url!r}")
        self.store_url = store_url
        self.host = parts.netloc
        self.base_path = parts.path if parts.path.endswith("/") else f"{parts.path}/"
        self.routes = dict(DEFAULT_ROUTES)
        if routes:
            self.routes.update(routes)

    def route_url(self, route_name: str, protocol: str = "http", **values) -> str:
        """
        Build an absolute URL for a named route.

        Args:
            route_name: Key in the route table, e.g. "category"
            protocol: "http" or "https"
            **values: Template values, URL-quoted before substitution

        Returns:
            Absolute URL
        """
        template = self.routes[route_name]
        path = template.format(**{k: quote(str(v), safe="") for k, v in values.items()})
        return f"{protocol}://{self.host}{self.base_path}{path.lstrip('/')}"

    def store_location(self, protocol: Optional[str] = None) -> str:
        """Store URL with a trailing slash, optionally under another protocol."""
        scheme = protocol or urlsplit(self.store_url).scheme
        return f"{scheme}://{self.host}{self.base_path}"
