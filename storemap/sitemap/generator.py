"""
Sitemap generator.
Collects the store's indexable URLs from the catalog, splits them into
numbered sitemaps and writes either the sitemap index or one urlset.
"""

import io
from datetime import datetime, timezone
from typing import BinaryIO, Callable, List, Optional, Set

from storemap.config import AppConfig, StoreSettings, MAX_SITEMAP_URLS
from storemap.database import Catalog, get_catalog
from storemap.sitemap.models import SitemapUrl, UpdateFrequency
from storemap.sitemap.routes import UrlHelper, entity_se_name
from storemap.sitemap.writer import write_sitemap_index, write_urlset
from storemap.logging_config import get_logger

logger = get_logger("sitemap.generator")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def split_sitemaps(urls: List[SitemapUrl], size: int) -> List[List[SitemapUrl]]:
    """Split URLs into consecutive chunks of at most `size` entries."""
    if size < 1:
        raise ValueError(f"Chunk size must be positive, got {size}")
    return [urls[i:i + size] for i in range(0, len(urls), size)]


class SitemapGenerator:
    """
    Builds sitemap.xml documents for a store.

    Every generate call re-reads the catalog, so output always reflects
    the current catalog state.
    """

    def __init__(
        self,
        catalog: Catalog,
        url_helper: UrlHelper,
        settings: StoreSettings,
        max_urls_per_sitemap: int = MAX_SITEMAP_URLS,
        clock: Callable[[], datetime] = utc_now,
    ):
        if not 1 <= max_urls_per_sitemap <= MAX_SITEMAP_URLS:
            raise ValueError(
                f"max_urls_per_sitemap must be between 1 and {MAX_SITEMAP_URLS}, "
                f"got {max_urls_per_sitemap}"
            )
        self.catalog = catalog
        self.url_helper = url_helper
        self.settings = settings
        self.max_urls_per_sitemap = max_urls_per_sitemap
        self.clock = clock

    @property
    def protocol(self) -> str:
        return self.settings.http_protocol

    def _route_url(self, route_name: str, **values) -> str:
        return self.url_helper.route_url(route_name, self.protocol, **values)

    # ==================== URL COLLECTION ====================

    def generate_urls(self) -> List[SitemapUrl]:
        """
        Collect every URL for the sitemap, in publishing order.

        Returns:
            List of SitemapUrl
        """
        now = self.clock()
        sitemap_urls: List[SitemapUrl] = []

        # Static pages
        static_routes = ["home_page", "product_search", "contact_us"]
        if self.settings.news_enabled:
            static_routes.append("news_archive")
        if self.settings.blog_enabled:
            static_routes.append("blog")
        if self.settings.forums_enabled:
            static_routes.append("boards")
        for route_name in static_routes:
            sitemap_urls.append(SitemapUrl(self._route_url(route_name), UpdateFrequency.WEEKLY, now))

        if self.settings.sitemap_include_categories:
            self.write_categories(sitemap_urls, 0, now)

        if self.settings.sitemap_include_manufacturers:
            self.write_manufacturers(sitemap_urls, now)

        if self.settings.sitemap_include_products:
            self.write_products(sitemap_urls, now)

        self.write_topics(sitemap_urls, now)
        self.write_custom_urls(sitemap_urls, now)

        logger.info(
            f"Collected {len(sitemap_urls)} sitemap URLs",
            extra={"store": self.settings.store_id, "urls_found": len(sitemap_urls)}
        )
        return sitemap_urls

    def write_categories(
        self,
        sitemap_urls: List[SitemapUrl],
        parent_category_id: int,
        now: datetime,
        visited: Optional[Set[int]] = None,
    ) -> None:
        """Append category URLs depth-first, each parent before its children."""
        if visited is None:
            visited = {parent_category_id}

        for category in self.catalog.get_categories_by_parent(parent_category_id):
            if category.id in visited:
                logger.warning(
                    f"Category {category.id} already visited, skipping cycle",
                    extra={"section": "categories"}
                )
                continue
            visited.add(category.id)

            url = self._route_url("category", se_name=entity_se_name(category))
            sitemap_urls.append(SitemapUrl(url, UpdateFrequency.WEEKLY, category.updated_on_utc or now))

            self.write_categories(sitemap_urls, category.id, now, visited)

    def write_manufacturers(self, sitemap_urls: List[SitemapUrl], now: datetime) -> None:
        manufacturers = self.catalog.get_all_manufacturers(store_id=self.settings.store_id)
        for manufacturer in manufacturers:
            url = self._route_url("manufacturer", se_name=entity_se_name(manufacturer))
            sitemap_urls.append(SitemapUrl(url, UpdateFrequency.WEEKLY, manufacturer.updated_on_utc or now))

    def write_products(self, sitemap_urls: List[SitemapUrl], now: datetime) -> None:
        products = self.catalog.search_products(
            store_id=self.settings.store_id,
            visible_individually_only=True
        )
        for product in products:
            url = self._route_url("product", se_name=entity_se_name(product))
            sitemap_urls.append(SitemapUrl(url, UpdateFrequency.WEEKLY, product.updated_on_utc or now))

    def write_topics(self, sitemap_urls: List[SitemapUrl], now: datetime) -> None:
        topics = [t for t in self.catalog.get_all_topics(store_id=self.settings.store_id) if t.include_in_sitemap]
        for topic in topics:
            url = self._route_url("topic", se_name=entity_se_name(topic))
            sitemap_urls.append(SitemapUrl(url, UpdateFrequency.WEEKLY, now))

    def write_custom_urls(self, sitemap_urls: List[SitemapUrl], now: datetime) -> None:
        store_location = self.url_helper.store_location(self.protocol)
        for custom_url in self.settings.sitemap_custom_urls:
            if custom_url.startswith(("http://", "https://")):
                url = custom_url
            else:
                url = store_location + custom_url.lstrip("/")
            sitemap_urls.append(SitemapUrl(url, UpdateFrequency.WEEKLY, now))

    # ==================== DOCUMENTS ====================

    def sitemaps(self) -> List[List[SitemapUrl]]:
        """All URLs split into numbered sitemaps (index 0 is sitemap 1)."""
        return split_sitemaps(self.generate_urls(), self.max_urls_per_sitemap)

    def sitemap_count(self) -> int:
        return len(self.sitemaps())

    def generate_to(self, stream: BinaryIO, sitemap_id: Optional[int] = None) -> None:
        """
        Write a sitemap document to a binary stream.

        Args:
            stream: Destination stream
            sitemap_id: 1-based sitemap number. None, values below 1 and
                values past the last sitemap produce the sitemap index.
        """
        sitemaps = self.sitemaps()

        if sitemap_id is None or sitemap_id < 1 or sitemap_id > len(sitemaps):
            self.write_index(stream, sitemaps)
        else:
            self.write_chunk(stream, sitemaps, sitemap_id)

    def write_index(self, stream: BinaryIO, sitemaps: List[List[SitemapUrl]]) -> None:
        """Write the sitemap index for already collected sitemaps."""
        locations = [self._route_url("sitemap", id=n) for n in range(1, len(sitemaps) + 1)]
        write_sitemap_index(stream, locations, self.clock())
        logger.info(
            "Generated sitemap index",
            extra={"store": self.settings.store_id, "sitemap_count": len(sitemaps)}
        )

    def write_chunk(self, stream: BinaryIO, sitemaps: List[List[SitemapUrl]], sitemap_id: int) -> None:
        """Write numbered sitemap `sitemap_id` (1-based) from already collected sitemaps."""
        if not 1 <= sitemap_id <= len(sitemaps):
            raise IndexError(f"Sitemap {sitemap_id} out of range 1..{len(sitemaps)}")
        written = write_urlset(stream, sitemaps[sitemap_id - 1])
        logger.info(
            f"Generated sitemap with {written} URLs",
            extra={"store": self.settings.store_id, "sitemap_id": sitemap_id}
        )

    def generate(self, sitemap_id: Optional[int] = None) -> str:
        """Build a sitemap document and return it as text."""
        stream = io.BytesIO()
        self.generate_to(stream, sitemap_id)
        return stream.getvalue().decode("utf-8")


def build_generator(config: AppConfig, catalog: Optional[Catalog] = None) -> SitemapGenerator:
    """Wire a generator from application configuration."""
    if catalog is None:
        catalog = get_catalog(config)
    return SitemapGenerator(
        catalog=catalog,
        url_helper=UrlHelper(config.store.store_url, config.routes),
        settings=config.store,
        max_urls_per_sitemap=config.max_urls_per_sitemap,
    )
