import io
from datetime import datetime, timezone

import pytest
from lxml import etree

from storemap.config import AppConfig, StoreSettings
from storemap.database.entities import Category
from storemap.database.file_catalog import FileCatalog
from storemap.sitemap.generator import SitemapGenerator, build_generator, split_sitemaps
from storemap.sitemap.models import SitemapUrl, UpdateFrequency
from storemap.sitemap.routes import UrlHelper

NS = {"sm": "http://www.sitemaps.org/schemas/sitemap/0.9"}


def _locations(urls):
    return [u.location for u in urls]


class TestGenerateUrls:
    def test_publishing_order(self, generator, expected_locations):
        assert _locations(generator.generate_urls()) == expected_locations

    def test_every_entry_is_weekly(self, generator):
        assert {u.update_frequency for u in generator.generate_urls()} == {UpdateFrequency.WEEKLY}

    def test_lastmod_uses_entity_timestamps(self, generator, fixed_now):
        by_location = {u.location: u.updated_on for u in generator.generate_urls()}

        assert by_location["http://shop.example.com/computers"] == datetime(2024, 5, 2, 10, tzinfo=timezone.utc)
        assert by_location["http://shop.example.com/apple"] == datetime(2024, 3, 1, tzinfo=timezone.utc)
        assert by_location["http://shop.example.com/store-one-exclusive"] == datetime(
            2024, 6, 3, 9, tzinfo=timezone.utc
        )
        # No stored timestamp, static pages, topics and custom URLs
        assert by_location["http://shop.example.com/camera-photo"] == fixed_now
        assert by_location["http://shop.example.com/"] == fixed_now
        assert by_location["http://shop.example.com/about-us"] == fixed_now
        assert by_location["https://blog.example.com/"] == fixed_now

    def test_force_ssl_switches_protocol(self, catalog, url_helper, settings, fixed_now):
        settings.force_ssl_for_all_pages = True
        generator = SitemapGenerator(catalog, url_helper, settings, clock=lambda: fixed_now)

        locations = _locations(generator.generate_urls())

        assert locations[0] == "https://shop.example.com/"
        assert "https://shop.example.com/computers" in locations
        assert "https://shop.example.com/shipping-returns" in locations
        assert "https://shop.example.com/gift-cards" in locations
        assert all(location.startswith("https://") for location in locations)
        # Absolute custom URLs are kept as configured
        assert locations[-1] == "https://blog.example.com/"

    def test_optional_sections_follow_settings(self, catalog, url_helper, fixed_now):
        settings = StoreSettings(
            store_url="http://shop.example.com/",
            store_id=1,
            news_enabled=False,
            blog_enabled=False,
            forums_enabled=True,
            sitemap_include_categories=False,
            sitemap_include_manufacturers=False,
            sitemap_include_products=False,
        )
        generator = SitemapGenerator(catalog, url_helper, settings, clock=lambda: fixed_now)

        assert _locations(generator.generate_urls()) == [
            "http://shop.example.com/",
            "http://shop.example.com/search",
            "http://shop.example.com/contactus",
            "http://shop.example.com/boards",
            "http://shop.example.com/about-us",
        ]

    def test_store_zero_sees_every_store(self, catalog, url_helper, settings, fixed_now):
        settings.store_id = 0
        generator = SitemapGenerator(catalog, url_helper, settings, clock=lambda: fixed_now)

        locations = _locations(generator.generate_urls())

        assert "http://shop.example.com/hp" in locations
        assert "http://shop.example.com/privacy-notice" in locations

    def test_category_cycle_is_visited_once(self, url_helper, fixed_now):
        catalog = FileCatalog.from_dict({
            "categories": [
                {"id": 1, "name": "A", "parent_category_id": 0},
                {"id": 2, "name": "B", "parent_category_id": 1},
            ]
        })
        # Corrupt data: B is also listed as the parent of A
        catalog.categories.append(Category(id=1, name="A", parent_category_id=2))
        settings = StoreSettings(news_enabled=False, blog_enabled=False)
        generator = SitemapGenerator(catalog, url_helper, settings, clock=lambda: fixed_now)

        locations = _locations(generator.generate_urls())

        assert locations.count("http://shop.example.com/a") == 1
        assert locations.count("http://shop.example.com/b") == 1

    def test_custom_url_under_store_path(self, catalog, fixed_now):
        settings = StoreSettings(
            store_url="http://example.com/shop",
            sitemap_include_categories=False,
            sitemap_include_manufacturers=False,
            sitemap_custom_urls=["/deals"],
        )
        generator = SitemapGenerator(catalog, UrlHelper(settings.store_url), settings, clock=lambda: fixed_now)

        locations = _locations(generator.generate_urls())

        assert locations[0] == "http://example.com/shop/"
        assert locations[-1] == "http://example.com/shop/deals"


class TestSplitSitemaps:
    def _urls(self, count, fixed_now):
        return [SitemapUrl(f"http://x/{i}", UpdateFrequency.WEEKLY, fixed_now) for i in range(count)]

    def test_chunks_keep_order(self, fixed_now):
        urls = self._urls(7, fixed_now)

        chunks = split_sitemaps(urls, 3)

        assert [len(c) for c in chunks] == [3, 3, 1]
        assert [u for chunk in chunks for u in chunk] == urls

    def test_exact_multiple(self, fixed_now):
        assert [len(c) for c in split_sitemaps(self._urls(6, fixed_now), 3)] == [3, 3]

    def test_empty(self):
        assert split_sitemaps([], 50000) == []

    def test_invalid_size(self, fixed_now):
        with pytest.raises(ValueError):
            split_sitemaps(self._urls(1, fixed_now), 0)


class TestGenerate:
    def _small_generator(self, catalog, url_helper, settings, fixed_now, size=5):
        return SitemapGenerator(catalog, url_helper, settings, max_urls_per_sitemap=size, clock=lambda: fixed_now)

    def test_default_is_index(self, catalog, url_helper, settings, fixed_now):
        generator = self._small_generator(catalog, url_helper, settings, fixed_now)

        root = etree.fromstring(generator.generate().encode("utf-8"))

        assert etree.QName(root).localname == "sitemapindex"
        locs = root.xpath("//sm:sitemap/sm:loc/text()", namespaces=NS)
        assert locs == [f"http://shop.example.com/sitemap-{n}.xml" for n in range(1, 5)]
        assert set(root.xpath("//sm:sitemap/sm:lastmod/text()", namespaces=NS)) == {"2024-07-15"}

    @pytest.mark.parametrize("sitemap_id", [None, 0, -1, 5, 99])
    def test_out_of_range_ids_return_index(self, catalog, url_helper, settings, fixed_now, sitemap_id):
        generator = self._small_generator(catalog, url_helper, settings, fixed_now)

        assert "<sitemapindex" in generator.generate(sitemap_id)

    def test_numbered_sitemaps_cover_all_urls(self, catalog, url_helper, settings, fixed_now, expected_locations):
        generator = self._small_generator(catalog, url_helper, settings, fixed_now)

        collected = []
        for sitemap_id in range(1, generator.sitemap_count() + 1):
            root = etree.fromstring(generator.generate(sitemap_id).encode("utf-8"))
            assert etree.QName(root).localname == "urlset"
            locs = root.xpath("//sm:url/sm:loc/text()", namespaces=NS)
            assert len(locs) <= 5
            collected.extend(locs)

        assert collected == expected_locations

    def test_single_urlset_fields(self, generator):
        root = etree.fromstring(generator.generate(1).encode("utf-8"))

        computers = root.xpath("//sm:url[sm:loc='http://shop.example.com/computers']", namespaces=NS)[0]
        assert computers.findtext("sm:changefreq", namespaces=NS) == "weekly"
        assert computers.findtext("sm:lastmod", namespaces=NS) == "2024-05-02"

    def test_generate_to_stream(self, generator):
        stream = io.BytesIO()

        generator.generate_to(stream, 1)

        assert stream.getvalue().startswith(b"<?xml version='1.0' encoding='UTF-8'?>")
        assert b"<urlset" in stream.getvalue()

    def test_precomputed_chunks(self, catalog, url_helper, settings, fixed_now, expected_locations):
        generator = self._small_generator(catalog, url_helper, settings, fixed_now)
        sitemaps = generator.sitemaps()

        index = io.BytesIO()
        generator.write_index(index, sitemaps)
        chunk = io.BytesIO()
        generator.write_chunk(chunk, sitemaps, 2)

        assert len(etree.fromstring(index.getvalue()).xpath("sm:sitemap", namespaces=NS)) == 4
        assert etree.fromstring(chunk.getvalue()).xpath("sm:url/sm:loc/text()", namespaces=NS) == expected_locations[5:10]
        with pytest.raises(IndexError):
            generator.write_chunk(io.BytesIO(), sitemaps, 5)

    def test_rejects_oversized_chunks(self, catalog, url_helper, settings):
        with pytest.raises(ValueError):
            SitemapGenerator(catalog, url_helper, settings, max_urls_per_sitemap=50001)


def test_build_generator_uses_config(catalog):
    config = AppConfig(
        store=StoreSettings(store_url="https://store.example.org/", force_ssl_for_all_pages=True),
        max_urls_per_sitemap=100,
    )

    generator = build_generator(config, catalog=catalog)

    assert generator.max_urls_per_sitemap == 100
    assert generator.generate_urls()[0].location == "https://store.example.org/"
