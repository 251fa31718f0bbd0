# Sitemap module
from storemap.sitemap.models import SitemapUrl, UpdateFrequency
from storemap.sitemap.routes import UrlHelper, get_se_name
from storemap.sitemap.generator import SitemapGenerator, build_generator, split_sitemaps
from storemap.sitemap.parser import SitemapParser, SitemapEntry, SitemapIndexEntry

__all__ = [
    "SitemapUrl",
    "UpdateFrequency",
    "UrlHelper",
    "get_se_name",
    "SitemapGenerator",
    "build_generator",
    "split_sitemaps",
    "SitemapParser",
    "SitemapEntry",
    "SitemapIndexEntry",
]
