"""
Sitemap XML writer.
Serializes sitemap indexes and urlsets per the sitemaps.org 0.9 schema.
"""

from datetime import datetime, timezone
from typing import BinaryIO, Iterable, Optional
from lxml import etree

from storemap.sitemap.models import SitemapUrl
from storemap.logging_config import get_logger

logger = get_logger("sitemap.writer")

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"
SCHEMA_LOCATION = f"{SITEMAP_NS} {SITEMAP_NS}/sitemap.xsd"

DATE_FORMAT = "%Y-%m-%d"


def format_date(value: datetime) -> str:
    """Format a timestamp as a W3C date (YYYY-MM-DD) in UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(DATE_FORMAT)


def _root(tag: str) -> etree._Element:
    root = etree.Element(f"{{{SITEMAP_NS}}}{tag}", nsmap={None: SITEMAP_NS, "xsi": XSI_NS})
    root.set(f"{{{XSI_NS}}}schemaLocation", SCHEMA_LOCATION)
    return root


def _child(parent: etree._Element, tag: str, text: Optional[str] = None) -> etree._Element:
    element = etree.SubElement(parent, f"{{{SITEMAP_NS}}}{tag}")
    if text is not None:
        element.text = text
    return element


def _write(root: etree._Element, stream: BinaryIO) -> None:
    etree.ElementTree(root).write(
        stream,
        xml_declaration=True,
        encoding="UTF-8",
        pretty_print=True,
    )


def write_urlset(stream: BinaryIO, urls: Iterable[SitemapUrl]) -> int:
    """
    Write a <urlset> document.

    Args:
        stream: Binary stream to write to
        urls: Entries to publish

    Returns:
        Number of <url> elements written
    """
    root = _root("urlset")
    count = 0
    for url in urls:
        url_elem = _child(root, "url")
        _child(url_elem, "loc", url.location)
        _child(url_elem, "changefreq", url.update_frequency.value)
        _child(url_elem, "lastmod", format_date(url.updated_on))
        count += 1

    _write(root, stream)
    logger.debug(f"Wrote urlset with {count} URLs")
    return count


def write_sitemap_index(stream: BinaryIO, locations: Iterable[str], lastmod: datetime) -> int:
    """
    Write a <sitemapindex> document.

    Args:
        stream: Binary stream to write to
        locations: Absolute URLs of the numbered sitemaps
        lastmod: Modification date stamped on every entry

    Returns:
        Number of <sitemap> elements written
    """
    root = _root("sitemapindex")
    stamp = format_date(lastmod)
    count = 0
    for location in locations:
        sitemap_elem = _child(root, "sitemap")
        _child(sitemap_elem, "loc", location)
        _child(sitemap_elem, "lastmod", stamp)
        count += 1

    _write(root, stream)
    logger.debug(f"Wrote sitemap index with {count} sitemaps")
    return count
