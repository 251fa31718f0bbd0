"""
Sitemap XML parser.
Reads sitemap index and urlset documents back, for inspecting exported files.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union
from lxml import etree

from storemap.logging_config import get_logger

logger = get_logger("sitemap.parser")

# XML namespaces - support both HTTP and HTTPS variants
SITEMAP_NS_HTTP = {"sm": "http://www.sitemaps.org/schemas/sitemap/0.9"}
SITEMAP_NS_HTTPS = {"sm": "https://www.sitemaps.org/schemas/sitemap/0.9"}


@dataclass
class SitemapEntry:
    """A single entry from a urlset."""
    loc: str  # URL
    lastmod: Optional[str] = None  # Last modified date
    changefreq: Optional[str] = None  # Change frequency
    priority: Optional[float] = None  # Priority


@dataclass
class SitemapIndexEntry:
    """A sitemap reference from a sitemap index."""
    loc: str  # Sitemap URL
    lastmod: Optional[str] = None


def _text(element, path: str, namespaces: dict) -> Optional[str]:
    found = element.find(path, namespaces=namespaces)
    if found is not None and found.text:
        return found.text.strip()
    return None


class SitemapParser:
    """
    Parser for XML sitemaps.
    Handles both sitemap index and regular urlsets.
    """

    def _root(self, xml_content: Union[str, bytes]):
        if isinstance(xml_content, str):
            xml_content = xml_content.encode("utf-8")
        return etree.fromstring(xml_content)

    def is_sitemap_index(self, xml_content: Union[str, bytes]) -> bool:
        """Check if content is a sitemap index, whatever prefix its root uses."""
        try:
            root = self._root(xml_content)
        except etree.XMLSyntaxError:
            return False
        return etree.QName(root).localname == "sitemapindex"

    def _detect_sitemap_namespace(self, root) -> dict:
        """
        Detect whether the sitemap uses HTTP or HTTPS namespace.
        """
        root_ns = etree.QName(root).namespace or ""

        if "https://www.sitemaps.org/schemas/sitemap/0.9" in root_ns:
            return SITEMAP_NS_HTTPS
        return SITEMAP_NS_HTTP

    def parse_index(self, xml_content: Union[str, bytes]) -> List[SitemapIndexEntry]:
        """
        Parse a sitemap index file.

        Args:
            xml_content: XML document

        Returns:
            List of SitemapIndexEntry
        """
        entries = []

        try:
            root = self._root(xml_content)
            sitemap_ns = self._detect_sitemap_namespace(root)

            for sitemap in root.xpath("//sm:sitemap", namespaces=sitemap_ns):
                loc = _text(sitemap, "sm:loc", sitemap_ns)
                if loc:
                    entries.append(SitemapIndexEntry(loc=loc, lastmod=_text(sitemap, "sm:lastmod", sitemap_ns)))

            logger.info(f"Parsed sitemap index with {len(entries)} nested sitemaps")

        except etree.XMLSyntaxError as e:
            logger.error(f"XML parsing error in sitemap index: {e}")

        return entries

    def parse_urlset(self, xml_content: Union[str, bytes]) -> List[SitemapEntry]:
        """
        Parse a regular sitemap (urlset).

        Args:
            xml_content: XML document

        Returns:
            List of SitemapEntry
        """
        entries = []

        try:
            root = self._root(xml_content)
            sitemap_ns = self._detect_sitemap_namespace(root)

            for url_elem in root.xpath("//sm:url", namespaces=sitemap_ns):
                loc = _text(url_elem, "sm:loc", sitemap_ns)
                if not loc:
                    continue

                priority = _text(url_elem, "sm:priority", sitemap_ns)
                entries.append(SitemapEntry(
                    loc=loc,
                    lastmod=_text(url_elem, "sm:lastmod", sitemap_ns),
                    changefreq=_text(url_elem, "sm:changefreq", sitemap_ns),
                    priority=float(priority) if priority else None,
                ))

            logger.info(f"Parsed urlset with {len(entries)} URLs")

        except etree.XMLSyntaxError as e:
            logger.error(f"XML parsing error in urlset: {e}")

        return entries

    def parse(self, xml_content: Union[str, bytes]) -> Tuple[List[SitemapEntry], List[SitemapIndexEntry]]:
        """
        Parse any sitemap content.

        Returns:
            Tuple of (url_entries, index_entries)
            One of these will be empty depending on sitemap type.
        """
        if self.is_sitemap_index(xml_content):
            return [], self.parse_index(xml_content)
        return self.parse_urlset(xml_content), []
