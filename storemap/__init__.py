"""
Sitemap XML generator for an e-commerce storefront.
"""

__version__ = "1.0.0"
