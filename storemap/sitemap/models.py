"""
Sitemap entry types.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class UpdateFrequency(Enum):
    """How often a page is likely to change (the <changefreq> token)."""
    ALWAYS = "always"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    NEVER = "never"


@dataclass
class SitemapUrl:
    """A single URL to publish in a urlset."""
    location: str  # Absolute URL
    update_frequency: UpdateFrequency
    updated_on: datetime  # Last modification, UTC
