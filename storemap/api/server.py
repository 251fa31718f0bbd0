"""
FastAPI server exposing the store's sitemap documents.
"""

import io
from datetime import datetime, timezone
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, Depends, HTTPException
from fastapi.responses import Response, RedirectResponse
from pydantic import BaseModel

from storemap.config import get_config
from storemap.sitemap.generator import SitemapGenerator, build_generator
from storemap.sitemap.models import SitemapUrl
from storemap.logging_config import setup_logging, get_logger

logger = get_logger("api.server")

XML_MEDIA_TYPE = "text/xml"


class SitemapStats(BaseModel):
    urls: int
    sitemaps: int
    max_urls_per_sitemap: int


# Generator built on first request
_generator: Optional[SitemapGenerator] = None


def get_generator() -> SitemapGenerator:
    """Get or create the generator for the configured store."""
    global _generator
    if _generator is None:
        try:
            _generator = build_generator(get_config())
        except Exception as e:
            logger.error(f"Catalog could not be opened: {e}")
            raise HTTPException(status_code=503, detail="Sitemap catalog unavailable")
    return _generator


def _collect(generator: SitemapGenerator) -> List[List[SitemapUrl]]:
    """Read the catalog once, mapping failures to 503."""
    try:
        return generator.sitemaps()
    except Exception as e:
        logger.error(f"Catalog read failed: {e}", extra={"store": generator.settings.store_id})
        raise HTTPException(status_code=503, detail="Sitemap catalog unavailable")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    config = get_config()
    setup_logging(level=config.log_level)
    logger.info("API server starting", extra={"store": config.store.store_id})

    yield

    logger.info("API server stopping")


app = FastAPI(
    title="Storefront Sitemap API",
    description="sitemaps.org documents for the storefront catalog",
    version="1.0.0",
    lifespan=lifespan
)


def _sitemap_response(generator: SitemapGenerator, sitemap_id: Optional[int]) -> Response:
    if not generator.settings.sitemap_enabled:
        home_page = generator.url_helper.route_url("home_page", generator.protocol)
        return RedirectResponse(url=home_page, status_code=302)

    sitemaps = _collect(generator)
    stream = io.BytesIO()
    if sitemap_id is None or not 1 <= sitemap_id <= len(sitemaps):
        generator.write_index(stream, sitemaps)
    else:
        generator.write_chunk(stream, sitemaps, sitemap_id)
    return Response(content=stream.getvalue(), media_type=XML_MEDIA_TYPE)


# ==================== HEALTH ====================

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    config = get_config()
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "store_url": config.store.store_url,
    }


# ==================== SITEMAP ENDPOINTS ====================

# Plain `def` handlers run in the threadpool; generation reads the catalog synchronously

@app.get("/sitemap.xml")
def sitemap_index(generator: SitemapGenerator = Depends(get_generator)):
    """Sitemap index listing every numbered sitemap."""
    return _sitemap_response(generator, None)


@app.get("/sitemap-{sitemap_id}.xml")
def sitemap_page(sitemap_id: int, generator: SitemapGenerator = Depends(get_generator)):
    """One numbered urlset; unknown numbers fall back to the index."""
    return _sitemap_response(generator, sitemap_id)


@app.get("/api/sitemap/stats", response_model=SitemapStats)
def sitemap_stats(generator: SitemapGenerator = Depends(get_generator)):
    """URL and sitemap counts for the current catalog."""
    sitemaps = _collect(generator)
    return SitemapStats(
        urls=sum(len(s) for s in sitemaps),
        sitemaps=len(sitemaps),
        max_urls_per_sitemap=generator.max_urls_per_sitemap,
    )
