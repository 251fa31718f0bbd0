"""
Storefront Sitemap - Main Entry Point

Serves sitemap.xml over HTTP.
"""

import os

import uvicorn

from storemap.config import get_config
from storemap.logging_config import setup_logging, get_logger


def main():
    """Main entry point."""
    config = get_config()
    setup_logging(level=config.log_level)
    logger = get_logger("main")

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))

    logger.info("=" * 50)
    logger.info(f"Storefront Sitemap serving {config.store.store_url} on {host}:{port}")
    logger.info("=" * 50)

    uvicorn.run("storemap.api.server:app", host=host, port=port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
