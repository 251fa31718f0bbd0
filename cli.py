"""
Storefront Sitemap - CLI

Command-line interface for sitemap generation.
"""

import argparse
import sys
from pathlib import Path

from storemap.config import get_config
from storemap.logging_config import setup_logging, get_logger
from storemap.sitemap.generator import build_generator
from storemap.sitemap.parser import SitemapParser


def generate(args):
    """Write one sitemap document (index by default)."""
    config = get_config(args.config)
    setup_logging(level=config.log_level)
    generator = build_generator(config)

    if args.output:
        with open(args.output, "wb") as f:
            generator.generate_to(f, args.id)
        get_logger("cli").info(f"Sitemap written to {args.output}")
    else:
        generator.generate_to(sys.stdout.buffer, args.id)


def export(args):
    """Write the sitemap index and every numbered sitemap to a directory."""
    config = get_config(args.config)
    setup_logging(level=config.log_level)
    logger = get_logger("cli")
    generator = build_generator(config)

    out_dir = Path(args.dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    # One catalog walk for every file
    sitemaps = generator.sitemaps()
    with open(out_dir / "sitemap.xml", "wb") as f:
        generator.write_index(f, sitemaps)
    for sitemap_id in range(1, len(sitemaps) + 1):
        with open(out_dir / f"sitemap-{sitemap_id}.xml", "wb") as f:
            generator.write_chunk(f, sitemaps, sitemap_id)

    logger.info(f"Exported {len(sitemaps)} sitemaps to {out_dir}", extra={"sitemap_count": len(sitemaps)})

    print("\n" + "=" * 50)
    print("EXPORT RESULTS")
    print("=" * 50)
    print(f"URLs:      {sum(len(s) for s in sitemaps)}")
    print(f"Sitemaps:  {len(sitemaps)}")
    print(f"Directory: {out_dir}")
    print("=" * 50)


def inspect(args):
    """Show what a sitemap file contains."""
    setup_logging(level="WARNING")
    content = Path(args.file).read_bytes()

    parser = SitemapParser()
    url_entries, index_entries = parser.parse(content)

    print("\n" + "=" * 50)
    if parser.is_sitemap_index(content):
        print(f"SITEMAP INDEX: {len(index_entries)} sitemaps")
        print("=" * 50)
        for entry in index_entries:
            print(f"  - {entry.loc} (lastmod {entry.lastmod or 'n/a'})")
    else:
        print(f"URLSET: {len(url_entries)} URLs")
        print("=" * 50)
        for entry in url_entries[:args.limit]:
            print(f"  - {entry.loc} [{entry.changefreq or '-'}, {entry.lastmod or '-'}]")
        if len(url_entries) > args.limit:
            print(f"  ... {len(url_entries) - args.limit} more")
    print("=" * 50)


def show_config(args):
    """Show the effective configuration."""
    config = get_config(args.config)
    store = config.store

    print("\n" + "=" * 50)
    print("SITEMAP CONFIGURATION")
    print("=" * 50)
    print(f"Store URL:       {store.store_url} (store {store.store_id})")
    print(f"Protocol:        {store.http_protocol}")
    print(f"Enabled:         {store.sitemap_enabled}")
    print(f"Categories:      {store.sitemap_include_categories}")
    print(f"Manufacturers:   {store.sitemap_include_manufacturers}")
    print(f"Products:        {store.sitemap_include_products}")
    print(f"Custom URLs:     {len(store.sitemap_custom_urls)}")
    print(f"Catalog:         {config.catalog_source} {config.catalog_file or ''}".rstrip())
    print(f"URLs per file:   {config.max_urls_per_sitemap}")
    print("=" * 50)


def main(argv=None):
    """CLI main entry point."""
    parser = argparse.ArgumentParser(
        description="Storefront Sitemap CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "--config",
        help="Path to the store YAML configuration"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # generate command
    generate_parser = subparsers.add_parser(
        "generate",
        help="Write the sitemap index or one numbered sitemap"
    )
    generate_parser.add_argument(
        "--id",
        type=int,
        default=None,
        help="Sitemap number (omit for the index)"
    )
    generate_parser.add_argument(
        "--output",
        help="Output file (default: stdout)"
    )
    generate_parser.set_defaults(func=generate)

    # export command
    export_parser = subparsers.add_parser(
        "export",
        help="Write sitemap.xml and all sitemap-N.xml files"
    )
    export_parser.add_argument(
        "--dir",
        required=True,
        help="Output directory"
    )
    export_parser.set_defaults(func=export)

    # inspect command
    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Summarize a sitemap file"
    )
    inspect_parser.add_argument("file", help="Sitemap XML file")
    inspect_parser.add_argument(
        "--limit",
        type=int,
        default=20,
        help="Max URLs to list"
    )
    inspect_parser.set_defaults(func=inspect)

    # config command
    config_parser = subparsers.add_parser(
        "config",
        help="Show effective configuration"
    )
    config_parser.set_defaults(func=show_config)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
