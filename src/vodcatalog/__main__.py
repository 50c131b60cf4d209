"""vodcatalog entry point.

Commands:
  serve     run the HTTP API (default)
  search    one-shot keyword search, printed to stdout
  browse    print one catalog page of a folder
"""

import argparse
import logging
import sys

from vodcatalog import __version__
from vodcatalog.config import Settings, get_settings
from vodcatalog.errors import CatalogError
from vodcatalog.logging_setup import setup_logging
from vodcatalog.models import CatalogPage
from vodcatalog.sorting import parse_sort_key

logger = logging.getLogger(__name__)


def print_page(page: CatalogPage) -> None:
    for entry in page.entries:
        remarks = f"  [{entry.remarks}]" if entry.remarks else ""
        print(f"{entry.kind:6} {entry.id}{remarks}")
    print(f"-- page {page.page}/{page.page_count}, {page.total} item(s)")


def run_search(settings: Settings, keyword: str) -> int:
    from vodcatalog.service import CatalogService

    with CatalogService(settings) as service:
        print_page(service.search(keyword))
    return 0


def run_browse(settings: Settings, tid: str, sort: str | None, page: int) -> int:
    from vodcatalog.service import CatalogService

    sort_key = parse_sort_key(sort, strict=sort is not None)
    with CatalogService(settings) as service:
        print_page(service.catalog.build_page(tid, sort_key, page))
    return 0


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="vodcatalog",
        description="Serve AList folders as a video catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  vodcatalog serve --port 5678           Start the HTTP API
  vodcatalog search "Friends S01"        Search every searchable site
  vodcatalog browse 'movies$/TV' --sort time,desc
""",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    serve.add_argument("--port", "-p", type=int, default=5678, help="Port (default: 5678)")

    search = sub.add_parser("search", help="Search all searchable sites")
    search.add_argument("keyword", nargs="+")

    browse = sub.add_parser("browse", help="Print one page of a folder")
    browse.add_argument("id", help="Folder id, site$path")
    browse.add_argument("--sort", default=None, help="name|time|size,asc|desc")
    browse.add_argument("--page", type=int, default=1)

    args = parser.parse_args()
    setup_logging(level=args.log_level)
    settings = get_settings()

    if not settings.sites:
        logger.warning("No sites configured. Add them to ~/.vodcatalog/config.json")

    try:
        if args.command == "search":
            sys.exit(run_search(settings, " ".join(args.keyword)))
        elif args.command == "browse":
            sys.exit(run_browse(settings, args.id, args.sort, args.page))
        else:
            from vodcatalog.api.serve import run_api_server

            host = getattr(args, "host", "127.0.0.1")
            port = getattr(args, "port", 5678)
            run_api_server(settings, host=host, port=port)
    except CatalogError as e:
        logger.error("%s", e)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Stopped")


if __name__ == "__main__":
    main()
