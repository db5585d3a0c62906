import argparse

from . import __version__
from .config import ConfigError, Settings, load_settings
from .database import JobStore
from .env import load_env
from .queries import fetch_job_page, fetch_statistics
from .schema import SortOrder, parse_listing_params


def _settings() -> Settings:
    try:
        return load_settings()
    except ConfigError as e:
        raise SystemExit(str(e))


def cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    from .api import create_app

    settings = _settings()
    host = args.host or settings.host
    port = args.port or settings.port
    uvicorn.run(create_app(settings), host=host, port=port, log_level=settings.log_level.lower())


def cmd_list(args: argparse.Namespace) -> None:
    settings = _settings()
    # Same normalization as the HTTP handler, so CLI and API agree on defaults.
    params = parse_listing_params(
        {
            "page": args.page,
            "limit": args.limit,
            "search": args.search,
            "ministry": args.ministry,
            "sortBy": args.sort_by,
        }
    )
    store = JobStore(settings.database_url)
    try:
        with store.session() as session:
            page = fetch_job_page(session, params)
    finally:
        store.dispose()

    if not page.postings:
        print("No job postings found.")
        return
    print(f"Page {page.page}/{page.total_pages} ({page.total} matching postings):\n")
    for posting in page.postings:
        flags = [name for name, on in (("urgent", posting.is_urgent), ("new", posting.is_new)) if on]
        print(f"ID: {posting.id}")
        print(f"  Title: {posting.title}")
        print(f"  Ministry: {posting.ministry}")
        print(f"  Type: {posting.job_type}")
        print(f"  Deadline: {posting.application_period_end}")
        if flags:
            print(f"  Flags: {', '.join(flags)}")
        print()


def cmd_stats(args: argparse.Namespace) -> None:
    settings = _settings()
    store = JobStore(settings.database_url)
    try:
        with store.session() as session:
            stats = fetch_statistics(session)
    finally:
        store.dispose()

    print(f"Total jobs: {stats.total_jobs}")
    print(f"Urgent jobs: {stats.urgent_jobs}")
    print(f"New jobs: {stats.new_jobs}")
    print(f"Ministries: {stats.ministries}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jobboard", description="Job board API and query tools")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    srv = subparsers.add_parser("serve", help="Run the HTTP API")
    srv.add_argument("--host", help="Bind address (default: HOST or 127.0.0.1)")
    srv.add_argument("--port", type=int, help="Port (default: PORT or 8000)")
    srv.set_defaults(func=cmd_serve)

    lst = subparsers.add_parser("list", help="Print one page of job postings")
    lst.add_argument("--page", default="1", help="1-based page number (default 1)")
    lst.add_argument("--limit", default="10", help="Page size (default 10, max 50)")
    lst.add_argument("--search", help="Case-insensitive text matched against title, ministry and job type")
    lst.add_argument("--ministry", help="Exact ministry name")
    lst.add_argument(
        "--sort-by",
        default=SortOrder.LATEST.value,
        choices=[s.value for s in SortOrder],
        help="Sort order (default: latest)",
    )
    lst.set_defaults(func=cmd_list)

    sts = subparsers.add_parser("stats", help="Print aggregate statistics")
    sts.set_defaults(func=cmd_stats)

    return parser


def main(argv=None):
    # Load .env if present (DATABASE_URL, LOG_LEVEL, ...)
    load_env()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
