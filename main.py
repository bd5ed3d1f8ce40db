# main.py

"""Entry point for naftas (API server or headless CLI)."""

import argparse
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("naftas.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    valid_ids = ", ".join(s["id"] for s in Settings.AVAILABLE_SOURCES)

    parser = argparse.ArgumentParser(
        prog="naftas",
        description="Nearby fuel prices from the Argentine energy open data.",
        epilog=f"Available price sources: {valid_ids}",
    )
    parser.add_argument(
        "--source",
        default=None,
        choices=[s["id"] for s in Settings.AVAILABLE_SOURCES],
        help=f"Price source (default: {Settings.PRICE_SOURCE}).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default=Settings.API_HOST)
    serve.add_argument("--port", type=int, default=Settings.API_PORT)

    prices = sub.add_parser("prices", help="Show prices for a city.")
    prices.add_argument(
        "city",
        nargs="?",
        default=None,
        help="Locality name, e.g. 'BERISSO' (default: the saved city).",
    )
    prices.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )

    zone = sub.add_parser("zone", help="Nearest locality to a coordinate.")
    zone.add_argument("lat")
    zone.add_argument("lon")

    city = sub.add_parser("city", help="Show or change the saved city.")
    city.add_argument("name", nargs="?", default=None)

    bookmark = sub.add_parser("bookmark", help="Manage saved prices.")
    actions = bookmark.add_subparsers(dest="action", required=True)
    add = actions.add_parser("add", help="Save a price.")
    add.add_argument("brand")
    add.add_argument("fuel_type")
    add.add_argument("price", type=float)
    add.add_argument("--city", default=None, help="Default: the saved city.")
    add.add_argument("--liters", type=float, default=None)
    add.add_argument("--date", default=None, help="Default: today.")
    remove = actions.add_parser("rm", help="Delete a saved price.")
    remove.add_argument("bookmark_id")
    listing = actions.add_parser("ls", help="List saved prices.")
    listing.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="table",
        dest="output_format",
    )

    sub.add_parser("health", help="Check connectivity of every upstream.")
    return parser


def _run_server(host: str, port: int, source_id: str | None) -> None:
    """Serve the FastAPI app with uvicorn."""
    import uvicorn

    from src.api.app import create_app

    try:
        uvicorn.run(create_app(source_id), host=host, port=port)
    except Exception:
        logger.critical("Fatal error while serving", exc_info=True)
        raise
    finally:
        logger.info("naftas API shutting down")


def _run_bookmark(args: argparse.Namespace) -> int:
    from src.cli import runner

    if args.action == "add":
        return runner.run_bookmark_add(
            args.brand,
            args.fuel_type,
            args.price,
            city=args.city,
            liters=args.liters,
            saved_on=args.date,
        )
    if args.action == "rm":
        return runner.run_bookmark_remove(args.bookmark_id)
    return runner.run_bookmark_list(args.output_format)


def main() -> None:
    """Dispatch to the server or a one-shot CLI command."""
    log_file = setup_logging()
    logger.info("naftas starting, log file: %s", log_file)

    args = _build_parser().parse_args()

    if args.command == "serve":
        _run_server(args.host, args.port, args.source)
        return

    from src.cli import runner

    if args.command == "prices":
        exit_code = runner.run_prices(
            args.city, args.output_format, args.source
        )
    elif args.command == "zone":
        exit_code = runner.run_zone(args.lat, args.lon, args.source)
    elif args.command == "city":
        exit_code = runner.run_city(args.name)
    elif args.command == "bookmark":
        exit_code = _run_bookmark(args)
    else:
        exit_code = runner.run_health_check()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
