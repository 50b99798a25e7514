"""Command line front end for the Bitso funds client.

Usage:
    bitso-funds list-fundings --limit 25 --status complete
    bitso-funds get-withdrawal <wid>
    bitso-funds export-fundings fundings.csv

Credentials come from BITSO_API_KEY / BITSO_API_SECRET (environment or .env).
"""

import argparse
import logging
import sys

from bitso_funds.config import ConfigurationError, Settings, load_settings
from bitso_funds.services.bitso.client import BitsoAPIError, BitsoClient
from bitso_funds.services.bitso.constants import TransferMethod, TransferStatus
from bitso_funds.services.bitso.export import FundsExporter
from bitso_funds.services.bitso.formatting import (
    format_funding,
    format_funding_list,
    format_withdrawal,
    format_withdrawal_list,
)
from bitso_funds.services.shared.http_client import TransportError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Send logs to stderr, plus the debug log file when one is configured."""
    if settings.debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, settings.log_level.upper(), logging.INFO)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file, encoding="utf-8"))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)


def _limit(value: str) -> int:
    limit = int(value)
    if not 1 <= limit <= 100:
        raise argparse.ArgumentTypeError("limit must be between 1 and 100")
    return limit


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bitso-funds",
        description="Query and export Bitso withdrawals and fundings",
    )
    parser.add_argument(
        "--no-connection-test",
        action="store_true",
        help="Skip the startup connection check",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("test-connection", help="Check API reachability and credentials")

    statuses = [s.value for s in TransferStatus]
    methods = ", ".join(m.value for m in TransferMethod)

    list_withdrawals = commands.add_parser("list-withdrawals", help="List withdrawals")
    list_withdrawals.add_argument("--currency", help="Filter by transaction currency")
    list_withdrawals.add_argument("--limit", type=_limit, help="Objects to return (max 100)")
    list_withdrawals.add_argument("--marker", help="Pagination marker")
    list_withdrawals.add_argument("--method", help=f"Filter by withdrawal method ({methods})")
    list_withdrawals.add_argument("--origin-id", help="Filter by client-supplied ID")
    list_withdrawals.add_argument("--status", choices=statuses, help="Filter by status")
    list_withdrawals.add_argument("--wid", help="Filter by specific withdrawal ID")

    get_withdrawal = commands.add_parser("get-withdrawal", help="Get a withdrawal by ID")
    get_withdrawal.add_argument("wid", help="The withdrawal ID to retrieve")

    by_ids = commands.add_parser(
        "get-withdrawals-by-ids", help="Get withdrawals by comma-separated IDs"
    )
    by_ids.add_argument("wids", help="Comma-separated withdrawal IDs (e.g., 'wid1,wid2')")

    by_origin = commands.add_parser(
        "get-withdrawals-by-origin-ids", help="Get withdrawals by comma-separated origin IDs"
    )
    by_origin.add_argument("origin_ids", help="Comma-separated origin IDs")

    list_fundings = commands.add_parser("list-fundings", help="List fundings")
    list_fundings.add_argument("--limit", type=_limit, help="Objects to return (max 100)")
    list_fundings.add_argument("--marker", help="Pagination marker")
    list_fundings.add_argument("--method", help=f"Filter by funding method ({methods})")
    list_fundings.add_argument("--status", choices=statuses, help="Filter by status")
    list_fundings.add_argument("--fids", help="Comma-separated funding IDs to filter by")

    get_funding = commands.add_parser("get-funding", help="Get a funding by ID")
    get_funding.add_argument("fid", help="The funding ID to retrieve")

    for name, noun in (("export-fundings", "fundings"), ("export-withdrawals", "withdrawals")):
        export = commands.add_parser(name, help=f"Export all {noun} to a CSV file")
        export.add_argument("filepath", help="Path where the CSV file should be created")
        export.add_argument(
            "--page-size", type=_limit, default=None, help="Records per page (max 100)"
        )

    return parser


# Verb used in "Error <verb>: ..." messages
_ERROR_ACTIONS = {
    "list-withdrawals": "listing withdrawals",
    "get-withdrawal": "retrieving withdrawal",
    "get-withdrawals-by-ids": "retrieving withdrawals",
    "get-withdrawals-by-origin-ids": "retrieving withdrawals",
    "list-fundings": "listing fundings",
    "get-funding": "retrieving funding",
    "export-fundings": "exporting fundings",
    "export-withdrawals": "exporting withdrawals",
}


def _execute(args: argparse.Namespace, client: BitsoClient, page_size: int) -> str:
    command = args.command

    if command == "list-withdrawals":
        return format_withdrawal_list(
            client.list_withdrawals(
                currency=args.currency,
                limit=args.limit,
                marker=args.marker,
                method=args.method,
                origin_id=args.origin_id,
                status=args.status,
                wid=args.wid,
            )
        )
    if command == "get-withdrawal":
        return format_withdrawal(client.get_withdrawal(args.wid))
    if command == "get-withdrawals-by-ids":
        return format_withdrawal_list(
            client.get_withdrawals_by_ids(args.wids),
            empty_message="No withdrawals found with the specified IDs.",
            include_network=False,
        )
    if command == "get-withdrawals-by-origin-ids":
        return format_withdrawal_list(
            client.get_withdrawals_by_origin_ids(args.origin_ids),
            empty_message="No withdrawals found with the specified origin IDs.",
            include_network=False,
        )
    if command == "list-fundings":
        return format_funding_list(
            client.list_fundings(
                limit=args.limit,
                marker=args.marker,
                method=args.method,
                status=args.status,
                fids=args.fids,
            )
        )
    if command == "get-funding":
        return format_funding(client.get_funding(args.fid))

    exporter = FundsExporter(client)
    if command == "export-fundings":
        result = exporter.export_fundings(args.filepath, args.page_size or page_size)
        noun = "funding"
    else:
        result = exporter.export_withdrawals(args.filepath, args.page_size or page_size)
        noun = "withdrawal"
    if not result.written:
        return f"No {noun} transactions found to export."
    return f"Successfully exported {result.record_count} {noun} transactions to {result.filepath}"


def run_command(args: argparse.Namespace, client: BitsoClient, page_size: int = 100) -> int:
    """Run one parsed command, print its output and return the exit status."""
    if args.command == "test-connection":
        healthy = client.test_connection()
        print("Connection OK" if healthy else "Could not establish connection to Bitso API")
        return 0 if healthy else 1

    try:
        output = _execute(args, client, page_size)
    except (TransportError, BitsoAPIError, ValueError, OSError) as e:
        logger.error(f"Command {args.command} failed: {e}")
        print(f"Error {_ERROR_ACTIONS[args.command]}: {e}")
        return 1

    print(output)
    return 0


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
        configure_logging(settings)
        credentials = settings.credentials()
    except ConfigurationError as e:
        print(f"Failed to initialize API client: {e}", file=sys.stderr)
        sys.exit(2)

    logger.info(
        f"Configuration loaded (endpoint={settings.bitso_api_endpoint}, "
        f"cache_ttl={settings.cache_ttl_seconds}s)"
    )

    with BitsoClient(
        credentials,
        base_url=settings.bitso_api_endpoint,
        timeout=settings.request_timeout_seconds,
        cache_ttl_seconds=settings.cache_ttl_seconds,
    ) as client:
        if not args.no_connection_test and args.command != "test-connection":
            if not client.test_connection():
                logger.warning("Could not establish connection to Bitso API")
        sys.exit(run_command(args, client, settings.default_limit))


if __name__ == "__main__":
    main()
