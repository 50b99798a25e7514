"""Export of Bitso fundings and withdrawals to CSV.

Walks the list endpoints page by page with Bitso's marker cursor, collects
every record, and renders the columns used by accounting imports:
method, currency, gross, fee, net amount, timestamp, datetime.
"""

import csv
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import tzinfo
from io import StringIO
from pathlib import Path
from typing import TypeVar

from bitso_funds.schemas import Funding, ListResponse, TransferBase, Withdrawal
from bitso_funds.services.bitso.client import BitsoAPIError, BitsoClient
from bitso_funds.services.bitso.constants import MAX_PAGE_SIZE
from bitso_funds.services.shared.http_client import TransportError

logger = logging.getLogger(__name__)

CSV_HEADER = ["method", "currency", "gross", "fee", "net amount", "timestamp", "datetime"]
DATETIME_FORMAT = "%m/%d/%Y %H:%M:%S"

# Fees are not reported by the list endpoints
PLACEHOLDER_FEE = "0"

T = TypeVar("T", bound=TransferBase)


@dataclass
class ExportResult:
    """Outcome of an export run."""

    filepath: Path
    record_count: int
    written: bool


def collect_pages(
    fetch_page: Callable[[int, str | None], ListResponse[T]],
    page_size: int = MAX_PAGE_SIZE,
) -> list[T]:
    """Collect every record from a marker-paginated list endpoint.

    Stops at the first page shorter than page_size. A failed page (ok=False
    or a raised API/transport error) also stops the walk; records already
    collected are kept.

    Args:
        fetch_page: Called with (limit, marker), returns one page
        page_size: Records requested per page, 1-100

    Returns:
        All collected records in API order
    """
    if not 1 <= page_size <= MAX_PAGE_SIZE:
        raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {page_size}")

    collected: list[T] = []
    marker: str | None = None
    pages = 0

    while True:
        try:
            response = fetch_page(page_size, marker)
        except (TransportError, BitsoAPIError) as e:
            logger.warning(f"Stopping pagination after {pages} pages: {e}")
            break
        pages += 1

        if not response.ok:
            logger.warning(
                f"Stopping pagination after {pages} pages: {response.error_message}"
            )
            break

        collected.extend(response.items)

        if len(response.items) < page_size:
            break
        marker = response.items[-1].id

    logger.info(f"Collected {len(collected)} records in {pages} pages")
    return collected


def render_csv(transfers: Sequence[TransferBase], tz: tzinfo | None = None) -> str:
    """Render transfers as CSV text.

    Args:
        transfers: Fundings or withdrawals
        tz: Zone for the datetime column. None uses the local zone.

    Returns:
        CSV text with header, one row per transfer, newline-terminated
    """
    buffer = StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for transfer in transfers:
        created = transfer.created_at
        writer.writerow(
            [
                transfer.method,
                transfer.currency,
                transfer.amount,
                PLACEHOLDER_FEE,
                transfer.amount,
                int(created.timestamp()),
                created.astimezone(tz).strftime(DATETIME_FORMAT),
            ]
        )
    return buffer.getvalue()


class FundsExporter:
    """Exports every funding or withdrawal on the account to a CSV file.

    Usage:
        exporter = FundsExporter(client)
        result = exporter.export_fundings("fundings.csv")
        if not result.written:
            print("No funding transactions found to export.")
    """

    def __init__(self, client: BitsoClient, tz: tzinfo | None = None):
        self.client = client
        self.tz = tz

    def collect_fundings(self, page_size: int = MAX_PAGE_SIZE) -> list[Funding]:
        return collect_pages(
            lambda limit, marker: self.client.list_fundings(limit=limit, marker=marker),
            page_size,
        )

    def collect_withdrawals(self, page_size: int = MAX_PAGE_SIZE) -> list[Withdrawal]:
        return collect_pages(
            lambda limit, marker: self.client.list_withdrawals(limit=limit, marker=marker),
            page_size,
        )

    def render_csv(self, transfers: Sequence[TransferBase]) -> str:
        return render_csv(transfers, self.tz)

    def _write(self, filepath: str | Path, transfers: Sequence[TransferBase]) -> ExportResult:
        path = Path(filepath)
        if not transfers:
            logger.info(f"Nothing to export, {path} not written")
            return ExportResult(filepath=path, record_count=0, written=False)

        path.write_text(self.render_csv(transfers), encoding="utf-8")
        logger.info(f"Exported {len(transfers)} records to {path}")
        return ExportResult(filepath=path, record_count=len(transfers), written=True)

    def export_fundings(
        self, filepath: str | Path, page_size: int = MAX_PAGE_SIZE
    ) -> ExportResult:
        """Collect all fundings and write them to filepath.

        No file is written when there are no fundings. OSError from the
        write propagates.
        """
        return self._write(filepath, self.collect_fundings(page_size))

    def export_withdrawals(
        self, filepath: str | Path, page_size: int = MAX_PAGE_SIZE
    ) -> ExportResult:
        """Collect all withdrawals and write them to filepath."""
        return self._write(filepath, self.collect_withdrawals(page_size))
