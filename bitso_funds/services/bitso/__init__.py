"""Bitso funds-movement API: signing, client and CSV export."""

from .client import BitsoAPIError, BitsoClient, BitsoNotFoundError
from .export import ExportResult, FundsExporter, collect_pages, render_csv
from .signer import BitsoCredentials, RequestSigner

__all__ = [
    "BitsoAPIError",
    "BitsoClient",
    "BitsoCredentials",
    "BitsoNotFoundError",
    "ExportResult",
    "FundsExporter",
    "RequestSigner",
    "collect_pages",
    "render_csv",
]
