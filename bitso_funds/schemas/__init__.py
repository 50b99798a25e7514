from .common import ApiErrorDetail, ListResponse
from .funds import Funding, TransferBase, Withdrawal

__all__ = [
    "ApiErrorDetail",
    "Funding",
    "ListResponse",
    "TransferBase",
    "Withdrawal",
]
