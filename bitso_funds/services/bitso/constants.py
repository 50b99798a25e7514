"""Bitso API constants."""

from enum import StrEnum

BITSO_API_URL = "https://api.bitso.com"

WITHDRAWALS_PATH = "/api/v3/withdrawals"
FUNDINGS_PATH = "/api/v3/fundings"

# Bitso caps list endpoints at 100 objects per page
MAX_PAGE_SIZE = 100


class TransferStatus(StrEnum):
    PENDING = "pending"
    COMPLETE = "complete"
    FAILED = "failed"


class TransferMethod(StrEnum):
    PIXSTARK = "pixstark"
    PRAXIS = "praxis"
    USDC_TRF = "usdc_trf"
    BTC = "btc"
    ETH_ERC20 = "eth_erc20"
