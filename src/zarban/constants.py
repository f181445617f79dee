"""Constants and mappings for the Zarban SDK."""

from enum import Enum

# API base URLs per surface and network
WALLET_API_MAINNET = "https://wapi.zarban.io"
WALLET_API_TESTNET = "https://testwapi.zarban.io"
SERVICE_API_MAINNET = "https://api.zarban.io"
SERVICE_API_TESTNET = "https://testapi.zarban.io"

HEADER_AUTHORIZATION = "Authorization"
HEADER_CHILD_USER = "X-Child-User"
HEADER_REQUEST_ID = "X-Request-ID"

DEFAULT_LOCALE = "en-US"

# Stablecoin symbol; every other precision comes from the ilk list
STABLECOIN_SYMBOL = "ZAR"
DEFAULT_PRECISION = 18

# Contract role and decoded field that carry a freshly opened vault id
VAULT_MANAGER_CONTRACT = "Cdpmanager"
VAULT_ID_FIELD = "Cdp"

LOAN_SETTLED_STATE = "Loan settled"
LOAN_SETTLEMENT_FAILED_STATE = "Loan settlement failed"


class APISurface(str, Enum):
    """The two REST surfaces exposed by Zarban."""

    WALLET = "wallet"
    SERVICE = "service"


class WalletEndpoint(str, Enum):
    """Wallet API endpoint paths."""

    LOGIN = "/v2/auth/email/login"
    SIGNUP = "/v2/auth/email/signup"
    CHILD_USERS = "/v2/users/children"
    PROFILE = "/v2/users/me"
    LOANS_CREATE = "/v2/loans/create"
    LOANS_REPAY = "/v2/loans/repay"
    LOAN_DETAILS = "/v2/loans/{loan_id}"


class ServiceEndpoint(str, Enum):
    """Service API endpoint paths."""

    ILKS = "/v2/stablecoin-system/ilks"
    CREATE_VAULT_TX = "/v2/stablecoin-system/tx/create-vault"
    REPAY_ZAR_TX = "/v2/stablecoin-system/tx/repay-zar"
    LOGS_BY_TX_HASH = "/v2/stablecoin-system/events/tx/{tx_hash}"
    STAKING_WITHDRAW_TX = "/v2/staking/tx/withdraw"


class LoanToValueOption(str, Enum):
    """Risk profile for custodial loans."""

    RISKY = "Risky"
    NORMAL = "Normal"
    SAFE = "Safe"


class LoanCreateIntent(str, Enum):
    PREVIEW = "Preview"
    CREATE = "Create"


class RepayLoanIntent(str, Enum):
    PREVIEW = "Preview"
    REPAY = "Repay"


BASE_URLS = {
    (APISurface.WALLET, False): WALLET_API_MAINNET,
    (APISurface.WALLET, True): WALLET_API_TESTNET,
    (APISurface.SERVICE, False): SERVICE_API_MAINNET,
    (APISurface.SERVICE, True): SERVICE_API_TESTNET,
}


def get_base_url(surface: APISurface | str, testnet: bool = True) -> str:
    """Get the default base URL for an API surface.

    Args:
        surface: ``"wallet"`` or ``"service"``
        testnet: Whether to target the test deployment

    Returns:
        Base URL without trailing slash

    Raises:
        ValueError: If surface is not known
    """
    try:
        key = (APISurface(surface), testnet)
    except ValueError:
        raise ValueError(f"Unknown API surface: {surface}")
    return BASE_URLS[key]
