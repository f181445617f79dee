"""Zarban SDK - wallet and service API clients with on-chain step execution.

This library wraps the Zarban wallet API (auth, child users, custodial
loans) and service API (stablecoin vaults, event logs, staking), and runs
the multi-step transaction plans returned by the service API against an
Ethereum-compatible network.
"""

from .api import (
    APIClientConfig,
    ServiceClient,
    WalletClient,
    format_api_error,
    handle_api_response,
)
from .evm import StepExecutor, TransactionDispatcher, TransactionLog, ZarbanEVM
from .exceptions import (
    APIError,
    ConfirmationTimeoutError,
    GenericAPIError,
    LoanSettlementError,
    NetworkError,
    PrecisionLossError,
    ResponseDecodeError,
    TransactionRevertedError,
    TransportError,
    UnhandledAPIError,
    UserError,
    ValidationError,
    ZarbanError,
)
from .types import (
    Address,
    ExecutionResult,
    GenericErrorDetails,
    NativeAmount,
    PreparedTransaction,
    Step,
    StepPlan,
    SubmittedTransaction,
    TransactionLogEntry,
    UnhandledErrorDetails,
    UserErrorDetails,
    UserErrorMessage,
    Wei,
)
from .utils import extract_vault_id, from_native, to_native

__version__ = "0.1.0"

__all__ = [
    # Clients
    "APIClientConfig",
    "WalletClient",
    "ServiceClient",
    "ZarbanEVM",
    "StepExecutor",
    "TransactionDispatcher",
    "TransactionLog",
    # Response handling
    "handle_api_response",
    "format_api_error",
    # Types
    "StepPlan",
    "Step",
    "PreparedTransaction",
    "SubmittedTransaction",
    "TransactionLogEntry",
    "ExecutionResult",
    "UserErrorDetails",
    "UserErrorMessage",
    "GenericErrorDetails",
    "UnhandledErrorDetails",
    "Address",
    "NativeAmount",
    "Wei",
    # Exceptions
    "ZarbanError",
    "ValidationError",
    "PrecisionLossError",
    "TransportError",
    "NetworkError",
    "ResponseDecodeError",
    "APIError",
    "UserError",
    "GenericAPIError",
    "UnhandledAPIError",
    "ConfirmationTimeoutError",
    "TransactionRevertedError",
    "LoanSettlementError",
    # Utility functions
    "to_native",
    "from_native",
    "extract_vault_id",
]
