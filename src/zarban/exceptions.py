"""Exception hierarchy for the Zarban SDK."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - import-time only
    from .types import ErrorDetails, GenericErrorDetails, UnhandledErrorDetails, UserErrorDetails


class ZarbanError(Exception):
    """Base exception for all Zarban SDK errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(ZarbanError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.field = field
        self.value = value


class PrecisionLossError(ValidationError):
    """Raised when an amount cannot be represented exactly in native units."""

    def __init__(self, amount: Any, decimals: int):
        super().__init__(
            f"Lost precision converting {amount} to {decimals} decimals",
            field="amount",
            value=amount,
            details={"decimals": decimals},
        )
        self.decimals = decimals


class TransportError(ZarbanError):
    """Raised when network/connection issues occur."""

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.endpoint = endpoint
        self.status_code = status_code


NetworkError = TransportError


class ResponseDecodeError(TransportError):
    """Raised when a successful response body does not match the expected type."""


class APIError(ZarbanError):
    """A non-success API response, classified by its body shape."""

    kind = "APIError"

    def __init__(
        self,
        message: str,
        status_code: int,
        error_details: ErrorDetails,
        *,
        request_id: str | None = None,
        path: str | None = None,
        method: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.error_details = error_details
        self.request_id = request_id
        self.path = path
        self.method = method
        self.context: dict[str, Any] = {}

    def __str__(self) -> str:
        return (
            f"{self.kind}[{self.request_id or '-'}]: status {self.status_code}, "
            f"path: {self.path or '-'}, message: {self.message}"
        )

    def with_context(self, key: str, value: Any) -> APIError:
        self.context[key] = value
        return self

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401

    @property
    def is_forbidden(self) -> bool:
        return self.status_code == 403

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self.status_code < 600


class UserError(APIError):
    """Localised, end-user actionable error."""

    kind = "UserError"
    error_details: UserErrorDetails


class GenericAPIError(APIError):
    """Operational API error carrying a message and reasons."""

    kind = "APIError"
    error_details: GenericErrorDetails


class UnhandledAPIError(APIError):
    """Error response whose body matched no known shape."""

    kind = "UnhandledError"
    error_details: UnhandledErrorDetails


class ConfirmationTimeoutError(ZarbanError):
    """Raised when a transaction is not mined within the wait budget."""

    def __init__(self, tx_hash: str, max_wait: float, details: dict | None = None):
        super().__init__(f"Transaction {tx_hash} not mined after {max_wait:g} seconds", details)
        self.tx_hash = tx_hash
        self.max_wait = max_wait


class TransactionRevertedError(ZarbanError):
    """Raised when a mined transaction reports a failed execution status."""

    def __init__(self, tx_hash: str, block_number: int | None = None, details: dict | None = None):
        super().__init__(f"Transaction {tx_hash} failed", details)
        self.tx_hash = tx_hash
        self.block_number = block_number


class LoanSettlementError(ZarbanError):
    """Raised when the wallet API reports a failed loan settlement."""

    def __init__(self, loan_id: str, state: str | None = None):
        super().__init__(f"Settlement of loan {loan_id} failed: {state}")
        self.loan_id = loan_id
        self.state = state
