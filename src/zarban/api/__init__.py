"""REST clients for the Zarban wallet and service APIs."""

from .config import APIClientConfig
from .response import format_api_error, handle_api_response
from .service import ServiceClient
from .wallet import WalletClient

__all__ = [
    "APIClientConfig",
    "ServiceClient",
    "WalletClient",
    "format_api_error",
    "handle_api_response",
]
