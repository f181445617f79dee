"""Connection helpers for the Zarban EVM client."""

from __future__ import annotations

import logging
from typing import cast

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import HTTPProvider, Web3

from ..exceptions import NetworkError, ValidationError
from .config import EVMClientConfig

logger = logging.getLogger(__name__)


class Web3Connections:
    """Manage the Web3 provider, the signer account and the chain id."""

    def __init__(self, config: EVMClientConfig):
        self.config = config
        self._provider: HTTPProvider | None = None
        self._web3: Web3 | None = None
        self._account: LocalAccount | None = None
        self._chain_id: int | None = None
        self._connected = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def connect(self) -> None:
        """Initialise the provider, derive the signer and resolve the chain id."""

        try:
            signer = cast(LocalAccount, Account.from_key(self.config.private_key))  # type: ignore[arg-type]
        except Exception as exc:  # pragma: no cover - defensive
            raise ValidationError(
                "Failed to derive signer account from provided private key",
                field="private_key",
                details={"error": str(exc)},
            ) from exc

        provider = HTTPProvider(
            self.config.rpc_url, request_kwargs={"timeout": self.config.request_timeout}
        )
        web3 = Web3(provider)
        if not web3.is_connected():
            raise NetworkError("Unable to connect to RPC", endpoint=self.config.rpc_url)

        try:
            chain_id = web3.eth.chain_id
        except Exception as exc:  # pragma: no cover - defensive
            raise NetworkError(
                "Failed to get chain ID",
                endpoint=self.config.rpc_url,
                details={"error": str(exc)},
            ) from exc

        self._account = signer
        self._provider = provider
        self._web3 = web3
        self._chain_id = chain_id
        self._connected = True
        logger.info("Connected to RPC at %s (chain id %s)", self.config.rpc_url, chain_id)

    def disconnect(self) -> None:
        self._provider = None
        self._web3 = None
        self._account = None
        self._chain_id = None
        self._connected = False

    def is_connected(self) -> bool:
        return self._connected and self._web3 is not None

    def ensure_connected(self) -> None:
        if not self.is_connected():
            raise NetworkError("EVM connector is not connected", endpoint=self.config.rpc_url)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def account(self) -> LocalAccount:
        if self._account is None:
            raise NetworkError(
                "Signer account is not initialised; call connect() first",
                endpoint=self.config.rpc_url,
            )
        return self._account

    @property
    def web3(self) -> Web3:
        if self._web3 is None:
            raise NetworkError("RPC provider not connected", endpoint=self.config.rpc_url)
        return self._web3

    @property
    def chain_id(self) -> int:
        if self._chain_id is None:
            raise NetworkError("Chain id unavailable; connect() first", endpoint=self.config.rpc_url)
        return self._chain_id

    @property
    def address(self) -> str:
        return self.account.address
