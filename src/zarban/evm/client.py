"""Zarban EVM client that executes service-API step plans on chain."""

from __future__ import annotations

import logging
from decimal import Decimal

from ..api.models import CreateVaultTxRequest, RepayZarTxRequest, StakingWithdrawTxRequest
from ..api.service import ServiceClient
from ..constants import DEFAULT_PRECISION, STABLECOIN_SYMBOL
from ..exceptions import NetworkError, ValidationError
from ..types import ExecutionResult
from ..utils import extract_vault_id, to_native
from .config import DEFAULT_REQUEST_TIMEOUT, EVMClientConfig, FlowConfig
from .connections import Web3Connections
from .executor import StepExecutor
from .transactions import TransactionDispatcher
from .txlog import TransactionLog

logger = logging.getLogger(__name__)

Amount = float | int | str | Decimal


class ZarbanEVM:
    """Create and repay stablecoin vaults and withdraw stake via step plans."""

    def __init__(
        self,
        private_key: str,
        rpc_url: str,
        *,
        service: ServiceClient | None = None,
        testnet: bool = True,
        service_base_url: str | None = None,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        config: EVMClientConfig | None = None,
    ) -> None:
        self._config = config or EVMClientConfig(
            private_key=private_key, rpc_url=rpc_url, request_timeout=request_timeout
        )
        self._service = service or ServiceClient.create(
            testnet=testnet, base_url=service_base_url, request_timeout=request_timeout
        )
        self._connections = Web3Connections(self._config)
        self._dispatcher = TransactionDispatcher(self._connections)

    # ------------------------------------------------------------------
    # Connection management
    # ------------------------------------------------------------------
    def connect(self) -> None:
        try:
            self._connections.connect()
        except (ValidationError, NetworkError):
            self.disconnect()
            raise

    def disconnect(self) -> None:
        self._connections.disconnect()

    def is_connected(self) -> bool:
        return self._connections.is_connected()

    @property
    def address(self) -> str:
        return self._connections.address

    @property
    def service(self) -> ServiceClient:
        return self._service

    # ------------------------------------------------------------------
    # Flows
    # ------------------------------------------------------------------
    def create_vault(
        self,
        ilk_name: str,
        symbol: str,
        collateral_amount: Amount,
        loan_amount: Amount,
    ) -> ExecutionResult:
        """Open a vault on ``ilk_name`` and mint ``loan_amount`` ZAR against it.

        The vault id is read from the last transaction's event logs and
        written back into the transaction log.
        """

        self._connections.ensure_connected()
        precisions = self._service.get_precisions()
        request = CreateVaultTxRequest(
            ilk_name=ilk_name,
            user=self.address,
            mint_amount=self._service.to_native(
                STABLECOIN_SYMBOL, loan_amount, precisions=precisions
            ),
            collateral_amount=self._service.to_native(
                symbol, collateral_amount, precisions=precisions
            ),
        )
        logger.info(
            "Creating vault on %s: collateral=%s %s, loan=%s %s",
            ilk_name,
            collateral_amount,
            symbol,
            loan_amount,
            STABLECOIN_SYMBOL,
        )

        result = self._executor(self._config.vault_create).run(
            lambda: self._service.create_stablecoin_vault(request),
            resolve_vault_id=self._resolve_vault_id,
        )
        if result.completed:
            logger.info(
                "Vault was created successfully. tx=%s vault_id=%s",
                result.last_tx_hash,
                result.vault_id,
            )
        return result

    def repay_vault(self, vault_id: int, amount: Amount | None = None) -> ExecutionResult:
        """Repay ZAR debt of ``vault_id``; a missing or zero amount lets the API choose."""

        self._connections.ensure_connected()
        native_amount = None
        if amount is not None:
            native_amount = to_native(amount, DEFAULT_PRECISION)
            if native_amount == "0":
                native_amount = None

        request = RepayZarTxRequest(user=self.address, vault_id=vault_id, amount=native_amount)
        logger.info("Repaying vault %s (amount=%s)", vault_id, native_amount or "auto")

        return self._executor(self._config.vault_repay).run(
            lambda: self._service.repay_stablecoin_vault(request), vault_id=vault_id
        )

    def staking_withdraw(self, amount: Amount) -> ExecutionResult:
        self._connections.ensure_connected()
        request = StakingWithdrawTxRequest(
            user=self.address, amount=to_native(amount, DEFAULT_PRECISION)
        )
        logger.info("Withdrawing %s from staking", amount)

        return self._executor(self._config.staking).run(
            lambda: self._service.staking_withdraw(request)
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _executor(self, flow: FlowConfig) -> StepExecutor:
        return StepExecutor(
            self._dispatcher,
            TransactionLog(flow.log_path),
            receipt_policy=flow.receipt,
            gas_price_markup=flow.gas_price_markup,
        )

    def _resolve_vault_id(self, tx_hash: str) -> int | None:
        return extract_vault_id(self._service.get_logs_by_tx_hash(tx_hash))
