"""Client for the Zarban service API (stablecoin system, events and staking)."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from decimal import Decimal
from urllib.parse import quote

import requests

from ..constants import DEFAULT_PRECISION, STABLECOIN_SYMBOL, APISurface, ServiceEndpoint
from ..exceptions import ValidationError
from ..types import StepPlan
from ..utils import build_precision_map, to_native
from .base import BaseAPIClient
from .config import DEFAULT_REQUEST_TIMEOUT, APIClientConfig
from .models import (
    CreateVaultTxRequest,
    EventDetailsResponse,
    EventLog,
    IlksResponse,
    RepayZarTxRequest,
    StakingWithdrawTxRequest,
)

logger = logging.getLogger(__name__)


class ServiceClient(BaseAPIClient):
    """Service API: ilks, vault transaction steps, event logs and staking."""

    def __init__(
        self,
        config: APIClientConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(config or APIClientConfig(surface=APISurface.SERVICE), session)

    @classmethod
    def create(
        cls,
        *,
        testnet: bool = True,
        base_url: str | None = None,
        access_token: str | None = None,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> ServiceClient:
        return cls(
            APIClientConfig(
                surface=APISurface.SERVICE,
                testnet=testnet,
                base_url=base_url,
                access_token=access_token,
                request_timeout=request_timeout,
            )
        )

    # ------------------------------------------------------------------
    # Ilks and native amounts
    # ------------------------------------------------------------------
    def get_all_ilks(self) -> IlksResponse:
        return self._get(ServiceEndpoint.ILKS.value, IlksResponse)

    def get_ilk_symbols(self) -> list[str]:
        return self.get_all_ilks().symbols()

    def get_precisions(self) -> dict[str, int]:
        return build_precision_map(
            self.get_ilk_symbols(), base={STABLECOIN_SYMBOL: DEFAULT_PRECISION}
        )

    def to_native(
        self,
        symbol: str,
        amount: float | int | str | Decimal,
        *,
        precisions: Mapping[str, int] | None = None,
    ) -> str:
        """Convert ``amount`` of ``symbol`` to native units.

        ``precisions`` defaults to a fresh :meth:`get_precisions` lookup.

        Raises:
            ValidationError: If the symbol is neither ZAR nor an ilk symbol
            PrecisionLossError: If the amount has more decimals than the symbol
        """

        if precisions is None:
            precisions = self.get_precisions()
        if symbol not in precisions:
            raise ValidationError(f"Unknown symbol: {symbol}", field="symbol", value=symbol)
        return to_native(amount, precisions[symbol])

    # ------------------------------------------------------------------
    # Step plans
    # ------------------------------------------------------------------
    def create_stablecoin_vault(self, request: CreateVaultTxRequest) -> StepPlan:
        return self._post(ServiceEndpoint.CREATE_VAULT_TX.value, request, StepPlan)

    def repay_stablecoin_vault(self, request: RepayZarTxRequest) -> StepPlan:
        return self._post(ServiceEndpoint.REPAY_ZAR_TX.value, request, StepPlan)

    def staking_withdraw(self, request: StakingWithdrawTxRequest) -> StepPlan:
        return self._post(ServiceEndpoint.STAKING_WITHDRAW_TX.value, request, StepPlan)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def get_logs_by_tx_hash(self, tx_hash: str) -> list[EventLog]:
        path = ServiceEndpoint.LOGS_BY_TX_HASH.value.format(tx_hash=quote(tx_hash, safe=""))
        response: EventDetailsResponse = self._get(path, EventDetailsResponse)
        logger.debug("Fetched %s event logs for %s", len(response.data), tx_hash)
        return response.data
