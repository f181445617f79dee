"""Configuration containers for the Zarban EVM client."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path

DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_RECEIPT_TIMEOUT = 120.0
DEFAULT_RECEIPT_POLL_INTERVAL = 15.0
REPAY_RECEIPT_TIMEOUT = 60.0
REPAY_RECEIPT_POLL_INTERVAL = 5.0
REPAY_GAS_PRICE_MARKUP = Decimal("0.10")

DEFAULT_TRANSACTION_LOG = "transaction_log.json"
DEFAULT_REPAY_TRANSACTION_LOG = "repay_transaction_log.json"


@dataclass(frozen=True)
class ReceiptPolicy:
    """How long to wait for a receipt and whether a timeout stops the flow."""

    max_wait: float = DEFAULT_RECEIPT_TIMEOUT
    poll_interval: float = DEFAULT_RECEIPT_POLL_INTERVAL
    continue_on_timeout: bool = False


@dataclass(frozen=True)
class FlowConfig:
    """Per-flow settings for step execution."""

    receipt: ReceiptPolicy = ReceiptPolicy()
    gas_price_markup: Decimal = Decimal(0)
    log_path: Path = Path(DEFAULT_TRANSACTION_LOG)


def _vault_create_flow() -> FlowConfig:
    return FlowConfig()


def _vault_repay_flow() -> FlowConfig:
    return FlowConfig(
        receipt=ReceiptPolicy(
            max_wait=REPAY_RECEIPT_TIMEOUT,
            poll_interval=REPAY_RECEIPT_POLL_INTERVAL,
            continue_on_timeout=True,
        ),
        gas_price_markup=REPAY_GAS_PRICE_MARKUP,
        log_path=Path(DEFAULT_REPAY_TRANSACTION_LOG),
    )


@dataclass(frozen=True)
class EVMClientConfig:
    """Aggregated configuration used to construct the EVM client."""

    private_key: str
    rpc_url: str
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    vault_create: FlowConfig = field(default_factory=_vault_create_flow)
    vault_repay: FlowConfig = field(default_factory=_vault_repay_flow)
    staking: FlowConfig = field(default_factory=_vault_create_flow)
