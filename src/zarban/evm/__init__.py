"""On-chain execution of Zarban step plans."""

from .client import ZarbanEVM
from .config import EVMClientConfig, FlowConfig, ReceiptPolicy
from .connections import Web3Connections
from .executor import StepExecutor
from .transactions import TransactionDispatcher, apply_gas_price_markup
from .txlog import TransactionLog

__all__ = [
    "EVMClientConfig",
    "FlowConfig",
    "ReceiptPolicy",
    "StepExecutor",
    "TransactionDispatcher",
    "TransactionLog",
    "Web3Connections",
    "ZarbanEVM",
    "apply_gas_price_markup",
]
