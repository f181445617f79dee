"""Transaction building, signing and receipt handling for the Zarban EVM client."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from decimal import ROUND_DOWN, Decimal
from typing import Any

import requests
from eth_typing import HexStr
from hexbytes import HexBytes
from web3 import Web3
from web3.exceptions import TransactionNotFound, Web3Exception

from ..exceptions import ConfirmationTimeoutError, NetworkError, ValidationError
from ..types import PreparedTransaction, SubmittedTransaction
from .connections import Web3Connections

logger = logging.getLogger(__name__)


def apply_gas_price_markup(gas_price: int, markup: Decimal) -> int:
    """Raise ``gas_price`` by ``markup`` (``Decimal("0.10")`` is +10%), rounding down."""
    if markup < 0:
        raise ValidationError("Gas price markup cannot be negative", field="markup", value=markup)
    if not markup:
        return gas_price
    scaled = Decimal(gas_price) * (Decimal(1) + markup)
    return int(scaled.to_integral_value(rounding=ROUND_DOWN))


class TransactionDispatcher:
    """Encapsulate transaction signing, submission and receipt polling."""

    def __init__(
        self,
        connections: Web3Connections,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._connections = connections
        self._clock = clock
        self._sleep = sleep

    def build(
        self, prepared: PreparedTransaction, *, gas_price_markup: Decimal = Decimal(0)
    ) -> SubmittedTransaction:
        """Resolve nonce, gas price and chain id for a prepared transaction."""

        web3 = self._connections.web3
        sender = self._connections.address

        try:
            calldata = HexBytes(prepared.calldata).to_0x_hex()
        except ValueError as exc:
            raise ValidationError(
                "Failed to decode calldata", field="calldata", value=prepared.calldata
            ) from exc

        try:
            nonce = web3.eth.get_transaction_count(sender, "pending")
            gas_price = web3.eth.gas_price
        except (Web3Exception, requests.RequestException) as exc:
            raise NetworkError(
                "Failed to resolve nonce or gas price",
                endpoint="eth_getTransactionCount/eth_gasPrice",
                details={"from": sender, "error": str(exc)},
            ) from exc

        return SubmittedTransaction(
            from_address=sender,
            to=prepared.to,
            value=int(prepared.value),
            gas=prepared.gas_estimate,
            gas_price=apply_gas_price_markup(int(gas_price), gas_price_markup),
            nonce=int(nonce),
            chain_id=self._connections.chain_id,
            data=calldata,
        )

    def send(self, tx: SubmittedTransaction) -> HexStr:
        """Sign ``tx`` with EIP-155 replay protection and broadcast it."""

        params = tx.as_tx_params()
        try:
            params["to"] = Web3.to_checksum_address(tx.to)
        except (TypeError, ValueError) as exc:
            raise ValidationError(
                "Invalid transaction recipient", field="to", value=tx.to
            ) from exc

        try:
            signed = self._connections.account.sign_transaction(params)
        except (TypeError, ValueError) as exc:
            raise ValidationError(
                "Failed to sign the transaction", field="tx", details={"error": str(exc)}
            ) from exc

        try:
            tx_hash = self._connections.web3.eth.send_raw_transaction(signed.raw_transaction)
        except (Web3Exception, requests.RequestException, ValueError) as exc:
            raise NetworkError(
                "Failed to send transaction",
                endpoint="eth_sendRawTransaction",
                details={"nonce": tx.nonce, "to": tx.to, "error": str(exc)},
            ) from exc

        tx_hex = HexStr(HexBytes(tx_hash).to_0x_hex())
        logger.info("Transaction sent: %s", tx_hex)
        return tx_hex

    def wait_for_receipt(
        self, tx_hash: str, *, max_wait: float, poll_interval: float
    ) -> Any:
        """Poll for a receipt until one exists or ``max_wait`` seconds elapse.

        Raises:
            ConfirmationTimeoutError: If no receipt appears within ``max_wait``
        """

        web3 = self._connections.web3
        start = self._clock()

        while self._clock() - start < max_wait:
            try:
                receipt = web3.eth.get_transaction_receipt(HexStr(tx_hash))
            except TransactionNotFound:
                receipt = None
            except (Web3Exception, requests.RequestException) as exc:
                logger.warning("Error checking transaction receipt: %s", exc)
                receipt = None

            if receipt is not None:
                return receipt

            logger.debug("Waiting for transaction %s to be mined...", tx_hash)
            self._sleep(poll_interval)

        logger.warning("Transaction %s not mined after %s seconds", tx_hash, max_wait)
        raise ConfirmationTimeoutError(tx_hash, max_wait)
