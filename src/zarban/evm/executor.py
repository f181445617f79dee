"""Step-wise execution of API-provided multi-transaction plans."""

from __future__ import annotations

import logging
from collections.abc import Callable
from decimal import Decimal

from ..constants import DEFAULT_LOCALE
from ..exceptions import ConfirmationTimeoutError, TransactionRevertedError, ValidationError
from ..types import UNKNOWN_VAULT_ID, ExecutionResult, StepPlan
from ..utils import serialise_receipt
from .config import ReceiptPolicy
from .transactions import TransactionDispatcher
from .txlog import TransactionLog

logger = logging.getLogger(__name__)

PlanFetcher = Callable[[], StepPlan]
VaultIdResolver = Callable[[str], int | None]


class StepExecutor:
    """Run a step plan one transaction at a time, re-polling after each step.

    Only the step at ``current_step_index`` is ever submitted; the others are
    logged for visibility. After each confirmed step the plan is fetched again
    so the API can advance the index, for exactly
    ``total_steps - current_step_index + 1`` rounds.
    """

    def __init__(
        self,
        dispatcher: TransactionDispatcher,
        transaction_log: TransactionLog | None = None,
        *,
        receipt_policy: ReceiptPolicy = ReceiptPolicy(),
        gas_price_markup: Decimal = Decimal(0),
        locale: str = DEFAULT_LOCALE,
    ) -> None:
        self._dispatcher = dispatcher
        self._log = transaction_log
        self._receipt_policy = receipt_policy
        self._gas_price_markup = gas_price_markup
        self._locale = locale

    def run(
        self,
        fetch_plan: PlanFetcher,
        *,
        vault_id: int = UNKNOWN_VAULT_ID,
        resolve_vault_id: VaultIdResolver | None = None,
    ) -> ExecutionResult:
        """Execute every remaining step of the plan returned by ``fetch_plan``.

        Raises:
            ValidationError: If the plan has no steps or a step is not a transaction
            NetworkError: If nonce/gas resolution or broadcasting fails
            ConfirmationTimeoutError: If a receipt does not arrive in time and
                the receipt policy does not allow continuing
            TransactionRevertedError: If a mined transaction failed
        """

        plan = fetch_plan()
        if not plan.steps:
            raise ValidationError("No steps found in the response", field="steps")

        result = ExecutionResult(vault_id=None if vault_id == UNKNOWN_VAULT_ID else vault_id)
        rounds = plan.total_steps - plan.current_step_index + 1

        for round_number in range(rounds):
            if round_number:
                plan = fetch_plan()

            self._show_plan(plan)
            confirmed = self._execute_current_step(plan, result, vault_id)

            if confirmed and plan.is_final:
                result.completed = True
                break

        last_tx_hash = result.last_tx_hash
        if result.completed and resolve_vault_id is not None and last_tx_hash:
            self._finalise_vault_id(result, last_tx_hash, resolve_vault_id)

        return result

    # ------------------------------------------------------------------
    # Internal workflow
    # ------------------------------------------------------------------
    def _show_plan(self, plan: StepPlan) -> None:
        for number, step in enumerate(plan.steps, start=1):
            logger.info("Step %s/%s: %s", number, plan.total_steps, step.label_for(self._locale))

    def _execute_current_step(self, plan: StepPlan, result: ExecutionResult, vault_id: int) -> bool:
        step = plan.current_step
        prepared = step.prepared_transaction
        logger.info(
            "Processing step %s/%s: %s",
            plan.current_step_index,
            plan.total_steps,
            prepared.label_for(self._locale),
        )

        tx = self._dispatcher.build(prepared, gas_price_markup=self._gas_price_markup)
        tx_hash = self._dispatcher.send(tx)
        result.tx_hashes.append(tx_hash)

        if self._log is not None:
            try:
                self._log.record(tx, tx_hash, vault_id)
            except ValidationError as exc:
                exc.details.setdefault("tx_hash", tx_hash)
                raise

        policy = self._receipt_policy
        try:
            receipt = self._dispatcher.wait_for_receipt(
                tx_hash, max_wait=policy.max_wait, poll_interval=policy.poll_interval
            )
        except ConfirmationTimeoutError:
            if not policy.continue_on_timeout:
                raise
            logger.warning("Transaction %s was not mined; continuing with next step", tx_hash)
            return False

        block_number = receipt.get("blockNumber")
        if receipt.get("status", 1) == 0:
            raise TransactionRevertedError(
                tx_hash, block_number, details={"receipt": serialise_receipt(receipt)}
            )

        logger.info("Transaction %s was mined in block %s", tx_hash, block_number)
        result.receipts.append(serialise_receipt(receipt))
        return True

    def _finalise_vault_id(
        self, result: ExecutionResult, tx_hash: str, resolve_vault_id: VaultIdResolver
    ) -> None:
        derived = resolve_vault_id(tx_hash)
        if derived is None:
            logger.warning("No vault id found in logs of %s", tx_hash)
            return

        result.vault_id = derived
        logger.info("Vault id %s resolved from %s", derived, tx_hash)
        if self._log is not None:
            self._log.patch_last_vault_id(derived)
