"""Utility functions for the Zarban SDK."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal, InvalidOperation, localcontext
from typing import Any

from hexbytes import HexBytes

from .constants import DEFAULT_PRECISION, VAULT_ID_FIELD, VAULT_MANAGER_CONTRACT
from .exceptions import PrecisionLossError, ValidationError

logger = logging.getLogger(__name__)


def _to_decimal(value: float | int | str | Decimal) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValidationError("Amount must be a number", field="amount", value=value)
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError("Invalid amount", field="amount", value=value) from exc


def to_native(amount: float | int | str | Decimal, decimals: int = DEFAULT_PRECISION) -> str:
    """Convert a human readable amount into an integer string of native units.

    Floats are converted through their shortest ``repr`` so ``0.01`` scales to
    exactly ``10**16`` at 18 decimals.

    Raises:
        ValidationError: If the amount is negative, not finite, or not a number
        PrecisionLossError: If the scaled amount is not an exact integer
    """
    if decimals < 0:
        raise ValidationError("Decimals cannot be negative", field="decimals", value=decimals)

    quantity = _to_decimal(amount)
    if not quantity.is_finite():
        raise ValidationError("Amount must be finite", field="amount", value=amount)
    if quantity < 0:
        raise ValidationError("Amount cannot be negative", field="amount", value=amount)

    with localcontext() as ctx:
        ctx.prec = max(28, len(quantity.as_tuple().digits) + decimals + 2)
        scaled = quantity.scaleb(decimals)
        integral = scaled.to_integral_value()

    if integral != scaled:
        raise PrecisionLossError(amount, decimals)

    return str(int(integral))


def from_native(value: int | str, decimals: int = DEFAULT_PRECISION) -> Decimal:
    """Convert native units back to a Decimal amount."""
    try:
        units = int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError("Native amount must be an integer", field="value", value=value) from exc
    return Decimal(units).scaleb(-decimals)


def build_precision_map(
    symbols: Iterable[str], *, base: Mapping[str, int] | None = None
) -> dict[str, int]:
    """Return symbol precisions, defaulting every listed symbol to 18 decimals."""
    precision = dict(base or {})
    for symbol in symbols:
        precision.setdefault(symbol, DEFAULT_PRECISION)
    return precision


def extract_vault_id(
    logs: Iterable[Any],
    *,
    contract: str = VAULT_MANAGER_CONTRACT,
    field: str = VAULT_ID_FIELD,
) -> int | None:
    """Find the vault id emitted by the vault manager contract.

    Returns ``None`` when no log comes from ``contract``.

    Raises:
        ValidationError: If the matching log has no usable id field
    """
    for entry in logs:
        if getattr(entry, "contract", None) != contract:
            continue

        decoded = getattr(entry, "decoded", None) or {}
        raw_id = decoded.get(field)
        if raw_id is None:
            raise ValidationError(
                "Failed to get vault id from log", field=field, details={"decoded": dict(decoded)}
            )
        try:
            return int(raw_id)
        except (TypeError, ValueError) as exc:
            raise ValidationError(
                "Failed to convert vault id to int", field=field, value=raw_id
            ) from exc

    logger.debug("No %s log found among event logs", contract)
    return None


def serialise_receipt(receipt: Any) -> Any:
    """Serialise web3 receipt objects into JSON-friendly structures."""
    if receipt is None:
        return None
    if isinstance(receipt, Mapping):
        return {key: serialise_receipt(value) for key, value in receipt.items()}
    if isinstance(receipt, Sequence) and not isinstance(
        receipt, str | bytes | bytearray | HexBytes
    ):
        return [serialise_receipt(item) for item in receipt]
    if isinstance(receipt, bytes | bytearray | HexBytes):
        return HexBytes(receipt).to_0x_hex()
    return receipt
