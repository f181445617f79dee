"""Type definitions and data models for the Zarban SDK."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from .constants import DEFAULT_LOCALE
from .exceptions import ValidationError

Address = str  # Ethereum address
NativeAmount = str  # Decimal-digit string of smallest token units
Wei = int


# ----------------------------------------------------------------------
# Error body shapes
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class UserErrorMessage:
    """One localised message with suggested solutions."""

    user_message: str
    solutions: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class UserErrorDetails:
    """``{"messages": {"<locale>": {"userMessage": ..., "solutions": [...]}}}``"""

    messages: dict[str, UserErrorMessage]

    @classmethod
    def from_dict(cls, data: Any) -> UserErrorDetails | None:
        """Return the parsed shape, or ``None`` if the body does not match."""

        if not isinstance(data, Mapping):
            return None
        raw_messages = data.get("messages")
        if not isinstance(raw_messages, Mapping):
            return None

        messages: dict[str, UserErrorMessage] = {}
        for locale, entry in raw_messages.items():
            if not isinstance(entry, Mapping):
                return None
            user_message = entry.get("userMessage", "")
            solutions = entry.get("solutions") or []
            if not isinstance(user_message, str) or not isinstance(solutions, list):
                return None
            messages[str(locale)] = UserErrorMessage(
                user_message=user_message, solutions=[str(item) for item in solutions]
            )

        if not messages:
            return None
        return cls(messages=messages)


@dataclass(frozen=True)
class GenericErrorDetails:
    """``{"msg": ..., "reasons": [...]}``"""

    msg: str
    reasons: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> GenericErrorDetails | None:
        if not isinstance(data, Mapping):
            return None
        msg = data.get("msg")
        reasons = data.get("reasons") or []
        if not isinstance(msg, str) or not msg or not isinstance(reasons, list):
            return None
        return cls(msg=msg, reasons=[str(item) for item in reasons])


@dataclass(frozen=True)
class UnhandledErrorDetails:
    """Raw body of an error response that matched no known shape."""

    body: str


ErrorDetails = Union[UserErrorDetails, GenericErrorDetails, UnhandledErrorDetails]


# ----------------------------------------------------------------------
# Step plans
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class PreparedTransaction:
    """An unsigned transaction proposed by the service API."""

    label: dict[str, str]
    to: Address
    calldata: str
    value: NativeAmount
    gas_estimate: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PreparedTransaction:
        params = data.get("methodParameters")
        if not isinstance(params, Mapping):
            raise ValidationError(
                "Prepared transaction is missing method parameters",
                field="methodParameters",
                value=params,
            )

        to = params.get("to")
        if not isinstance(to, str) or not to:
            raise ValidationError("Prepared transaction has no recipient", field="to", value=to)

        value = str(params.get("value") or "0")
        if not value.isdigit():
            raise ValidationError(
                "Prepared transaction value must be a decimal string", field="value", value=value
            )

        try:
            gas_estimate = int(data.get("gasUseEstimate") or 0)
        except (TypeError, ValueError) as exc:
            raise ValidationError(
                "Invalid gas estimate",
                field="gasUseEstimate",
                value=data.get("gasUseEstimate"),
            ) from exc

        label = data.get("label") or {}
        return cls(
            label={str(k): str(v) for k, v in label.items()} if isinstance(label, Mapping) else {},
            to=to,
            calldata=str(params.get("calldata") or "0x"),
            value=value,
            gas_estimate=gas_estimate,
        )

    def label_for(self, locale: str = DEFAULT_LOCALE) -> str:
        if locale in self.label:
            return self.label[locale]
        return next(iter(self.label.values()), "")


@dataclass(frozen=True)
class Step:
    """A single entry of a step plan; only ``PreparedTx`` steps are executable."""

    type: str
    data: Mapping[str, Any]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Step:
        payload = data.get("data")
        if not isinstance(payload, Mapping):
            payload = {}
        step_type = data.get("type")
        if step_type is None:
            step_type = "PreparedTx" if "methodParameters" in payload else "Unknown"
        return cls(type=str(step_type), data=payload)

    @property
    def prepared_transaction(self) -> PreparedTransaction:
        if "methodParameters" not in self.data:
            raise ValidationError(
                "Step is not a prepared transaction", field="type", value=self.type
            )
        return PreparedTransaction.from_dict(self.data)

    def label_for(self, locale: str = DEFAULT_LOCALE) -> str:
        label = self.data.get("label")
        if not isinstance(label, Mapping) or not label:
            return self.type
        return str(label.get(locale) or next(iter(label.values())))


@dataclass(frozen=True)
class StepPlan:
    """The API-provided sequence of transactions for one logical operation."""

    total_steps: int
    current_step_index: int
    steps: list[Step]

    def __post_init__(self) -> None:
        if self.total_steps < 1:
            raise ValidationError(
                "Step plan must contain at least one step",
                field="numberOfSteps",
                value=self.total_steps,
            )
        if not 1 <= self.current_step_index <= self.total_steps:
            raise ValidationError(
                "Current step index out of range",
                field="stepNumber",
                value=self.current_step_index,
                details={"total_steps": self.total_steps},
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> StepPlan:
        raw_steps = data.get("steps") or []
        try:
            total_steps = int(data["numberOfSteps"])
            current = int(data["stepNumber"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ValidationError(
                "Malformed step plan", field="numberOfSteps", details={"error": str(exc)}
            ) from exc
        return cls(
            total_steps=total_steps,
            current_step_index=current,
            steps=[Step.from_dict(item) for item in raw_steps if isinstance(item, Mapping)],
        )

    @property
    def current_step(self) -> Step:
        if self.current_step_index > len(self.steps):
            raise ValidationError(
                "Step plan does not include the current step",
                field="stepNumber",
                value=self.current_step_index,
                details={"available_steps": len(self.steps)},
            )
        return self.steps[self.current_step_index - 1]

    @property
    def is_final(self) -> bool:
        return self.current_step_index == self.total_steps


# ----------------------------------------------------------------------
# Submitted transactions and the transaction log
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class SubmittedTransaction:
    """The exact transaction that was signed and broadcast."""

    from_address: Address
    to: Address
    value: int
    gas: int
    gas_price: int
    nonce: int
    chain_id: int
    data: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.from_address,
            "to": self.to,
            "value": self.value,
            "gas": self.gas,
            "gasPrice": self.gas_price,
            "nonce": self.nonce,
            "chainId": self.chain_id,
            "data": self.data,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SubmittedTransaction:
        return cls(
            from_address=data["from"],
            to=data["to"],
            value=int(data["value"]),
            gas=int(data["gas"]),
            gas_price=int(data["gasPrice"]),
            nonce=int(data["nonce"]),
            chain_id=int(data["chainId"]),
            data=data.get("data") or "0x",
        )

    def as_tx_params(self) -> dict[str, Any]:
        """Return the legacy transaction dict consumed by eth-account."""

        return {
            "to": self.to,
            "value": self.value,
            "gas": self.gas,
            "gasPrice": self.gas_price,
            "nonce": self.nonce,
            "chainId": self.chain_id,
            "data": self.data,
        }


UNKNOWN_VAULT_ID = -1


@dataclass
class TransactionLogEntry:
    """One record of the transaction log."""

    timestamp: str
    tx: SubmittedTransaction
    tx_hash: str
    vault_id: int = UNKNOWN_VAULT_ID

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "tx": self.tx.to_dict(),
            "tx_hash": self.tx_hash,
            "vault_id": self.vault_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TransactionLogEntry:
        return cls(
            timestamp=data["timestamp"],
            tx=SubmittedTransaction.from_dict(data["tx"]),
            tx_hash=data["tx_hash"],
            vault_id=int(data.get("vault_id", UNKNOWN_VAULT_ID)),
        )


@dataclass
class ExecutionResult:
    """Outcome of running a step plan to completion."""

    tx_hashes: list[str] = field(default_factory=list)
    receipts: list[dict[str, Any]] = field(default_factory=list)
    vault_id: int | None = None
    completed: bool = False

    @property
    def last_tx_hash(self) -> str | None:
        return self.tx_hashes[-1] if self.tx_hashes else None
