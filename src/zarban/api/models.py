"""Request and response models for the wallet and service APIs."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ..constants import (
    LOAN_SETTLED_STATE,
    LOAN_SETTLEMENT_FAILED_STATE,
    LoanCreateIntent,
    LoanToValueOption,
    RepayLoanIntent,
)


def _drop_none(payload: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


# ----------------------------------------------------------------------
# Wallet API
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class LoginRequest:
    email: str
    password: str

    def to_dict(self) -> dict[str, Any]:
        return {"email": self.email, "password": self.password}


@dataclass(frozen=True)
class SignUpRequest:
    email: str
    password: str

    def to_dict(self) -> dict[str, Any]:
        return {"email": self.email, "password": self.password}


@dataclass(frozen=True)
class CreateChildUserRequest:
    username: str

    def to_dict(self) -> dict[str, Any]:
        return {"username": self.username}


@dataclass(frozen=True)
class JwtResponse:
    token: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> JwtResponse:
        return cls(token=data["token"])


@dataclass(frozen=True)
class SimpleResponse:
    messages: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SimpleResponse:
        return cls(messages=dict(data.get("messages") or {}))


@dataclass(frozen=True)
class User:
    username: str | None = None
    email: str | None = None
    id: int | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> User:
        return cls(
            username=data.get("username"),
            email=data.get("email"),
            id=data.get("id"),
            raw=dict(data),
        )


@dataclass(frozen=True)
class LoanCreateRequest:
    plan_name: str
    symbol: str
    loan_to_value_option: LoanToValueOption | str
    collateral: str | None = None
    debt: str | None = None
    intent: LoanCreateIntent | str = LoanCreateIntent.CREATE

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "intent": _enum_value(self.intent),
                "planName": self.plan_name,
                "collateral": self.collateral,
                "debt": self.debt,
                "symbol": self.symbol,
                "loanToValueOption": _enum_value(self.loan_to_value_option),
            }
        )


@dataclass(frozen=True)
class RepayLoanRequest:
    loan_id: str
    intent: RepayLoanIntent | str = RepayLoanIntent.REPAY

    def to_dict(self) -> dict[str, Any]:
        return {"loanId": self.loan_id, "intent": _enum_value(self.intent)}


@dataclass(frozen=True)
class LoansResponse:
    """Custodial loan state; amounts are kept as returned by the API."""

    id: str
    state: dict[str, str] = field(default_factory=dict)
    collateral: Any = None
    debt: Any = None
    collateralization_ratio: Any = None
    loan_to_value: Any = None
    liquidation_price: Any = None
    plan: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LoansResponse:
        return cls(
            id=str(data["id"]),
            state=dict(data.get("state") or {}),
            collateral=data.get("collateral"),
            debt=data.get("debt"),
            collateralization_ratio=data.get("collateralizationRatio"),
            loan_to_value=data.get("loanToValue"),
            liquidation_price=data.get("liquidationPrice"),
            plan=data.get("plan"),
        )

    @property
    def state_en(self) -> str | None:
        return self.state.get("LocaleEn") or self.state.get("en-US")

    @property
    def is_settled(self) -> bool:
        return self.state_en == LOAN_SETTLED_STATE

    @property
    def settlement_failed(self) -> bool:
        return self.state_en == LOAN_SETTLEMENT_FAILED_STATE


# ----------------------------------------------------------------------
# Service API
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class Ilk:
    name: str
    symbol: str
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Ilk:
        return cls(name=data["name"], symbol=data["symbol"], raw=dict(data))


@dataclass(frozen=True)
class IlksResponse:
    data: list[Ilk]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IlksResponse:
        return cls(data=[Ilk.from_dict(item) for item in data.get("data") or []])

    def symbols(self) -> list[str]:
        """Unique ilk symbols in first-seen order."""
        return list(dict.fromkeys(ilk.symbol for ilk in self.data))


@dataclass(frozen=True)
class EventLog:
    contract: str
    decoded: dict[str, str] | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EventLog:
        decoded = data.get("decoded")
        return cls(
            contract=str(data.get("contract", "")),
            decoded={str(k): str(v) for k, v in decoded.items()} if decoded else None,
            raw=dict(data),
        )


@dataclass(frozen=True)
class EventDetailsResponse:
    data: list[EventLog]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EventDetailsResponse:
        return cls(data=[EventLog.from_dict(item) for item in data.get("data") or []])


@dataclass(frozen=True)
class CreateVaultTxRequest:
    ilk_name: str
    user: str
    mint_amount: str
    collateral_amount: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "collateralAmount": self.collateral_amount,
                "mintAmount": self.mint_amount,
                "user": self.user,
                "ilkName": self.ilk_name,
            }
        )


@dataclass(frozen=True)
class RepayZarTxRequest:
    user: str
    vault_id: int
    amount: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({"amount": self.amount, "user": self.user, "vaultId": self.vault_id})


@dataclass(frozen=True)
class StakingWithdrawTxRequest:
    user: str
    amount: str

    def to_dict(self) -> dict[str, Any]:
        return {"user": self.user, "amount": self.amount}
