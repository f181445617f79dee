"""Client for the Zarban wallet API (identity, auth and custodial loans)."""

from __future__ import annotations

import logging
import time
from urllib.parse import quote

import requests

from ..constants import (
    APISurface,
    LoanCreateIntent,
    LoanToValueOption,
    RepayLoanIntent,
    WalletEndpoint,
)
from ..exceptions import LoanSettlementError, ValidationError
from .base import BaseAPIClient
from .config import DEFAULT_REQUEST_TIMEOUT, APIClientConfig
from .models import (
    CreateChildUserRequest,
    JwtResponse,
    LoanCreateRequest,
    LoansResponse,
    LoginRequest,
    RepayLoanRequest,
    SignUpRequest,
    SimpleResponse,
    User,
)

logger = logging.getLogger(__name__)

DEFAULT_SETTLEMENT_POLL_INTERVAL = 1.0
DEFAULT_SETTLEMENT_MAX_POLLS = 300


class WalletClient(BaseAPIClient):
    """Wallet API: login, child users, profiles and loans."""

    def __init__(
        self,
        config: APIClientConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(config or APIClientConfig(surface=APISurface.WALLET), session)

    @classmethod
    def create(
        cls,
        *,
        testnet: bool = True,
        base_url: str | None = None,
        access_token: str | None = None,
        child_user: str | None = None,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> WalletClient:
        return cls(
            APIClientConfig(
                surface=APISurface.WALLET,
                testnet=testnet,
                base_url=base_url,
                access_token=access_token,
                child_user=child_user,
                request_timeout=request_timeout,
            )
        )

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------
    def login(self, email: str, password: str) -> JwtResponse:
        return self._post(WalletEndpoint.LOGIN.value, LoginRequest(email, password), JwtResponse)

    def signup(self, email: str, password: str) -> SimpleResponse:
        return self._post(
            WalletEndpoint.SIGNUP.value, SignUpRequest(email, password), SimpleResponse
        )

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def create_child_user(self, username: str) -> User:
        return self._post(
            WalletEndpoint.CHILD_USERS.value, CreateChildUserRequest(username), User
        )

    def get_profile(self) -> User:
        return self._get(WalletEndpoint.PROFILE.value, User)

    # ------------------------------------------------------------------
    # Loans
    # ------------------------------------------------------------------
    def create_loan(
        self,
        plan_name: str,
        symbol: str,
        loan_to_value_option: LoanToValueOption | str,
        *,
        collateral: str | None = None,
        debt: str | None = None,
        intent: LoanCreateIntent | str = LoanCreateIntent.CREATE,
    ) -> LoansResponse:
        """Create (or preview) a loan; exactly one of collateral and debt is given."""

        collateral = collateral or None
        debt = debt or None
        if (collateral is None) == (debt is None):
            raise ValidationError(
                "Exactly one of collateral or debt must be provided",
                field="collateral",
                details={"collateral": collateral, "debt": debt},
            )

        request = LoanCreateRequest(
            plan_name=plan_name,
            symbol=symbol,
            loan_to_value_option=loan_to_value_option,
            collateral=collateral,
            debt=debt,
            intent=intent,
        )
        loan = self._post(WalletEndpoint.LOANS_CREATE.value, request, LoansResponse)
        logger.info("Loan %s: id=%s", getattr(intent, "value", intent), loan.id)
        return loan

    def repay_loan(
        self, loan_id: str, intent: RepayLoanIntent | str = RepayLoanIntent.REPAY
    ) -> LoansResponse:
        return self._post(
            WalletEndpoint.LOANS_REPAY.value, RepayLoanRequest(loan_id, intent), LoansResponse
        )

    def get_loan_details(self, loan_id: str) -> LoansResponse:
        path = WalletEndpoint.LOAN_DETAILS.value.format(loan_id=quote(loan_id, safe=""))
        return self._get(path, LoansResponse)

    def wait_for_loan_settlement(
        self,
        loan_id: str,
        *,
        poll_interval: float = DEFAULT_SETTLEMENT_POLL_INTERVAL,
        max_polls: int = DEFAULT_SETTLEMENT_MAX_POLLS,
    ) -> LoansResponse:
        """Poll loan details until the loan is settled.

        Raises:
            LoanSettlementError: If the API reports the settlement failed
            TimeoutError: If the loan is still pending after ``max_polls`` polls
        """

        for attempt in range(max_polls):
            loan = self.get_loan_details(loan_id)
            if loan.is_settled:
                logger.info("Loan %s settled", loan_id)
                return loan
            if loan.settlement_failed:
                raise LoanSettlementError(loan_id, loan.state_en)

            logger.debug(
                "Loan %s state=%s (attempt %s/%s)", loan_id, loan.state_en, attempt + 1, max_polls
            )
            time.sleep(poll_interval)

        raise TimeoutError(
            f"Loan {loan_id} not settled after {max_polls * poll_interval:.0f} seconds"
        )
