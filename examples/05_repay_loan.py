"""Example: Preview, repay and wait for settlement of a custodial loan."""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

from zarban import APIError, LoanSettlementError, WalletClient, format_api_error
from zarban.constants import RepayLoanIntent

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOGLEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def main() -> None:
    access_token = os.getenv("ZARBAN_ACCESS_TOKEN")
    loan_id = os.getenv("ZARBAN_LOAN_ID")
    if not access_token or not loan_id:
        raise ValueError("ZARBAN_ACCESS_TOKEN and ZARBAN_LOAN_ID must be set")
    child_user = os.getenv("ZARBAN_CHILD_USER", "child_user_test")

    client = WalletClient.create(
        testnet=True, access_token=access_token, child_user=child_user
    )

    try:
        preview = client.repay_loan(loan_id, RepayLoanIntent.PREVIEW)
        print(f"Repay preview for {preview.id}: debt={preview.debt}")

        client.repay_loan(loan_id, RepayLoanIntent.REPAY)
        print(f"Loan repayment submitted. Loan ID: {loan_id}")

        loan = client.wait_for_loan_settlement(loan_id, poll_interval=1.0)
    except APIError as err:
        print(format_api_error(err))
        return
    except (LoanSettlementError, TimeoutError) as exc:
        print(f"Loan was not settled: {exc}")
        return

    print(f"Loan {loan.id} state: {loan.state_en}")


if __name__ == "__main__":
    main()
