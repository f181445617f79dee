"""Example: Open a custodial loan for a child user and check its state."""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

from zarban import APIError, WalletClient, format_api_error
from zarban.constants import LoanToValueOption

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOGLEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Only DAIA and DAIB are supported; give either a collateral or a debt amount
PLAN_NAME = "DAIA"
SYMBOL = "DAI"
COLLATERAL = "1000"
LOAN_TO_VALUE = LoanToValueOption.SAFE


def main() -> None:
    access_token = os.getenv("ZARBAN_ACCESS_TOKEN")
    if not access_token:
        raise ValueError("ZARBAN_ACCESS_TOKEN not found in environment variables")
    child_user = os.getenv("ZARBAN_CHILD_USER", "child_user_test")

    client = WalletClient.create(testnet=True, access_token=access_token)

    try:
        loan = client.with_child_user(child_user).create_loan(
            PLAN_NAME, SYMBOL, LOAN_TO_VALUE, collateral=COLLATERAL
        )
        print(f"Loan created successfully. Loan ID: {loan.id}")

        print("\nTracking loan status...")
        details = client.get_loan_details(loan.id)
    except APIError as err:
        print(format_api_error(err))
        return

    print(f"State: {details.state_en}")
    print(f"Collateral: {details.collateral}")
    print(f"Debt: {details.debt}")
    print(f"Liquidation Price: {details.liquidation_price}")
    print(f"Loan To Value: {details.loan_to_value}")


if __name__ == "__main__":
    main()
