"""Example: Log in to the Zarban wallet API and print the access token."""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

from zarban import APIError, WalletClient, format_api_error

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOGLEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def main() -> None:
    email = os.getenv("ZARBAN_EMAIL")
    password = os.getenv("ZARBAN_PASSWORD")
    if not email or not password:
        raise ValueError("ZARBAN_EMAIL and ZARBAN_PASSWORD must be set")

    client = WalletClient.create(testnet=True)

    try:
        response = client.login(email, password)
    except APIError as err:
        print(format_api_error(err))
        return

    print("Login successful")
    print(f"Token: {response.token}")


if __name__ == "__main__":
    main()
