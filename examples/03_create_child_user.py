"""Example: Create a child user under the authenticated account."""

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

CHILD_USERNAME = os.getenv("ZARBAN_CHILD_USER", "child_user_test")


def main() -> None:
    access_token = os.getenv("ZARBAN_ACCESS_TOKEN")
    if not access_token:
        raise ValueError("ZARBAN_ACCESS_TOKEN not found in environment variables")

    client = WalletClient.create(testnet=True, access_token=access_token)

    try:
        user = client.create_child_user(CHILD_USERNAME)
    except APIError as err:
        print(format_api_error(err.with_context("username", CHILD_USERNAME)))
        return

    print(f"Child user created: username={user.username} id={user.id}")


if __name__ == "__main__":
    main()
