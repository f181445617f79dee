"""Example: Open a stablecoin vault on chain and mint ZAR against it."""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

from zarban import APIError, ZarbanEVM, ZarbanError, format_api_error

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOGLEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

ILK_NAME = "ETHA"
SYMBOL = "ETH"
COLLATERAL_AMOUNT = 0.01
LOAN_AMOUNT = 100


def main() -> None:
    private_key = os.getenv("PRIVATE_KEY")
    if not private_key:
        raise ValueError("PRIVATE_KEY not found in environment variables")
    rpc_url = os.getenv("ZARBAN_RPC_URL", "http://localhost:8545")

    client = ZarbanEVM(private_key, rpc_url, testnet=True)
    client.connect()
    try:
        print(
            f"Creating vault: ilk={ILK_NAME} collateral={COLLATERAL_AMOUNT} {SYMBOL} "
            f"loan={LOAN_AMOUNT} ZAR"
        )
        result = client.create_vault(ILK_NAME, SYMBOL, COLLATERAL_AMOUNT, LOAN_AMOUNT)
    except APIError as err:
        print(format_api_error(err))
        return
    except ZarbanError as exc:
        print(f"Vault creation failed: {exc}")
        return
    finally:
        client.disconnect()

    print(f"Transactions: {', '.join(result.tx_hashes)}")
    print(f"Vault ID: {result.vault_id}")


if __name__ == "__main__":
    main()
