"""Example: Repay ZAR debt of an existing stablecoin vault."""

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

# Zero repays the amount chosen by the API
REPAY_AMOUNT = 0


def main() -> None:
    private_key = os.getenv("PRIVATE_KEY")
    vault_id = os.getenv("ZARBAN_VAULT_ID")
    if not private_key or not vault_id:
        raise ValueError("PRIVATE_KEY and ZARBAN_VAULT_ID must be set")
    rpc_url = os.getenv("ZARBAN_RPC_URL", "http://localhost:8545")

    client = ZarbanEVM(private_key, rpc_url, testnet=True)
    client.connect()
    try:
        result = client.repay_vault(int(vault_id), REPAY_AMOUNT)
    except APIError as err:
        print(format_api_error(err))
        return
    except ZarbanError as exc:
        print(f"Vault repayment failed: {exc}")
        return
    finally:
        client.disconnect()

    status = "completed" if result.completed else "submitted (some steps unconfirmed)"
    print(f"Repayment {status}: {', '.join(result.tx_hashes)}")


if __name__ == "__main__":
    main()
