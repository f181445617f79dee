from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from types import SimpleNamespace

import pytest

from zarban.api.service import ServiceClient
from zarban.evm.client import ZarbanEVM
from zarban.evm.config import EVMClientConfig, FlowConfig, ReceiptPolicy
from zarban.exceptions import ConfirmationTimeoutError, NetworkError, PrecisionLossError

from conftest import SENDER, DummySession, FakeDispatcher, plan_payload

_ILKS = {"data": [{"name": "ETHA", "symbol": "ETH"}, {"name": "USDCA", "symbol": "USDC"}]}


def _client(
    tmp_path: Path, routes: dict, outcomes: list | None = None
) -> tuple[ZarbanEVM, DummySession, FakeDispatcher]:
    session = DummySession(routes)
    config = EVMClientConfig(
        private_key="0x" + "11" * 32,
        rpc_url="http://localhost:8545",
        vault_create=FlowConfig(log_path=tmp_path / "transaction_log.json"),
        vault_repay=FlowConfig(
            receipt=ReceiptPolicy(max_wait=60, poll_interval=5, continue_on_timeout=True),
            gas_price_markup=Decimal("0.10"),
            log_path=tmp_path / "repay_transaction_log.json",
        ),
        staking=FlowConfig(log_path=tmp_path / "staking_log.json"),
    )
    client = ZarbanEVM(
        config.private_key, config.rpc_url, service=ServiceClient(session=session), config=config
    )
    dispatcher = FakeDispatcher(outcomes)
    client._connections = SimpleNamespace(  # type: ignore[assignment]
        ensure_connected=lambda: None, address=SENDER
    )
    client._dispatcher = dispatcher  # type: ignore[assignment]
    return client, session, dispatcher


def _read(path: Path) -> list[dict]:
    return json.loads(path.read_text())


def test_create_vault_runs_plan_and_records_vault_id(tmp_path: Path):
    last_hash = f"0x{2:064x}"
    client, session, dispatcher = _client(
        tmp_path,
        {
            "/v2/stablecoin-system/ilks": [(200, _ILKS)],
            "/v2/stablecoin-system/tx/create-vault": [(200, plan_payload(2, 1)), (200, plan_payload(2, 2))],
            f"/v2/stablecoin-system/events/tx/{last_hash}": [
                (200, {"data": [{"contract": "Cdpmanager", "decoded": {"Cdp": "42"}}]})
            ],
        },
    )

    result = client.create_vault("ETHA", "ETH", 0.01, 100)

    assert result.completed
    assert result.vault_id == 42
    assert result.last_tx_hash == last_hash
    paths = [call["url"].split("zarban.io")[1] for call in session.calls]
    assert paths.count("/v2/stablecoin-system/ilks") == 1
    assert session.calls[1]["json"] == {
        "collateralAmount": "10000000000000000",
        "mintAmount": "100000000000000000000",
        "user": SENDER,
        "ilkName": "ETHA",
    }
    assert [markup for _, markup in dispatcher.built] == [Decimal(0), Decimal(0)]
    assert [entry["vault_id"] for entry in _read(tmp_path / "transaction_log.json")] == [-1, 42]


def test_create_vault_timeout_is_fatal(tmp_path: Path):
    client, _, dispatcher = _client(
        tmp_path,
        {
            "/v2/stablecoin-system/ilks": [(200, _ILKS)],
            "/v2/stablecoin-system/tx/create-vault": [(200, plan_payload(2, 1))],
        },
        outcomes=["timeout"],
    )

    with pytest.raises(ConfirmationTimeoutError):
        client.create_vault("ETHA", "ETH", 1, 100)

    assert len(dispatcher.sent) == 1


def test_create_vault_rejects_unrepresentable_amount(tmp_path: Path):
    client, session, dispatcher = _client(
        tmp_path, {"/v2/stablecoin-system/ilks": [(200, _ILKS)]}
    )

    with pytest.raises(PrecisionLossError):
        client.create_vault("ETHA", "ETH", "0.0000000000000000001", 100)

    assert len(session.calls) == 1
    assert dispatcher.sent == []


def test_repay_vault_continues_after_timeout(tmp_path: Path):
    client, session, dispatcher = _client(
        tmp_path,
        {"/v2/stablecoin-system/tx/repay-zar": [(200, plan_payload(2, 1)), (200, plan_payload(2, 2))]},
        outcomes=["timeout"],
    )

    result = client.repay_vault(7, 0)

    assert result.completed
    assert result.vault_id == 7
    assert len(dispatcher.sent) == 2
    assert [wait[1:] for wait in dispatcher.waits] == [(60, 5), (60, 5)]
    assert [markup for _, markup in dispatcher.built] == [Decimal("0.10"), Decimal("0.10")]
    assert session.calls[0]["json"] == {"user": SENDER, "vaultId": 7}
    entries = _read(tmp_path / "repay_transaction_log.json")
    assert [entry["vault_id"] for entry in entries] == [7, 7]


def test_repay_vault_with_amount(tmp_path: Path):
    client, session, _ = _client(
        tmp_path, {"/v2/stablecoin-system/tx/repay-zar": [(200, plan_payload(1, 1))]}
    )

    client.repay_vault(7, 250.5)

    assert session.calls[0]["json"] == {
        "amount": "250500000000000000000",
        "user": SENDER,
        "vaultId": 7,
    }


def test_staking_withdraw(tmp_path: Path):
    client, session, dispatcher = _client(
        tmp_path, {"/v2/staking/tx/withdraw": [(200, plan_payload(1, 1))]}
    )

    result = client.staking_withdraw("1.5")

    assert result.completed
    assert result.vault_id is None
    assert session.calls[0]["json"] == {"user": SENDER, "amount": "1500000000000000000"}
    assert len(_read(tmp_path / "staking_log.json")) == 1
    assert len(dispatcher.sent) == 1


def test_flows_require_connection(tmp_path: Path):
    session = DummySession({})
    client = ZarbanEVM(
        "0x" + "11" * 32, "http://localhost:8545", service=ServiceClient(session=session)
    )

    with pytest.raises(NetworkError):
        client.staking_withdraw(1)
    assert session.calls == []
