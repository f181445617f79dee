from __future__ import annotations

import json
from decimal import Decimal
from typing import Any
from urllib.parse import urlsplit

import requests

from zarban.exceptions import ConfirmationTimeoutError
from zarban.types import PreparedTransaction, SubmittedTransaction

SENDER = "0x2c7536E3605D9C16a7a3D7b1898e529396a65c23"


def step_payload(number: int, *, to: str | None = None, value: str = "0") -> dict[str, Any]:
    return {
        "type": "PreparedTx",
        "data": {
            "label": {"en-US": f"Step {number}", "fa-IR": f"مرحله {number}"},
            "methodParameters": {
                "to": to or f"0x{number:040x}",
                "calldata": f"0x{number:08x}",
                "value": value,
            },
            "gasUseEstimate": 100000 + number,
        },
    }


def plan_payload(total: int, current: int, *, steps: int | None = None) -> dict[str, Any]:
    count = total if steps is None else steps
    return {
        "numberOfSteps": total,
        "stepNumber": current,
        "steps": [step_payload(number) for number in range(1, count + 1)],
    }


def make_response(
    status: int,
    body: Any = None,
    *,
    headers: dict[str, str] | None = None,
    method: str = "POST",
    url: str = "https://testapi.zarban.io/v2/example",
) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    if isinstance(body, bytes):
        response._content = body
    elif body is None:
        response._content = b""
    else:
        response._content = json.dumps(body).encode("utf-8")
    response.encoding = "utf-8"
    response.headers.update(headers or {})
    response.url = url
    response.request = requests.Request(method, url).prepare()
    return response


class DummySession(requests.Session):
    """Session returning queued responses per path and recording every call."""

    def __init__(self, routes: dict[str, list[tuple[int, Any]]] | None = None) -> None:
        super().__init__()
        self.routes = {path: list(items) for path, items in (routes or {}).items()}
        self.calls: list[dict[str, Any]] = []

    def request(self, method, url, **kwargs):  # type: ignore[override]
        self.calls.append({"method": method, "url": url, **kwargs})
        path = urlsplit(url).path
        queue = self.routes.get(path)
        if not queue:
            raise requests.ConnectionError(f"no route for {path}")
        status, body = queue.pop(0) if len(queue) > 1 else queue[0]
        return make_response(status, body, method=method, url=url)


class FakeDispatcher:
    """Stand-in for TransactionDispatcher with scripted receipt outcomes."""

    def __init__(self, outcomes: list[Any] | None = None) -> None:
        self.outcomes = list(outcomes or [])
        self.built: list[tuple[PreparedTransaction, Decimal]] = []
        self.sent: list[SubmittedTransaction] = []
        self.waits: list[tuple[str, float, float]] = []

    def build(self, prepared: PreparedTransaction, *, gas_price_markup: Decimal) -> SubmittedTransaction:
        self.built.append((prepared, gas_price_markup))
        return SubmittedTransaction(
            from_address=SENDER,
            to=prepared.to,
            value=int(prepared.value),
            gas=prepared.gas_estimate,
            gas_price=1_000_000_000,
            nonce=len(self.built) - 1,
            chain_id=1337,
            data=prepared.calldata,
        )

    def send(self, tx: SubmittedTransaction) -> str:
        self.sent.append(tx)
        return f"0x{len(self.sent):064x}"

    def wait_for_receipt(self, tx_hash: str, *, max_wait: float, poll_interval: float) -> Any:
        self.waits.append((tx_hash, max_wait, poll_interval))
        outcome = self.outcomes.pop(0) if self.outcomes else {"status": 1, "blockNumber": 100}
        if outcome == "timeout":
            raise ConfirmationTimeoutError(tx_hash, max_wait)
        return outcome

