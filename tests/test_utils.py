from __future__ import annotations

from decimal import Decimal

import pytest
from hexbytes import HexBytes

from zarban.api.models import EventLog
from zarban.exceptions import PrecisionLossError, ValidationError
from zarban.utils import (
    build_precision_map,
    extract_vault_id,
    from_native,
    serialise_receipt,
    to_native,
)


@pytest.mark.parametrize(
    ("amount", "decimals", "expected"),
    [
        (0.01, 18, "10000000000000000"),
        (100, 18, "100000000000000000000"),
        ("1.5", 6, "1500000"),
        (Decimal("0.000001"), 6, "1"),
        (0, 18, "0"),
        (12, 0, "12"),
        (0.1, 18, "100000000000000000"),
    ],
)
def test_to_native_scales_exactly(amount, decimals, expected):
    assert to_native(amount, decimals) == expected


def test_to_native_large_amount_keeps_every_digit():
    assert to_native("123456789012345678.123456789012345678", 18) == (
        "123456789012345678123456789012345678"
    )


def test_to_native_rejects_excess_precision():
    with pytest.raises(PrecisionLossError) as excinfo:
        to_native("0.0000001", 6)

    assert excinfo.value.decimals == 6
    assert excinfo.value.field == "amount"


@pytest.mark.parametrize("amount", [-1, "-0.5", float("nan"), float("inf"), "abc", True])
def test_to_native_rejects_invalid_amounts(amount):
    with pytest.raises(ValidationError):
        to_native(amount, 18)


def test_to_native_rejects_negative_decimals():
    with pytest.raises(ValidationError):
        to_native(1, -1)


def test_from_native_inverts_scaling():
    assert from_native("10000000000000000") == Decimal("0.01")
    assert from_native(1500000, 6) == Decimal("1.5")

    with pytest.raises(ValidationError):
        from_native("1.5")


def test_build_precision_map_defaults_symbols():
    precisions = build_precision_map(["ETH", "USDC", "ETH"], base={"ZAR": 18, "USDC": 6})

    assert precisions == {"ZAR": 18, "USDC": 6, "ETH": 18}


def test_extract_vault_id_reads_manager_log():
    logs = [
        EventLog(contract="Vat", decoded={"Cdp": "1"}),
        EventLog(contract="Cdpmanager", decoded={"Usr": "0xabc", "Cdp": "42"}),
    ]

    assert extract_vault_id(logs) == 42


def test_extract_vault_id_without_manager_log_returns_none():
    assert extract_vault_id([EventLog(contract="Vat", decoded={"Cdp": "7"})]) is None
    assert extract_vault_id([]) is None


def test_extract_vault_id_rejects_bad_field():
    with pytest.raises(ValidationError):
        extract_vault_id([EventLog(contract="Cdpmanager", decoded={"Usr": "0xabc"})])

    with pytest.raises(ValidationError):
        extract_vault_id([EventLog(contract="Cdpmanager", decoded={"Cdp": "not-a-number"})])


def test_serialise_receipt_converts_bytes_to_hex():
    receipt = {
        "transactionHash": HexBytes("0x" + "ab" * 32),
        "status": 1,
        "logs": [{"data": b"\x01\x02", "topics": [HexBytes("0x00")]}],
    }

    assert serialise_receipt(receipt) == {
        "transactionHash": "0x" + "ab" * 32,
        "status": 1,
        "logs": [{"data": "0x0102", "topics": ["0x00"]}],
    }
