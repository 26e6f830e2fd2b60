"""Tests for internal native transfer extraction from call traces."""

from __future__ import annotations

import pytest

from conftest import RECIPIENT, ROUTER, SENDER
from receipts.trace_parser import (
    TraceFrame,
    parse_internal_transfers,
    parse_trace_frame,
    parse_trace_value,
)


def call_frame(value, sender=SENDER, recipient=RECIPIENT, frame_type="call", call_type="call"):
    return {
        "type": frame_type,
        "action": {"callType": call_type, "from": sender, "to": recipient, "value": value, "gas": "0x5208"},
        "result": {"gasUsed": "0x0", "output": "0x"},
        "traceAddress": [],
        "subtraces": 0,
    }


def test_zero_value_call_dropped_and_ten_gwei_kept():
    traces = [call_frame("0x0"), call_frame("0x2540be400", sender=ROUTER)]

    transfers = parse_internal_transfers(traces, 18)

    assert len(transfers) == 1
    assert transfers[0].value_wei == 10_000_000_000
    assert transfers[0].value_formatted == "0.00000001"
    assert transfers[0].from_address == ROUTER
    assert transfers[0].to_address == RECIPIENT
    assert transfers[0].call_type == "call"


def test_only_call_frames_count():
    traces = [
        call_frame("0x10", frame_type="create"),
        call_frame("0x10", frame_type="suicide"),
        call_frame("0x20", call_type="delegatecall"),
        call_frame("0x30"),
    ]

    transfers = parse_internal_transfers(traces, 18)

    assert [t.value_wei for t in transfers] == [0x20, 0x30]
    assert transfers[0].call_type == "delegatecall"


def test_order_preserved_without_aggregation():
    traces = [call_frame("0x1"), call_frame("0x2"), call_frame("0x1")]

    transfers = parse_internal_transfers(traces, 18)

    assert [t.value_wei for t in transfers] == [1, 2, 1]


def test_unparsable_values_and_frames_are_skipped():
    no_action = {"type": "call"}
    missing_type = {"action": {"value": "0x10"}}
    traces = [
        call_frame("0xnothex"),
        call_frame(None),
        call_frame(""),
        no_action,
        missing_type,
        "garbage",
        None,
        call_frame("0x5"),
    ]

    transfers = parse_internal_transfers(traces, 18)

    assert [t.value_wei for t in transfers] == [5]


def test_missing_addresses_become_empty_strings():
    frame = call_frame("0x64")
    del frame["action"]["from"]
    frame["action"]["to"] = None

    (transfer,) = parse_internal_transfers([frame], 18)

    assert transfer.from_address == ""
    assert transfer.to_address == ""


def test_native_decimals_are_used_for_formatting():
    (transfer,) = parse_internal_transfers([call_frame("0xf4240")], 6)
    assert transfer.value_formatted == "1"


def test_accepts_validated_frames():
    frame = TraceFrame.model_validate(call_frame("0xde0b6b3a7640000"))
    (transfer,) = parse_internal_transfers([frame], 18)
    assert transfer.value_formatted == "1"


def test_parse_trace_frame():
    frame = parse_trace_frame(call_frame("0x1"))
    assert frame is not None
    assert frame.action.from_address == SENDER
    assert frame.trace_address == []
    assert parse_trace_frame({"action": {}}) is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("0x2540BE400", 10_000_000_000),
        ("1000", 1000),
        (42, 42),
        ("0x", 0),
        ("xyz", 0),
        (None, 0),
        ("1_000", 0),
        ("0x_ff", 0),
    ],
)
def test_parse_trace_value(raw, expected):
    assert parse_trace_value(raw) == expected


@pytest.mark.parametrize(
    "overrides",
    [{"traceAddress": None}, {"subtraces": "0x1"}, {"traceAddress": "0"}],
)
def test_unused_frame_fields_do_not_drop_transfer(overrides):
    frame = {**call_frame("0x10"), **overrides}

    (transfer,) = parse_internal_transfers([frame], 18)

    assert transfer.value_wei == 16
