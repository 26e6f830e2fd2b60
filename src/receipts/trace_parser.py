"""Internal native transfers from trace_transaction call traces."""

from typing import Any, Iterable, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from receipts.receipt_types import InternalNativeTransfer
from receipts.units import format_units


class TraceAction(BaseModel):
    """Action payload of a trace frame (OpenEthereum / Erigon / Nethermind)"""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    call_type: Optional[str] = Field(default=None, alias="callType")
    from_address: Optional[str] = Field(default=None, alias="from")
    to_address: Optional[str] = Field(default=None, alias="to")
    value: Optional[Union[str, int]] = None


class TraceFrame(BaseModel):
    """One entry of a trace_transaction result"""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    type: str
    action: TraceAction = Field(default_factory=TraceAction)
    error: Optional[str] = None
    trace_address: Optional[Any] = Field(default=None, alias="traceAddress")
    subtraces: Optional[Any] = None


def parse_trace_frame(raw: Any) -> Optional[TraceFrame]:
    """Validate a raw trace frame, returning None if it has the wrong shape"""
    if isinstance(raw, TraceFrame):
        return raw
    try:
        return TraceFrame.model_validate(raw)
    except ValidationError:
        return None


def parse_trace_value(value: Optional[Union[str, int]]) -> int:
    """Parse a hex (or decimal) quantity; anything unparsable counts as zero"""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    text = value.strip().lower()
    if "_" in text:
        return 0
    try:
        if text.startswith("0x"):
            return int(text, 16)
        return int(text, 10)
    except ValueError:
        return 0


def parse_internal_transfers(
    traces: Iterable[Union[TraceFrame, Any]], native_decimals: int
) -> List[InternalNativeTransfer]:
    """
    Extract native value transfers from a flat list of trace frames.

    Only frames of type "call" with a non-zero value are kept, in trace
    order. Frames that fail validation are skipped.

    Args:
        traces: trace_transaction result, raw dicts or TraceFrame models
        native_decimals: Decimals of the chain's native currency

    Returns:
        List[InternalNativeTransfer]: Value-bearing calls
    """
    transfers: List[InternalNativeTransfer] = []
    for raw in traces:
        frame = parse_trace_frame(raw)
        if frame is None or frame.type != "call":
            continue

        value_wei = parse_trace_value(frame.action.value)
        if value_wei <= 0:
            continue

        transfers.append(
            InternalNativeTransfer(
                from_address=frame.action.from_address or "",
                to_address=frame.action.to_address or "",
                value_wei=value_wei,
                value_formatted=format_units(value_wei, native_decimals),
                call_type=frame.action.call_type,
            )
        )
    return transfers
