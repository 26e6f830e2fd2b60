"""Sender/receiver summary of a transaction for receipt rendering."""

from datetime import datetime
from typing import Any, Optional, Sequence, Union
from receipts.networks import NetworkConfig
from receipts.receipt_types import (
    Erc20Transfer,
    InternalNativeTransfer,
    ReceiptSummary,
    TxDetailsResult,
    get_field,
)
from receipts.units import format_units

Transfer = Union[Erc20Transfer, InternalNativeTransfer]


def _norm(address: Any) -> str:
    return address.lower() if isinstance(address, str) else ""


def _amount(transfer: Transfer) -> str:
    return transfer.value_formatted


def _first_from(transfers: Sequence[Transfer], user: str) -> Optional[Transfer]:
    """First transfer sent by `user`, else the first transfer"""
    for t in transfers:
        if _norm(t.from_address) == user:
            return t
    return transfers[0] if transfers else None


def _to_int(value: Any) -> Optional[int]:
    """Quantities are ints from web3 and hex strings in raw JSON"""
    if value is None:
        return None
    if isinstance(value, str):
        return int(value, 16) if value.lower().startswith("0x") else int(value)
    return int(value)


def _status(receipt: Any) -> Optional[str]:
    status = _to_int(get_field(receipt, "status"))
    if status is None:
        return None
    return "success" if status == 1 else "reverted"


def summarize(
    result: TxDetailsResult,
    network: NetworkConfig,
    timestamp: Optional[datetime] = None,
) -> ReceiptSummary:
    """
    Pick the sent and received amounts of a transaction.

    The user is the receipt's sender. The input side is the first ERC-20
    transfer the user sent; the output side is the last ERC-20 transfer the
    user received, or failing that the last internal native transfer to the
    user. Transactions without decoded transfers fall back to the
    transaction's own value.

    Args:
        result: Output of TxDetailsService.get_tx_details
        network: Network the transaction was found on
        timestamp: Block time, if known

    Returns:
        ReceiptSummary: Fields printed on a receipt
    """
    receipt, tx = result.receipt, result.tx
    native_symbol = network.chain.native_symbol
    native_decimals = network.chain.native_decimals

    sender = get_field(receipt, "from") or ""
    user = _norm(sender)
    receiver = get_field(receipt, "to") or ""
    amount_from = amount_to = "0"
    token_from = token_to = native_symbol

    input_transfer = None
    output_transfer = None
    for t in result.erc20_transfers:
        if input_transfer is None and _norm(t.from_address) == user:
            input_transfer = t
        if _norm(t.to_address) == user:
            output_transfer = t

    if output_transfer is None:
        for t in result.internal_native_transfers:
            if _norm(t.to_address) == user:
                output_transfer = t

    if result.erc20_transfers:
        reference = input_transfer or _first_from(result.erc20_transfers, user)
        amount_from = _amount(reference)
        token_from = reference.symbol or native_symbol
        if output_transfer is not None:
            amount_to = _amount(output_transfer)
            token_to = getattr(output_transfer, "symbol", None) or (
                native_symbol
                if isinstance(output_transfer, InternalNativeTransfer)
                else token_from
            )
            receiver = output_transfer.to_address
        else:
            amount_to = amount_from
            token_to = token_from
            receiver = reference.to_address or receiver
    elif result.internal_native_transfers:
        reference = _first_from(result.internal_native_transfers, user)
        amount_from = amount_to = _amount(reference)
        receiver = reference.to_address or receiver
    else:
        value = _to_int(get_field(tx, "value")) or 0
        amount_from = amount_to = format_units(value, native_decimals)
        receiver = get_field(tx, "to") or receiver

    if amount_to == "0":
        amount_to = amount_from

    gas_used = _to_int(get_field(receipt, "gasUsed"))
    gas_price = _to_int(get_field(receipt, "effectiveGasPrice"))
    gas_price_gwei = fee = None
    if gas_used is not None and gas_price is not None:
        gas_price_gwei = format_units(gas_price, 9)
        fee = format_units(gas_used * gas_price, native_decimals)

    tx_hash = get_field(receipt, "transactionHash")
    if isinstance(tx_hash, (bytes, bytearray)):
        tx_hash = "0x" + bytes(tx_hash).hex()

    return ReceiptSummary(
        network_name=network.name,
        chain_id=network.chain_id,
        explorer_url=network.explorer_tx_url(tx_hash or ""),
        sender=sender,
        receiver=receiver or "",
        amount_from=amount_from,
        amount_to=amount_to,
        token_from=token_from,
        token_to=token_to,
        native_symbol=native_symbol,
        status=_status(receipt),
        gas_used=gas_used,
        gas_price_gwei=gas_price_gwei,
        transaction_fee=fee,
        timestamp=timestamp,
    )
