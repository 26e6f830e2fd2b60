from typing import Any, List, Optional
from eth_abi import decode
from eth_abi.exceptions import DecodingError
from eth_utils import keccak
from hexbytes import HexBytes
from web3 import AsyncWeb3
from receipts.receipt_types import (
    DecodedTransfer,
    Erc20Transfer,
    ReceiptType,
    TokenMetadata,
    get_field,
)
from receipts.token_metadata import TokenMetadataCache
from receipts.units import format_units

# keccak256("Transfer(address,address,uint256)")
TRANSFER_TOPIC = HexBytes(keccak(text="Transfer(address,address,uint256)"))

DEFAULT_TOKEN_DECIMALS = 18


def is_transfer_log(log: Any) -> bool:
    """True if the log carries the Transfer signature and both indexed addresses"""
    topics = get_field(log, "topics") or []
    if len(topics) < 3:
        return False
    try:
        return HexBytes(topics[0]) == TRANSFER_TOPIC
    except (TypeError, ValueError):
        return False


def decode_transfer_log(log: Any) -> Optional[DecodedTransfer]:
    """
    Decode a log as an ERC-20 Transfer event.

    Returns:
        Optional[DecodedTransfer]: The event arguments, or None if the log is
            not a decodable ERC-20 Transfer (wrong signature, ERC-721 style
            indexed token id with empty data, bad padding or hex)
    """
    if not is_transfer_log(log):
        return None

    topics = get_field(log, "topics")
    try:
        from_address, to_address = decode(
            ["address", "address"], HexBytes(topics[1]) + HexBytes(topics[2])
        )
        (value,) = decode(["uint256"], HexBytes(get_field(log, "data") or b""))
    except (DecodingError, TypeError, ValueError):
        return None

    return DecodedTransfer(
        token_address=get_field(log, "address"),
        from_address=from_address,
        to_address=to_address,
        value=value,
    )


async def decode_erc20_transfers(
    receipt: ReceiptType,
    web3: AsyncWeb3,
    load_metadata: bool,
    token_cache: TokenMetadataCache,
) -> List[Erc20Transfer]:
    """
    Decode every ERC-20 Transfer log of a receipt, in log order.

    Args:
        receipt: Transaction receipt holding the logs
        web3: Client used for token metadata reads
        load_metadata: Look up symbol and decimals for each token contract
        token_cache: Cache the metadata lookups go through

    Returns:
        List[Erc20Transfer]: One entry per decodable Transfer log
    """
    transfers: List[Erc20Transfer] = []
    for log in get_field(receipt, "logs") or []:
        decoded = decode_transfer_log(log)
        if decoded is None:
            continue

        meta = TokenMetadata()
        if load_metadata:
            meta = await token_cache.get_token_meta(web3, decoded.token_address)

        decimals = (
            meta.decimals if meta.decimals is not None else DEFAULT_TOKEN_DECIMALS
        )
        transfers.append(
            Erc20Transfer(
                token_address=decoded.token_address,
                from_address=decoded.from_address,
                to_address=decoded.to_address,
                value_raw=decoded.value,
                value_formatted=format_units(decoded.value, decimals),
                symbol=meta.symbol,
                decimals=meta.decimals,
            )
        )
    return transfers
