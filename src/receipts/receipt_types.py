"""Data types produced by transaction detail extraction."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Mapping, Optional

# Receipt and transaction objects come back from web3 as AttributeDicts;
# plain mappings with the same keys are accepted everywhere.
ReceiptType = Any
TransactionType = Any


@dataclass(frozen=True)
class ChainInfo:
    """Identity of an EVM chain and its native currency."""

    chain_id: int
    name: str
    native_symbol: str = "ETH"
    native_decimals: int = 18


@dataclass(frozen=True)
class TokenMetadata:
    """Symbol and decimals of a token contract, either may be unknown."""

    symbol: Optional[str] = None
    decimals: Optional[int] = None


@dataclass(frozen=True)
class DecodedTransfer:
    """Arguments of a Transfer(address,address,uint256) event."""

    token_address: str
    from_address: str
    to_address: str
    value: int


@dataclass
class Erc20Transfer:
    """ERC-20 transfer decoded from a receipt log."""

    token_address: str
    from_address: str
    to_address: str
    value_raw: int
    value_formatted: str
    symbol: Optional[str] = None
    decimals: Optional[int] = None


@dataclass
class InternalNativeTransfer:
    """Native currency movement found in a call trace."""

    from_address: str
    to_address: str
    value_wei: int
    value_formatted: str
    call_type: Optional[str] = None


@dataclass
class TxDetailsResult:
    """Receipt, transaction and every value transfer found in them."""

    tx: TransactionType
    receipt: ReceiptType
    erc20_transfers: List[Erc20Transfer] = field(default_factory=list)
    internal_native_transfers: List[InternalNativeTransfer] = field(
        default_factory=list
    )


@dataclass
class ReceiptSummary:
    """Sender/receiver view of a transaction, as printed on a receipt."""

    network_name: str
    chain_id: int
    explorer_url: str
    sender: str
    receiver: str
    amount_from: str
    amount_to: str
    token_from: str
    token_to: str
    native_symbol: str
    status: Optional[str] = None
    gas_used: Optional[int] = None
    gas_price_gwei: Optional[str] = None
    transaction_fee: Optional[str] = None
    timestamp: Optional[datetime] = None


def get_field(obj: Any, name: str, default: Any = None) -> Any:
    """Read a key from a web3 AttributeDict or a plain dict"""
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)
