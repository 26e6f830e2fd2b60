from receipts.exceptions import (
    ReceiptsError,
    RpcError,
    UnsupportedNetworkError,
    TransactionNotFoundOnAnyNetwork,
    InvalidTransactionHashError,
)
from receipts.erc20_decoder import (
    TRANSFER_TOPIC,
    decode_erc20_transfers,
    decode_transfer_log,
)
from receipts.networks import (
    DiscoveryCache,
    NetworkConfig,
    NetworkRegistry,
    native_token_info,
)
from receipts.receipt_types import (
    ChainInfo,
    Erc20Transfer,
    InternalNativeTransfer,
    ReceiptSummary,
    TokenMetadata,
    TxDetailsResult,
)
from receipts.summary import summarize
from receipts.token_metadata import TokenMetadataCache
from receipts.trace_parser import TraceFrame, parse_internal_transfers
from receipts.tx_details import TxDetailsService, get_tx_details, normalize_tx_hash
from receipts.units import format_units, parse_units

__all__ = [
    'ReceiptsError',
    'RpcError',
    'UnsupportedNetworkError',
    'TransactionNotFoundOnAnyNetwork',
    'InvalidTransactionHashError',
    'TRANSFER_TOPIC',
    'decode_erc20_transfers',
    'decode_transfer_log',
    'DiscoveryCache',
    'NetworkConfig',
    'NetworkRegistry',
    'native_token_info',
    'ChainInfo',
    'Erc20Transfer',
    'InternalNativeTransfer',
    'ReceiptSummary',
    'TokenMetadata',
    'TxDetailsResult',
    'summarize',
    'TokenMetadataCache',
    'TraceFrame',
    'parse_internal_transfers',
    'TxDetailsService',
    'get_tx_details',
    'normalize_tx_hash',
    'format_units',
    'parse_units',
]
