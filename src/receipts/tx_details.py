import asyncio
import logging
import os
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple, Union
import aiohttp
from eth_utils import is_hexstr
from web3 import AsyncWeb3
from web3.exceptions import TransactionNotFound
from receipts.erc20_decoder import decode_erc20_transfers
from receipts.exceptions import (
    InvalidTransactionHashError,
    TransactionNotFoundOnAnyNetwork,
    UnsupportedNetworkError,
)
from receipts.networks import DiscoveryCache, NetworkConfig, NetworkRegistry
from receipts.receipt_types import (
    ChainInfo,
    InternalNativeTransfer,
    ReceiptSummary,
    TxDetailsResult,
    get_field,
)
from receipts.rpc_client import JsonRpcClient
from receipts.summary import summarize
from receipts.token_metadata import TokenMetadataCache
from receipts.trace_parser import parse_internal_transfers

Web3Factory = Callable[[str], AsyncWeb3]
TraceClientFactory = Callable[[str], JsonRpcClient]


def normalize_tx_hash(tx_hash: str) -> str:
    """
    Normalize a transaction hash to lower-case 0x + 64 hex characters.

    Raises:
        InvalidTransactionHashError: If the string is not a 32-byte hex hash
    """
    h = tx_hash.strip().lower()
    if not h.startswith("0x"):
        h = "0x" + h
    if len(h) != 66 or not is_hexstr(h):
        raise InvalidTransactionHashError(
            f"Invalid transaction hash: {tx_hash!r}, expected 0x + 64 hex characters"
        )
    return h


def _rpc_timeout() -> float:
    return float(os.getenv("RPC_TIMEOUT") or 30)


def default_web3_factory(rpc_url: str) -> AsyncWeb3:
    return AsyncWeb3(
        AsyncWeb3.AsyncHTTPProvider(
            rpc_url,
            request_kwargs={"timeout": aiohttp.ClientTimeout(total=_rpc_timeout())},
        )
    )


def default_trace_client_factory(rpc_url: str) -> JsonRpcClient:
    return JsonRpcClient(rpc_url, timeout=_rpc_timeout())


class TxDetailsService:
    """
    Fetches a transaction and every value transfer it made.

    Owns the token metadata cache, so metadata fetched for one transaction is
    reused by every later call on the same service.
    """

    def __init__(
        self,
        token_cache: Optional[TokenMetadataCache] = None,
        networks: Optional[NetworkRegistry] = None,
        web3_factory: Optional[Web3Factory] = None,
        trace_client_factory: Optional[TraceClientFactory] = None,
        discovery_cache: Optional[DiscoveryCache] = None,
        debug: bool = False,
    ) -> None:
        """Initialize the service

        Args:
            token_cache: Metadata cache to use; a fresh one if not given
            networks: Registry for chain-id based lookups; built from the
                environment on first use if not given
            web3_factory: Builds the read client for an RPC URL
            trace_client_factory: Builds the JSON-RPC client for trace calls
            discovery_cache: Remembers which network a hash was found on;
                a fresh one with the default TTL if not given
            debug: Enable debug logging if True
        """
        self._debug = debug
        self._logger = None
        if debug:
            self._logger = logging.getLogger(__name__)

        self._token_cache = (
            token_cache if token_cache is not None else TokenMetadataCache(debug=debug)
        )
        self._networks = networks
        self._web3_factory = web3_factory or default_web3_factory
        self._trace_client_factory = (
            trace_client_factory or default_trace_client_factory
        )
        self._discovery_cache = (
            discovery_cache if discovery_cache is not None else DiscoveryCache()
        )
        self._clients: Dict[str, AsyncWeb3] = {}

    @property
    def token_cache(self) -> TokenMetadataCache:
        return self._token_cache

    @property
    def discovery_cache(self) -> DiscoveryCache:
        return self._discovery_cache

    @property
    def networks(self) -> NetworkRegistry:
        if self._networks is None:
            self._networks = NetworkRegistry()
        return self._networks

    def _debug_log(self, message: str, data: Optional[Any] = None) -> None:
        """Log debug information if debug mode is enabled

        Args:
            message: Debug message to log
            data: Optional data to include in debug output
        """
        if self._debug and self._logger:
            if data:
                self._logger.debug(f"{message}: {data}")
            else:
                self._logger.debug(message)

    def _get_web3(self, rpc_url: str) -> AsyncWeb3:
        if rpc_url not in self._clients:
            self._clients[rpc_url] = self._web3_factory(rpc_url)
        return self._clients[rpc_url]

    async def fetch_traces(
        self, trace_rpc_url: str, tx_hash: str
    ) -> Optional[List[Any]]:
        """
        Fetch the call trace of a transaction.

        Returns:
            Optional[List[Any]]: Raw trace frames, or None if the endpoint
                failed, lacks trace_transaction or answered with a non-list
        """
        client = self._trace_client_factory(trace_rpc_url)
        try:
            traces = await client.trace_transaction(tx_hash)
        except Exception as e:
            self._debug_log("trace_transaction failed", f"{tx_hash}: {str(e)}")
            return None

        if not isinstance(traces, list):
            self._debug_log("Malformed trace_transaction result", type(traces))
            return None
        return traces

    async def get_tx_details(
        self,
        tx_hash: str,
        chain: ChainInfo,
        public_rpc_url: str,
        trace_rpc_url: Optional[str] = None,
        load_token_meta: bool = True,
    ) -> TxDetailsResult:
        """
        Fetch receipt and transaction, then extract ERC-20 and internal transfers.

        Args:
            tx_hash: 0x-prefixed 32-byte transaction hash
            chain: Chain the hash belongs to
            public_rpc_url: Endpoint for receipt, transaction and eth_call
            trace_rpc_url: Optional endpoint supporting trace_transaction
            load_token_meta: Look up symbol and decimals of transferred tokens

        Returns:
            TxDetailsResult: Receipt, transaction and decoded transfers

        Raises:
            TransactionNotFound: If the hash is unknown or not yet mined
        """
        web3 = self._get_web3(public_rpc_url)

        self._debug_log("Fetching transaction", f"{tx_hash} on {chain.name}")
        receipt = await web3.eth.get_transaction_receipt(tx_hash)
        tx = await web3.eth.get_transaction(tx_hash)

        erc20_transfers = await decode_erc20_transfers(
            receipt, web3, load_token_meta, self._token_cache
        )

        internal_native_transfers: List[InternalNativeTransfer] = []
        if trace_rpc_url:
            traces = await self.fetch_traces(trace_rpc_url, tx_hash)
            if traces is not None:
                internal_native_transfers = parse_internal_transfers(
                    traces, chain.native_decimals
                )

        self._debug_log(
            "Decoded transfers",
            f"{len(erc20_transfers)} erc20, {len(internal_native_transfers)} internal",
        )
        return TxDetailsResult(
            tx=tx,
            receipt=receipt,
            erc20_transfers=erc20_transfers,
            internal_native_transfers=internal_native_transfers,
        )

    async def _lookup_on(self, network: NetworkConfig, tx_hash: str) -> bool:
        web3 = self._get_web3(network.rpc_url)
        try:
            tx = await web3.eth.get_transaction(tx_hash)
        except TransactionNotFound:
            return False
        except Exception as e:
            self._debug_log(f"Lookup failed on {network.name}", str(e))
            return False
        return tx is not None

    async def find_transaction_network(self, tx_hash: str) -> Optional[NetworkConfig]:
        """
        Find the network that knows a transaction hash.

        Every configured network is queried concurrently; the first match in
        registry order wins. Hits and misses are both remembered for the
        discovery cache's TTL.
        """
        hit, cached = self._discovery_cache.get(tx_hash)
        if hit:
            self._debug_log("Discovery cache hit", tx_hash)
            return cached

        networks = list(self.networks)
        found = await asyncio.gather(
            *(self._lookup_on(network, tx_hash) for network in networks)
        )
        network = next((n for n, exists in zip(networks, found) if exists), None)
        self._discovery_cache.set(tx_hash, network)
        return network

    def _resolve_chain(
        self, chain_id: Optional[Union[int, str]]
    ) -> Optional[NetworkConfig]:
        if not chain_id or (isinstance(chain_id, str) and not chain_id.strip()):
            return None
        try:
            return self.networks.get(chain_id)
        except UnsupportedNetworkError as e:
            self._debug_log("Falling back to network discovery", str(e))
            return None

    async def get_block_timestamp(
        self, rpc_url: str, block_number: Optional[int]
    ) -> Optional[datetime]:
        """Timestamp of a block, or None if it cannot be fetched"""
        if block_number is None:
            return None
        try:
            block = await self._get_web3(rpc_url).eth.get_block(block_number)
            return datetime.fromtimestamp(
                int(get_field(block, "timestamp")), tz=timezone.utc
            )
        except Exception as e:
            self._debug_log("Failed to fetch block timestamp", str(e))
            return None

    async def get_universal_tx_details(
        self,
        tx_hash: str,
        chain_id: Optional[Union[int, str]] = None,
        load_token_meta: bool = True,
    ) -> Tuple[TxDetailsResult, ReceiptSummary]:
        """
        Get transaction details on a configured network, discovering it if needed.

        Args:
            tx_hash: 0x-prefixed 32-byte transaction hash
            chain_id: Chain to use; every configured chain is searched if it
                is empty, zero or not configured
            load_token_meta: Look up symbol and decimals of transferred tokens

        Returns:
            Tuple[TxDetailsResult, ReceiptSummary]: Details and their summary

        Raises:
            TransactionNotFoundOnAnyNetwork: If discovery finds no network
            TransactionNotFound: If the hash is unknown on the given chain
        """
        network = self._resolve_chain(chain_id)
        if network is None:
            network = await self.find_transaction_network(tx_hash)
            if network is None:
                raise TransactionNotFoundOnAnyNetwork(
                    f"Transaction {tx_hash} not found on any configured network"
                )

        result = await self.get_tx_details(
            tx_hash,
            chain=network.chain,
            public_rpc_url=network.rpc_url,
            trace_rpc_url=network.trace_rpc_url,
            load_token_meta=load_token_meta,
        )
        timestamp = await self.get_block_timestamp(
            network.rpc_url, get_field(result.receipt, "blockNumber")
        )
        return result, summarize(result, network, timestamp)


async def get_tx_details(
    tx_hash: str,
    chain: ChainInfo,
    public_rpc_url: str,
    trace_rpc_url: Optional[str] = None,
    load_token_meta: bool = True,
    token_cache: Optional[TokenMetadataCache] = None,
) -> TxDetailsResult:
    """
    One-shot transaction detail extraction.

    Pass the same `token_cache` across calls to share metadata lookups.
    """
    service = TxDetailsService(token_cache=token_cache)
    return await service.get_tx_details(
        tx_hash,
        chain=chain,
        public_rpc_url=public_rpc_url,
        trace_rpc_url=trace_rpc_url,
        load_token_meta=load_token_meta,
    )
