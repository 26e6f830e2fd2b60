import asyncio
import logging
from typing import Any, Awaitable, Dict, Optional
from web3 import AsyncWeb3
from receipts.contracts import contracts
from receipts.receipt_types import TokenMetadata


async def _read_optional(call: Awaitable[Any]) -> Optional[Any]:
    """Await a contract read, returning None if it fails"""
    try:
        return await call
    except Exception:
        return None


class TokenMetadataCache:
    """
    Memoizes ERC-20 symbol and decimals per contract address.

    Entries are keyed by lower-cased address and never evicted: symbol and
    decimals are immutable on-chain. Failed lookups are cached too, so a
    non-ERC-20 contract costs one round of calls per cache lifetime.
    """

    def __init__(self, debug: bool = False):
        self._entries: Dict[str, TokenMetadata] = {}
        self._logger = None
        if debug:
            self._logger = logging.getLogger(__name__)

    def __contains__(self, address: str) -> bool:
        return address.lower() in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, address: str) -> Optional[TokenMetadata]:
        """Return the cached entry for `address` without touching the network"""
        return self._entries.get(address.lower())

    def clear(self) -> None:
        self._entries.clear()

    async def get_token_meta(self, web3: AsyncWeb3, address: str) -> TokenMetadata:
        """
        Get symbol and decimals for a token contract.

        symbol() and decimals() run concurrently and fail independently;
        a failed or ill-typed answer leaves that field as None.

        Args:
            web3: Client used for the eth_call reads
            address: Token contract address, any case

        Returns:
            TokenMetadata: Cached or freshly fetched metadata
        """
        key = address.lower()
        cached = self._entries.get(key)
        if cached is not None:
            return cached

        try:
            contract = contracts.get_contract(web3, "erc20", address)
        except (TypeError, ValueError) as e:
            self._debug_log("Not a contract address", f"{address}: {e}")
            self._entries[key] = TokenMetadata()
            return self._entries[key]

        symbol, decimals = await asyncio.gather(
            _read_optional(contract.functions.symbol().call()),
            _read_optional(contract.functions.decimals().call()),
        )

        meta = TokenMetadata(
            symbol=symbol if isinstance(symbol, str) else None,
            decimals=(
                decimals
                if isinstance(decimals, int) and not isinstance(decimals, bool)
                else None
            ),
        )
        if meta.symbol is None or meta.decimals is None:
            self._debug_log("Incomplete token metadata", f"{address} -> {meta}")

        self._entries[key] = meta
        return meta

    def _debug_log(self, message: str, data: Optional[Any] = None) -> None:
        if self._logger:
            if data:
                self._logger.debug(f"{message}: {data}")
            else:
                self._logger.debug(message)
