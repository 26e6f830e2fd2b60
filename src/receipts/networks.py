import os
import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Tuple, Union
from receipts.exceptions import UnsupportedNetworkError
from receipts.receipt_types import ChainInfo


@dataclass(frozen=True)
class NetworkConfig:
    """RPC and explorer settings for one supported chain"""

    chain: ChainInfo
    rpc_url: str
    explorer_base_url: str
    trace_rpc_url: Optional[str] = None

    @property
    def chain_id(self) -> int:
        return self.chain.chain_id

    @property
    def name(self) -> str:
        return self.chain.name

    def explorer_tx_url(self, tx_hash: str) -> str:
        return f"{self.explorer_base_url}/tx/{tx_hash}"


# env prefix, chain, default public RPC, explorer
KNOWN_NETWORKS: List[Tuple[str, ChainInfo, str, str]] = [
    (
        "ETHEREUM",
        ChainInfo(1, "Ethereum Mainnet", "ETH"),
        "https://ethereum-rpc.publicnode.com",
        "https://etherscan.io",
    ),
    (
        "BASE",
        ChainInfo(8453, "Base Mainnet", "ETH"),
        "https://mainnet.base.org",
        "https://basescan.org",
    ),
    (
        "BASE_SEPOLIA",
        ChainInfo(84532, "Base Sepolia", "ETH"),
        "https://sepolia.base.org",
        "https://sepolia.basescan.org",
    ),
    (
        "POLYGON",
        ChainInfo(137, "Polygon Mainnet", "POL"),
        "https://polygon-rpc.com",
        "https://polygonscan.com",
    ),
    (
        "ARBITRUM",
        ChainInfo(42161, "Arbitrum One", "ETH"),
        "https://arb1.arbitrum.io/rpc",
        "https://arbiscan.io",
    ),
    (
        "OPTIMISM",
        ChainInfo(10, "Optimism Mainnet", "ETH"),
        "https://mainnet.optimism.io",
        "https://optimistic.etherscan.io",
    ),
    (
        "ZKSYNC",
        ChainInfo(324, "zkSync Era", "ETH"),
        "https://mainnet.era.zksync.io",
        "https://explorer.zksync.io",
    ),
    (
        "BSC",
        ChainInfo(56, "BNB Smart Chain", "BNB"),
        "https://bsc-dataseed1.binance.org",
        "https://bscscan.com",
    ),
    (
        "AVALANCHE",
        ChainInfo(43114, "Avalanche C-Chain", "AVAX"),
        "https://api.avax.network/ext/bc/C/rpc",
        "https://snowtrace.io",
    ),
]


def native_token_info(chain_id: int) -> Tuple[str, int]:
    """Symbol and decimals of a chain's native currency, ETH/18 if unknown"""
    for _, chain, _, _ in KNOWN_NETWORKS:
        if chain.chain_id == chain_id:
            return chain.native_symbol, chain.native_decimals
    return "ETH", 18


def _parse_chain_id(chain_id: Union[int, str]) -> int:
    if isinstance(chain_id, int):
        return chain_id
    text = chain_id.strip().lower()
    try:
        return int(text, 16) if text.startswith("0x") else int(text)
    except ValueError:
        raise UnsupportedNetworkError(f"Invalid chain id: {chain_id}")


class NetworkRegistry:
    """Supported networks, with RPC URLs taken from the environment"""

    def __init__(self, networks: Optional[List[NetworkConfig]] = None):
        """
        Initialize the registry.

        Args:
            networks: Explicit network list; defaults to every known network
                configured from <PREFIX>_RPC_URL / <PREFIX>_TRACE_RPC_URL
        """
        if networks is None:
            networks = self._from_env()
        self._networks: Dict[int, NetworkConfig] = {n.chain_id: n for n in networks}

    @staticmethod
    def _from_env() -> List[NetworkConfig]:
        networks = []
        for prefix, chain, default_rpc, explorer in KNOWN_NETWORKS:
            networks.append(
                NetworkConfig(
                    chain=chain,
                    rpc_url=os.getenv(f"{prefix}_RPC_URL") or default_rpc,
                    explorer_base_url=explorer,
                    trace_rpc_url=os.getenv(f"{prefix}_TRACE_RPC_URL") or None,
                )
            )
        return networks

    def __iter__(self) -> Iterator[NetworkConfig]:
        return iter(self._networks.values())

    def __len__(self) -> int:
        return len(self._networks)

    def get(self, chain_id: Union[int, str]) -> NetworkConfig:
        """
        Get a network by decimal or 0x-hex chain id.

        Raises:
            UnsupportedNetworkError: If the chain is not configured
        """
        parsed = _parse_chain_id(chain_id)
        if parsed not in self._networks:
            raise UnsupportedNetworkError(f"Unsupported chain id: {chain_id}")
        return self._networks[parsed]


# seconds
DISCOVERY_CACHE_TTL = 10 * 60


class DiscoveryCache:
    """
    Remembers which network a transaction hash was found on.

    Misses are stored as well, so an unknown hash does not fan out to every
    network again until its entry expires. Expired entries are pruned on write.
    """

    def __init__(
        self,
        ttl: float = DISCOVERY_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._ttl = ttl
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Optional[NetworkConfig]]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at >= self._ttl

    def get(self, tx_hash: str) -> Tuple[bool, Optional[NetworkConfig]]:
        """
        Look up a hash.

        Returns:
            Tuple[bool, Optional[NetworkConfig]]: (hit, network); network is
                None on a cached miss
        """
        entry = self._entries.get(tx_hash.lower())
        if entry is None or self._expired(entry[0], self._clock()):
            return False, None
        return True, entry[1]

    def set(self, tx_hash: str, network: Optional[NetworkConfig]) -> None:
        now = self._clock()
        self.prune(now)
        self._entries[tx_hash.lower()] = (now, network)

    def prune(self, now: Optional[float] = None) -> int:
        """Drop expired entries, returning how many were removed"""
        if now is None:
            now = self._clock()
        expired = [h for h, (t, _) in self._entries.items() if self._expired(t, now)]
        for h in expired:
            del self._entries[h]
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()
