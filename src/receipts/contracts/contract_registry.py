import json
from pathlib import Path
from typing import Any, Dict, List
from eth_utils import to_checksum_address
from web3 import AsyncWeb3

current_dir = Path(__file__).parent

# Load ABIs
with open(current_dir / "contract_abis" / "erc20.json") as f:
    ERC20_ABI = json.load(f)


class ContractRegistry:
    """Registry of known ABIs, building contract instances for any address"""

    def __init__(self):
        self._abis: Dict[str, List[Dict[str, Any]]] = {
            "erc20": ERC20_ABI,
        }

    def get_abi(self, name: str) -> List[Dict[str, Any]]:
        """Get ABI by name"""
        if name not in self._abis:
            raise KeyError(f"ABI not found: {name}")
        return self._abis[name]

    def get_contract(self, web3: AsyncWeb3, name: str, address: str) -> Any:
        """Create a contract instance for the ABI `name` at `address`"""
        return web3.eth.contract(
            address=to_checksum_address(address), abi=self.get_abi(name)
        )


contracts = ContractRegistry()
