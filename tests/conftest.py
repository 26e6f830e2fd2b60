"""
Pytest fixtures for receipt extraction tests. web3 is replaced by MagicMock /
AsyncMock fakes so no test touches the network.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from hexbytes import HexBytes
from web3.exceptions import TransactionNotFound

from receipts.erc20_decoder import TRANSFER_TOPIC
from receipts.receipt_types import ChainInfo

TX_HASH = "0x" + "ab" * 32
SENDER = "0x1111111111111111111111111111111111111111"
RECIPIENT = "0x2222222222222222222222222222222222222222"
ROUTER = "0x3333333333333333333333333333333333333333"
USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"


def address_topic(address: str) -> HexBytes:
    return HexBytes(b"\x00" * 12 + HexBytes(address))


def transfer_log(
    token: str, sender: str, recipient: str, value: int, log_index: int = 0
) -> Dict[str, Any]:
    """A Transfer(address,address,uint256) log as web3 returns it"""
    return {
        "address": token,
        "topics": [TRANSFER_TOPIC, address_topic(sender), address_topic(recipient)],
        "data": HexBytes(value.to_bytes(32, "big")),
        "logIndex": log_index,
    }


def make_receipt(logs: List[Dict[str, Any]], **fields: Any) -> Dict[str, Any]:
    receipt = {
        "transactionHash": HexBytes(TX_HASH),
        "blockNumber": 19000000,
        "from": SENDER,
        "to": ROUTER,
        "status": 1,
        "gasUsed": 21000,
        "effectiveGasPrice": 20_000_000_000,
        "logs": logs,
    }
    receipt.update(fields)
    return receipt


def make_contract(symbol: Any = None, decimals: Any = None) -> MagicMock:
    """Contract fake whose symbol()/decimals() return a value or raise it"""
    contract = MagicMock()
    for name, value in (("symbol", symbol), ("decimals", decimals)):
        call = AsyncMock()
        if isinstance(value, Exception):
            call.side_effect = value
        else:
            call.return_value = value
        getattr(contract.functions, name).return_value.call = call
    return contract


def make_web3(
    receipt: Optional[Dict[str, Any]] = None,
    tx: Optional[Dict[str, Any]] = None,
    tokens: Optional[Dict[str, MagicMock]] = None,
    block_timestamp: int = 1700000000,
) -> MagicMock:
    """
    AsyncWeb3 fake. `tokens` maps lower-cased addresses to contract fakes;
    unknown addresses get a contract whose calls revert.
    """
    tokens = {k.lower(): v for k, v in (tokens or {}).items()}
    web3 = MagicMock()

    if receipt is None:
        web3.eth.get_transaction_receipt = AsyncMock(
            side_effect=TransactionNotFound("Transaction not found")
        )
        web3.eth.get_transaction = AsyncMock(
            side_effect=TransactionNotFound("Transaction not found")
        )
    else:
        web3.eth.get_transaction_receipt = AsyncMock(return_value=receipt)
        web3.eth.get_transaction = AsyncMock(
            return_value=tx or {"hash": HexBytes(TX_HASH), "value": 0, "to": ROUTER}
        )
    web3.eth.get_block = AsyncMock(return_value={"timestamp": block_timestamp})

    def contract(address: str, abi: Any) -> MagicMock:
        return tokens.get(
            address.lower(),
            make_contract(ValueError("execution reverted"), ValueError("execution reverted")),
        )

    web3.eth.contract = MagicMock(side_effect=contract)
    return web3


class FakeTraceClient:
    """Stands in for JsonRpcClient; records every trace_transaction call"""

    def __init__(self, result: Any = None, error: Optional[Exception] = None):
        self.result = result
        self.error = error
        self.calls: List[str] = []

    async def trace_transaction(self, tx_hash: str) -> Any:
        self.calls.append(tx_hash)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def ethereum() -> ChainInfo:
    return ChainInfo(1, "Ethereum Mainnet", "ETH", 18)


@pytest.fixture
def trace_client():
    return FakeTraceClient(result=[])
