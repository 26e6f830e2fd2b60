from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel
from receipts.networks import NetworkConfig
from receipts.receipt_types import ReceiptSummary, TxDetailsResult, get_field


class Erc20TransferModel(BaseModel):
    token_address: str
    from_address: str
    to_address: str
    value_raw: str
    value_formatted: str
    symbol: Optional[str] = None
    decimals: Optional[int] = None


class InternalTransferModel(BaseModel):
    from_address: str
    to_address: str
    value_wei: str
    value_formatted: str
    call_type: Optional[str] = None


class SummaryModel(BaseModel):
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
    gas_used: Optional[str] = None
    gas_price_gwei: Optional[str] = None
    transaction_fee: Optional[str] = None
    timestamp: Optional[datetime] = None


class TxDetailsResponse(BaseModel):
    tx_hash: str
    block_number: Optional[int] = None
    summary: SummaryModel
    erc20_transfers: List[Erc20TransferModel]
    internal_native_transfers: List[InternalTransferModel]

    @classmethod
    def from_result(
        cls, tx_hash: str, result: TxDetailsResult, summary: ReceiptSummary
    ) -> "TxDetailsResponse":
        """Build the JSON view; big integers are sent as decimal strings"""
        block_number = get_field(result.receipt, "blockNumber")
        return cls(
            tx_hash=tx_hash,
            block_number=int(block_number) if block_number is not None else None,
            summary=SummaryModel(
                network_name=summary.network_name,
                chain_id=summary.chain_id,
                explorer_url=summary.explorer_url,
                sender=summary.sender,
                receiver=summary.receiver,
                amount_from=summary.amount_from,
                amount_to=summary.amount_to,
                token_from=summary.token_from,
                token_to=summary.token_to,
                native_symbol=summary.native_symbol,
                status=summary.status,
                gas_used=str(summary.gas_used) if summary.gas_used is not None else None,
                gas_price_gwei=summary.gas_price_gwei,
                transaction_fee=summary.transaction_fee,
                timestamp=summary.timestamp,
            ),
            erc20_transfers=[
                Erc20TransferModel(
                    token_address=t.token_address,
                    from_address=t.from_address,
                    to_address=t.to_address,
                    value_raw=str(t.value_raw),
                    value_formatted=t.value_formatted,
                    symbol=t.symbol,
                    decimals=t.decimals,
                )
                for t in result.erc20_transfers
            ],
            internal_native_transfers=[
                InternalTransferModel(
                    from_address=t.from_address,
                    to_address=t.to_address,
                    value_wei=str(t.value_wei),
                    value_formatted=t.value_formatted,
                    call_type=t.call_type,
                )
                for t in result.internal_native_transfers
            ],
        )


class NetworkModel(BaseModel):
    chain_id: int
    name: str
    native_symbol: str
    native_decimals: int
    explorer_base_url: str
    trace_enabled: bool

    @classmethod
    def from_config(cls, network: NetworkConfig) -> "NetworkModel":
        return cls(
            chain_id=network.chain_id,
            name=network.name,
            native_symbol=network.chain.native_symbol,
            native_decimals=network.chain.native_decimals,
            explorer_base_url=network.explorer_base_url,
            trace_enabled=network.trace_rpc_url is not None,
        )
