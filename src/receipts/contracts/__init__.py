from receipts.contracts.contract_registry import ContractRegistry, contracts, ERC20_ABI

__all__ = ["ContractRegistry", "contracts", "ERC20_ABI"]
