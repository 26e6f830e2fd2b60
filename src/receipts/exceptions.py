class ReceiptsError(Exception):
    """Base exception for transaction detail errors."""
    pass

class RpcError(ReceiptsError):
    """Raised when a JSON-RPC endpoint answers with an error or cannot be reached."""

    def __init__(self, message: str, code: int | None = None):
        super().__init__(message)
        self.code = code

class UnsupportedNetworkError(ReceiptsError):
    """Raised when a chain id is not in the network registry."""
    pass

class TransactionNotFoundOnAnyNetwork(ReceiptsError):
    """Raised when no configured network knows the transaction hash."""
    pass

class InvalidTransactionHashError(ReceiptsError):
    """Raised when a transaction hash is not 0x + 64 hex characters."""
    pass
