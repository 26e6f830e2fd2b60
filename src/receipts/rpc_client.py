from typing import Any, List, Optional
import asyncio
import itertools
import aiohttp
from receipts.exceptions import RpcError


class JsonRpcClient:
    """Minimal JSON-RPC 2.0 client for methods web3 does not expose (trace_*)"""

    _ids = itertools.count(1)

    def __init__(self, url: str, timeout: float = 30):
        """
        Args:
            url: JSON-RPC endpoint
            timeout: Total request timeout in seconds
        """
        self._url = url
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    @property
    def url(self) -> str:
        return self._url

    async def request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """
        Call a JSON-RPC method and return its result.

        Raises:
            RpcError: On HTTP errors, transport errors or a JSON-RPC error object
        """
        body = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params or [],
        }

        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.post(self._url, json=body) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        raise RpcError(
                            f"{method} failed with HTTP {response.status}: {error_text}"
                        )
                    payload = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RpcError(f"{method} request failed: {str(e)}")
        except ValueError as e:
            raise RpcError(f"{method} returned invalid JSON: {str(e)}")

        if not isinstance(payload, dict):
            raise RpcError(f"{method} returned a malformed response")

        error = payload.get("error")
        if error:
            if isinstance(error, dict):
                raise RpcError(
                    f"{method} error: {error.get('message', 'Unknown error')}",
                    code=error.get("code"),
                )
            raise RpcError(f"{method} error: {error}")

        return payload.get("result")

    async def trace_transaction(self, tx_hash: str) -> Any:
        """Parity-style call trace of a mined transaction"""
        return await self.request("trace_transaction", [tx_hash])
