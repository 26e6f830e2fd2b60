import asyncio
import argparse
import json
import logging
from typing import List, Optional
from contextlib import asynccontextmanager
from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query
from web3.exceptions import TransactionNotFound
from core.models.tx_details import NetworkModel, TxDetailsResponse
from receipts.exceptions import (
    InvalidTransactionHashError,
    TransactionNotFoundOnAnyNetwork,
)
from receipts.tx_details import TxDetailsService, normalize_tx_hash

# Load environment variables
load_dotenv(override=True)


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Transaction receipt details")
    parser.add_argument(
        "tx_hash", nargs="?", default=None, help="Transaction hash to look up"
    )
    parser.add_argument(
        "--chain-id", default=None, help="Chain id (decimal or 0x-hex); searched if omitted or unknown"
    )
    parser.add_argument(
        "--no-token-meta",
        action="store_true",
        default=False,
        help="Skip symbol/decimals lookups for ERC-20 tokens",
    )
    parser.add_argument(
        "--debug", action="store_true", default=False, help="Enable debug mode"
    )
    parser.add_argument(
        "--web", action="store_true", default=False, help="Run as web server"
    )
    parser.add_argument(
        "--port", type=int, default=8000, help="Port for web server mode"
    )
    return parser.parse_args()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the details service shared by all requests."""
    if not hasattr(app.state, "tx_service"):
        app.state.tx_service = TxDetailsService(
            debug=getattr(app.state, "debug", False)
        )
    yield


app = FastAPI(lifespan=lifespan)


async def fetch_details(
    service: TxDetailsService,
    tx_hash: str,
    chain_id: Optional[str] = None,
    load_token_meta: bool = True,
) -> TxDetailsResponse:
    tx_hash = normalize_tx_hash(tx_hash)
    result, summary = await service.get_universal_tx_details(
        tx_hash, chain_id=chain_id, load_token_meta=load_token_meta
    )
    return TxDetailsResponse.from_result(tx_hash, result, summary)


@app.get("/tx/{tx_hash}", response_model=TxDetailsResponse)
async def get_transaction_details(
    tx_hash: str,
    chain_id: Optional[str] = Query(default=None),
    load_token_meta: bool = Query(default=True),
) -> TxDetailsResponse:
    """
    Receipt details for a transaction: summary, ERC-20 and internal transfers.

    Args:
        tx_hash: 0x-prefixed transaction hash
        chain_id: Chain to look on; every configured chain is searched if omitted or unknown
        load_token_meta: Resolve token symbols and decimals
    """
    try:
        return await fetch_details(
            app.state.tx_service, tx_hash, chain_id, load_token_meta
        )
    except InvalidTransactionHashError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except (TransactionNotFound, TransactionNotFoundOnAnyNetwork) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=502, detail=str(e))


@app.get("/networks", response_model=List[NetworkModel])
async def list_networks() -> List[NetworkModel]:
    """Networks transactions are looked up on"""
    return [NetworkModel.from_config(n) for n in app.state.tx_service.networks]


async def print_details(
    service: TxDetailsService, tx_hash: str, chain_id: Optional[str], load_token_meta: bool
) -> None:
    """Look up a transaction and print its details as JSON"""
    response = await fetch_details(service, tx_hash, chain_id, load_token_meta)
    print(json.dumps(response.model_dump(mode="json"), indent=2))


def main() -> None:
    args = parse_args()

    if args.debug:
        logging.basicConfig(level=logging.DEBUG)

    if args.web:
        import uvicorn

        app.state.debug = args.debug
        uvicorn.run(app, host="0.0.0.0", port=args.port)
    elif args.tx_hash:
        service = TxDetailsService(debug=args.debug)
        try:
            asyncio.run(
                print_details(
                    service, args.tx_hash, args.chain_id, not args.no_token_meta
                )
            )
        except InvalidTransactionHashError as e:
            print(f"Error: {str(e)}")
            raise SystemExit(2)
        except (
            TransactionNotFound,
            TransactionNotFoundOnAnyNetwork,
        ) as e:
            print(f"Error: {str(e)}")
            raise SystemExit(1)
    else:
        print("Usage: python main.py <tx_hash> [--chain-id N] | --web")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
