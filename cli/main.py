from __future__ import annotations

from typing import Optional

from cli.utils import format_gwei, input_required, prompt
from connectors.base import ChainClient
from connectors.dex.uniswap_v2 import UniswapV2ChainClient
from core.config import PriceServiceConfig
from core.ttl_cache import TtlCache
from services.gas_price_monitor import GasPriceMonitor
from services.price_api import PriceApi
from services.swap_estimator import SwapEstimator


def build_api(cfg: PriceServiceConfig, chain_client: Optional[ChainClient] = None) -> PriceApi:
    client = chain_client or UniswapV2ChainClient(
        rpc_url=cfg.rpc_url,
        factory_address=cfg.factory_address,
        request_timeout=cfg.request_timeout,
    )
    gas_monitor = GasPriceMonitor(client, refresh_interval=cfg.gas_refresh_interval)
    estimator = SwapEstimator(
        client,
        cache=TtlCache(default_ttl=cfg.quote_ttl),
        quote_ttl=cfg.quote_ttl,
        decimals=cfg.decimals,
    )
    return PriceApi(gas_monitor, estimator)


def menu_gas_price(api: PriceApi) -> None:
    status, body = api.handle("gasPrice")
    if status != 200:
        print(f"Error: {body['message']}")
        return
    wei = body["gasPrice"]
    if wei == 0:
        print("Gas price not available yet.")
    else:
        print(f"Gas price: {wei} wei ({format_gwei(wei)})")


def menu_swap_estimate(api: PriceApi) -> None:
    from_token = input_required("From token address: ")
    if from_token is None:
        return
    to_token = input_required("To token address: ")
    if to_token is None:
        return
    amount_in = input_required("Amount in (e.g. 1.5): ")
    if amount_in is None:
        return
    status, body = api.handle("swapEstimate", from_token, to_token, amount_in)
    if status != 200:
        print(f"Error: {body['message']}")
        return
    print(f"Estimated output: {body['estimatedOutputAmount']}")


def main(cfg: Optional[PriceServiceConfig] = None, chain_client: Optional[ChainClient] = None) -> None:
    print("Chain Price Service - CLI")
    try:
        cfg = cfg or PriceServiceConfig.from_env()
        api = build_api(cfg, chain_client)
    except Exception as e:
        print(f"Error: {e}")
        raise SystemExit(1)

    api.gas_monitor.start()
    try:
        while True:
            print("\nMain Menu:")
            print("  1) Gas price")
            print("  2) Swap estimate (Uniswap V2)")
            print("  0) Exit")
            choice = prompt("Select: ").strip()
            if choice == "1":
                menu_gas_price(api)
            elif choice == "2":
                menu_swap_estimate(api)
            elif choice in {"0", ""}:
                print("Goodbye.")
                break
            else:
                print("Invalid selection.")
    finally:
        api.gas_monitor.stop()


if __name__ == "__main__":
    main()
