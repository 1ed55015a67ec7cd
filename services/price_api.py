"""
Request surface over the two price services.

Responses are plain dicts shaped like the JSON bodies an HTTP layer would
return: {"gasPrice": int} and {"estimatedOutputAmount": str}.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Tuple

from core.errors import PriceServiceError
from services.gas_price_monitor import GasPriceMonitor
from services.swap_estimator import SwapEstimator


def error_response(exc: BaseException) -> Tuple[int, Dict[str, Any]]:
    """Map an exception to (status, body). Domain errors are client faults."""
    if isinstance(exc, PriceServiceError):
        status = exc.status_code
        error = "Bad Request" if status == 400 else "Bad Gateway"
        return status, {"statusCode": status, "error": error, "message": str(exc)}
    return 500, {"statusCode": 500, "error": "Internal Server Error", "message": "Internal server error"}


class PriceApi:
    def __init__(self, gas_monitor: GasPriceMonitor, swap_estimator: SwapEstimator) -> None:
        self.gas_monitor = gas_monitor
        self.swap_estimator = swap_estimator

    def _log_request(self, name: str, *args: Any) -> None:
        print(f"[PriceApi] → {name} {'/'.join(str(a) for a in args)} - Request started")

    def _log_response(self, name: str, body: Dict[str, Any]) -> None:
        print(f"[PriceApi] ← {name} - response: {json.dumps(body)}")

    def get_gas_price(self) -> Dict[str, int]:
        self._log_request("gasPrice")
        body = {"gasPrice": self.gas_monitor.read()}
        self._log_response("gasPrice", body)
        return body

    def get_swap_estimate(self, from_token: str, to_token: str, amount_in: str) -> Dict[str, str]:
        self._log_request("swapEstimate", from_token, to_token, amount_in)
        body = {"estimatedOutputAmount": self.swap_estimator.estimate(from_token, to_token, amount_in)}
        self._log_response("swapEstimate", body)
        return body

    def handle(self, name: str, *args: str) -> Tuple[int, Dict[str, Any]]:
        """Dispatch by endpoint name and always return (status, body)."""
        try:
            if name == "gasPrice":
                return 200, self.get_gas_price()
            if name == "swapEstimate":
                return 200, self.get_swap_estimate(*args)
            return 404, {"statusCode": 404, "error": "Not Found", "message": f"Unknown endpoint: {name}"}
        except Exception as e:
            status, body = error_response(e)
            print(f"[PriceApi] ✗ {name} - {status}: {body['message']}")
            return status, body
