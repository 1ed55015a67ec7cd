"""
Background gas price cache.

The monitor fetches once on start, then refreshes on a fixed interval from a
daemon thread. Reads never touch the network.
"""
from __future__ import annotations

import threading
import time
from enum import Enum
from typing import Optional

from connectors.base import ChainClient
from core.errors import TransportError
from core.resilience import ConnectionMonitor


class MonitorState(str, Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    STOPPED = "stopped"


class GasPriceMonitor:
    """
    Holds the latest gas price in wei.

    read() returns 0 until the first successful fetch; callers must treat 0
    as "not available yet". Refresh failures keep the previous value and
    never stop the loop.
    """

    def __init__(self, chain_client: ChainClient, refresh_interval: float = 30.0, name: str = "GasPriceMonitor") -> None:
        if refresh_interval <= 0:
            raise ValueError(f"refresh_interval must be positive: {refresh_interval}")
        self.chain_client = chain_client
        self.refresh_interval = float(refresh_interval)
        self.name = name
        self._gas_price = 0
        self._lock = threading.Lock()
        self._stop_flag = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._state = MonitorState.UNINITIALIZED
        self._connection_monitor = ConnectionMonitor(name)
        self.last_error: Optional[TransportError] = None

    @property
    def state(self) -> MonitorState:
        return self._state

    def read(self) -> int:
        with self._lock:
            return self._gas_price

    def refresh(self) -> bool:
        """Fetch and store the gas price. Returns False (and keeps the old value) on failure."""
        try:
            raw = self.chain_client.get_gas_price()
            if isinstance(raw, bool):
                raise ValueError(f"Malformed gas price: {raw!r}")
            gas_price = int(raw)
            if gas_price < 0:
                raise ValueError(f"Malformed gas price: {raw!r}")
        except Exception as e:
            err = e if isinstance(e, TransportError) else TransportError(f"Gas price refresh failed: {e}")
            self.last_error = err
            self._connection_monitor.record_failure(err)
            print(f"[{self.name}] ⚠ Refresh failed, keeping {self.read()} wei: {err}")
            return False

        with self._lock:
            self._gas_price = gas_price
        self.last_error = None
        self._connection_monitor.record_success()
        return True

    def start(self) -> None:
        if self._state is MonitorState.RUNNING:
            return
        if self._state is MonitorState.STOPPED:
            raise RuntimeError(f"{self.name} was stopped and cannot be restarted")
        self.refresh()
        self._stop_flag.clear()
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._state = MonitorState.RUNNING
        self._thread.start()

    def _run(self) -> None:
        next_tick = time.monotonic() + self.refresh_interval
        while not self._stop_flag.wait(timeout=max(0.0, next_tick - time.monotonic())):
            self.refresh()
            next_tick += self.refresh_interval
            # Fell behind (slow node): restart the schedule from now
            now = time.monotonic()
            if next_tick < now:
                next_tick = now + self.refresh_interval

    def stop(self, timeout: float = 2.0) -> None:
        if self._state is not MonitorState.RUNNING:
            self._state = MonitorState.STOPPED
            return
        self._stop_flag.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
        self._state = MonitorState.STOPPED

    def stats(self) -> dict:
        return self._connection_monitor.get_stats()
