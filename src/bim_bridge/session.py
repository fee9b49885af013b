"""Host context passed to handlers by the MCP transport, plus request stats."""

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from bim_bridge.config.bridge import BridgeConfig
from bim_bridge.core.contract import HostContext
from bim_bridge.core.dispatcher import Dispatcher
from bim_bridge.core.registry import Registry


class RequestStats:
    """Thread-safe request counters"""

    def __init__(self):
        self._lock = threading.Lock()
        self.total = 0
        self.succeeded = 0
        self.failed = 0
        self.total_ms = 0.0
        self.peak_ms = 0.0

    def record(self, elapsed_ms: float, succeeded: bool) -> None:
        with self._lock:
            self.total += 1
            if succeeded:
                self.succeeded += 1
            else:
                self.failed += 1
            self.total_ms += elapsed_ms
            self.peak_ms = max(self.peak_ms, elapsed_ms)

    def snapshot(self) -> dict:
        with self._lock:
            average = self.total_ms / self.total if self.total else 0.0
            return {
                "total_requests": self.total,
                "successful_requests": self.succeeded,
                "failed_requests": self.failed,
                "average_response_time_ms": round(average, 3),
                "peak_response_time_ms": round(self.peak_ms, 3),
            }


def format_uptime(seconds: float) -> str:
    """Format seconds as ``1d 2h 3m``, ``2h 3m 4s`` or ``3m 4s``"""
    seconds = int(seconds)
    days, rest = divmod(seconds, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    if days:
        return f"{days}d {hours}h {minutes}m"
    if hours:
        return f"{hours}h {minutes}m {secs}s"
    return f"{minutes}m {secs}s"


@dataclass
class BridgeSession(HostContext):
    """Everything the bundled handlers need from the running bridge"""
    dispatcher: Dispatcher
    config_manager: BridgeConfig
    settings: dict
    host: Any = None
    stats: RequestStats = field(default_factory=RequestStats)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def registry(self) -> Registry:
        return self.dispatcher.registry

    def reload_config(self) -> dict:
        """Re-read the config file into the session"""
        self.settings = self.config_manager.load()
        self.dispatcher.include_traceback = bool(
            self.settings["dispatch"].get("include_traceback", True)
        )
        return self.settings

    def uptime(self) -> str:
        return format_uptime((datetime.now(timezone.utc) - self.started_at).total_seconds())
