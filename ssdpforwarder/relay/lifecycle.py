"""
Lifecycle coordinator.

Owns the stop event shared by every forwarding worker. On SIGINT/SIGTERM the event is
set once; run() then waits for every worker to exit before any socket is closed.
"""

import logging
import signal
import threading
from typing import Optional

from ..io import SocketRegistry
from .engine import ForwardingEngine


class RelayCoordinator:
    def __init__(self,
                 registry: SocketRegistry,
                 verbose: bool = False,
                 narration: bool = False,
                 logger: Optional[logging.Logger] = None
                 ):
        self.registry = registry
        self.logger = logger or logging.getLogger(__name__)
        self.stop_event = threading.Event()
        self._lock = threading.RLock()
        self.engine = ForwardingEngine(
            registry,
            self.stop_event,
            verbose=verbose,
            narration=narration,
            logger=self.logger,
        )

    def install_signal_handlers(self, signals: tuple = (signal.SIGINT, signal.SIGTERM)) -> None:
        """Request shutdown on the given signals; must be called from the main thread"""
        for sig in signals:
            signal.signal(sig, self._handle_signal)

    def _handle_signal(self, signum, frame) -> None:
        self.request_shutdown(signal.Signals(signum).name)

    def request_shutdown(self, reason: str = "shutdown request") -> bool:
        """Set the stop event; only the first call has any effect"""
        with self._lock:
            if self.stop_event.is_set():
                return False
            self.logger.info(f"Received signal {reason}. Shutting down...")
            self.stop_event.set()
            return True

    def run(self, poll_interval: float = 1.0) -> None:
        """Start forwarding, block until shutdown is requested, then drain and close"""
        self.engine.start()
        try:
            while not self.stop_event.wait(poll_interval):
                pass
        finally:
            # KeyboardInterrupt or an error here still drains before closing
            self.stop_event.set()
            self.shutdown()

    def shutdown(self) -> None:
        # Workers first: nothing may read or write a closed socket
        self.engine.join()
        self.registry.close()

        for key, stats in self.engine.stats.items():
            self.logger.debug(f"{self.registry.topology.describe(key)}: {stats}")
        self.logger.info("All done.")
