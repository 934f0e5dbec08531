import logging
from typing import Optional

from .config import ForwarderConfig
from .io import SocketRegistry, SocketOpener
from .relay import RelayCoordinator
from .topology import TopologyResolver, Topology


class SSDPForwarder:
    """Relays multicast discovery traffic between interfaces.

    Resolves the configured interfaces, opens every socket pair up front, then
    runs one forwarding worker per (group, interface, port) until SIGINT or SIGTERM.
    """

    def __init__(self,
                 config: ForwarderConfig,
                 logger: Optional[logging.Logger] = None,
                 opener: Optional[SocketOpener] = None
                 ) -> None:
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.opener = opener
        self.topology: Optional[Topology] = None
        self.registry: Optional[SocketRegistry] = None
        self.coordinator: Optional[RelayCoordinator] = None

    def setup(self) -> RelayCoordinator:
        """Resolve and provision everything; raises a ForwarderError on the first failure"""
        self.topology = TopologyResolver(self.logger).resolve(self.config)
        self.registry = SocketRegistry.provision(
            self.topology,
            timeout=self.config.read_timeout,
            opener=self.opener,
            logger=self.logger,
        )
        self.coordinator = RelayCoordinator(
            self.registry,
            verbose=self.config.verbose,
            narration=self.config.narration,
            logger=self.logger,
        )
        return self.coordinator

    def run(self, install_signal_handlers: bool = True) -> None:
        """Main method to start the forwarder."""
        coordinator = self.coordinator or self.setup()
        if install_signal_handlers:
            coordinator.install_signal_handlers()
        coordinator.run()

    def stop(self) -> None:
        if self.coordinator:
            self.coordinator.request_shutdown()
