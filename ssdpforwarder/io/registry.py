"""
Socket registry.

Holds one SocketPair per (group, interface, port) triple of a Topology. The registry
is filled completely before any worker starts, is only read by key while relaying,
and is closed as a whole once every worker has exited.
"""

import logging
import socket
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from ..exceptions import ProvisioningError
from ..topology import Topology, InterfaceBinding, RelayGroup, PortMapping
from .sockets import open_listen_socket, open_send_socket


Key = tuple[int, int, int]


@dataclass
class SocketPair:
    """The listen and send sockets of one (group, interface, port) triple"""
    group: RelayGroup
    interface: InterfaceBinding
    ports: PortMapping
    listen: socket.socket
    send: socket.socket


class SocketOpener:
    """Opens the sockets of a triple; replaceable so tests can inject fakes"""

    def __init__(self, timeout: float):
        self.timeout = timeout

    def listen(self, group: str, port: int, interface: InterfaceBinding) -> socket.socket:
        return open_listen_socket(group, port, interface, self.timeout)

    def send(self, group: str, dest_port: int, interface: InterfaceBinding) -> socket.socket:
        return open_send_socket(group, dest_port, interface)


class SocketRegistry:
    def __init__(self, topology: Topology, logger: Optional[logging.Logger] = None):
        self.topology = topology
        self.logger = logger or logging.getLogger(__name__)
        self.pairs: dict[Key, SocketPair] = {}
        self.closed = False

    @classmethod
    def provision(
        cls,
        topology: Topology,
        timeout: float = 1.0,
        opener: Optional[SocketOpener] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "SocketRegistry":
        """
        Open every socket pair of the topology.

        The first failure closes everything opened so far and raises ProvisioningError;
        a partially joined topology is never returned.
        """
        self = cls(topology, logger)
        opener = opener or SocketOpener(timeout)

        for key in topology.triples():
            g, i, p = key
            group = topology.groups[g]
            interface = topology.interfaces[i]
            ports = topology.ports[p]

            try:
                listen = opener.listen(group.address, ports.listen_port, interface)
            except Exception as e:
                self.logger.error(f"Failed to listen on group={group.address}, port={ports.listen_port}, iface={interface.name}: {e}")
                self.close()
                raise ProvisioningError(group.address, interface.name, ports.listen_port, e) from e

            try:
                send = opener.send(group.address, ports.dest_port, interface)
            except Exception as e:
                self.logger.error(f"Could not create sender on group={group.address}, iface={interface.name} ({interface.address}), port={ports.dest_port}: {e}")
                cls._close_socket(listen, self.logger)
                self.close()
                raise ProvisioningError(group.address, interface.name, ports.dest_port, e) from e

            self.pairs[key] = SocketPair(group=group, interface=interface, ports=ports, listen=listen, send=send)
            self.logger.info(
                f"Joined group={group.address} on interface={interface.name}:{ports.listen_port}, "
                f"localIP={interface.address} (listening & sending to port {ports.dest_port})"
            )

        self.logger.debug(f"Provisioned {topology.size()} socket pairs")

        return self

    def __getitem__(self, key: Key) -> SocketPair:
        return self.pairs[key]

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self) -> Iterator[Key]:
        return iter(self.pairs)

    def keys(self) -> list[Key]:
        return list(self.pairs)

    def peers(self, key: Key) -> list[SocketPair]:
        """Pairs of every other interface for the same group and port, in interface order"""
        g, i, p = key
        return [
            self.pairs[(g, j, p)]
            for j in range(len(self.topology.interfaces))
            if j != i and (g, j, p) in self.pairs
        ]

    def close(self) -> None:
        """Close every listen and send socket; close errors aren't fatal"""
        for pair in self.pairs.values():
            self._close_socket(pair.listen, self.logger)
            self._close_socket(pair.send, self.logger)
        self.closed = True

    @staticmethod
    def _close_socket(sock: socket.socket, logger: logging.Logger) -> None:
        try:
            sock.close()
        except OSError as e:
            logger.debug(f"Error closing socket: {e}")
