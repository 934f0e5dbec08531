"""
Topology models.

These describe what the forwarder relays, resolved once at startup and immutable afterwards:
- InterfaceBinding: an interface name and its local IPv4 address
- PortMapping: a listen port and the port forwarded datagrams are sent to
- RelayGroup: a multicast group and its port mappings
- Topology: the three axes whose Cartesian product gives one socket pair per triple
"""

import itertools
from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class InterfaceBinding:
    """A network interface resolved to its first IPv4 address"""
    name: str
    address: str


@dataclass(frozen=True)
class PortMapping:
    listen_port: int
    dest_port: int


@dataclass(frozen=True)
class RelayGroup:
    """A multicast group and the ports relayed for it"""
    address: str
    ports: tuple[PortMapping, ...]


@dataclass(frozen=True)
class Topology:
    interfaces: tuple[InterfaceBinding, ...]
    groups: tuple[RelayGroup, ...]
    ports: tuple[PortMapping, ...]

    def triples(self) -> Iterator[tuple[int, int, int]]:
        """Every (group, interface, port) index triple, groups outermost"""
        return itertools.product(range(len(self.groups)), range(len(self.interfaces)), range(len(self.ports)))

    def size(self) -> int:
        return len(self.groups) * len(self.interfaces) * len(self.ports)

    def describe(self, key: tuple[int, int, int]) -> str:
        g, i, p = key
        return f"group={self.groups[g].address}, iface={self.interfaces[i].name}, port={self.ports[p].listen_port}"
