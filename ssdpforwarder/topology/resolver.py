"""
Topology resolver.

Turns a validated ForwarderConfig into a Topology: interface names become local IPv4
addresses (first one the OS reports), group literals are checked, and destination
ports are paired with listen ports by position.
"""

import ipaddress
import logging
import socket
from typing import Optional

import psutil

from ..config import ForwarderConfig
from ..exceptions import InterfaceNotFoundError, NoIPv4AddressError, InvalidGroupAddressError
from .models import InterfaceBinding, PortMapping, RelayGroup, Topology


class TopologyResolver:
    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def resolve(self, config: ForwarderConfig) -> Topology:
        config.validate()

        ports = tuple(
            PortMapping(listen_port=listen, dest_port=dest)
            for listen, dest in zip(config.ports, config.dest_port_list())
        )
        groups = tuple(RelayGroup(address=self.parse_group(g), ports=ports) for g in config.groups)

        addresses = psutil.net_if_addrs()
        interfaces = tuple(self.resolve_interface(name, addresses) for name in config.interfaces)

        return Topology(interfaces=interfaces, groups=groups, ports=ports)

    def resolve_interface(self, name: str, addresses: Optional[dict] = None) -> InterfaceBinding:
        """Resolve an interface name to its first IPv4 address"""
        if addresses is None:
            addresses = psutil.net_if_addrs()

        if name not in addresses:
            raise InterfaceNotFoundError(f"Could not find interface {name!r}")

        for addr in addresses[name]:
            if addr.family == socket.AF_INET and addr.address:
                self.logger.debug(f"Interface {name} resolved to {addr.address}")
                return InterfaceBinding(name=name, address=addr.address)

        raise NoIPv4AddressError(f"No IPv4 address found on interface {name}")

    def parse_group(self, literal: str) -> str:
        """Validate a multicast group literal and return it in canonical form"""
        try:
            address = ipaddress.ip_address(literal.strip())
        except ValueError as e:
            raise InvalidGroupAddressError(f"Failed to parse multicast group {literal!r}") from e

        if address.version != 4:
            raise InvalidGroupAddressError(f"Multicast group {literal!r} is not an IPv4 address")
        if not address.is_multicast:
            self.logger.warning(f"Group {address} is not a multicast address")

        return str(address)
