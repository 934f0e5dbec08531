"""
ssdp-forwarder

Relays multicast discovery packets (SSDP and friends) between network interfaces
that don't otherwise share multicast traffic, such as separate VLANs.

This package is built in layers:

1. **topology**: which interfaces, groups and ports are bridged (resolved once at startup)
2. **io**: one listen socket and one send socket per (group, interface, port) triple
3. **relay**: one forwarding thread per triple, plus the coordinator that stops them

Example usage:
    import ssdpforwarder

    config = ssdpforwarder.ForwarderConfig(
        interfaces=["eth0", "vlan3"],
        ports=[1900],
        groups=["239.255.255.250"],
    )
    forwarder = ssdpforwarder.SSDPForwarder(config, logger=ssdpforwarder.setup_logging())
    forwarder.run()  # Until SIGINT or SIGTERM
"""

__version__ = "0.1.0"

# Configuration
from .config import ForwarderConfig, load_config

# Topology
from .topology import InterfaceBinding, PortMapping, RelayGroup, Topology, TopologyResolver

# Sockets
from .io import SocketRegistry, SocketPair, SocketOpener, SocketConst

# Relaying
from .relay import ForwardingEngine, WorkerStats, RelayCoordinator
from .forwarder import SSDPForwarder

# Exceptions
from .exceptions import (
    ForwarderError,
    ForwarderConfigError,
    ConfigMismatchError,
    DuplicateInterfaceError,
    InvalidPortError,
    InvalidGroupAddressError,
    ResolutionError,
    InterfaceNotFoundError,
    NoIPv4AddressError,
    ProvisioningError,
)

# Utilities
from .utils import setup_logging

__all__ = [
    "SSDPForwarder",
    "ForwarderConfig",
    "load_config",

    # Topology
    "InterfaceBinding",
    "PortMapping",
    "RelayGroup",
    "Topology",
    "TopologyResolver",

    # Sockets
    "SocketRegistry",
    "SocketPair",
    "SocketOpener",
    "SocketConst",

    # Relaying
    "ForwardingEngine",
    "WorkerStats",
    "RelayCoordinator",

    # Exceptions
    "ForwarderError",
    "ForwarderConfigError",
    "ConfigMismatchError",
    "DuplicateInterfaceError",
    "InvalidPortError",
    "InvalidGroupAddressError",
    "ResolutionError",
    "InterfaceNotFoundError",
    "NoIPv4AddressError",
    "ProvisioningError",

    # Utilities
    "setup_logging",
]
