"""
Relay topology: which interfaces, groups and ports the forwarder bridges.
"""

from .models import InterfaceBinding, PortMapping, RelayGroup, Topology
from .resolver import TopologyResolver

__all__ = [
    "InterfaceBinding",
    "PortMapping",
    "RelayGroup",
    "Topology",
    "TopologyResolver",
]
