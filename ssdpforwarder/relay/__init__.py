"""
Relaying: the per-triple forwarding workers and the coordinator that starts and stops them.
"""

from .engine import ForwardingEngine, WorkerStats
from .lifecycle import RelayCoordinator

__all__ = [
    "ForwardingEngine",
    "WorkerStats",
    "RelayCoordinator",
]
