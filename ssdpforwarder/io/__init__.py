"""
Socket-level components.

This module contains the lowest-level communication components:
- open_listen_socket, open_send_socket - multicast UDP sockets bound to one interface
- SocketRegistry, SocketPair - the sockets of every (group, interface, port) triple
"""

from .sockets import SocketConst, open_listen_socket, open_send_socket
from .registry import SocketRegistry, SocketPair, SocketOpener

__all__ = [
    "SocketConst",
    "open_listen_socket",
    "open_send_socket",
    "SocketRegistry",
    "SocketPair",
    "SocketOpener",
]
