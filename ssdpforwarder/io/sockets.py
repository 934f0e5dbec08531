"""
Socket-level helpers for the forwarder.

Each (group, interface, port) triple gets two sockets:
- a listen socket, bound to the group and port and joined to the group on one interface only
- a send socket, bound to the interface's address and connected to (group, destination port)
"""

import socket
import struct
import sys

from ..topology import InterfaceBinding


class SocketConst:
    BUFFER_LEN = 65535  # Maximum UDP read buffer size
    MULTICAST_TTL = 1
    # Linux only; not exported by every Python build
    IP_MULTICAST_ALL = getattr(socket, "IP_MULTICAST_ALL", 49)


def open_listen_socket(group: str, port: int, interface: InterfaceBinding, timeout: float) -> socket.socket:
    """Open a UDP socket receiving group:port on a single interface"""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
    try:
        # Every interface listens on the same group:port
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        if hasattr(socket, "SO_REUSEPORT"):
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEPORT, 1)

        # Bigger RX buffer helps with bursts
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF, SocketConst.BUFFER_LEN)

        if sys.platform.startswith("linux"):
            # Only deliver groups joined by this socket, on the interface it joined them on
            sock.setsockopt(socket.IPPROTO_IP, SocketConst.IP_MULTICAST_ALL, 0)

        # Windows can't bind to a multicast address
        sock.bind(("" if sys.platform == "win32" else group, port))

        # struct ip_mreq: { struct in_addr imr_multiaddr; struct in_addr imr_interface; }
        mreq = struct.pack("=4s4s", socket.inet_aton(group), socket.inet_aton(interface.address))
        sock.setsockopt(socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, mreq)

        sock.settimeout(timeout)
    except Exception:
        sock.close()
        raise
    return sock


def open_send_socket(group: str, dest_port: int, interface: InterfaceBinding) -> socket.socket:
    """Open a UDP socket sending from the interface's address to group:dest_port"""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
    try:
        local = socket.inet_aton(interface.address)
        sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_IF, local)
        sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, SocketConst.MULTICAST_TTL)
        # Our own listener on the egress interface must not see what we forward
        sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_LOOP, 0)

        sock.bind((interface.address, 0))  # Ephemeral port
        sock.connect((group, dest_port))
    except Exception:
        sock.close()
        raise
    return sock
