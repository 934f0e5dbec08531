import socket
import sys

import pytest

from ssdpforwarder.io import sockets
from ssdpforwarder.topology import InterfaceBinding

ETH1 = InterfaceBinding(name="eth1", address="10.0.1.1")


class RecordingSocket:
    """Records the calls made while a socket is set up"""
    fail_on = None
    created = []

    def __init__(self, family, type, proto=0):
        self.family = family
        self.type = type
        self.options = {}
        self.bound = None
        self.connected = None
        self.timeout = None
        self.closed = False
        RecordingSocket.created.append(self)

    def _maybe_fail(self, name):
        if RecordingSocket.fail_on == name:
            raise OSError(98, "Address already in use")

    def setsockopt(self, level, option, value):
        self._maybe_fail("setsockopt")
        self.options[(level, option)] = value

    def bind(self, address):
        self._maybe_fail("bind")
        self.bound = address

    def connect(self, address):
        self._maybe_fail("connect")
        self.connected = address

    def settimeout(self, timeout):
        if timeout != timeout:
            raise ValueError("Invalid value NaN (not a number)")
        self.timeout = timeout

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def recording(monkeypatch):
    RecordingSocket.fail_on = None
    RecordingSocket.created = []
    monkeypatch.setattr(sockets.socket, "socket", RecordingSocket)


def test_listen_socket_joins_on_one_interface():
    sock = sockets.open_listen_socket("239.255.255.250", 1900, ETH1, timeout=1.0)

    assert sock.family == socket.AF_INET
    assert sock.type == socket.SOCK_DGRAM
    mreq = sock.options[(socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP)]
    assert mreq == socket.inet_aton("239.255.255.250") + socket.inet_aton("10.0.1.1")
    assert sock.options[(socket.SOL_SOCKET, socket.SO_REUSEADDR)] == 1
    assert sock.options[(socket.SOL_SOCKET, socket.SO_RCVBUF)] == sockets.SocketConst.BUFFER_LEN
    assert sock.timeout == 1.0


@pytest.mark.skipif(not sys.platform.startswith("linux"), reason="Linux socket options")
def test_listen_socket_is_bound_to_the_group_on_linux():
    sock = sockets.open_listen_socket("239.255.255.250", 1900, ETH1, timeout=0.5)
    assert sock.bound == ("239.255.255.250", 1900)
    assert sock.options[(socket.IPPROTO_IP, sockets.SocketConst.IP_MULTICAST_ALL)] == 0


def test_send_socket_is_pinned_to_the_interface():
    sock = sockets.open_send_socket("239.255.255.250", 2021, ETH1)

    assert sock.bound == ("10.0.1.1", 0)
    assert sock.connected == ("239.255.255.250", 2021)
    assert sock.options[(socket.IPPROTO_IP, socket.IP_MULTICAST_IF)] == socket.inet_aton("10.0.1.1")
    assert sock.options[(socket.IPPROTO_IP, socket.IP_MULTICAST_LOOP)] == 0
    assert sock.options[(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL)] == sockets.SocketConst.MULTICAST_TTL


@pytest.mark.parametrize("fail_on", ["setsockopt", "bind"])
def test_listen_socket_closed_on_failure(fail_on):
    RecordingSocket.fail_on = fail_on
    with pytest.raises(OSError):
        sockets.open_listen_socket("239.255.255.250", 1900, ETH1, timeout=1.0)
    assert RecordingSocket.created[-1].closed


@pytest.mark.parametrize("fail_on", ["bind", "connect"])
def test_send_socket_closed_on_failure(fail_on):
    RecordingSocket.fail_on = fail_on
    with pytest.raises(OSError):
        sockets.open_send_socket("239.255.255.250", 1900, ETH1)
    assert RecordingSocket.created[-1].closed


def test_listen_socket_closed_when_timeout_is_rejected():
    with pytest.raises(ValueError):
        sockets.open_listen_socket("239.255.255.250", 1900, ETH1, timeout=float("nan"))
    assert RecordingSocket.created[-1].closed
