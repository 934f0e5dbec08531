import queue
import socket
import time

import pytest

from ssdpforwarder.topology import InterfaceBinding, PortMapping, RelayGroup, Topology


class FakeListenSocket:
    """Stands in for a multicast listen socket; datagrams are fed through a queue"""

    def __init__(self, timeout: float = 0.02):
        self.timeout = timeout
        self.inbox: queue.Queue = queue.Queue()
        self.closed = False
        self.used_after_close = False

    def feed(self, data: bytes, source=("192.0.2.10", 50000)):
        self.inbox.put((data, source))

    def fail(self, exc: BaseException):
        self.inbox.put(exc)

    def recvfrom_into(self, buffer):
        if self.closed:
            self.used_after_close = True
            raise OSError(9, "Bad file descriptor")
        try:
            item = self.inbox.get(timeout=self.timeout)
        except queue.Empty:
            raise socket.timeout("timed out")
        if isinstance(item, BaseException):
            raise item
        data, source = item
        buffer[:len(data)] = data
        return len(data), source

    def close(self):
        self.closed = True


class FakeSendSocket:
    """Stands in for a connected send socket; records everything written"""

    def __init__(self):
        self.sent: list[bytes] = []
        self.error = None
        self.closed = False
        self.used_after_close = False

    def send(self, data):
        if self.closed:
            self.used_after_close = True
            raise OSError(9, "Bad file descriptor")
        if self.error:
            raise self.error
        self.sent.append(bytes(data))
        return len(data)

    def close(self):
        self.closed = True


class FakeOpener:
    """Socket opener handing out fakes, keyed by (group, interface name, port)"""

    def __init__(self, fail_listen=None, fail_send=None):
        self.listens: dict[tuple, FakeListenSocket] = {}
        self.sends: dict[tuple, FakeSendSocket] = {}
        self.fail_listen = fail_listen
        self.fail_send = fail_send

    def listen(self, group, port, interface):
        key = (group, interface.name, port)
        if key == self.fail_listen:
            raise OSError(98, "Address already in use")
        sock = FakeListenSocket()
        self.listens[key] = sock
        return sock

    def send(self, group, dest_port, interface):
        key = (group, interface.name, dest_port)
        if key == self.fail_send:
            raise OSError(99, "Cannot assign requested address")
        sock = FakeSendSocket()
        self.sends[key] = sock
        return sock

    def all_sockets(self):
        return list(self.listens.values()) + list(self.sends.values())


def make_topology(interfaces=("eth0", "eth1", "eth2"), groups=("239.255.255.250",), ports=((1900, 1900),)):
    mappings = tuple(PortMapping(listen_port=l, dest_port=d) for l, d in ports)
    return Topology(
        interfaces=tuple(InterfaceBinding(name=name, address=f"10.0.{n}.1") for n, name in enumerate(interfaces)),
        groups=tuple(RelayGroup(address=g, ports=mappings) for g in groups),
        ports=mappings,
    )


def wait_for(predicate, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


@pytest.fixture
def opener():
    return FakeOpener()
