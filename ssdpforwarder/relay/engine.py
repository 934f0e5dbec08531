"""
Forwarding engine.

One thread per (group, interface, port) triple. Each thread reads datagrams from its
own listen socket and writes each one, unchanged, to the send sockets of every other
interface for the same group and port.

Terms:
- Worker = the thread serving one triple
- Peer = the socket pair of another interface sharing the worker's group and port

Example usage:
    stop_event = threading.Event()
    engine = ForwardingEngine(registry, stop_event, verbose=True)
    engine.start()
    ...
    stop_event.set()
    engine.join()
    registry.close()
"""

import logging
import socket
import threading
from dataclasses import dataclass
from typing import Optional

from colorama import Fore, Style

from ..exceptions import ForwarderError
from ..io import SocketRegistry, SocketConst
from ..io.registry import Key


@dataclass
class WorkerStats:
    """Counters for one worker, written only by that worker"""
    received: int = 0
    forwarded: int = 0
    write_errors: int = 0
    read_error: Optional[str] = None


class ForwardingEngine:
    def __init__(self,
                 registry: SocketRegistry,
                 stop_event: threading.Event,
                 verbose: bool = False,
                 narration: bool = False,
                 logger: Optional[logging.Logger] = None
                 ):
        self.registry = registry
        self.stop_event = stop_event
        self.verbose = verbose
        self.narration = narration
        self.logger = logger or logging.getLogger(__name__)

        self.workers: dict[Key, threading.Thread] = {}
        self.stats: dict[Key, WorkerStats] = {key: WorkerStats() for key in registry}

    def start(self) -> None:
        """Spawn one worker thread per registry entry"""
        if self.workers:
            raise ForwarderError("Forwarding engine already started")

        for key in self.registry:
            worker = threading.Thread(
                target=self._forward,
                args=(key,),
                name=f"forward-{key[0]}-{key[1]}-{key[2]}",
                daemon=True,
            )
            self.workers[key] = worker

        for worker in self.workers.values():
            worker.start()

        self.logger.debug(f"Started {len(self.workers)} forwarding workers")

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for every worker to exit"""
        for worker in self.workers.values():
            worker.join(timeout)

    def is_running(self) -> bool:
        return any(worker.is_alive() for worker in self.workers.values())

    def _forward(self, key: Key) -> None:
        """Worker loop: read from one listen socket, fan out to every peer"""
        pair = self.registry[key]
        peers = self.registry.peers(key)
        stats = self.stats[key]

        group = pair.group.address
        iface = pair.interface.name
        port = pair.ports.listen_port
        dest_port = pair.ports.dest_port

        buffer = bytearray(SocketConst.BUFFER_LEN)
        view = memoryview(buffer)

        while not self.stop_event.is_set():
            try:
                n, source = pair.listen.recvfrom_into(buffer)
            except socket.timeout:
                # Bounded wait so the stop event gets checked
                continue
            except OSError as e:
                self.logger.error(f"Read error on group={group}, iface={iface}, port={port}: {e}")
                stats.read_error = str(e)
                return

            # The buffer is reused on the next read
            packet = bytes(view[:n])
            stats.received += 1

            for peer in peers:
                try:
                    peer.send.send(packet)
                except OSError as e:
                    stats.write_errors += 1
                    self.logger.error(f"Forward error: group={group}, from iface={iface} to iface={peer.interface.name}, dest port={dest_port}: {e}")
                    continue

                stats.forwarded += 1
                if self.verbose:
                    self.logger.debug(f"Forwarded {n} bytes from {source[0]}:{source[1]} on iface={iface} to iface={peer.interface.name}:{dest_port}")
                if self.narration:
                    print(Fore.MAGENTA + f"FROM: {source[0]}:{source[1]} ({iface})" + Fore.CYAN + f"  TO: {peer.interface.name}:{dest_port}  LEN: {n}" + Style.RESET_ALL)

            if self.verbose:
                self.logger.debug(f"Received {n} bytes from {source[0]}:{source[1]} on (group={group}, iface={iface}, port={port})")

        if self.verbose:
            self.logger.debug(f"Worker for group={group}, iface={iface}, port={port} exiting.")
