"""
Command line entry point.

    ssdp-forwarder -i eth0,vlan3 -p 1900 -g 239.255.255.250 -v
"""

import argparse
import sys
from typing import Optional

from . import __version__
from .config import ForwarderConfig, load_config
from .exceptions import ForwarderError
from .forwarder import SSDPForwarder
from .utils import setup_logging


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="ssdp-forwarder",
        description="Relay multicast discovery packets (e.g. SSDP) between network interfaces",
    )
    ap.add_argument("-i", dest="interfaces", help="Comma-separated list of interface names (e.g. 'eth0,eth1,vlan3')")
    ap.add_argument("-p", dest="ports", help="Comma-separated list of UDP ports to listen on (e.g. '1900,1990')")
    ap.add_argument("-g", dest="groups", help="Comma-separated list of multicast groups (e.g. '239.255.255.250,239.255.255.251')")
    ap.add_argument("-d", dest="dest_ports", help="Comma-separated list of target UDP ports to forward to (optional, e.g. '2021,2022')")
    ap.add_argument("-v", dest="verbose", action="store_true", default=None, help="Enable verbose/debug logging")
    ap.add_argument("--narrate", dest="narration", action="store_true", default=None, help="Print every forwarded packet to the console")
    ap.add_argument("--read-timeout", dest="read_timeout", type=float, help="Seconds a worker waits on a read before checking for shutdown (default: 1)")
    ap.add_argument("--config", help="YAML config file; command line options override it")
    ap.add_argument("--log-file", dest="log_file", help="Also log to this file, rotated at 5MB")
    ap.add_argument("--version", action="version", version=f"ssdp-forwarder version {__version__}", help="Print the version and exit")
    return ap


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    options = {k: v for k, v in vars(args).items() if k != "config"}

    # Console only until the config is known
    logger = setup_logging(verbose=bool(args.verbose))

    try:
        config = load_config(args.config) if args.config else ForwarderConfig()
        config.merge(options)
        if config.verbose or config.log_file:
            logger = setup_logging(verbose=config.verbose, log_file=config.log_file)

        forwarder = SSDPForwarder(config, logger=logger)
        forwarder.setup()
    except ForwarderError as e:
        logger.critical(str(e))
        return 1

    forwarder.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
