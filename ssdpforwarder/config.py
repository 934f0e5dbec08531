"""
Forwarder configuration.

Values come from the command line, from a YAML file, or both (command line wins).
List fields accept either YAML lists or the comma-separated strings used on the
command line, e.g. ``interfaces: eth0,eth1``.

Example config file:

    interfaces: [eth0, vlan3]
    ports: [1900]
    groups: [239.255.255.250]
    dest_ports: [1900]
    verbose: false
"""

import math
from dataclasses import dataclass, field, fields
from typing import Any, Optional

import yaml

from .exceptions import ForwarderConfigError, ConfigMismatchError, DuplicateInterfaceError
from .utils import parse_comma_separated, parse_ports


class ConfigConst:
    DEFAULT_READ_TIMEOUT = 1.0


@dataclass
class ForwarderConfig:
    """Everything the forwarder needs to know at startup"""
    interfaces: list[str] = field(default_factory=list)
    ports: list[int] = field(default_factory=list)
    groups: list[str] = field(default_factory=list)
    dest_ports: Optional[list[int]] = None
    verbose: bool = False
    narration: bool = False
    read_timeout: float = ConfigConst.DEFAULT_READ_TIMEOUT
    log_file: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ForwarderConfig":
        """Build a config from a dict, parsing list fields as comma-separated strings or lists"""
        known = {f.name for f in fields(cls)}
        unknown = [k for k in data if k not in known]
        if unknown:
            raise ForwarderConfigError(f"Unknown config fields: {', '.join(sorted(unknown))}")

        config = cls()
        config.merge(data)
        return config

    def merge(self, data: dict[str, Any]) -> None:
        """Overlay values from data; None values are ignored"""
        for key, value in data.items():
            if value is None:
                continue
            match key:
                case "interfaces":
                    self.interfaces = parse_comma_separated(value)
                case "groups":
                    self.groups = parse_comma_separated(value)
                case "ports":
                    self.ports = parse_ports(value)
                case "dest_ports":
                    self.dest_ports = parse_ports(value) or None
                case "verbose" | "narration":
                    setattr(self, key, bool(value))
                case "read_timeout":
                    try:
                        self.read_timeout = float(value)
                    except (TypeError, ValueError) as e:
                        raise ForwarderConfigError(f"Invalid read timeout {value!r}") from e
                case "log_file":
                    self.log_file = str(value)
                case _:
                    raise ForwarderConfigError(f"Unknown config field: {key}")

    def validate(self) -> None:
        """Check the config is complete and self-consistent; raises a ForwarderConfigError subclass"""
        if not self.interfaces:
            raise ForwarderConfigError("No interfaces specified. Use -i <iface1,iface2,...>")
        if not self.ports:
            raise ForwarderConfigError("No ports specified. Use -p <port1,port2,...>")
        if not self.groups:
            raise ForwarderConfigError("No groups specified. Use -g <group1,group2,...>")

        # Ports may have been assigned directly rather than through merge()
        self.ports = parse_ports(self.ports)
        if self.dest_ports is not None:
            self.dest_ports = parse_ports(self.dest_ports)
            if len(self.dest_ports) != len(self.ports):
                raise ConfigMismatchError(
                    f"Number of destination ports ({len(self.dest_ports)}) must match number of listening ports ({len(self.ports)})"
                )

        seen = set()
        for name in self.interfaces:
            if name in seen:
                raise DuplicateInterfaceError(f"Interface {name!r} is listed more than once")
            seen.add(name)

        if not math.isfinite(self.read_timeout) or self.read_timeout <= 0:
            raise ForwarderConfigError(f"Read timeout must be a positive number of seconds, got {self.read_timeout}")

    def dest_port_list(self) -> list[int]:
        """Destination ports, defaulting to the listen ports by position"""
        return list(self.dest_ports) if self.dest_ports is not None else list(self.ports)


def load_config(path: str) -> ForwarderConfig:
    """Load a ForwarderConfig from a YAML file"""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ForwarderConfigError(f"Failed to read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ForwarderConfigError(f"Failed to parse config file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ForwarderConfigError(f"Config file {path} must contain a mapping")
    return ForwarderConfig.from_dict(data)
