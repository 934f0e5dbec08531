"""
ssdp-forwarder exceptions.

This module defines all custom exceptions raised while starting the forwarder.
Runtime socket failures inside a worker are plain OSErrors and never leave the worker.
"""


class ForwarderError(Exception):
    """Base exception for forwarder errors"""
    pass


class ForwarderConfigError(ForwarderError):
    """Raised when configuration is invalid"""
    pass


class ConfigMismatchError(ForwarderConfigError):
    """Raised when the destination port list doesn't line up with the listen ports"""
    pass


class DuplicateInterfaceError(ConfigMismatchError):
    """Raised when the same interface is named more than once"""
    pass


class InvalidPortError(ForwarderConfigError):
    """Raised when a port is not a number between 1 and 65535"""
    pass


class InvalidGroupAddressError(ForwarderConfigError):
    """Raised when a multicast group is not an IPv4 literal"""
    pass


class ResolutionError(ForwarderError):
    """Raised when an interface can't be resolved to a local address"""
    pass


class InterfaceNotFoundError(ResolutionError):
    """Raised when a named interface doesn't exist"""
    pass


class NoIPv4AddressError(ResolutionError):
    """Raised when an interface has no IPv4 address"""
    pass


class ProvisioningError(ForwarderError):
    """Raised when a listen or send socket can't be opened"""

    def __init__(self, group: str, interface: str, port: int, cause: BaseException):
        self.group = group
        self.interface = interface
        self.port = port
        self.cause = cause
        super().__init__(f"Failed to provision group={group}, iface={interface}, port={port}: {cause}")
