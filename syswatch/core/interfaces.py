"""
Interface collector - lists the non-loopback addresses bound to this host.
"""

import ipaddress
import socket
from typing import List, Union

import psutil
from loguru import logger

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


class InterfaceCollectionError(OSError):
    """The OS refused or failed to enumerate interface addresses."""


def _parse_address(raw: str) -> IPAddress:
    # IPv6 link-local addresses carry a zone suffix: fe80::1%eth0
    return ipaddress.ip_address(raw.split("%", 1)[0])


def collect_interfaces() -> List[IPAddress]:
    """Return every non-loopback IPv4/IPv6 address on the host."""
    try:
        table = psutil.net_if_addrs()
    except (OSError, RuntimeError) as e:
        raise InterfaceCollectionError(f"Could not enumerate network interfaces: {e}") from e

    addresses: List[IPAddress] = []
    for name, entries in table.items():
        for entry in entries:
            if entry.family not in (socket.AF_INET, socket.AF_INET6):
                continue
            try:
                ip = _parse_address(entry.address)
            except ValueError:
                logger.debug(f"Skipping unparsable address on {name}: {entry.address!r}")
                continue
            if ip.is_loopback:
                continue
            addresses.append(ip)

    logger.debug(f"Collected {len(addresses)} non-loopback address(es)")
    return addresses
