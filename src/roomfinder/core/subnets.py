from __future__ import annotations

import ipaddress
import logging
import socket
from collections.abc import Sequence

logger = logging.getLogger(__name__)

FIRST_HOST = 1
LAST_HOST = 254


def enumerate_addresses(prefixes: Sequence[str]) -> list[str]:
    """Expand ``/24`` prefixes such as ``"192.168.1."`` into host addresses.

    Hosts ``.1`` to ``.254`` are produced for each prefix, prefixes in input
    order and host numbers ascending. Network and broadcast addresses are
    skipped. Raises ``ValueError`` for a prefix that does not form IPv4
    addresses.
    """
    addresses: list[str] = []
    for prefix in prefixes:
        if not prefix.endswith("."):
            raise ValueError(f"Invalid subnet prefix: {prefix!r}")
        try:
            ipaddress.IPv4Address(f"{prefix}{FIRST_HOST}")
        except ValueError as exc:
            raise ValueError(f"Invalid subnet prefix: {prefix!r}") from exc
        addresses.extend(f"{prefix}{host}" for host in range(FIRST_HOST, LAST_HOST + 1))
    return addresses


def detect_local_prefix() -> str:
    """Return the ``/24`` prefix of the interface used for outbound traffic."""
    try:
        # No packet is sent; connecting a UDP socket only selects a route
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            local_ip = sock.getsockname()[0]
    except OSError as exc:
        raise RuntimeError("Could not detect local network") from exc

    network = ipaddress.ip_network(f"{local_ip}/24", strict=False)
    prefix = str(network.network_address).rsplit(".", 1)[0] + "."
    logger.debug("Detected local subnet prefix: %s", prefix)
    return prefix
