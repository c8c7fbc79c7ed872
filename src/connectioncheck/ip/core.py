"""
Public IP address lookup.

Asks an external "what is my IP" service first and falls back to the
first active IPv4 address on a local interface.
"""

import socket

import httpx
import psutil
from netaddr import AddrFormatError, INET_PTON, IPAddress

from connectioncheck.config import DEFAULT_IP_LOOKUP_TIMEOUT, DEFAULT_IP_LOOKUP_URL
from connectioncheck.logging_config import get_logger

logger = get_logger(__name__)

UNKNOWN_IP = "Unknown"


class IPLookupError(Exception):
    """The address could not be determined."""


def parse_ip(text: str) -> str | None:
    """Return the normalized address if text is a valid IPv4/IPv6 literal."""
    candidate = text.strip()
    if not candidate:
        return None
    try:
        return str(IPAddress(candidate, flags=INET_PTON))
    except (AddrFormatError, ValueError, TypeError):
        return None


def fetch_public_ip(
    url: str = DEFAULT_IP_LOOKUP_URL,
    timeout: float = DEFAULT_IP_LOOKUP_TIMEOUT,
    client: httpx.Client | None = None,
) -> str:
    """Query the lookup service and validate its plain-text answer."""
    owns_client = client is None
    if client is None:
        client = httpx.Client(timeout=httpx.Timeout(timeout), follow_redirects=True)

    try:
        resp = client.get(url, timeout=timeout)
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise IPLookupError(f"{e.request.url.host} returned status {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise IPLookupError(f"failed to contact {url}: {e}") from e
    finally:
        if owns_client:
            client.close()

    body = resp.text.strip()
    ip = parse_ip(body)
    if ip is None:
        shown = body if len(body) <= 64 else body[:64] + "..."
        raise IPLookupError(f"invalid IP address received: {shown!r}")

    return ip


def local_interface_ip() -> str:
    """First IPv4 address on an interface that is up and not loopback."""
    try:
        stats = psutil.net_if_stats()
        addrs = psutil.net_if_addrs()
    except (OSError, psutil.Error) as e:
        raise IPLookupError(f"cannot enumerate network interfaces: {e}") from e

    for name, iface_addrs in addrs.items():
        iface = stats.get(name)
        if iface is None or not iface.isup:
            continue
        if "loopback" in getattr(iface, "flags", "").split(","):
            continue

        for addr in iface_addrs:
            if addr.family != socket.AF_INET:
                continue
            ip = parse_ip(addr.address)
            if ip and not IPAddress(ip).is_loopback():
                logger.debug("Using %s from interface %s", ip, name)
                return ip

    raise IPLookupError("no active network interface found")


def resolve_public_ip(
    url: str = DEFAULT_IP_LOOKUP_URL,
    timeout: float = DEFAULT_IP_LOOKUP_TIMEOUT,
    client: httpx.Client | None = None,
) -> str:
    """Public IP from the lookup service, else a local interface address."""
    try:
        return fetch_public_ip(url, timeout, client=client)
    except IPLookupError as e:
        logger.warning(
            "Could not get public IP from %s (%s), falling back to local interface detection",
            url, e,
        )

    return local_interface_ip()


def resolve_public_ip_or_placeholder(
    url: str = DEFAULT_IP_LOOKUP_URL,
    timeout: float = DEFAULT_IP_LOOKUP_TIMEOUT,
    client: httpx.Client | None = None,
    placeholder: str = UNKNOWN_IP,
) -> str:
    """Like resolve_public_ip, but never fails."""
    try:
        return resolve_public_ip(url, timeout, client=client)
    except IPLookupError as e:
        logger.warning("Could not determine public IP: %s", e)
        return placeholder
