"""
Public IP Module

Resolves the caller's public address for the report header.
"""

from connectioncheck.ip.core import (
    IPLookupError,
    UNKNOWN_IP,
    fetch_public_ip,
    local_interface_ip,
    parse_ip,
    resolve_public_ip,
    resolve_public_ip_or_placeholder,
)

__all__ = [
    "IPLookupError",
    "UNKNOWN_IP",
    "fetch_public_ip",
    "local_interface_ip",
    "parse_ip",
    "resolve_public_ip",
    "resolve_public_ip_or_placeholder",
]
