"""Outbound URL validation for executed requests.

Only public HTTP(S) targets are allowed: internal hostnames, private and
reserved IP literals and well-known infrastructure service ports are
rejected. Hostnames are not resolved, so DNS rebinding is not covered.
"""

import ipaddress
from urllib.parse import urlsplit

from pydantic import BaseModel

ALLOWED_SCHEMES = ("http", "https")

BLOCKED_PORTS = {
    22,  # SSH
    23,  # Telnet
    25,  # SMTP
    53,  # DNS
    135,  # MSRPC
    137,  # NetBIOS name
    138,  # NetBIOS datagram
    139,  # NetBIOS session
    445,  # SMB
    1433,  # MSSQL
    1521,  # Oracle
    3306,  # MySQL
    5432,  # PostgreSQL
    6379,  # Redis
    9200,  # Elasticsearch
    11211,  # Memcached
    27017,  # MongoDB
}

BLOCKED_HOSTNAME_KEYWORDS = ("localhost", "local", "internal", "intranet", "metadata", "instance-data")


class ValidationResult(BaseModel):
    valid: bool
    error: str | None = None


def validate_proxy_url(url: str) -> ValidationResult:
    """Check whether `url` may be requested on the user's behalf."""
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError:
        return ValidationResult(valid=False, error="Invalid URL format")
    hostname = (parts.hostname or "").lower()
    if not parts.scheme or not hostname:
        return ValidationResult(valid=False, error="Invalid URL format")

    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        return ValidationResult(
            valid=False,
            error=f"Protocol not allowed. Only HTTP/HTTPS permitted (got: {parts.scheme}:)",
        )

    for keyword in BLOCKED_HOSTNAME_KEYWORDS:
        if keyword in hostname:
            return ValidationResult(
                valid=False,
                error=f'Hostname blocked: Contains restricted keyword "{keyword}" (SSRF protection)',
            )

    if port is None:
        port = 443 if parts.scheme.lower() == "https" else 80
    if not is_allowed_port(port):
        return ValidationResult(
            valid=False,
            error=f"Port {port} blocked: Known dangerous service port (SSRF protection)",
        )

    if is_private_ip(hostname):
        return ValidationResult(
            valid=False,
            error="Request blocked: IP address is in private/internal range. Only public APIs allowed for security.",
        )

    return ValidationResult(valid=True)


def is_private_ip(value: str) -> bool:
    """True for loopback, private, link-local, reserved and multicast literals.

    Returns False for anything that is not an IP literal.
    """
    try:
        ip = ipaddress.ip_address(value)
    except ValueError:
        return False
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        ip = ip.ipv4_mapped
    return not ip.is_global or ip.is_multicast


def is_allowed_port(port: int) -> bool:
    return port not in BLOCKED_PORTS
