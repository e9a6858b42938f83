"""
Validation for listing URLs loaded from configuration.

A registry supplied at runtime must only point the scraper at public HTTPS
hosts:
- No localhost/loopback or private network addresses
- No schemes other than https
- Optionally, only hosts under an allow-listed domain
"""

import ipaddress
from typing import Optional
from urllib.parse import urlparse


class SourceURLError(ValueError):
    """Raised when a listing URL fails validation."""
    pass


BLOCKED_HOSTNAMES = {
    "localhost",
    "localhost.localdomain",
}


def validate_source_url(
    url: str,
    allowed_domains: Optional[set[str]] = None,
) -> str:
    """
    Validate a listing URL before it is added to the registry.

    Args:
        url: The URL to validate
        allowed_domains: Optional set of domains the host must belong to
                        (subdomains match, e.g. www.bonsai.co.jp for bonsai.co.jp)

    Returns:
        The stripped URL

    Raises:
        SourceURLError: If the URL fails validation
    """
    if not url or not isinstance(url, str):
        raise SourceURLError("URL must be a non-empty string")

    url = url.strip()
    parsed = urlparse(url)

    if parsed.scheme.lower() != "https":
        raise SourceURLError(f"Only HTTPS listing URLs are allowed (got {parsed.scheme or 'none'}://)")

    hostname = (parsed.hostname or "").lower()
    if not hostname:
        raise SourceURLError("URL must include a hostname")

    if hostname in BLOCKED_HOSTNAMES or hostname.endswith(".localhost"):
        raise SourceURLError(f"Access to {hostname} is blocked (localhost addresses are not allowed)")

    ip_addr = _parse_ip_address(hostname)
    if ip_addr is not None and _is_internal(ip_addr):
        raise SourceURLError(f"Access to {hostname} is blocked (private/internal IP addresses are not allowed)")

    if allowed_domains is not None and not _domain_allowed(hostname, allowed_domains):
        raise SourceURLError(f"Domain {hostname} is not in the allowed domains list")

    return url


def _domain_allowed(hostname: str, allowed_domains: set[str]) -> bool:
    """Check if hostname equals or is a subdomain of an allowed domain."""
    for domain in allowed_domains:
        domain = domain.lower()
        if hostname == domain or hostname.endswith("." + domain):
            return True
    return False


def _parse_ip_address(hostname: str) -> Optional[ipaddress.IPv4Address | ipaddress.IPv6Address]:
    """Try to parse hostname as an IP address."""
    try:
        return ipaddress.ip_address(hostname)
    except ValueError:
        return None


def _is_internal(ip_addr: ipaddress.IPv4Address | ipaddress.IPv6Address) -> bool:
    return (
        ip_addr.is_private
        or ip_addr.is_loopback
        or ip_addr.is_link_local
        or ip_addr.is_multicast
        or ip_addr.is_reserved
        or ip_addr.is_unspecified
    )
