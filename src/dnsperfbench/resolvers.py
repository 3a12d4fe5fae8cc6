"""
Built-in resolver table.

Provides the default set of public recursive resolvers, keyed by
address literal (IPv6 literals are bracketed), with provider names.
"""

from types import MappingProxyType
from typing import Iterable


UNKNOWN_PROVIDER = "Unknown"

# Address -> provider name, in default test order
RESOLVER_NAMES = MappingProxyType({
    "8.8.8.8": "Google",
    "1.1.1.1": "Cloudflare",
    "9.9.9.9": "Quad9",
    "114.114.114.114": "114dns",
    "119.29.29.29": "DNSPod",
    "180.76.76.76": "Baidu",
    "208.67.222.222": "OpenDNS",
    "199.85.126.20": "Norton",
    "185.228.168.168": "Clean Browsing",
    "8.26.56.26": "Comodo",
    "[2001:4860:4860::8888]": "Google",
    "[2606:4700:4700::1111]": "Cloudflare",
    "[2620:fe::fe]": "Quad9",
    "[2620:0:ccc::2]": "OpenDNS",  # https://www.opendns.com/about/innovations/ipv6/
    "[2a0d:2a00:1::]": "Clean Browsing",
})

DEFAULT_RESOLVERS: tuple[str, ...] = tuple(RESOLVER_NAMES)


def provider_name(resolver: str) -> str:
    """Get the provider name for a resolver address (exact match)."""
    return RESOLVER_NAMES.get(resolver, UNKNOWN_PROVIDER)


def display_name(resolver: str) -> str:
    """Format a resolver as ``address (provider)``."""
    return f"{resolver} ({provider_name(resolver)})"


def merge_resolvers(
    additions: Iterable[str],
    defaults: Iterable[str] = DEFAULT_RESOLVERS,
) -> tuple[str, ...]:
    """
    Combine the default list with user additions.

    Duplicates are dropped by exact string match, keeping the position
    of the first occurrence.
    """
    merged: list[str] = []
    for resolver in (*defaults, *additions):
        if resolver not in merged:
            merged.append(resolver)
    return tuple(merged)


def host_address(resolver: str) -> str:
    """Strip IPv6 brackets so the address can be handed to a socket."""
    if resolver.startswith("[") and resolver.endswith("]"):
        return resolver[1:-1]
    return resolver
