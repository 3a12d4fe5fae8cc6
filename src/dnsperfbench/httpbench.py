"""
HTTP timing through each resolver.

Resolves the host of a URL through one resolver at a time, fetches the
URL from the resolved address, and breaks the fetch down into DNS,
Connect, TLS, Time-To-First-Byte and Transfer phases.
"""

import asyncio
import ipaddress
import logging
import time
from typing import Awaitable, Callable, Optional, Sequence
from urllib.parse import urlparse

import dns.asyncresolver
import httpx

from .models import ConnectionTiming, HTTPResult
from .resolvers import host_address

logger = logging.getLogger(__name__)

HTTP_TIMEOUT = 10.0
SUPPORTED_SCHEMES = ("http", "https")

# Type for the name lookup step: (hostname, resolver, timeout) -> address
Resolve = Callable[[str, str, float], Awaitable[str]]


class InvalidURLError(ValueError):
    """URL cannot be used for an HTTP timing test."""


def validate_url(url: str) -> httpx.URL:
    """
    Check that a URL has an http(s) scheme and a host.

    Raises:
        InvalidURLError: If the URL is unusable
    """
    parsed = urlparse(url)
    if not parsed.scheme:
        raise InvalidURLError(f"URL must include a scheme (http:// or https://): {url}")
    if parsed.scheme not in SUPPORTED_SCHEMES:
        raise InvalidURLError("Only http:// and https:// schemes supported")
    if not parsed.hostname:
        raise InvalidURLError(f"Invalid URL: {url}")
    return httpx.URL(url)


def _is_ip(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


async def resolve_host(hostname: str, resolver: str, timeout: float) -> str:
    """Resolve an A record for hostname using only the given resolver."""
    res = dns.asyncresolver.Resolver(configure=False)
    res.nameservers = [host_address(resolver)]
    res.lifetime = timeout
    answer = await res.resolve(hostname, "A")
    return answer[0].address


def _span(events: dict[str, float], start: str, end: str) -> float:
    """Milliseconds between two trace events, 0 if either is missing."""
    t0 = next((t for name, t in events.items() if name.endswith(start)), None)
    t1 = next((t for name, t in events.items() if name.endswith(end)), None)
    if t0 is None or t1 is None:
        return 0.0
    return (t1 - t0) * 1000


async def time_fetch(
    url: httpx.URL,
    resolver: str,
    timeout: float = HTTP_TIMEOUT,
    resolve: Resolve = resolve_host,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> HTTPResult:
    """
    Fetch a URL using one resolver for the name lookup.

    The request goes to the resolved address; the Host header and TLS
    SNI keep the original host name.
    """
    host = url.host
    start = time.perf_counter()
    address = host if _is_ip(host) else await resolve(host, resolver, timeout)
    dns_done = time.perf_counter()

    events: dict[str, float] = {}

    async def trace(event_name: str, info: dict) -> None:
        events[event_name] = time.perf_counter()

    target = url.copy_with(host=address)
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        async with client.stream(
            "GET",
            target,
            headers={"Host": url.netloc.decode("ascii")},
            extensions={"trace": trace, "sni_hostname": host},
        ) as response:
            headers_done = time.perf_counter()
            async for _ in response.aiter_raw():
                pass
            end = time.perf_counter()

    request_start = min(events.values(), default=dns_done)
    timing = ConnectionTiming(
        dns_ms=(dns_done - start) * 1000,
        connect_ms=_span(events, "connect_tcp.started", "connect_tcp.complete"),
        tls_ms=_span(events, "start_tls.started", "start_tls.complete"),
        ttfb_ms=_span(events, "send_request_headers.started", "receive_response_headers.complete")
        or (headers_done - request_start) * 1000,
        transfer_ms=(end - headers_done) * 1000,
        total_ms=(end - start) * 1000,
    )

    port = url.port or (443 if url.scheme == "https" else 80)
    remote = f"[{address}]:{port}" if ":" in address else f"{address}:{port}"
    return HTTPResult(resolver=resolver, remote_addr=remote, timing=timing)


async def run_http_test(
    url: httpx.URL,
    resolvers: Sequence[str],
    timeout: float = HTTP_TIMEOUT,
    resolve: Resolve = resolve_host,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> list[HTTPResult]:
    """
    Time a URL fetch through every resolver concurrently.

    Resolvers whose lookup or fetch fails are left out of the results.
    """

    async def one(resolver: str) -> Optional[HTTPResult]:
        try:
            return await time_fetch(url, resolver, timeout, resolve, transport)
        except Exception as e:
            logger.warning("HTTP test through %s failed: %s", resolver, e)
            return None

    results = await asyncio.gather(*(one(r) for r in resolvers))
    return [r for r in results if r is not None]
