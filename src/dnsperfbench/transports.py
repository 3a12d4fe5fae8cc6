"""
DNS transport.

Sends a single DNS message to a resolver over UDP using dnspython's
asyncio API and reports the response together with the measured
round-trip time.
"""

import asyncio
import time
from abc import ABC, abstractmethod

import dns.asyncquery
import dns.message

DNS_PORT = 53


class BaseTransport(ABC):
    """Base class for DNS transports."""

    @abstractmethod
    async def query(
        self,
        message: dns.message.Message,
        resolver_ip: str,
        timeout: float = 1.0,
    ) -> tuple[dns.message.Message, float]:
        """
        Send a DNS query and return the response.

        Returns:
            Tuple of (response, round_trip_ms)
        """
        pass


class UDPTransport(BaseTransport):
    """Standard DNS over UDP."""

    def __init__(self, port: int = DNS_PORT):
        self.port = port

    async def query(
        self,
        message: dns.message.Message,
        resolver_ip: str,
        timeout: float = 1.0,
    ) -> tuple[dns.message.Message, float]:
        """Send DNS query over UDP, bounded end to end by ``timeout``."""
        start = time.perf_counter_ns()

        # Native asyncio socket: the timeout covers only the exchange itself
        response = await asyncio.wait_for(
            dns.asyncquery.udp(
                message,
                resolver_ip,
                timeout=timeout,
                port=self.port,
            ),
            timeout=timeout,
        )

        end = time.perf_counter_ns()
        return response, (end - start) / 1_000_000
