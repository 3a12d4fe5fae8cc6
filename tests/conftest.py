"""
Shared pytest fixtures: a scripted in-memory DNS transport and small
benchmark configurations that run without network access.
"""

import asyncio
import dataclasses
import os
import sys

import dns.message
import dns.rrset
import pytest

# Ensure 'src' is on sys.path so 'dnsperfbench' is importable without install
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
SRC_DIR = os.path.join(ROOT, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from dnsperfbench.config import BenchmarkConfig  # noqa: E402
from dnsperfbench.transports import BaseTransport  # noqa: E402

GOOD_ADDRESS = "138.197.54.54"


def make_response(hostname, *records):
    """
    Build a response to an A query for hostname.

    Each record is (rdtype, value), e.g. ("A", "138.197.54.54").
    """
    query = dns.message.make_query(hostname, "A")
    response = dns.message.make_response(query)
    for rdtype, value in records:
        response.answer.append(dns.rrset.from_text(hostname, 60, "IN", rdtype, value))
    return response


class FakeTransport(BaseTransport):
    """
    Transport answering from a handler instead of the network.

    handler(hostname, resolver_ip) returns (response, rtt_ms) or raises.
    Tracks every call and the peak number of concurrent queries.
    """

    def __init__(self, handler=None, delay=0.0):
        self.handler = handler or (lambda hostname, ip: (make_response(hostname, ("A", GOOD_ADDRESS)), 10.0))
        self.delay = delay
        self.calls = []
        self.in_flight = 0
        self.peak = 0

    async def query(self, message, resolver_ip, timeout=1.0):
        hostname = message.question[0].name.to_text()
        self.calls.append((hostname, resolver_ip))
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            return self.handler(hostname, resolver_ip)
        finally:
            self.in_flight -= 1


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def small_config():
    """Two resolvers, two operators, no launch stagger."""
    config = BenchmarkConfig.build(
        defaults=("8.8.8.8", "1.1.1.1"),
        authoritative_hostnames={"NS1": "tbrum3.com.", "Akamai": "tbrum9.com."},
    )
    return dataclasses.replace(config, stagger_delay=0.0)
