"""
Core DNS query engine.

Issues single recursive A queries against a resolver, validates the
answer against the expected address set, and shares one concurrency
limit on in-flight queries across every resolver under test.
"""

import asyncio
import logging
from typing import Optional

import dns.exception
import dns.flags
import dns.message
import dns.rdatatype

from .config import FAIL_DURATION_MS, QUERY_TIMEOUT, DEFAULT_QUERY_LIMIT
from .models import FailureCause, QueryOutcome
from .probes import EXPECTED_ANSWERS
from .resolvers import host_address
from .transports import BaseTransport, UDPTransport

logger = logging.getLogger(__name__)


def validate_response(
    response: dns.message.Message,
    expected_answers: frozenset = EXPECTED_ANSWERS,
) -> Optional[tuple[FailureCause, str]]:
    """
    Check a DNS response against the expected answer.

    Returns:
        None if the response is acceptable, otherwise (cause, detail)
    """
    records = [(rrset.rdtype, rdata) for rrset in response.answer for rdata in rrset]

    # Expect only one answer
    if len(records) != 1:
        return FailureCause.ANSWER_COUNT, f"Number of answers is {len(records)}, not 1"

    rdtype, rdata = records[0]
    if rdtype != dns.rdatatype.A:
        return FailureCause.RECORD_TYPE, f"Answer is type {dns.rdatatype.to_text(rdtype)}, not A"

    if rdata.address not in expected_answers:
        return FailureCause.HIJACK, f"Got strange answer {rdata.address}. Hijacking resolver?"

    return None


class DNSQueryEngine:
    """
    Rate-limited DNS query engine.

    Every query acquires one slot of a shared semaphore, so the number of
    queries in flight across all resolvers never exceeds ``query_limit``.
    """

    def __init__(
        self,
        query_limit: int = DEFAULT_QUERY_LIMIT,
        timeout: float = QUERY_TIMEOUT,
        fail_duration_ms: float = FAIL_DURATION_MS,
        expected_answers: frozenset = EXPECTED_ANSWERS,
        transport: Optional[BaseTransport] = None,
    ):
        """
        Initialize the query engine.

        Args:
            query_limit: Maximum queries in flight at once
            timeout: Query timeout in seconds
            fail_duration_ms: Latency recorded for a failed query
            expected_answers: Addresses accepted as a valid answer
            transport: DNS transport (default: UDP)
        """
        self.timeout = timeout
        self.fail_duration_ms = fail_duration_ms
        self.expected_answers = expected_answers
        self.transport = transport or UDPTransport()
        self._limiter = asyncio.Semaphore(query_limit)

    def _create_query_message(self, hostname: str) -> dns.message.Message:
        """Create a recursive A query."""
        message = dns.message.make_query(hostname, dns.rdatatype.A)
        message.flags |= dns.flags.RD
        return message

    def _failure(self, cause: FailureCause, detail: str) -> QueryOutcome:
        return QueryOutcome(latency_ms=self.fail_duration_ms, cause=cause, detail=detail)

    async def query(self, hostname: str, resolver: str) -> QueryOutcome:
        """
        Execute a single DNS query. Never retries.

        Args:
            hostname: Name to resolve
            resolver: Resolver address (IPv6 may be bracketed)

        Returns:
            QueryOutcome with the round-trip time, or the fail duration
            and a cause
        """
        message = self._create_query_message(hostname)

        async with self._limiter:
            try:
                response, rtt_ms = await self.transport.query(
                    message,
                    host_address(resolver),
                    timeout=self.timeout,
                )
            except (asyncio.TimeoutError, dns.exception.Timeout):
                outcome = self._failure(
                    FailureCause.TIMEOUT, f"Query timed out after {self.timeout}s"
                )
            except Exception as e:
                outcome = self._failure(FailureCause.TRANSPORT, str(e) or type(e).__name__)
            else:
                problem = validate_response(response, self.expected_answers)
                if problem is None:
                    return QueryOutcome(latency_ms=rtt_ms)
                outcome = self._failure(*problem)

        logger.debug("%s @ %s failed: %s (%s)", hostname, resolver, outcome.cause.value, outcome.detail)
        return outcome
