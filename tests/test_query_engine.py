import asyncio

import dns.exception
import pytest

from conftest import GOOD_ADDRESS, FakeTransport, make_response
from dnsperfbench.models import FailureCause
from dnsperfbench.query_engine import DNSQueryEngine, validate_response

HOST = "fixed.turbobytes.net."


@pytest.mark.parametrize(
    "records",
    [
        [],
        [("A", GOOD_ADDRESS), ("A", "138.197.53.4")],
    ],
)
def test_validate_rejects_wrong_answer_count(records):
    cause, _ = validate_response(make_response(HOST, *records))
    assert cause is FailureCause.ANSWER_COUNT


def test_validate_rejects_non_address_record():
    cause, _ = validate_response(make_response(HOST, ("CNAME", "elsewhere.example.")))
    assert cause is FailureCause.RECORD_TYPE


def test_validate_rejects_unexpected_address():
    cause, detail = validate_response(make_response(HOST, ("A", "1.2.3.4")))
    assert cause is FailureCause.HIJACK
    assert "1.2.3.4" in detail


@pytest.mark.parametrize("address", ["138.197.54.54", "138.197.53.4"])
def test_validate_accepts_expected_address(address):
    assert validate_response(make_response(HOST, ("A", address))) is None


def test_query_success_returns_rtt(fake_transport):
    engine = DNSQueryEngine(transport=fake_transport)
    outcome = asyncio.run(engine.query(HOST, "8.8.8.8"))
    assert outcome.is_success
    assert outcome.latency_ms == 10.0
    assert fake_transport.calls == [(HOST, "8.8.8.8")]


def test_query_strips_ipv6_brackets(fake_transport):
    engine = DNSQueryEngine(transport=fake_transport)
    asyncio.run(engine.query(HOST, "[2620:fe::fe]"))
    assert fake_transport.calls[0][1] == "2620:fe::fe"


@pytest.mark.parametrize("error", [asyncio.TimeoutError(), dns.exception.Timeout()])
def test_query_timeout_records_fail_duration(error):
    def handler(hostname, ip):
        raise error

    engine = DNSQueryEngine(transport=FakeTransport(handler))
    outcome = asyncio.run(engine.query(HOST, "8.8.8.8"))
    assert outcome.cause is FailureCause.TIMEOUT
    assert outcome.latency_ms == 10_000.0


def test_query_transport_error():
    def handler(hostname, ip):
        raise OSError("Network is unreachable")

    engine = DNSQueryEngine(transport=FakeTransport(handler))
    outcome = asyncio.run(engine.query(HOST, "8.8.8.8"))
    assert outcome.cause is FailureCause.TRANSPORT
    assert outcome.latency_ms == 10_000.0
    assert "unreachable" in outcome.detail


def test_query_hijack_is_failure():
    transport = FakeTransport(lambda hostname, ip: (make_response(hostname, ("A", "1.2.3.4")), 5.0))
    engine = DNSQueryEngine(transport=transport)
    outcome = asyncio.run(engine.query(HOST, "8.8.8.8"))
    assert outcome.cause is FailureCause.HIJACK
    assert outcome.latency_ms == 10_000.0


def test_query_limit_bounds_in_flight():
    transport = FakeTransport(delay=0.01)
    engine = DNSQueryEngine(query_limit=3, transport=transport)

    async def burst():
        await asyncio.gather(*(engine.query(HOST, f"192.0.2.{i}") for i in range(12)))

    asyncio.run(burst())
    assert len(transport.calls) == 12
    assert transport.peak == 3


def test_query_limit_released_after_failure():
    def handler(hostname, ip):
        raise OSError("boom")

    engine = DNSQueryEngine(query_limit=1, transport=FakeTransport(handler))

    async def twice():
        await engine.query(HOST, "8.8.8.8")
        return await asyncio.wait_for(engine.query(HOST, "8.8.8.8"), timeout=1)

    assert asyncio.run(twice()).cause is FailureCause.TRANSPORT
