"""
Data models for dnsperfbench.

Defines structured types for query outcomes, sample summaries,
per-resolver result bundles and HTTP timing rows.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping, Optional


# Reserved bundle key for the cache-hit probe
RESOLVER_HIT = "ResolverHit"


class FailureCause(Enum):
    """Reason a single DNS query was counted as failed."""
    TIMEOUT = "timeout"
    TRANSPORT = "transport error"
    ANSWER_COUNT = "wrong answer count"
    RECORD_TYPE = "wrong record type"
    HIJACK = "unexpected answer / possible hijack"


@dataclass(frozen=True)
class ProbeTarget:
    """A hostname to query and whether each query gets a random label."""
    key: str
    hostname: str
    randomize: bool = False


@dataclass(frozen=True)
class QueryOutcome:
    """Result of a single DNS query."""
    latency_ms: float
    cause: Optional[FailureCause] = None
    detail: Optional[str] = None

    @property
    def is_success(self) -> bool:
        """Check if query was successful."""
        return self.cause is None


@dataclass(frozen=True)
class SampleSummary:
    """Reduced statistics over repeated queries for one probe."""
    mean_ms: float
    median_ms: float
    fail_ratio: float

    @property
    def fail_pct(self) -> float:
        return self.fail_ratio * 100


class ResultBundle(Mapping):
    """
    Read-only mapping of probe key to SampleSummary for one resolver.

    Iteration yields the cache-hit key first, then the authoritative
    operators in the order they were added.
    """

    def __init__(self, summaries: Mapping[str, SampleSummary]):
        if RESOLVER_HIT not in summaries:
            raise ValueError(f"Result bundle is missing {RESOLVER_HIT}")
        ordered = {RESOLVER_HIT: summaries[RESOLVER_HIT]}
        ordered.update((k, v) for k, v in summaries.items() if k != RESOLVER_HIT)
        self._summaries = MappingProxyType(ordered)

    def __getitem__(self, key: str) -> SampleSummary:
        return self._summaries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._summaries)

    def __len__(self) -> int:
        return len(self._summaries)

    @property
    def hit(self) -> SampleSummary:
        return self._summaries[RESOLVER_HIT]

    def authoritative(self) -> Iterator[tuple[str, SampleSummary]]:
        """Yield (operator, summary) pairs, skipping the cache-hit probe."""
        for key, summary in self._summaries.items():
            if key != RESOLVER_HIT:
                yield key, summary

    def __repr__(self) -> str:
        return f"ResultBundle({dict(self._summaries)!r})"


@dataclass(frozen=True)
class ResolverScore:
    """Score for an individual resolver (lower is better)."""
    resolver: str
    score: float


@dataclass(frozen=True)
class ConnectionTiming:
    """Connection-phase timings for one HTTP fetch, in milliseconds."""
    dns_ms: float
    connect_ms: float
    tls_ms: float
    ttfb_ms: float
    transfer_ms: float
    total_ms: float


@dataclass(frozen=True)
class HTTPResult:
    """HTTP timing result for a URL fetched through one resolver."""
    resolver: str
    remote_addr: str
    timing: ConnectionTiming


@dataclass(frozen=True)
class BenchmarkResult:
    """Complete benchmark result for all resolvers."""
    started_at: datetime
    completed_at: datetime
    resolvers: tuple[str, ...]
    operators: tuple[str, ...]
    bundles: Mapping[str, ResultBundle]
    ranking: tuple[ResolverScore, ...]

    @property
    def duration_seconds(self) -> float:
        """Total benchmark duration in seconds."""
        return (self.completed_at - self.started_at).total_seconds()

    @property
    def recommendation(self) -> str:
        """Best scoring resolver."""
        return self.ranking[0].resolver
