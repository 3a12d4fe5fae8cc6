"""
Run configuration.

Everything a benchmark run needs is collected into one immutable
BenchmarkConfig, built once at startup and passed to the runner.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from .models import ProbeTarget
from .probes import (
    AUTHORITATIVE_HOSTNAMES,
    CACHE_HIT_HOSTNAMES,
    EXPECTED_ANSWERS,
    LABEL_LENGTH,
    authoritative_targets,
)
from .resolvers import DEFAULT_RESOLVERS, merge_resolvers


DEFAULT_QUERY_LIMIT = 5
QUERY_TIMEOUT = 1.0          # seconds, end to end
FAIL_DURATION_MS = 10_000.0  # latency recorded for any failed query
REPETITIONS = 15             # measured queries per (resolver, probe)
PRIMING_QUERIES = 5
STAGGER_DELAY = 0.05         # seconds between resolver launches


@dataclass(frozen=True)
class BenchmarkConfig:
    """Immutable configuration for one benchmark run."""
    resolvers: tuple[str, ...]
    worker_limit: int
    query_limit: int = DEFAULT_QUERY_LIMIT
    timeout: float = QUERY_TIMEOUT
    fail_duration_ms: float = FAIL_DURATION_MS
    repetitions: int = REPETITIONS
    priming_queries: int = PRIMING_QUERIES
    stagger_delay: float = STAGGER_DELAY
    label_length: int = LABEL_LENGTH
    cache_hit_hostnames: tuple[str, ...] = CACHE_HIT_HOSTNAMES
    authoritative: tuple[ProbeTarget, ...] = field(default_factory=authoritative_targets)
    expected_answers: frozenset = EXPECTED_ANSWERS

    def __post_init__(self):
        if not self.resolvers:
            raise ValueError("At least one resolver is required")
        if self.worker_limit < 1:
            raise ValueError(f"Worker limit must be positive, got {self.worker_limit}")
        if self.query_limit < 1:
            raise ValueError(f"Query limit must be positive, got {self.query_limit}")
        if self.repetitions < 1:
            raise ValueError(f"Repetitions must be positive, got {self.repetitions}")

    @property
    def operators(self) -> tuple[str, ...]:
        """Authoritative operator names in report order."""
        return tuple(target.key for target in self.authoritative)

    @classmethod
    def build(
        cls,
        extra_resolvers: Iterable[str] = (),
        workers: Optional[int] = None,
        queries: int = DEFAULT_QUERY_LIMIT,
        timeout: float = QUERY_TIMEOUT,
        defaults: Iterable[str] = DEFAULT_RESOLVERS,
        authoritative_hostnames: Optional[dict[str, str]] = None,
    ) -> "BenchmarkConfig":
        """
        Build a configuration from command-line style inputs.

        Args:
            extra_resolvers: Resolver addresses appended after the defaults
            workers: Resolvers tested at once (default: all of them)
            queries: DNS queries in flight at once, across all resolvers
            timeout: Per-query timeout in seconds
            defaults: Built-in resolver list
            authoritative_hostnames: Operator -> hostname table override

        Returns:
            BenchmarkConfig
        """
        resolvers = merge_resolvers(extra_resolvers, defaults)
        table = AUTHORITATIVE_HOSTNAMES if authoritative_hostnames is None else authoritative_hostnames
        return cls(
            resolvers=resolvers,
            worker_limit=len(resolvers) if workers is None else workers,
            query_limit=queries,
            timeout=timeout,
            authoritative=authoritative_targets(table),
        )
