"""
Test runner for DNS benchmarking.

Orchestrates test execution:
- Repeated sampling of one probe against one resolver
- Per-resolver recursive test (cache priming, cache-hit sample,
  one randomized sample per authoritative operator)
- Fan-out over all resolvers with a bounded number of workers
"""

import asyncio
import logging
import random
from datetime import datetime
from typing import Callable, Optional

from .config import BenchmarkConfig
from .models import (
    BenchmarkResult,
    ProbeTarget,
    ResultBundle,
    SampleSummary,
)
from .probes import pick_cache_hit, randomized_hostname
from .query_engine import DNSQueryEngine
from .statistics import StatisticsEngine

logger = logging.getLogger(__name__)

# Type for progress callback
ProgressCallback = Callable[[str, int, int], None]


class BenchmarkError(RuntimeError):
    """A resolver test task died before delivering its results."""


class TestRunner:
    """
    Orchestrates DNS benchmark tests.

    Two independent limits apply: the number of resolvers tested at once
    (workers) and the number of DNS queries in flight across all of them
    (queries, enforced by the query engine).
    """

    __test__ = False  # not a pytest test class

    def __init__(
        self,
        config: BenchmarkConfig,
        engine: Optional[DNSQueryEngine] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the test runner.

        Args:
            config: Run configuration
            engine: Query engine (default: built from config)
            rng: Random source for hostname selection and labels
        """
        self.config = config
        self.engine = engine or DNSQueryEngine(
            query_limit=config.query_limit,
            timeout=config.timeout,
            fail_duration_ms=config.fail_duration_ms,
            expected_answers=config.expected_answers,
        )
        self.rng = rng or random.Random()

    async def run_samples(self, target: ProbeTarget, resolver: str) -> SampleSummary:
        """
        Query one probe repeatedly against one resolver, in sequence.

        Args:
            target: Probe to query
            resolver: Resolver address

        Returns:
            SampleSummary over all repetitions
        """
        outcomes = []
        for _ in range(self.config.repetitions):
            hostname = target.hostname
            if target.randomize:
                hostname = randomized_hostname(hostname, self.config.label_length, self.rng)
            outcomes.append(await self.engine.query(hostname, resolver))
        return StatisticsEngine.summarize(outcomes)

    async def test_recursive(self, resolver: str) -> ResultBundle:
        """
        Run the full probe set against one resolver.

        The cache-hit hostname is primed first, with results ignored.
        Queries run strictly one after another.

        Args:
            resolver: Resolver address

        Returns:
            ResultBundle with the cache-hit probe and every operator
        """
        hit = pick_cache_hit(self.config.cache_hit_hostnames, self.rng)

        # Prime the caches
        for _ in range(self.config.priming_queries):
            await self.engine.query(hit.hostname, resolver)

        summaries = {hit.key: await self.run_samples(hit, resolver)}
        for target in self.config.authoritative:
            summaries[target.key] = await self.run_samples(target, resolver)
        return ResultBundle(summaries)

    async def run(
        self,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> BenchmarkResult:
        """
        Test every resolver and rank them.

        Launches are staggered by ``stagger_delay``; results are collected
        in completion order and the run waits for all of them.

        Args:
            progress_callback: Optional callback for progress updates

        Returns:
            BenchmarkResult with every bundle and the ranking

        Raises:
            BenchmarkError: If a resolver task fails
        """
        started_at = datetime.now()
        resolvers = self.config.resolvers
        worker_limit = asyncio.Semaphore(self.config.worker_limit)
        results: asyncio.Queue = asyncio.Queue()

        async def worker(resolver: str) -> None:
            try:
                async with worker_limit:
                    logger.info("Issuing tests for %s", resolver)
                    bundle = await self.test_recursive(resolver)
            except asyncio.CancelledError as e:
                results.put_nowait((resolver, e))
                raise
            except Exception as e:
                results.put_nowait((resolver, e))
                return
            results.put_nowait((resolver, bundle))

        tasks = []
        for resolver in resolvers:
            # Stagger the start of tests
            await asyncio.sleep(self.config.stagger_delay)
            tasks.append(asyncio.create_task(worker(resolver)))

        bundles: dict[str, ResultBundle] = {}
        try:
            for i in range(len(resolvers)):
                resolver, result = await results.get()
                if isinstance(result, BaseException):
                    raise BenchmarkError(f"Testing {resolver} failed: {result!r}") from result
                logger.info("[%d/%d] Got results for %s", i + 1, len(resolvers), resolver)
                if progress_callback:
                    progress_callback(f"Got results for {resolver}", i + 1, len(resolvers))
                bundles[resolver] = result
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        return BenchmarkResult(
            started_at=started_at,
            completed_at=datetime.now(),
            resolvers=resolvers,
            operators=self.config.operators,
            bundles=bundles,
            ranking=tuple(StatisticsEngine.rank(bundles, resolvers)),
        )
