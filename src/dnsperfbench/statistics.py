"""
Statistical analysis for DNS benchmark results.

Reduces repeated query outcomes to sample summaries, and turns a
resolver's result bundle into a single score used for ranking.
"""

from typing import Mapping, Sequence

import numpy as np

from .models import QueryOutcome, ResolverScore, ResultBundle, SampleSummary

# Weight of the cache-hit probe relative to one authoritative probe
HIT_WEIGHT = 5


class StatisticsEngine:
    """Calculates summaries and scores from query outcomes."""

    @staticmethod
    def summarize(outcomes: Sequence[QueryOutcome]) -> SampleSummary:
        """
        Summarize repeated outcomes for one (resolver, probe) pair.

        Failed queries carry the fail duration as their latency, so they
        pull both the mean and the median up.

        Args:
            outcomes: Every outcome of the sample, successes and failures

        Returns:
            SampleSummary with mean, median and failure ratio
        """
        if not outcomes:
            raise ValueError("Cannot summarize an empty sample")

        latencies = np.array([o.latency_ms for o in outcomes], dtype=float)
        fails = sum(1 for o in outcomes if not o.is_success)

        return SampleSummary(
            mean_ms=float(np.mean(latencies)),
            median_ms=float(np.median(latencies)),
            fail_ratio=fails / len(outcomes),
        )

    @staticmethod
    def score(bundle: ResultBundle) -> float:
        """
        Score a resolver, lower is better.

        The cache-hit probe counts HIT_WEIGHT times; every authoritative
        probe counts once. Failure ratio is not part of the score.
        """
        hit = bundle.hit
        score = HIT_WEIGHT * (hit.mean_ms + hit.median_ms)
        for _, summary in bundle.authoritative():
            score += summary.mean_ms + summary.median_ms
        return score

    @staticmethod
    def rank(
        bundles: Mapping[str, ResultBundle],
        order: Sequence[str],
    ) -> list[ResolverScore]:
        """
        Rank resolvers by ascending score.

        Args:
            bundles: Resolver -> ResultBundle
            order: Resolver list order, used to break ties

        Returns:
            List of ResolverScore, best first
        """
        scores = [
            ResolverScore(resolver=resolver, score=StatisticsEngine.score(bundles[resolver]))
            for resolver in order
        ]
        # sorted() is stable, so equal scores keep resolver-list order
        return sorted(scores, key=lambda s: s.score)
