"""
dnsperfbench - Recursive DNS resolver benchmarking tool.

Measures cache-hit and authoritative-delegation latency through each
resolver and recommends the best scoring one.
"""

__version__ = "1.0.0"

from .config import BenchmarkConfig
from .models import BenchmarkResult, ResultBundle, SampleSummary
from .query_engine import DNSQueryEngine
from .runner import TestRunner

__all__ = [
    "__version__",
    "BenchmarkConfig",
    "BenchmarkResult",
    "ResultBundle",
    "SampleSummary",
    "DNSQueryEngine",
    "TestRunner",
]
