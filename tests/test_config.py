import pytest

from dnsperfbench.config import BenchmarkConfig
from dnsperfbench.resolvers import DEFAULT_RESOLVERS


def test_build_defaults():
    config = BenchmarkConfig.build()
    assert config.resolvers == DEFAULT_RESOLVERS
    assert config.worker_limit == len(DEFAULT_RESOLVERS)
    assert config.query_limit == 5
    assert config.timeout == 1.0
    assert config.fail_duration_ms == 10_000.0
    assert config.repetitions == 15
    assert config.priming_queries == 5
    assert config.stagger_delay == 0.05
    assert config.expected_answers == {"138.197.54.54", "138.197.53.4"}


def test_build_worker_default_counts_additions():
    config = BenchmarkConfig.build(extra_resolvers=["192.0.2.1"])
    assert config.resolvers[-1] == "192.0.2.1"
    assert config.worker_limit == len(DEFAULT_RESOLVERS) + 1


def test_operators_sorted():
    config = BenchmarkConfig.build(authoritative_hostnames={"b": "b.example.", "A": "a.example."})
    assert config.operators == ("A", "b")


@pytest.mark.parametrize("kwargs", [{"workers": 0}, {"queries": 0}, {"queries": -1}])
def test_build_rejects_non_positive_limits(kwargs):
    with pytest.raises(ValueError):
        BenchmarkConfig.build(**kwargs)


def test_config_is_frozen():
    config = BenchmarkConfig.build()
    with pytest.raises(AttributeError):
        config.query_limit = 10
