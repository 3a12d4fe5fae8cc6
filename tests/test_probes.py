import random
import string

from dnsperfbench.models import RESOLVER_HIT
from dnsperfbench.probes import (
    AUTHORITATIVE_HOSTNAMES,
    CACHE_HIT_HOSTNAMES,
    authoritative_targets,
    pick_cache_hit,
    random_label,
    randomized_hostname,
)


def test_random_label_is_fifteen_lowercase_letters():
    label = random_label()
    assert len(label) == 15
    assert set(label) <= set(string.ascii_lowercase)


def test_randomized_hostname_prefixes_label():
    host = randomized_hostname("tbrum3.com.", rng=random.Random(1))
    label, rest = host.split(".", 1)
    assert rest == "tbrum3.com."
    assert len(label) == 15


def test_randomized_hostnames_differ():
    rng = random.Random(7)
    hosts = {randomized_hostname("tbrum3.com.", rng=rng) for _ in range(15)}
    assert len(hosts) == 15


def test_pick_cache_hit():
    target = pick_cache_hit(rng=random.Random(3))
    assert target.key == RESOLVER_HIT
    assert target.hostname in CACHE_HIT_HOSTNAMES
    assert target.randomize is False


def test_authoritative_targets_sorted_and_randomized():
    targets = authoritative_targets()
    keys = [t.key for t in targets]
    assert keys == sorted(AUTHORITATIVE_HOSTNAMES)
    assert all(t.randomize for t in targets)
    assert {t.key: t.hostname for t in targets} == dict(AUTHORITATIVE_HOSTNAMES)
