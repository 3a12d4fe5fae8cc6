"""
Probe catalog for resolver benchmarking.

Holds the hostnames queried against every resolver:
- Cache-hit hostnames, queried as-is to measure warm-cache lookups
- Authoritative hostnames per DNS operator, queried with a random
  label prefix so every query forces a fresh recursive resolution
- The addresses every probe hostname is expected to resolve to
"""

import random
import string
from types import MappingProxyType
from typing import Optional

from .models import RESOLVER_HIT, ProbeTarget


CACHE_HIT_HOSTNAMES: tuple[str, ...] = (
    "fixed.turbobytes.net.",
    "fixed2.turbobytes.net.",
)

# Operator -> zone delegated to that operator's authoritative servers
AUTHORITATIVE_HOSTNAMES = MappingProxyType({
    "NS1": "tbrum3.com.",
    "Google": "tbrum4.com.",
    "AWS Route53": "tbrum5.com.",
    "DNSimple": "tbrum14.com.",
    "GoDaddy": "tbrum2.com.",
    "Akamai": "tbrum9.com.",
    "Dyn": "tbrum10.com.",
    "CloudFlare": "tbrum8.com.",
    "EasyDNS": "tbrum16.com.",
    "Ultradns": "tbrum22.com.",
    "Azure": "tbrum25.com.",
})

# All answers must match these
EXPECTED_ANSWERS = frozenset({
    "138.197.54.54",
    "138.197.53.4",
})

LABEL_LENGTH = 15


def random_label(length: int = LABEL_LENGTH, rng: Optional[random.Random] = None) -> str:
    """Generate a random lowercase label for cache bypass."""
    rng = rng or random
    return "".join(rng.choice(string.ascii_lowercase) for _ in range(length))


def randomized_hostname(
    hostname: str,
    length: int = LABEL_LENGTH,
    rng: Optional[random.Random] = None,
) -> str:
    """Prefix a hostname with a fresh random label."""
    return f"{random_label(length, rng)}.{hostname}"


def pick_cache_hit(
    hostnames: tuple[str, ...] = CACHE_HIT_HOSTNAMES,
    rng: Optional[random.Random] = None,
) -> ProbeTarget:
    """Select one cache-hit hostname at random."""
    rng = rng or random
    return ProbeTarget(key=RESOLVER_HIT, hostname=rng.choice(hostnames), randomize=False)


def authoritative_targets(
    table: Optional[dict[str, str]] = None,
) -> tuple[ProbeTarget, ...]:
    """Build randomized probe targets, one per operator, sorted by operator."""
    table = AUTHORITATIVE_HOSTNAMES if table is None else table
    return tuple(
        ProbeTarget(key=operator, hostname=table[operator], randomize=True)
        for operator in sorted(table)
    )
