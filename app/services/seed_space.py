"""
Seed-space table: the largest seed each supported PRNG family can take.
"""

from types import MappingProxyType
from typing import List, Mapping, Optional

from core.exceptions import UnsupportedPRNG


UINT_MAX = 0xffffffff
LLONG_MAX = 0x7fffffffffffffff

DEFAULT_SEED_BOUNDS: Mapping[str, int] = MappingProxyType({
    "glibc-rand": UINT_MAX,
    "java": LLONG_MAX,
    "mt19937": UINT_MAX,
    "php-mt_rand": UINT_MAX,
    "ruby-rand": UINT_MAX,
})


class SeedSpaceModel:
    """Read-only lookup of seed-space bounds, shared freely between jobs."""

    def __init__(self, bounds: Mapping[str, int] = DEFAULT_SEED_BOUNDS):
        self._bounds = MappingProxyType(dict(bounds))

    def bound_for(self, prng: str, job_id: Optional[str] = None) -> int:
        try:
            return self._bounds[prng]
        except KeyError:
            raise UnsupportedPRNG(prng, job_id=job_id) from None

    def is_supported(self, prng: str) -> bool:
        return prng in self._bounds

    def families(self) -> List[str]:
        return sorted(self._bounds)


seed_space = SeedSpaceModel()
