"""Seedable random number streams for the solver.

Each consumer (a solve, the benchmark, a caller's own generation step) gets
an independent Random instance derived from one master seed. This keeps a
solve reproducible from its seed, and lets one consumer draw more or fewer
numbers without shifting any other consumer's sequence.

Usage:
    from wfc3d.util import rng
    rng.init(config.RANDOM_SEED)

    _rng = rng.get("wfc.solve")
    model = DiscreteModel(exemplar, (8, 8, 8), rng=_rng)

    # After rng.reset(), cached stream references use the new seed

Any random.Random instance is accepted wherever an RNG is expected, so tests
can simply inject random.Random(42).
"""

from __future__ import annotations

import zlib
from collections.abc import Sequence
from random import Random
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from wfc3d.types import RandomSeed

T = TypeVar("T")


class RNGStream:
    """Proxy that delegates to the current Random for a domain.

    Callers may keep a reference across rng.reset(); every call looks the
    underlying generator up again from the provider.
    """

    def __init__(self, provider: RNGProvider, domain: str) -> None:
        self._provider = provider
        self._domain = domain

    @property
    def domain(self) -> str:
        return self._domain

    def _rng(self) -> Random:
        return self._provider._get_raw(self._domain)

    def choice(self, seq: Sequence[T]) -> T:
        """Return random element from non-empty sequence."""
        return self._rng().choice(seq)

    def choices(
        self,
        population: Sequence[T],
        weights: Sequence[float] | None = None,
        *,
        cum_weights: Sequence[float] | None = None,
        k: int = 1,
    ) -> list[T]:
        """Return k-sized list of elements chosen with replacement."""
        return self._rng().choices(
            population, weights=weights, cum_weights=cum_weights, k=k
        )


# Anything the solver can draw random numbers from.
RNG = Random | RNGStream


class RNGProvider:
    """Hands out isolated, named RNG streams derived from one master seed."""

    def __init__(self, master_seed: RandomSeed = None) -> None:
        self._master_seed = master_seed
        self._streams: dict[str, Random] = {}
        self._proxies: dict[str, RNGStream] = {}

    @property
    def master_seed(self) -> RandomSeed:
        return self._master_seed

    def get(self, domain: str) -> RNGStream:
        """Get a cacheable stream for the named domain, e.g. "wfc.solve"."""
        if domain not in self._proxies:
            self._proxies[domain] = RNGStream(self, domain)
        return self._proxies[domain]

    def _get_raw(self, domain: str) -> Random:
        if domain not in self._streams:
            if self._master_seed is None:
                self._streams[domain] = Random()
            else:
                # crc32 rather than hash(): str hashes are salted per process.
                derived_seed = zlib.crc32(f"{self._master_seed}:{domain}".encode())
                self._streams[domain] = Random(derived_seed)
        return self._streams[domain]

    def reset(self, master_seed: RandomSeed = None) -> None:
        """Reseed every stream. Existing RNGStream proxies stay valid."""
        self._master_seed = master_seed
        self._streams.clear()


# =============================================================================
# Module-level API
# =============================================================================

_provider: RNGProvider | None = None


def init(master_seed: RandomSeed = None) -> None:
    """Initialize the global provider, or reseed it if it already exists."""
    global _provider
    if _provider is not None:
        _provider.reset(master_seed)
    else:
        _provider = RNGProvider(master_seed)


def get(domain: str) -> RNGStream:
    """Get a stream from the global provider.

    The provider is created unseeded on first use if init() was never called.
    """
    global _provider
    if _provider is None:
        _provider = RNGProvider(None)
    return _provider.get(domain)


def reset(master_seed: RandomSeed = None) -> None:
    """Reseed all global streams. Requires a prior init()."""
    if _provider is None:
        raise RuntimeError("RNG not initialized - call rng.init() first")
    _provider.reset(master_seed)
