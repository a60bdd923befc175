from __future__ import annotations

from collections.abc import Iterator

import pytest

from wfc3d import config
from wfc3d.util import rng


@pytest.fixture(autouse=True)
def reset_rng_streams() -> Iterator[None]:
    """Reseed the global RNG streams before and after each test."""
    rng.init(config.RANDOM_SEED)
    yield
    rng.init(config.RANDOM_SEED)
