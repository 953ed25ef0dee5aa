"""mcglauber/random_stream.py

Random streams are passed explicitly: a run owns one numpy Generator and hands
it to the nuclei, the nucleon-pair rule and the profile stage. Draw order is
therefore fixed by the call order, and a fixed seed reproduces a run exactly.
"""

from __future__ import annotations

import numpy as np
from typing import List, Optional


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Generator seeded with `seed`, or from OS entropy if seed is None or <= 0."""
    if seed is None or int(seed) <= 0:
        return np.random.default_rng()
    return np.random.default_rng(int(seed))


def spawn_streams(seed: Optional[int], n: int) -> List[np.random.Generator]:
    """Independent per-worker generators derived from one master seed."""
    if seed is None or int(seed) <= 0:
        ss = np.random.SeedSequence()
    else:
        ss = np.random.SeedSequence(int(seed))
    return [np.random.default_rng(child) for child in ss.spawn(int(n))]
