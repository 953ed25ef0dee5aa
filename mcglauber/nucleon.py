"""mcglauber/nucleon.py

Nucleon storage and the nucleon-nucleon participation rule.

- NucleonBuffer: per-nucleus positions (x, y, z) and participant flags,
  overwritten in place every event
- Nucleon: a light view into one buffer slot
- NucleonCommon: run-wide interaction parameters; decides whether a pair of
  nucleons from opposite nuclei collides and marks both as participants

Two interaction models:

  "gaussian"   Gaussian nucleons of width w. A pair at transverse distance d
               collides with probability P(d) = 1 - exp[-exp(x - d^2/4w^2)],
               where x is tuned so that ∫ d^2b P(b) = σ_NN.  One uniform draw
               per pair test.
  "black-disk" Deterministic: collide iff d^2 < σ_NN/π.
"""

from __future__ import annotations

import numpy as np
from typing import Optional

from scipy.optimize import brentq
from scipy.special import expi

from .config import ConfigurationError
from .physics import mb_to_fm2

# Gaussian nucleons interact out to this many widths
MAX_IMPACT_WIDTHS = 6.0


# -------------------------
# Storage
# -------------------------

class NucleonBuffer:
    """Owned, resizable nucleon storage reused across events."""

    def __init__(self, size: int = 0):
        self._positions = np.zeros((int(size), 3), dtype=float)
        self._participant = np.zeros(int(size), dtype=bool)

    def __len__(self) -> int:
        return self._positions.shape[0]

    def __getitem__(self, i: int) -> "Nucleon":
        if not -len(self) <= i < len(self):
            raise IndexError(f"nucleon index {i} out of range")
        return Nucleon(self, i % len(self))

    def __iter__(self):
        for i in range(len(self)):
            yield Nucleon(self, i)

    def resize(self, size: int) -> None:
        """Change the nucleon count; contents are undefined afterwards."""
        size = int(size)
        if size != len(self):
            self._positions = np.zeros((size, 3), dtype=float)
            self._participant = np.zeros(size, dtype=bool)

    def reset(self) -> None:
        """Clear participant flags for the next event."""
        self._participant[:] = False

    @property
    def positions(self) -> np.ndarray:
        return self._positions

    @property
    def x(self) -> np.ndarray:
        return self._positions[:, 0]

    @property
    def y(self) -> np.ndarray:
        return self._positions[:, 1]

    @property
    def participants(self) -> np.ndarray:
        return self._participant

    def mark_participants(self, mask: np.ndarray) -> None:
        self._participant |= mask


class Nucleon:
    """One nucleon, viewed through its buffer."""

    __slots__ = ("_buffer", "_index")

    def __init__(self, buffer: NucleonBuffer, index: int):
        self._buffer = buffer
        self._index = index

    @property
    def x(self) -> float:
        return float(self._buffer.positions[self._index, 0])

    @property
    def y(self) -> float:
        return float(self._buffer.positions[self._index, 1])

    @property
    def z(self) -> float:
        return float(self._buffer.positions[self._index, 2])

    @property
    def is_participant(self) -> bool:
        return bool(self._buffer.participants[self._index])

    def set_participant(self) -> None:
        self._buffer.participants[self._index] = True

    def __repr__(self) -> str:
        return f"Nucleon(x={self.x:.3f}, y={self.y:.3f}, participant={self.is_participant})"


# -------------------------
# Interaction rule
# -------------------------

def compute_cross_sec_param(sigma_fm2: float, width: float) -> float:
    """Solve for x in  c - Ei(-e^x) + Ei(-e^(x-c)) = σ/(4πw^2),  c = 6^2/4.

    The left side is ∫ d^2b P(b) / (4πw^2) for the Gaussian model, with the
    integral cut at MAX_IMPACT_WIDTHS widths.
    """
    rhs = sigma_fm2 / (4.0 * np.pi * width * width)
    c = MAX_IMPACT_WIDTHS * MAX_IMPACT_WIDTHS / 4.0

    def f(x: float) -> float:
        return c - expi(-np.exp(x)) + expi(-np.exp(x - c)) - rhs

    lo, hi = -10.0, 20.0
    if f(hi) <= 0.0:
        raise ConfigurationError(
            f"cross section {sigma_fm2:.3f} fm^2 is too large for nucleon width {width} fm "
            f"(must be < {4.0 * np.pi * width * width * c:.3f} fm^2)"
        )
    if f(lo) >= 0.0:
        raise ConfigurationError(
            f"cross section {sigma_fm2:.3g} fm^2 is too small for nucleon width {width} fm"
        )
    return float(brentq(f, lo, hi, xtol=1e-12, maxiter=1000))


class NucleonCommon:
    """Run-wide nucleon-nucleon interaction parameters. Immutable after construction."""

    MODELS = ("gaussian", "black-disk")

    def __init__(
        self,
        cross_section_mb: float,
        nucleon_width: float = 0.5,
        *,
        model: str = "gaussian",
        fluctuation: float = 1.0,
        rng: Optional[np.random.Generator] = None,
    ):
        if model not in self.MODELS:
            raise ConfigurationError(f"Unknown interaction model '{model}'. Choose from {self.MODELS}.")
        if cross_section_mb <= 0.0:
            raise ConfigurationError(f"cross section must be > 0, got {cross_section_mb} mb")
        if nucleon_width <= 0.0:
            raise ConfigurationError(f"nucleon width must be > 0, got {nucleon_width} fm")

        self.model = model
        self.sigma_fm2 = mb_to_fm2(cross_section_mb)
        self.width = float(nucleon_width)
        self.fluctuation = float(fluctuation)
        self._rng = rng if rng is not None else np.random.default_rng()

        self._width_sq = self.width * self.width
        if model == "gaussian":
            self._cross_sec_param = compute_cross_sec_param(self.sigma_fm2, self.width)
            self._max_impact = MAX_IMPACT_WIDTHS * self.width
        else:
            self._cross_sec_param = None
            self._max_impact = float(np.sqrt(self.sigma_fm2 / np.pi))
        self._max_impact_sq = self._max_impact * self._max_impact

    def max_impact(self) -> float:
        """Largest pair distance [fm] at which two nucleons can interact."""
        return self._max_impact

    @property
    def cross_sec_param(self) -> Optional[float]:
        return self._cross_sec_param

    def collision_probability(self, distance_sq: np.ndarray) -> np.ndarray:
        """P(d) for squared transverse pair distance(s) d^2."""
        dsq = np.asarray(distance_sq, dtype=float)
        if self.model == "black-disk":
            return (dsq < self._max_impact_sq).astype(float)
        p = 1.0 - np.exp(-np.exp(self._cross_sec_param - 0.25 * dsq / self._width_sq))
        return np.where(dsq > self._max_impact_sq, 0.0, p)

    def participate(self, a: Nucleon, b: Nucleon) -> bool:
        """Test one pair; on a hit both nucleons become participants."""
        distance_sq = (a.x - b.x) ** 2 + (a.y - b.y) ** 2

        if self.model == "black-disk":
            hit = distance_sq < self._max_impact_sq
        else:
            # always consume one draw so this matches participate_all()
            u = self._rng.random()
            if distance_sq > self._max_impact_sq:
                return False
            one_minus_prob = np.exp(-np.exp(self._cross_sec_param - 0.25 * distance_sq / self._width_sq))
            hit = one_minus_prob < u

        if hit:
            a.set_participant()
            b.set_participant()
        return bool(hit)

    def participate_all(self, nuc_a, nuc_b) -> np.ndarray:
        """Test every (a, b) pair at once and mark participants.

        Returns the (len(a), len(b)) boolean hit matrix. Random draws are taken
        in the same row-major order as looping participate() over a then b.
        """
        dx = nuc_a.x[:, None] - nuc_b.x[None, :]
        dy = nuc_a.y[:, None] - nuc_b.y[None, :]
        dsq = dx * dx + dy * dy

        if self.model == "black-disk":
            hit = dsq < self._max_impact_sq
        else:
            u = self._rng.random(dsq.shape)
            one_minus_prob = np.exp(-np.exp(self._cross_sec_param - 0.25 * dsq / self._width_sq))
            hit = (dsq <= self._max_impact_sq) & (one_minus_prob < u)

        nuc_a.mark_participants(hit.any(axis=1))
        nuc_b.mark_participants(hit.any(axis=0))
        return hit

    def sample_fluctuations(self, n: int) -> np.ndarray:
        """Per-participant weights ~ Gamma(k, scale=1/k): mean 1, var 1/k."""
        n = int(n)
        if self.fluctuation <= 0.0:
            return np.ones(n, dtype=float)
        k = self.fluctuation
        return self._rng.gamma(shape=k, scale=1.0 / k, size=n)

    def __repr__(self) -> str:
        return (f"NucleonCommon(model={self.model!r}, sigma={self.sigma_fm2:.3f} fm^2, "
                f"w={self.width}, max_impact={self._max_impact:.3f} fm)")
