"""mcglauber/nucleus.py

Nuclei as event-by-event nucleon samplers.

A Nucleus keeps one NucleonBuffer for the whole run. Each call to
sample_nucleons(offset) clears the participant flags, redraws every nucleon
position and shifts the nucleus by `offset` along x (the impact-parameter
axis). Iteration order is the buffer order and never changes within an event.

Species:
  "p"                                    proton (point at the origin)
  "d"                                    deuteron (Hulthén)
  "O" "Cu" "Zr" "Ru" "Xe" "Au" "Pb"      spherical Woods–Saxon
  "Cu2" "Xe2" "Au2" "U" "U2"             deformed Woods–Saxon
"""

from __future__ import annotations

import logging
import numpy as np
from typing import Iterator, Optional

from .config import ConfigurationError
from .geometry import (
    SPECIES,
    HulthenSampler,
    WoodsSaxonParams,
    WoodsSaxonRadialSampler,
    enforce_min_distance,
    random_rotation,
    sample_deformed_ws,
    sample_spherical_ws,
    with_overrides,
)
from .nucleon import Nucleon, NucleonBuffer

logger = logging.getLogger(__name__)


class Nucleus:
    """Base class: fixed nucleon count, reusable storage, per-event sampling."""

    def __init__(self, size: int, radius: float, *, rng: Optional[np.random.Generator] = None):
        self._buffer = NucleonBuffer(size)
        self._radius = float(radius)
        self._rng = rng if rng is not None else np.random.default_rng()

    @staticmethod
    def create(
        species: str,
        nucleon_dmin: float = 0.0,
        a0: float = 0.0,
        beta2: Optional[float] = None,
        beta3: Optional[float] = None,
        beta4: Optional[float] = None,
        gamma: Optional[float] = None,
        *,
        rng: Optional[np.random.Generator] = None,
    ) -> "Nucleus":
        """Build a nucleus by species name.

        a0 > 0 replaces the Woods–Saxon diffuseness; any non-None deformation
        parameter replaces the species default (and can deform a spherical one).
        """
        name = species.strip()
        if name == "p":
            return Proton(rng=rng)
        if name == "d":
            return Deuteron(rng=rng)
        if name not in SPECIES:
            raise ConfigurationError(
                f"Unknown species '{species}'. Known: p, d, {', '.join(SPECIES)}."
            )

        params = with_overrides(SPECIES[name], a0=a0, beta2=beta2, beta3=beta3, beta4=beta4, gamma=gamma)
        if params.deformed:
            return DeformedWoodsSaxonNucleus(params, nucleon_dmin, rng=rng)
        return WoodsSaxonNucleus(params, nucleon_dmin, rng=rng)

    # ---- geometry ----

    def radius(self) -> float:
        return self._radius

    def __len__(self) -> int:
        return len(self._buffer)

    def __iter__(self) -> Iterator[Nucleon]:
        return iter(self._buffer)

    def __getitem__(self, i: int) -> Nucleon:
        return self._buffer[i]

    @property
    def positions(self) -> np.ndarray:
        return self._buffer.positions

    @property
    def x(self) -> np.ndarray:
        return self._buffer.x

    @property
    def y(self) -> np.ndarray:
        return self._buffer.y

    # ---- participants ----

    @property
    def participants(self) -> np.ndarray:
        return self._buffer.participants

    @property
    def npart(self) -> int:
        return int(np.count_nonzero(self._buffer.participants))

    def mark_participants(self, mask: np.ndarray) -> None:
        self._buffer.mark_participants(mask)

    # ---- sampling ----

    def sample_nucleons(self, offset: float) -> None:
        """Redraw this event's nucleons and shift them by `offset` along x."""
        self._buffer.reset()
        self._sample_positions(self._buffer.positions)
        self._buffer.positions[:, 0] += offset

    def _sample_positions(self, out: np.ndarray) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(A={len(self)}, radius={self._radius:.3f} fm)"


class Proton(Nucleus):
    """A single nucleon at the center."""

    def __init__(self, *, rng: Optional[np.random.Generator] = None):
        super().__init__(1, 0.0, rng=rng)

    def _sample_positions(self, out: np.ndarray) -> None:
        out[:] = 0.0


class Deuteron(Nucleus):
    """Proton and neutron at ±r/2, with r drawn from the Hulthén distribution."""

    def __init__(self, *, rng: Optional[np.random.Generator] = None):
        self._hulthen = HulthenSampler()
        super().__init__(2, self._hulthen.radius, rng=rng)

    def _sample_positions(self, out: np.ndarray) -> None:
        sep = self._hulthen.sample_separation(1, rng=self._rng)[0]
        out[0] = 0.5 * sep
        out[1] = -0.5 * sep


class WoodsSaxonNucleus(Nucleus):
    """Spherical Woods–Saxon nucleus with an optional minimum nucleon distance."""

    def __init__(self, params: WoodsSaxonParams, nucleon_dmin: float = 0.0, *,
                 rng: Optional[np.random.Generator] = None):
        self.params = params
        self.dmin = float(nucleon_dmin)
        super().__init__(params.A, params.radius, rng=rng)
        self._radial = WoodsSaxonRadialSampler(params.R, params.a)
        logger.debug("Woods-Saxon nucleus A=%d R=%.3f a=%.3f dmin=%.2f",
                     params.A, params.R, params.a, self.dmin)

    def _draw(self, n: int) -> np.ndarray:
        return sample_spherical_ws(self._radial, n, rng=self._rng)

    def _sample_positions(self, out: np.ndarray) -> None:
        out[:] = self._draw(len(out))
        enforce_min_distance(out, self.dmin, lambda: self._draw(1)[0])


class DeformedWoodsSaxonNucleus(WoodsSaxonNucleus):
    """Deformed Woods–Saxon nucleus, randomly oriented every event."""

    def _draw(self, n: int) -> np.ndarray:
        return sample_deformed_ws(self.params, n, rng=self._rng, rotate=False)

    def _sample_positions(self, out: np.ndarray) -> None:
        # place in the body frame (min distance included), then orient once
        super()._sample_positions(out)
        out[:] = random_rotation(self._rng).apply(out)
