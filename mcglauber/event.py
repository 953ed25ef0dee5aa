"""mcglauber/event.py

Reference profile stage: turns the post-collision nuclei into per-event
observables from the participant nucleons alone.

- Npart
- multiplicity proxy S = ½ Σ w_i  (wounded nucleons, Gamma-fluctuated weights)
- participant eccentricities ε_n = |Σ w r^n e^{inφ}| / Σ w r^n about the
  weighted centroid

Any object with compute(nucleus_a, nucleus_b, nucleon_common) -> event can
replace ParticipantProfile in a Collider.
"""

from __future__ import annotations

import numpy as np
from dataclasses import dataclass, field
from typing import Dict, Sequence


@dataclass(frozen=True)
class Event:
    npart: int
    multiplicity: float
    eccentricity: Dict[int, float] = field(default_factory=dict)


def participant_eccentricities(xy: np.ndarray, w: np.ndarray, harmonics: Sequence[int]) -> Dict[int, float]:
    """Weighted ε_n of transverse points `xy` (N, 2); zero without spread."""
    ecc = {int(n): 0.0 for n in harmonics}
    wsum = float(w.sum())
    if xy.shape[0] < 2 or wsum <= 0.0:
        return ecc

    xc = xy - (w[:, None] * xy).sum(axis=0) / wsum
    r = np.hypot(xc[:, 0], xc[:, 1])
    phi = np.arctan2(xc[:, 1], xc[:, 0])
    for n in ecc:
        rn = w * r ** n
        den = rn.sum()
        if den > 0.0:
            ecc[n] = float(np.abs(np.sum(rn * np.exp(1j * n * phi))) / den)
    return ecc


class ParticipantProfile:
    """Compute an Event from the participant nucleons of both nuclei."""

    def __init__(self, harmonics: Sequence[int] = (2, 3, 4)):
        self.harmonics = tuple(int(n) for n in harmonics)

    def compute(self, nucleus_a, nucleus_b, nucleon_common) -> Event:
        xy = np.concatenate([
            nucleus_a.positions[nucleus_a.participants, :2],
            nucleus_b.positions[nucleus_b.participants, :2],
        ])
        npart = xy.shape[0]
        w = nucleon_common.sample_fluctuations(npart)

        return Event(
            npart=int(npart),
            multiplicity=0.5 * float(w.sum()),
            eccentricity=participant_eccentricities(xy, w, self.harmonics),
        )
