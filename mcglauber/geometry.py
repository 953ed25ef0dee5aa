"""mcglauber/geometry.py

Nuclear geometry primitives used to place nucleons:
- Woods–Saxon parameters (spherical and deformed) and the species table
- tabulated-CDF radial sampler for spherical Woods–Saxon nuclei
- rejection sampler for deformed Woods–Saxon nuclei (β2, γ, β3, β4)
- deuteron pn separation via the Hulthén wavefunction

All distances in fm.
"""

from __future__ import annotations

import numpy as np
from dataclasses import dataclass, replace
from typing import Dict

from scipy.spatial.transform import Rotation


# -------------------------
# Woods–Saxon nucleus
# -------------------------

@dataclass(frozen=True)
class WoodsSaxonParams:
    """Woods–Saxon parameters.

    rho(r, θ, φ) ∝ 1 / (1 + exp((r - R(θ, φ))/a))

    R(θ, φ) = R [1 + β2 (cos γ Y20 + sin γ Y22) + β3 Y30 + β4 Y40]
    """
    A: int
    R: float
    a: float
    beta2: float = 0.0
    beta3: float = 0.0
    beta4: float = 0.0
    gamma: float = 0.0  # triaxiality [rad]

    @property
    def deformed(self) -> bool:
        return any(v != 0.0 for v in (self.beta2, self.beta3, self.beta4))

    @property
    def radius(self) -> float:
        """Geometric extent used for impact-parameter bounds."""
        return self.R + 3.0 * self.a


# Nuclear charge-density fits commonly used for initial conditions.
SPECIES: Dict[str, WoodsSaxonParams] = {
    "O": WoodsSaxonParams(A=16, R=2.608, a=0.513),
    "Cu": WoodsSaxonParams(A=62, R=4.20, a=0.596),
    "Cu2": WoodsSaxonParams(A=62, R=4.20, a=0.596, beta2=0.162, beta4=-0.006),
    "Zr": WoodsSaxonParams(A=96, R=5.02, a=0.46),
    "Ru": WoodsSaxonParams(A=96, R=5.085, a=0.46),
    "Xe": WoodsSaxonParams(A=129, R=5.42, a=0.57),
    "Xe2": WoodsSaxonParams(A=129, R=5.42, a=0.57, beta2=0.162, beta4=-0.003),
    "Au": WoodsSaxonParams(A=197, R=6.38, a=0.535),
    "Au2": WoodsSaxonParams(A=197, R=6.38, a=0.535, beta2=-0.131, beta4=-0.031),
    "Pb": WoodsSaxonParams(A=208, R=6.62, a=0.546),
    "U": WoodsSaxonParams(A=238, R=6.81, a=0.60, beta2=0.280, beta4=0.093),
    "U2": WoodsSaxonParams(A=238, R=6.86, a=0.42, beta2=0.265, beta4=0.000),
}


def with_overrides(params: WoodsSaxonParams, *, a0: float = 0.0, **deformation) -> WoodsSaxonParams:
    """Copy of `params` with a positive a0 replacing the diffuseness and any
    non-None deformation parameter (beta2, beta3, beta4, gamma) replacing the default."""
    changes = {k: float(v) for k, v in deformation.items() if v is not None}
    if a0 > 0.0:
        changes["a"] = float(a0)
    return replace(params, **changes) if changes else params


class WoodsSaxonRadialSampler:
    """Sample radii with PDF ∝ r^2 / (1 + exp((r-R)/a)) from a tabulated CDF."""

    def __init__(self, R: float, a: float, *, Nr: int = 20001):
        rmax = R + 10.0 * a
        r = np.linspace(0.0, rmax, Nr)
        P = r * r / (1.0 + np.exp((r - R) / a))
        cdf = np.cumsum(P)
        cdf /= cdf[-1]
        self._r = r
        self._cdf = cdf

    def sample(self, n: int, *, rng: np.random.Generator) -> np.ndarray:
        return np.interp(rng.random(n), self._cdf, self._r)


def isotropic_directions(n: int, *, rng: np.random.Generator) -> np.ndarray:
    """(n, 3) unit vectors uniform on the sphere."""
    cos_th = rng.uniform(-1.0, 1.0, size=n)
    phi = rng.uniform(0.0, 2.0 * np.pi, size=n)
    sin_th = np.sqrt(1.0 - cos_th * cos_th)
    return np.stack([sin_th * np.cos(phi), sin_th * np.sin(phi), cos_th], axis=1)


def sample_spherical_ws(sampler: WoodsSaxonRadialSampler, n: int, *, rng: np.random.Generator) -> np.ndarray:
    """(n, 3) nucleon positions from a spherical Woods–Saxon."""
    r = sampler.sample(n, rng=rng)
    return r[:, None] * isotropic_directions(n, rng=rng)


# -------------------------
# Deformed Woods–Saxon
# -------------------------

def deformed_surface(params: WoodsSaxonParams, cos_th: np.ndarray, phi: np.ndarray) -> np.ndarray:
    """R(θ, φ) with real spherical harmonics."""
    c = cos_th
    c2 = c * c
    s2 = 1.0 - c2
    Y20 = np.sqrt(5.0 / (16.0 * np.pi)) * (3.0 * c2 - 1.0)
    Y22 = 0.25 * np.sqrt(15.0 / np.pi) * s2 * np.cos(2.0 * phi)
    Y30 = 0.25 * np.sqrt(7.0 / np.pi) * (5.0 * c2 * c - 3.0 * c)
    Y40 = (3.0 / 16.0) * np.sqrt(1.0 / np.pi) * (35.0 * c2 * c2 - 30.0 * c2 + 3.0)
    g = params.gamma
    return params.R * (
        1.0
        + params.beta2 * (np.cos(g) * Y20 + np.sin(g) * Y22)
        + params.beta3 * Y30
        + params.beta4 * Y40
    )


def random_rotation(rng: np.random.Generator) -> Rotation:
    """Uniformly random 3D rotation (normalized Gaussian quaternion)."""
    q = rng.normal(size=4)
    return Rotation.from_quat(q / np.linalg.norm(q))


def sample_deformed_ws(params: WoodsSaxonParams, n: int, *, rng: np.random.Generator,
                       rotate: bool = True) -> np.ndarray:
    """(n, 3) nucleon positions from a deformed Woods–Saxon, randomly oriented
    unless `rotate` is False (body frame).

    Rejection sampling: r uniform in volume up to rmax, direction isotropic,
    accepted with probability 1/(1 + exp((r - R(θ,φ))/a)).
    """
    rmax = params.R * (1.0 + 1.2 * abs(params.beta2) + 0.75 * abs(params.beta3)
                       + 0.85 * abs(params.beta4)) + 10.0 * params.a
    out = np.empty((n, 3), dtype=float)
    filled = 0
    while filled < n:
        m = 2 * (n - filled) + 16
        r = rmax * np.cbrt(rng.random(m))
        cos_th = rng.uniform(-1.0, 1.0, size=m)
        phi = rng.uniform(0.0, 2.0 * np.pi, size=m)
        u = rng.random(m)
        accept = u < 1.0 / (1.0 + np.exp((r - deformed_surface(params, cos_th, phi)) / params.a))

        r, cos_th, phi = r[accept], cos_th[accept], phi[accept]
        k = min(r.size, n - filled)
        sin_th = np.sqrt(1.0 - cos_th[:k] ** 2)
        out[filled:filled + k, 0] = r[:k] * sin_th * np.cos(phi[:k])
        out[filled:filled + k, 1] = r[:k] * sin_th * np.sin(phi[:k])
        out[filled:filled + k, 2] = r[:k] * cos_th[:k]
        filled += k

    if not rotate:
        return out
    return random_rotation(rng).apply(out)


def enforce_min_distance(positions: np.ndarray, dmin: float, redraw, *, max_tries: int = 1000) -> np.ndarray:
    """Redraw nucleons (in place) that land closer than dmin to an earlier one.

    `redraw()` must return one fresh (3,) position. After `max_tries` the last
    draw is kept.
    """
    if dmin <= 0.0:
        return positions
    dmin_sq = dmin * dmin
    for i in range(1, positions.shape[0]):
        for _ in range(max_tries):
            d = positions[:i] - positions[i]
            if np.min(np.einsum("ij,ij->i", d, d)) >= dmin_sq:
                break
            positions[i] = redraw()
    return positions


# -------------------------
# Deuteron: Hulthén sampling
# -------------------------

@dataclass(frozen=True)
class HulthenParams:
    """Hulthén parameters (fm^-1)."""
    a: float = 0.228
    b: float = 1.18


class HulthenSampler:
    """Sample the pn separation in a deuteron with a random 3D orientation.

    We use the Hulthén wavefunction ψ(r) ∝ (e^{-ar} - e^{-br})/r.
    The radial probability density for r is ∝ (e^{-ar} - e^{-br})^2.
    """

    def __init__(self, params: HulthenParams = HulthenParams(), *, rmax: float = 30.0, Nr: int = 200000):
        self.p = params
        r = np.linspace(1e-5, rmax, Nr)
        u = (np.exp(-self.p.a * r) - np.exp(-self.p.b * r))
        P = u * u
        cdf = np.cumsum(P) * (r[1] - r[0])
        cdf /= cdf[-1]
        self._r = r
        self._cdf = cdf

    @property
    def radius(self) -> float:
        """Half-separation where the density has dropped to 1%."""
        return float(-np.log(0.01) / (4.0 * self.p.a))

    def sample_separation(self, n: int, *, rng: np.random.Generator) -> np.ndarray:
        """(n, 3) pn separation vectors."""
        r = np.interp(rng.random(n), self._cdf, self._r)
        return r[:, None] * isotropic_directions(n, rng=rng)
