"""mcglauber/collider.py

Minimum-bias collision sampling and the event loop.

For every event the Collider
- draws b from P(b) db ∝ b db on [b_min, b_max],
- places nucleus A at +asymmetry·b and nucleus B at (asymmetry - 1)·b along x,
- tests every nucleon pair (A × B) with the shared NucleonCommon,
- and starts over with a fresh b and fresh nucleons if nothing collided.

The accepted nuclei (positions + participant flags) go to the profile stage,
and (n, b, ncoll, n_attempts, event) goes to the output callable.

The asymmetry rA/(rA + rB) keeps the larger nucleus closer to the origin, so
the participant region of e.g. p+Pb sits near the center of a profile grid.
"""

from __future__ import annotations

import logging
import numpy as np
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .config import CollisionConfig, ConfigurationError, validate_config
from .event import ParticipantProfile
from .nucleon import NucleonCommon
from .nucleus import Nucleus
from .output import EventRecorder
from .random_stream import make_rng

logger = logging.getLogger(__name__)

# below this radius sum (fm) both nuclei count as point-like
POINT_LIKE_RADIUS = 0.1


@dataclass(frozen=True)
class CollisionSample:
    b: float          # impact parameter [fm]
    ncoll: int        # binary collisions, 0 if not counted
    n_attempts: int   # rejection-loop attempts, 0 if not counted


# -------------------------
# Construction helpers
# -------------------------

def create_nucleus(config: CollisionConfig, index: int, *, rng: np.random.Generator) -> Nucleus:
    """Build projectile `index` of the config, sampling γ and β2 if configured."""
    gamma = None
    if config.gamma_mean is not None:
        gamma = float(rng.normal(config.gamma_mean, config.gamma_std))
    beta2 = None
    if config.beta2_mean is not None:
        beta2 = float(rng.normal(config.beta2_mean, config.beta2_std))

    return Nucleus.create(
        config.projectiles[index],
        config.nucleon_min_dist,
        config.a0,
        beta2,
        config.beta3,
        config.beta4,
        gamma,
        rng=rng,
    )


def determine_bmax(b_max: float, nucleus_a: Nucleus, nucleus_b: Nucleus, nucleon_common: NucleonCommon) -> float:
    """Configured b_max if non-negative, else the minimum-bias default rA + rB + max_impact."""
    if b_max < 0.0:
        b_max = nucleus_a.radius() + nucleus_b.radius() + nucleon_common.max_impact()
    return float(b_max)


def determine_asymmetry(nucleus_a: Nucleus, nucleus_b: Nucleus) -> float:
    """rA/(rA + rB), or 1/2 when both nuclei are point-like."""
    rA = nucleus_a.radius()
    rB = nucleus_b.radius()
    total = rA + rB
    if total < POINT_LIKE_RADIUS:
        return 0.5
    return rA / total


# -------------------------
# Collider
# -------------------------

class Collider:
    """Owns both nuclei, the nucleon-pair rule and the run's random stream."""

    def __init__(
        self,
        config: CollisionConfig,
        *,
        profile=None,
        rng: Optional[np.random.Generator] = None,
    ):
        validate_config(config)
        self.config = config
        self.rng = rng if rng is not None else make_rng(config.random_seed)

        self.nucleus_a = create_nucleus(config, 0, rng=self.rng)
        self.nucleus_b = create_nucleus(config, 1, rng=self.rng)
        self.nucleon_common = NucleonCommon(
            config.sigma_nn_mb(),
            config.nucleon_width,
            model=config.interaction_model,
            fluctuation=config.fluctuation,
            rng=self.rng,
        )

        self.n_events = int(config.n_events)
        self.calc_ncoll = bool(config.calc_ncoll)
        self.calc_attempts = bool(config.calc_attempts)
        self.attempt_warning = int(config.attempt_warning)
        self.b_min = float(config.b_min)
        self.b_max = determine_bmax(config.b_max, self.nucleus_a, self.nucleus_b, self.nucleon_common)
        if self.b_max < self.b_min:
            raise ConfigurationError(f"b_max={self.b_max:.3f} fm is below b_min={self.b_min:.3f} fm")
        self.asymmetry = determine_asymmetry(self.nucleus_a, self.nucleus_b)

        self.profile = profile if profile is not None else ParticipantProfile()

        logger.info(
            "Collider %s+%s: b in [%.3f, %.3f] fm, asymmetry=%.3f, %s",
            config.projectiles[0], config.projectiles[1],
            self.b_min, self.b_max, self.asymmetry, self.nucleon_common,
        )

    def sample_impact_parameter(self) -> float:
        """b from P(b) db ∝ b db, i.e. uniform in area on [b_min, b_max]."""
        bmin_sq = self.b_min * self.b_min
        return float(np.sqrt(bmin_sq + (self.b_max * self.b_max - bmin_sq) * self.rng.random()))

    def sample_collision(self) -> CollisionSample:
        """Sample b and nucleons until at least one nucleon pair collides.

        Leaves both nuclei in the accepted state (positions and participants).
        """
        ncoll = 0
        n_attempts = 0
        attempts = 0
        collision = False

        while not collision:
            b = self.sample_impact_parameter()

            self.nucleus_a.sample_nucleons(self.asymmetry * b)
            self.nucleus_b.sample_nucleons((self.asymmetry - 1.0) * b)

            # exhaustive scan: every pair is tested even after the first hit
            hits = self.nucleon_common.participate_all(self.nucleus_a, self.nucleus_b)
            n_hits = int(np.count_nonzero(hits))
            collision = n_hits > 0
            if self.calc_ncoll:
                ncoll = n_hits
            if self.calc_attempts:
                n_attempts += 1

            attempts += 1
            if not collision and attempts == self.attempt_warning:
                logger.warning(
                    "%d attempts without a collision; b_max=%.3f fm may far exceed the interaction range",
                    attempts, self.b_max,
                )

        return CollisionSample(b=b, ncoll=ncoll, n_attempts=n_attempts)

    def run_events(self, output: Optional[Callable[..., Any]] = None):
        """Main event loop. Returns the output callable (an EventRecorder by default).

        Errors raised by `output` end the run.
        """
        if output is None:
            output = EventRecorder(harmonics=getattr(self.profile, "harmonics", ()))

        for n in range(self.n_events):
            sample = self.sample_collision()
            event = self.profile.compute(self.nucleus_a, self.nucleus_b, self.nucleon_common)
            logger.debug("event %d: b=%.3f ncoll=%d attempts=%d", n, sample.b, sample.ncoll, sample.n_attempts)
            output(n, sample.b, sample.ncoll, sample.n_attempts, event)

        return output


def run_collisions(config: CollisionConfig, **kwargs) -> Dict[str, Any]:
    """Run `config.n_events` events and return event-level arrays.

    Returns dict with arrays:
      event, b, Ncoll, n_attempts, Npart, S, ecc{n}
    """
    collider = Collider(config, **kwargs)
    return collider.run_events().to_arrays()
