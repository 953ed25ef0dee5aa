"""mcglauber/config.py

Resolved run parameters for a collision run.

Nothing here parses files or command lines: a `CollisionConfig` is built in
code (or by whatever front end you like) and handed to `Collider`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Optional, Tuple

from .physics import DEFAULT_CROSS_SECTION_MB, DEFAULT_SIGMA_NN


InteractionModel = Literal["gaussian", "black-disk"]


class ConfigurationError(ValueError):
    """Raised when run parameters cannot describe a valid collision system."""

    pass


@dataclass(frozen=True)
class CollisionConfig:
    projectiles: Tuple[str, str]  # e.g. ("Pb", "Pb"), ("p", "Pb"), ("d", "Au")

    # nucleon-nucleon interaction
    cross_section_mb: Optional[float] = None  # None -> from sqrt_s_nn, else 64 mb
    sqrt_s_nn: Optional[float] = None         # GeV
    nucleon_width: float = 0.5                # fm
    interaction_model: InteractionModel = "gaussian"
    fluctuation: float = 1.0                  # Gamma shape k; <= 0 disables

    # nucleus construction
    nucleon_min_dist: float = 0.0  # fm
    a0: float = 0.0                # Woods-Saxon diffuseness override, <= 0 keeps species default
    gamma_mean: Optional[float] = None
    gamma_std: float = 0.0
    beta2_mean: Optional[float] = None
    beta2_std: float = 0.0
    beta3: Optional[float] = None
    beta4: Optional[float] = None

    # event sampling
    n_events: int = 1
    b_min: float = 0.0
    b_max: float = -1.0  # negative -> minimum-bias default
    calc_ncoll: bool = True
    calc_attempts: bool = True
    random_seed: int = -1  # <= 0 -> OS entropy
    attempt_warning: int = 100000  # soft cap on rejection attempts, <= 0 disables

    def sigma_nn_mb(self) -> float:
        """Inelastic nucleon-nucleon cross section [mb] for this run."""
        if self.cross_section_mb is not None:
            return float(self.cross_section_mb)
        if self.sqrt_s_nn is not None:
            try:
                return DEFAULT_SIGMA_NN.sigma_mb(float(self.sqrt_s_nn))
            except ValueError as exc:
                raise ConfigurationError(str(exc)) from exc
        return DEFAULT_CROSS_SECTION_MB

    def validate(self) -> List[str]:
        errors = []
        if len(self.projectiles) != 2:
            errors.append(f"exactly two projectiles required, got {len(self.projectiles)}")
        if self.n_events < 0:
            errors.append(f"n_events={self.n_events} must be >= 0")
        if self.b_min < 0.0:
            errors.append(f"b_min={self.b_min} must be >= 0")
        if self.b_max >= 0.0 and self.b_max < self.b_min:
            errors.append(f"b_max={self.b_max} must be >= b_min={self.b_min}")
        if self.nucleon_width <= 0.0:
            errors.append(f"nucleon_width={self.nucleon_width} must be > 0")
        if self.nucleon_min_dist < 0.0:
            errors.append(f"nucleon_min_dist={self.nucleon_min_dist} must be >= 0")
        if self.cross_section_mb is not None and self.cross_section_mb <= 0.0:
            errors.append(f"cross_section_mb={self.cross_section_mb} must be > 0")
        if self.gamma_std < 0.0 or self.beta2_std < 0.0:
            errors.append("deformation spreads must be >= 0")
        return errors


def validate_config(config: CollisionConfig) -> CollisionConfig:
    """Raise ConfigurationError listing every problem with `config`."""
    errors = config.validate()
    if errors:
        raise ConfigurationError(
            f"Configuration validation failed with {len(errors)} error(s):\n"
            + "\n".join(f"  - {err}" for err in errors)
        )
    return config
