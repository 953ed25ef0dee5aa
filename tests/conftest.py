"""Pytest configuration and shared fixtures for mcglauber tests."""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from mcglauber.config import CollisionConfig


def black_disk_mb(d0: float) -> float:
    """Cross section [mb] whose black-disk radius is d0 [fm]."""
    return 10.0 * np.pi * d0 * d0


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def pp_config():
    """Point-like p+p, black disk of radius 1 fm, minimum-bias b_max."""
    return CollisionConfig(
        projectiles=("p", "p"),
        cross_section_mb=black_disk_mb(1.0),
        interaction_model="black-disk",
        n_events=1000,
        b_min=0.0,
        b_max=-1.0,
        random_seed=2015,
    )


@pytest.fixture
def pPb_config():
    """p+Pb with Gaussian nucleons."""
    return CollisionConfig(
        projectiles=("p", "Pb"),
        cross_section_mb=64.0,
        nucleon_width=0.5,
        n_events=20,
        random_seed=7,
    )
