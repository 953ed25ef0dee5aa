"""Monte Carlo Glauber collision geometry.

Event-by-event initial-state geometry of heavy-ion collisions:

- nuclei as nucleon samplers (p, d, spherical and deformed Woods–Saxon)
- nucleon-nucleon participation (Gaussian overlap or black disk)
- minimum-bias impact-parameter sampling with rejection of empty events
- participant observables (Npart, Ncoll, multiplicity proxy, ε_n)
- centrality classes from the multiplicity proxy

All distances are in fm, cross sections in mb unless stated otherwise.
"""

from .collider import Collider, CollisionSample, run_collisions
from .config import CollisionConfig, ConfigurationError
from .event import Event, ParticipantProfile
from .nucleon import Nucleon, NucleonBuffer, NucleonCommon
from .nucleus import Nucleus
from .output import EventRecorder
from .random_stream import make_rng, spawn_streams

__all__ = [
    "Collider",
    "CollisionSample",
    "run_collisions",
    "CollisionConfig",
    "ConfigurationError",
    "Event",
    "ParticipantProfile",
    "Nucleon",
    "NucleonBuffer",
    "NucleonCommon",
    "Nucleus",
    "EventRecorder",
    "make_rng",
    "spawn_streams",
]
