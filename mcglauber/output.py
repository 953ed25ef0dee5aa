"""mcglauber/output.py

In-memory output stage. An EventRecorder is called once per event by
Collider.run_events and turns the run into numpy arrays at the end.
"""

from __future__ import annotations

import numpy as np
from typing import Any, Dict, List, Sequence


class EventRecorder:
    """Collect (n, b, ncoll, n_attempts, event) rows.

    `harmonics` names the ecc{n} columns; they are emitted (empty) even for a
    run without events.
    """

    def __init__(self, harmonics: Sequence[int] = (2, 3, 4)):
        self.harmonics = tuple(int(n) for n in harmonics)
        self._rows: List[tuple] = []

    def __call__(self, n: int, b: float, ncoll: int, n_attempts: int, event) -> None:
        self._rows.append((int(n), float(b), int(ncoll), int(n_attempts), event))

    def __len__(self) -> int:
        return len(self._rows)

    def to_arrays(self) -> Dict[str, Any]:
        """Return dict with arrays: event, b, Ncoll, n_attempts, Npart, S, ecc{n}.

        Npart, S and ecc{n} are left out when the profile stage produced no Event.
        """
        out: Dict[str, Any] = {
            "event": np.array([r[0] for r in self._rows], dtype=int),
            "b": np.array([r[1] for r in self._rows], dtype=float),
            "Ncoll": np.array([r[2] for r in self._rows], dtype=int),
            "n_attempts": np.array([r[3] for r in self._rows], dtype=int),
        }
        events = [r[4] for r in self._rows]
        if all(e is not None for e in events):
            out["Npart"] = np.array([e.npart for e in events], dtype=int)
            out["S"] = np.array([e.multiplicity for e in events], dtype=float)
            for n in self.harmonics:
                out[f"ecc{n}"] = np.array([e.eccentricity[n] for e in events], dtype=float)
        return out
