"""mcglauber/centrality.py

Centrality classes from the event-by-event multiplicity proxy S.
In small systems this, not b, is the data-matching definition.
"""

from __future__ import annotations

import numpy as np
from typing import Any, Dict


def centrality_bins(S: np.ndarray, cent_edges: np.ndarray) -> Dict[str, Any]:
    """Return centrality bin edges in S and event indices for each bin."""
    S = np.asarray(S, dtype=float)
    if S.size == 0:
        raise ValueError("centrality_bins needs at least one event")
    # centrality: most central = largest S
    order = np.argsort(S, kind="stable")[::-1]
    S_sorted = S[order]

    edges = {}
    idx_bins = []
    for c0, c1 in zip(cent_edges[:-1], cent_edges[1:]):
        i0 = int(np.floor(c0 / 100.0 * len(S_sorted)))
        i1 = int(np.floor(c1 / 100.0 * len(S_sorted)))
        idx_bins.append(order[i0:i1])
        i0 = min(i0, len(S_sorted) - 1)
        edges[(c0, c1)] = (S_sorted[i0], S_sorted[i1 - 1] if i1 > i0 else S_sorted[i0])

    return {"cent_edges": cent_edges, "bins": idx_bins, "S_edges": edges}
