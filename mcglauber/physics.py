"""mcglauber/physics.py

Small, stable unit conversions and the nucleon-nucleon cross-section table.
Keep this file boring and well-tested.

Conventions:
- length: fm
- σ_NN inelastic: mb (input) and fm^2 (internal)
"""

from __future__ import annotations

import numpy as np
from dataclasses import dataclass

MB_TO_FM2 = 0.1  # 1 mb = 0.1 fm^2

# σ_NN used when neither a cross section nor a beam energy is configured
DEFAULT_CROSS_SECTION_MB = 64.0


def mb_to_fm2(sigma_mb: float) -> float:
    """Convert millibarn to fm^2."""
    return MB_TO_FM2 * float(sigma_mb)


@dataclass(frozen=True)
class SigmaNNTable:
    """Anchor points for σ_NN^inel(√s) used by common initial-condition setups.

    This is *not* a global PDG fit; it is a practical table.
    Override per project as needed.
    """
    anchors_mb: dict

    def sigma_mb(self, sNN_GeV: float) -> float:
        # Exact match -> return
        if sNN_GeV in self.anchors_mb:
            return float(self.anchors_mb[sNN_GeV])

        # Interpolate in log(s) vs σ for sanity across decades.
        s = np.array(sorted(self.anchors_mb.keys()), dtype=float)
        sig = np.array([self.anchors_mb[x] for x in s], dtype=float)

        if sNN_GeV < s.min() or sNN_GeV > s.max():
            raise ValueError(
                f"sNN={sNN_GeV} GeV outside sigma table range [{s.min()}, {s.max()}]. "
                "Provide cross_section_mb explicitly."
            )

        xs = np.log(s)
        x = np.log(float(sNN_GeV))
        return float(np.interp(x, xs, sig))


DEFAULT_SIGMA_NN = SigmaNNTable(
    anchors_mb={
        # RHIC
        200.0: 42.0,
        # LHC
        2760.0: 62.0,
        5020.0: 67.6,
        8160.0: 71.0,
    }
)
