"""mcglauber/plotting.py

Publication-oriented matplotlib helpers.

Default choices:
- no grid
- no figure titles by default
- clean spines
- consistent fonts/sizes
"""

from __future__ import annotations

import matplotlib as mpl
import numpy as np
from typing import Optional


def set_pub_style():
    mpl.rcParams.update({
        "figure.figsize": (6.5, 4.2),
        "figure.dpi": 120,
        "savefig.dpi": 300,
        "axes.grid": False,
        "axes.spines.top": False,
        "axes.spines.right": False,
        "legend.frameon": False,
        "font.size": 12,
        "axes.titlesize": 12,
        "axes.labelsize": 12,
        "xtick.labelsize": 11,
        "ytick.labelsize": 11,
        "lines.linewidth": 2.0,
        "mathtext.fontset": "stix",
        "font.family": "DejaVu Sans",
    })


def style_ax(ax):
    ax.grid(False)
    ax.set_title("")
    for spine in ("top", "right"):
        ax.spines[spine].set_visible(False)


def add_panel_label(ax, label: str, *, x: float = 0.02, y: float = 0.98):
    """Bold "(a)"-style label in the upper-left corner of `ax`."""
    return ax.text(x, y, label, transform=ax.transAxes, ha="left", va="top",
                   fontsize=12, fontweight="bold")


def plot_impact_parameter(ax, b: np.ndarray, b_min: float, b_max: float, *,
                          bins: int = 40, panel: Optional[str] = None):
    """Histogram of sampled b against the flat-in-area density 2b/(b_max^2 - b_min^2)."""
    b = np.asarray(b, dtype=float)
    ax.hist(b, bins=bins, range=(b_min, b_max), density=True, histtype="step", label="sampled")
    if b_max > b_min:
        bb = np.linspace(b_min, b_max, 200)
        ax.plot(bb, 2.0 * bb / (b_max * b_max - b_min * b_min), label=r"$2b/(b_{max}^2-b_{min}^2)$")
    ax.set_xlabel(r"$b$ [fm]")
    ax.set_ylabel(r"$P(b)$")
    ax.legend()
    style_ax(ax)
    if panel:
        add_panel_label(ax, panel)
    return ax
