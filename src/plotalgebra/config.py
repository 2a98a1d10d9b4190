# src/plotalgebra/config.py

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

"""
Configuration objects for smart defaults and rendering.

This module centralizes the user-tunable knobs that the inference pass and
the renderer consult: which plot type each structural case receives, which
aesthetics a blend propagates, and the visual theme handed to matplotlib.

The primary entry point is :class:`PlotConfig`, a small dataclass with sane
defaults. Treat it as an immutable snapshot; build a new one rather than
mutating it mid-pipeline.

Examples
--------
>>> from plotalgebra.config import PlotConfig
>>> cfg = PlotConfig(bins=20, diagonal_plottype="density")
>>> cfg.bins
20
>>> cfg.diagonal_plottype
'density'
"""

__all__ = [
    "PlotConfig",
    "DEFAULT_CONFIG",
    "GGPLOT_PALETTE",
]

GGPLOT_PALETTE: Tuple[str, ...] = (
    "#F8766D", "#00BA38", "#619CFF", "#F564E3",
    "#00BFC4", "#FF9999", "#66CC99", "#9999FF",
)


@dataclass(frozen=True)
class PlotConfig:
    """
    Knobs used by role inference, defaults, transforms, and rendering.

    Parameters
    ----------
    diagonal_plottype : str, default="histogram"
        Plot type for layers whose x and y name the same column.
    off_diagonal_plottype : str, default="scatter"
        Plot type for layers with two distinct positional roles.
    univariate_plottype : str, default="histogram"
        Plot type for layers with an x role and no y role.
    inheritable_keys : tuple[str, ...], default=("x", "y", "color")
        Keys that later layers of a blend inherit from the first layer.
    bins : int, default=15
        Number of histogram bins handed to numpy/matplotlib.
    smooth_window : int, default=5
        Rolling-window size of the ``smooth`` transform.
    palette : tuple[str, ...]
        Categorical colors, indexed by ``color_index`` modulo its length.
    default_color : str, default="#333333"
        Mark color for layers without a color group.
    panel_size : float, default=2.5
        Size in inches of one grid panel (single plots use twice this width).
    alpha : float, default=0.7
        Mark opacity.
    point_size : float, default=12.0
        Marker area passed to ``Axes.scatter``.

    Notes
    -----
    Validation is limited to the numeric knobs; plot type names are checked
    by the renderer, which owns the geometry registry.
    """

    # Smart defaults
    diagonal_plottype: str = "histogram"
    off_diagonal_plottype: str = "scatter"
    univariate_plottype: str = "histogram"
    inheritable_keys: Tuple[str, ...] = ("x", "y", "color")

    # Statistical transforms
    bins: int = 15
    smooth_window: int = 5

    # Theme
    palette: Tuple[str, ...] = GGPLOT_PALETTE
    default_color: str = "#333333"
    panel_size: float = 2.5
    alpha: float = 0.7
    point_size: float = 12.0

    def __post_init__(self):
        if self.bins < 1:
            raise ValueError("bins must be ≥ 1")
        if self.smooth_window < 1:
            raise ValueError("smooth_window must be ≥ 1")
        if not self.palette:
            raise ValueError("palette must contain at least one color")
        if self.panel_size <= 0:
            raise ValueError("panel_size must be > 0")
        if not 0.0 <= self.alpha <= 1.0:
            raise ValueError("alpha must lie in [0, 1]")

    def defaults_table(self) -> dict:
        """Return the structural defaults as ``{case: {"plottype": ...}}``."""
        return {
            "diagonal": {"plottype": self.diagonal_plottype},
            "off_diagonal": {"plottype": self.off_diagonal_plottype},
            "univariate": {"plottype": self.univariate_plottype},
        }

    def color_for(self, index) -> str:
        """Palette color for a color index; ``None`` gives the default color."""
        if index is None:
            return self.default_color
        return self.palette[int(index) % len(self.palette)]


DEFAULT_CONFIG = PlotConfig()
