# src/plotalgebra/render.py

"""
Matplotlib renderer.

``render`` runs the processing passes (smart defaults, grouping spread,
color indices) and draws every layer:

- a spec with ``layout == "grid"`` becomes a subplot matrix; each layer lands
  in the panel at ``(grid_row, grid_col)``;
- any other spec draws all of its layers into a single axes.

Marks are drawn by geometry functions registered with :func:`register_geom`
under the layer's ``plottype``.

Examples
--------
>>> import matplotlib
>>> matplotlib.use("Agg")
>>> import pandas as pd
>>> from plotalgebra.forms.algebra import d_cross
>>> from plotalgebra.render import render
>>> df = pd.DataFrame({"a": [1.0, 2.0, 3.0], "b": [2.0, 1.0, 0.0]})
>>> fig = render(d_cross(df, ["a", "b"], ["a", "b"]))
>>> len(fig.axes)
4
"""

from __future__ import annotations
from typing import Any, Callable, Dict, List, Mapping, Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from scipy import stats

from .config import DEFAULT_CONFIG, PlotConfig
from .forms.layer import Spec
from .log import get_logger
from .processing.defaults import smart_defaults
from .processing.spread import assign_color_indices, spread
from .processing.transforms import apply_transform

__all__ = [
    "GEOMS",
    "register_geom",
    "prepare",
    "render",
    "save",
]

logger = get_logger(__name__)

GeomFn = Callable[[Axes, pd.DataFrame, Mapping, str, PlotConfig], None]

GEOMS: Dict[str, GeomFn] = {}


def register_geom(name: str):
    """Decorator registering ``fn(ax, frame, layer, color, config)`` as a plottype."""
    def deco(fn: GeomFn) -> GeomFn:
        GEOMS[name] = fn
        return fn
    return deco


def _label(layer: Mapping) -> Optional[str]:
    v = layer.get("color_value")
    return None if v is None else str(v)


# ---------------------------------------------------------------------
# Geometries
# ---------------------------------------------------------------------
@register_geom("scatter")
def _scatter(ax, frame, layer, color, config):
    y = frame["y"] if "y" in frame else np.zeros(len(frame))
    ax.scatter(frame["x"], y, s=config.point_size, alpha=config.alpha,
               color=color, label=_label(layer))


@register_geom("line")
def _line(ax, frame, layer, color, config):
    frame = frame.sort_values("x", kind="mergesort")
    ax.plot(frame["x"], frame["y"], color=color, label=_label(layer))


@register_geom("histogram")
def _histogram(ax, frame, layer, color, config):
    if "count" not in frame:
        counts, edges = np.histogram(frame["x"].dropna().to_numpy(dtype=float),
                                     bins=layer.get("bins") or config.bins)
        frame = pd.DataFrame({"bin_left": edges[:-1], "bin_right": edges[1:], "count": counts})
    ax.bar(frame["bin_left"], frame["count"],
           width=frame["bin_right"] - frame["bin_left"], align="edge",
           color=color, alpha=config.alpha, label=_label(layer))


@register_geom("bar")
def _bar(ax, frame, layer, color, config):
    if "y" in frame:
        xs, heights = frame["x"], frame["y"]
    else:
        counts = frame["x"].value_counts(sort=False).sort_index()
        xs, heights = counts.index.astype(str), counts.to_numpy()
    ax.bar(xs, heights, color=color, alpha=config.alpha, label=_label(layer))


@register_geom("density")
def _density(ax, frame, layer, color, config):
    x = frame["x"].dropna().to_numpy(dtype=float)
    if np.unique(x).size < 2:
        logger.debug("density: fewer than two distinct values, skipping layer")
        return
    grid = np.linspace(x.min(), x.max(), 200)
    ax.plot(grid, stats.gaussian_kde(x)(grid), color=color, label=_label(layer))


# ---------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------
def prepare(spec: Any, config: PlotConfig = DEFAULT_CONFIG) -> Spec:
    """Smart defaults, then grouping spread, then color indices."""
    return assign_color_indices(spread(smart_defaults(spec, config)))


def _draw(ax: Axes, layer: Mapping, plot_data, config: PlotConfig) -> None:
    plottype = layer.get("plottype")
    if plottype not in GEOMS:
        raise ValueError(f"Unknown plottype {plottype!r}; expected one of {sorted(GEOMS)}")
    frame = apply_transform(layer, plot_data, config)
    GEOMS[plottype](ax, frame, layer, config.color_for(layer.get("color_index")), config)


def _finish_axes(ax: Axes, layers: List[Mapping]) -> None:
    if any(l.get("color_value") is not None for l in layers):
        handles, labels = ax.get_legend_handles_labels()
        if handles:
            # one entry per group even when several layers share a color
            uniq = dict(zip(labels, handles))
            ax.legend(list(uniq.values()), list(uniq.keys()), fontsize="small")


def render(spec: Any, config: PlotConfig = DEFAULT_CONFIG) -> Figure:
    """
    Draw a spec with matplotlib and return the figure.

    Raises
    ------
    ValueError
        If a layer's plottype has no registered geometry.
    """
    config = config or DEFAULT_CONFIG
    spec = prepare(spec, config)
    plot_data = spec.data

    if spec.layout == "grid":
        n_rows = 1 + max(l.get("grid_row", 0) for l in spec.layers)
        n_cols = 1 + max(l.get("grid_col", 0) for l in spec.layers)
        fig, axes = plt.subplots(
            n_rows, n_cols, squeeze=False,
            figsize=(config.panel_size * n_cols, config.panel_size * n_rows),
        )
        panels: Dict[tuple, List[Mapping]] = {}
        for l in spec.layers:
            panels.setdefault((l.get("grid_row", 0), l.get("grid_col", 0)), []).append(l)
        for (r, c), lyrs in panels.items():
            ax = axes[r][c]
            for l in lyrs:
                _draw(ax, l, plot_data, config)
            if r == n_rows - 1:
                ax.set_xlabel(str(lyrs[0].get("x")))
            if c == 0 and not lyrs[0].get("diagonal"):
                ax.set_ylabel(str(lyrs[0].get("y")))
        _finish_axes(axes[0][n_cols - 1], list(spec.layers))
    else:
        fig, ax = plt.subplots(figsize=(config.panel_size * 2, config.panel_size * 1.5))
        for l in spec.layers:
            _draw(ax, l, plot_data, config)
        first = spec.layers[0] if len(spec) else {}
        if first.get("x") is not None:
            ax.set_xlabel(str(first["x"]))
        if first.get("y") is not None:
            ax.set_ylabel(str(first["y"]))
        _finish_axes(ax, list(spec.layers))

    title = spec.props.get("title")
    if title:
        fig.suptitle(title)
    fig.tight_layout()
    logger.debug("render: %d layers, layout=%s", len(spec), spec.layout)
    return fig


def save(spec: Any, path: str, config: PlotConfig = DEFAULT_CONFIG, dpi: int = 150) -> Figure:
    """Render a spec and write it to ``path``; the figure is closed afterwards."""
    fig = render(spec, config)
    fig.savefig(path, dpi=dpi)
    plt.close(fig)
    return fig
