# src/plotalgebra/processing/transforms.py

"""
Statistical transforms applied to a layer before drawing.

Each transform turns a layer's resolved data into a small DataFrame that the
renderer draws directly:

- ``identity`` : columns ``x`` (and ``y`` when the layer has one)
- ``bin``      : ``bin_left``, ``bin_right``, ``bin_center``, ``count``
  via :func:`numpy.histogram`
- ``linear``   : two endpoints ``x``, ``y`` of the least-squares line
  from :func:`scipy.stats.linregress`
- ``smooth``   : ``x``, ``y`` rolling mean of y sorted by x

Transforms are looked up in a registry; new ones are added with
:func:`register_transform`.

Examples
--------
>>> import pandas as pd
>>> from plotalgebra.processing.transforms import apply_transform
>>> df = pd.DataFrame({"a": [0.0, 1.0, 2.0], "b": [1.0, 3.0, 5.0]})
>>> apply_transform({"data": df, "x": "a", "y": "b", "transformation": "linear"})["y"].round(6).tolist()
[1.0, 5.0]
"""

from __future__ import annotations
from typing import Callable, Dict, Mapping, Optional

import numpy as np
import pandas as pd
from scipy import stats

from ..config import DEFAULT_CONFIG, PlotConfig
from ..errors import MissingRoleError
from ..log import get_logger
from .validate import resolve_column

__all__ = [
    "TRANSFORMS",
    "register_transform",
    "apply_transform",
    "identity",
    "bin_counts",
    "linear_fit",
    "rolling_smooth",
]

logger = get_logger(__name__)

TransformFn = Callable[[Mapping, Optional[pd.DataFrame], PlotConfig], pd.DataFrame]

TRANSFORMS: Dict[str, TransformFn] = {}


def register_transform(name: str):
    """Decorator registering ``fn(layer, plot_data, config)`` under ``name``."""
    def deco(fn: TransformFn) -> TransformFn:
        TRANSFORMS[name] = fn
        return fn
    return deco


def _column(layer: Mapping, role: str, plot_data: Optional[pd.DataFrame]) -> pd.Series:
    if layer.get(role) is None:
        raise MissingRoleError(role, layer)
    return resolve_column(layer, layer[role], plot_data)


def _xy(layer: Mapping, plot_data: Optional[pd.DataFrame], need_y: bool = False) -> pd.DataFrame:
    x = _column(layer, "x", plot_data)
    if layer.get("y") is None and not need_y:
        return pd.DataFrame({"x": x.to_numpy()})
    y = _column(layer, "y", plot_data)
    return pd.DataFrame({"x": x.to_numpy(), "y": y.to_numpy()})


# ---------------------------------------------------------------------
# Built-in transforms
# ---------------------------------------------------------------------
@register_transform("identity")
def identity(layer: Mapping, plot_data: Optional[pd.DataFrame] = None,
             config: PlotConfig = DEFAULT_CONFIG) -> pd.DataFrame:
    """Raw ``x``/``y`` values."""
    return _xy(layer, plot_data)


@register_transform("bin")
def bin_counts(layer: Mapping, plot_data: Optional[pd.DataFrame] = None,
               config: PlotConfig = DEFAULT_CONFIG) -> pd.DataFrame:
    """
    Histogram of the x column.

    The bin count is the layer's ``bins`` if set, else ``config.bins``.
    NaNs are dropped before binning.
    """
    x = _column(layer, "x", plot_data).dropna().to_numpy(dtype=float)
    bins = layer.get("bins") or config.bins
    counts, edges = np.histogram(x, bins=bins)
    return pd.DataFrame({
        "bin_left": edges[:-1],
        "bin_right": edges[1:],
        "bin_center": (edges[:-1] + edges[1:]) / 2.0,
        "count": counts,
    })


@register_transform("linear")
def linear_fit(layer: Mapping, plot_data: Optional[pd.DataFrame] = None,
               config: PlotConfig = DEFAULT_CONFIG) -> pd.DataFrame:
    """
    Least-squares line evaluated at min(x) and max(x).

    Rows with a NaN in either column are dropped. Fewer than two distinct x
    values make the fit undefined and yield an empty frame.
    """
    xy = _xy(layer, plot_data, need_y=True).dropna().astype(float)
    if xy["x"].nunique() < 2:
        logger.debug("linear: fewer than two distinct x values, nothing to fit")
        return pd.DataFrame({"x": [], "y": []})
    fit = stats.linregress(xy["x"], xy["y"])
    xs = np.array([xy["x"].min(), xy["x"].max()])
    return pd.DataFrame({"x": xs, "y": fit.intercept + fit.slope * xs})


@register_transform("smooth")
def rolling_smooth(layer: Mapping, plot_data: Optional[pd.DataFrame] = None,
                   config: PlotConfig = DEFAULT_CONFIG) -> pd.DataFrame:
    """Centered rolling mean of y over x-sorted rows (``window`` or ``config.smooth_window``)."""
    xy = _xy(layer, plot_data, need_y=True).dropna().sort_values("x", kind="mergesort")
    window = layer.get("window") or config.smooth_window
    y = xy["y"].rolling(window, center=True, min_periods=1).mean()
    return pd.DataFrame({"x": xy["x"].to_numpy(), "y": y.to_numpy()})


# ---------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------
def apply_transform(layer: Mapping, plot_data: Optional[pd.DataFrame] = None,
                    config: PlotConfig = DEFAULT_CONFIG) -> pd.DataFrame:
    """
    Run the layer's ``transformation`` (``identity`` when unset).

    Raises
    ------
    ValueError
        If the transformation is not registered.
    MissingRoleError
        If the layer lacks a role the transformation reads.
    """
    config = config or DEFAULT_CONFIG
    name = layer.get("transformation") or "identity"
    try:
        fn = TRANSFORMS[name]
    except KeyError:
        raise ValueError(
            f"Unknown transformation {name!r}; expected one of {sorted(TRANSFORMS)}"
        ) from None
    return fn(layer, plot_data, config)
