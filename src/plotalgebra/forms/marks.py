# src/plotalgebra/forms/marks.py

"""
Geometry constructors.

Each constructor returns a one-layer :class:`~plotalgebra.forms.layer.Spec`
naming a ``plottype`` (what to draw) and, where needed, a
``transformation`` (what to compute first). They carry no data and are meant
to be crossed into data layers:

>>> import pandas as pd
>>> from plotalgebra.forms.algebra import layer
>>> from plotalgebra.forms.marks import scatter, linear
>>> df = pd.DataFrame({"a": [1, 2, 3], "b": [2, 4, 7]})
>>> s = layer(df, "a", "b") * (scatter() + linear())
>>> [l["plottype"] for l in s]
['scatter', 'line']
"""

from __future__ import annotations
from typing import Any

from .layer import Layer, Spec

__all__ = [
    "scatter",
    "line",
    "linear",
    "smooth",
    "histogram",
    "bar",
    "density",
]


def _mark(plottype: str, transformation: str | None = None, **opts: Any) -> Spec:
    props = {"plottype": plottype}
    if transformation is not None:
        props["transformation"] = transformation
    props.update(opts)
    return Spec([Layer(props)])


def scatter(**opts: Any) -> Spec:
    """Points at (x, y). Options: ``color``, ``size``, ``alpha``."""
    return _mark("scatter", **opts)


def line(**opts: Any) -> Spec:
    """Line through the data points in x order."""
    return _mark("line", "identity", **opts)


def linear(**opts: Any) -> Spec:
    """Least-squares regression line (per color group once spread)."""
    return _mark("line", "linear", **opts)


def smooth(window: int | None = None, **opts: Any) -> Spec:
    """Rolling-mean trend line; ``window`` overrides the configured size."""
    if window is not None:
        opts["window"] = window
    return _mark("line", "smooth", **opts)


def histogram(bins: int | None = None, **opts: Any) -> Spec:
    """Binned counts of x; ``bins`` overrides the configured bin count."""
    if bins is not None:
        opts["bins"] = bins
    return _mark("histogram", "bin", **opts)


def bar(**opts: Any) -> Spec:
    """Bars of y at each x (pre-aggregated values)."""
    return _mark("bar", **opts)


def density(**opts: Any) -> Spec:
    """Kernel density estimate of x."""
    return _mark("density", **opts)
