# src/plotalgebra/forms/algebra.py

"""
Algebraic combinators over plot specifications.

A plot is built from small specs combined with three operations:

- :func:`cross`  (``*``, "l*") : Cartesian product of layers, merged pairwise.
- :func:`blend`  (``+``, "l+") : concatenation of layers into alternatives.
- :func:`nest`                 : partition each layer's data by a column.

Cross distributes over blend, which is what makes a scatterplot matrix a
one-liner:

>>> import pandas as pd
>>> from plotalgebra.forms.algebra import layers, cross
>>> df = pd.DataFrame({"a": [1, 2], "b": [3, 4]})
>>> splom = cross(layers(df, ["a", "b"]), layers(df, ["a", "b"]))
>>> [l["columns"] for l in splom]
[['a', 'a'], ['a', 'b'], ['b', 'a'], ['b', 'b']]

No inference happens here; roles and plot types are assigned later by
:func:`plotalgebra.processing.defaults.smart_defaults`.
"""

from __future__ import annotations
from collections.abc import Mapping
from functools import reduce
from itertools import product
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from ..config import DEFAULT_CONFIG, PlotConfig
from ..log import get_logger
from ..errors import MissingDataError
from .layer import Layer, Spec, to_spec
from .utils import ensure_list, intersect_indices, merge_attrs, merge_layers

__all__ = [
    "layer",
    "layers",
    "data",
    "mapping",
    "plot_props",
    "cross",
    "blend",
    "overlay",
    "d_cross",
    "d_blend",
    "nest",
    "facet_grid",
    "views",
    "pairs",
    "distribution",
    "cross_columns",
    "where",
    "where_not",
]

logger = get_logger(__name__)


# ---------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------
def layer(data: Optional[pd.DataFrame], *columns: Any, **aesthetics: Any) -> Spec:
    """
    Create a one-layer spec from a dataset and positional columns.

    Columns are stored in ``columns`` (positional provenance); roles are
    assigned later by role resolution.

    Parameters
    ----------
    data : pandas.DataFrame or None
        Dataset of the layer.
    *columns
        Column names, in positional order.
    **aesthetics
        Extra layer properties (``color=``, ``plottype=``, ...).

    Examples
    --------
    >>> layer(None, "x", "y").layers[0]["columns"]
    ['x', 'y']
    """
    props = {}
    if data is not None:
        props["data"] = data
    if columns:
        props["columns"] = list(columns)
    props.update(aesthetics)
    return Spec([Layer(props)])


def layers(data: Optional[pd.DataFrame], columns: Iterable[Any]) -> Spec:
    """
    One single-column layer per column, blended.

    ``layers(df, ["a", "b"])`` is ``layer(df, "a") + layer(df, "b")``.
    """
    return blend(*(layer(data, c) for c in columns))


def data(df: pd.DataFrame) -> Spec:
    """One-layer spec that only carries a dataset."""
    return Spec([Layer(data=df)])


def mapping(*columns: Any, **aesthetics: Any) -> Spec:
    """
    One-layer spec of positional columns and/or named aesthetics, no data.

    Examples
    --------
    >>> mapping("a", color="s").layers[0].to_dict()
    {'columns': ['a'], 'color': 's'}
    """
    return layer(None, *columns, **aesthetics)


def plot_props(**props: Any) -> Spec:
    """Layer-less spec carrying plot-level properties only."""
    return Spec((), props)


# ---------------------------------------------------------------------
# Cross / blend
# ---------------------------------------------------------------------
def _cross2(a: Spec, b: Spec) -> Spec:
    props = merge_attrs(a.props.to_dict(), b.props.to_dict())
    if "indices" in a.props and "indices" in b.props:
        # plot-level row sets intersect
        props["indices"] = intersect_indices(a.props["indices"], b.props["indices"])
    if a.layers and b.layers:
        merged = [Layer(merge_layers(la, lb)) for la, lb in product(a.layers, b.layers)]
        logger.debug("cross: %d x %d -> %d layers", len(a), len(b), len(merged))
        return Spec(merged, props)
    return Spec(a.layers or b.layers, props)


def cross(*specs: Any) -> Spec:
    """
    Cartesian product of specs with property merging (``*``).

    Parameters
    ----------
    *specs : Spec or Mapping or None
        Operands; ``None`` is dropped.

    Returns
    -------
    Spec
        - both sides with layers: every pair ``(a, b)`` in left-major order,
          merged with :func:`~plotalgebra.forms.utils.merge_layers`;
        - one side with layers: those layers;
        - plot properties merged recursively, right side winning.

    Notes
    -----
    Not commutative: ``columns`` concatenate in operand order.

    Examples
    --------
    >>> from plotalgebra.forms.algebra import mapping
    >>> s = cross(mapping("a") + mapping("b"), mapping("c"))
    >>> [l["columns"] for l in s]
    [['a', 'c'], ['b', 'c']]
    """
    specs = [to_spec(s) for s in specs if s is not None]
    if not specs:
        return Spec()
    if len(specs) == 1:
        return specs[0]
    return reduce(_cross2, specs)


def _inherit(layers_: Sequence[Layer], keys: Sequence[str]) -> List[Layer]:
    if len(layers_) < 2:
        return list(layers_)
    base = layers_[0]
    inherited = {k: base[k] for k in keys if base.get(k) is not None}
    if not inherited:
        return list(layers_)
    out = [base]
    for lyr in layers_[1:]:
        missing = {k: v for k, v in inherited.items() if lyr.get(k) is None}
        out.append(lyr.assoc(**missing) if missing else lyr)
    return out


def blend(*specs: Any, config: PlotConfig = DEFAULT_CONFIG) -> Spec:
    """
    Concatenate layers into alternatives (``+``).

    Plot properties merge right-wins. Every layer after the first inherits
    ``config.inheritable_keys`` (``x``, ``y``, ``color``) from the first
    layer when it does not set them itself, which is what lets a bare
    ``linear()`` overlay a resolved scatter layer.

    Examples
    --------
    >>> s = blend({"x": "a", "y": "b", "plottype": "scatter"}, {"plottype": "line"})
    >>> s.layers[1].select("x", "y", "plottype")
    {'x': 'a', 'y': 'b', 'plottype': 'line'}
    """
    config = config or DEFAULT_CONFIG
    specs = [to_spec(s) for s in specs if s is not None]
    all_layers = [l for s in specs for l in s.layers]
    props = {}
    for s in specs:
        props.update(s.props)
    return Spec(_inherit(all_layers, config.inheritable_keys), props)


def overlay(base: Any, *specs: Any) -> Spec:
    """
    Overlay specs on a base, each new layer inheriting the base layer.

    Every layer of each spec in ``specs`` is merged over the base's first
    layer. The base layers are kept in the output only if the base layer
    already has a ``plottype``; otherwise the base only provides shared
    data and aesthetics.

    Examples
    --------
    >>> from plotalgebra.forms.marks import scatter, linear
    >>> s = overlay(mapping(x="a", y="b"), scatter(), linear())
    >>> [(l["x"], l["plottype"]) for l in s]
    [('a', 'scatter'), ('a', 'line')]
    """
    base = to_spec(base)
    if not specs:
        return base
    rest = [to_spec(s) for s in specs if s is not None]
    base_layer = base.layers[0] if base.layers else None

    merged: List[Layer] = []
    for s in rest:
        if base_layer is not None:
            merged.extend(base_layer.merge(l) for l in s.layers)
        else:
            merged.extend(s.layers)

    out = list(base.layers) + merged if (base_layer is not None and base_layer.get("plottype")) else merged
    props = base.props.to_dict()
    for s in rest:
        props.update(s.props)
    return Spec(out, props)


# ---------------------------------------------------------------------
# Dataset-level crossing (no inference)
# ---------------------------------------------------------------------
def _column_spec(df: pd.DataFrame, cols: Any) -> Spec:
    return Spec(
        [Layer(columns=[c]) for c in ensure_list(cols)],
        {"data": df, "indices": list(df.index)},
    )


def d_cross(df: pd.DataFrame, *column_lists: Any) -> Spec:
    """
    Cross column lists over one dataset ("d*").

    Each argument is a column or a list of columns; the result is the
    Cartesian product of single-column layers with ``data`` and ``indices``
    held at plot level. Call ``smart_defaults`` to prepare it for rendering.

    Examples
    --------
    >>> import pandas as pd
    >>> df = pd.DataFrame({"a": [1], "b": [2]})
    >>> [l["columns"] for l in d_cross(df, ["a", "b"], ["a", "b"])]
    [['a', 'a'], ['a', 'b'], ['b', 'a'], ['b', 'b']]
    """
    if not column_lists:
        return Spec((), {"data": df, "indices": list(df.index)})
    return cross(*(_column_spec(df, cols) for cols in column_lists))


def d_blend(df: pd.DataFrame, columns: Iterable[Any]) -> Spec:
    """One single-column layer per column over one dataset ("d+")."""
    return blend(*(_column_spec(df, c) for c in columns))


# ---------------------------------------------------------------------
# Nesting
# ---------------------------------------------------------------------
def _layer_data(lyr: Mapping, spec: Spec) -> pd.DataFrame:
    df = lyr.get("data")
    if df is None:
        df = spec.data
    if df is None:
        raise MissingDataError()
    return df


def _restrict(df: pd.DataFrame, lyr: Mapping) -> pd.DataFrame:
    idx = lyr.get("indices")
    return df if idx is None else df.loc[list(idx)]


def _groups(df: pd.DataFrame, by: Any):
    # sort=True gives deterministic group order; dropna=False keeps NaN groups
    for key, sub in df.groupby(by, sort=True, dropna=False):
        yield key, sub


def nest(spec: Any, by: Any) -> Spec:
    """
    Partition every layer's data by a grouping column.

    Each layer becomes one layer per group (sorted by group value) carrying
    the subset ``data``, its ``indices``, ``facet_column`` and
    ``facet_value``.

    Raises
    ------
    MissingDataError
        If a layer has no data and the spec has no plot-level data.
    KeyError
        From pandas, if ``by`` is not a column.

    Examples
    --------
    >>> import pandas as pd
    >>> df = pd.DataFrame({"a": [1, 2, 3], "g": ["u", "v", "u"]})
    >>> s = nest(layer(df, "a"), "g")
    >>> [(l["facet_value"], l["indices"]) for l in s]
    [('u', [0, 2]), ('v', [1])]
    """
    spec = to_spec(spec)
    out: List[Layer] = []
    for lyr in spec.layers:
        df = _restrict(_layer_data(lyr, spec), lyr)
        for key, sub in _groups(df, by):
            out.append(lyr.assoc(
                data=sub,
                indices=list(sub.index),
                facet_column=by,
                facet_value=key,
            ))
    logger.debug("nest by %r: %d -> %d layers", by, len(spec), len(out))
    return spec.with_layers(out)


def facet_grid(spec: Any, row: Any, col: Any) -> Spec:
    """
    Partition every layer's data by two columns for a row x column grid.

    Sets ``facet_row`` and ``facet_col`` to the group values.
    """
    spec = to_spec(spec)
    out: List[Layer] = []
    for lyr in spec.layers:
        df = _restrict(_layer_data(lyr, spec), lyr)
        for (rv, cv), sub in _groups(df, [row, col]):
            out.append(lyr.assoc(
                data=sub,
                indices=list(sub.index),
                facet_row=rv,
                facet_col=cv,
            ))
    return spec.with_layers(out)


# ---------------------------------------------------------------------
# Column-pair helpers
# ---------------------------------------------------------------------
def cross_columns(xs: Iterable[Any], ys: Iterable[Any]) -> List[Tuple[Any, Any]]:
    """All pairs ``(x, y)`` in left-major order."""
    return list(product(xs, ys))


def pairs(columns: Sequence[Any]) -> List[Tuple[Any, Any]]:
    """
    Upper-triangle pairs of columns.

    Examples
    --------
    >>> pairs(["a", "b", "c"])
    [('a', 'b'), ('a', 'c'), ('b', 'c')]
    """
    cols = list(columns)
    return [(cols[i], cols[j]) for i in range(len(cols)) for j in range(i + 1, len(cols))]


def views(df: pd.DataFrame, column_pairs: Iterable[Sequence[Any]]) -> Spec:
    """Bind a dataset to ``(x, y)`` pairs: one resolved layer per pair."""
    return Spec([Layer(data=df, x=x, y=y) for x, y in column_pairs])


def distribution(df: pd.DataFrame, *columns: Any) -> Spec:
    """Diagonal views (``x == y``) for each column."""
    return views(df, [(c, c) for c in columns])


# ---------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------
def where(spec: Any, pred: Callable[[Layer], bool]) -> Spec:
    """Keep the layers for which ``pred`` is true."""
    spec = to_spec(spec)
    return spec.with_layers([l for l in spec.layers if pred(l)])


def where_not(spec: Any, pred: Callable[[Layer], bool]) -> Spec:
    """Drop the layers for which ``pred`` is true."""
    spec = to_spec(spec)
    return spec.with_layers([l for l in spec.layers if not pred(l)])
