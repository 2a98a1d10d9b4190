# src/plotalgebra/processing/validate.py

"""
Column resolution and validation.

Layers may carry their own ``data`` or rely on the plot-level ``data`` of
their spec. Column lookups try the layer first, then the plot, and fail with
a descriptive :class:`~plotalgebra.errors.MissingColumnError` /
:class:`~plotalgebra.errors.MissingDataError`.
"""

from __future__ import annotations
from typing import Any, List, Mapping, Optional

import pandas as pd

from ..errors import MissingColumnError, MissingDataError, PlotAlgebraError
from ..forms.layer import Spec, to_spec

__all__ = [
    "COLUMN_KEYS",
    "layer_frame",
    "resolve_column",
    "referenced_columns",
    "validate_layer",
    "validate_spec",
    "is_valid",
]

# Layer keys whose values name dataset columns.
COLUMN_KEYS = ("x", "y", "color", "size", "facet")


def layer_frame(layer: Mapping, spec: Optional[Spec] = None,
                plot_data: Optional[pd.DataFrame] = None) -> pd.DataFrame:
    """
    The dataset a layer draws from, restricted to its ``indices``.

    Precedence: layer ``data``, then ``plot_data``, then ``spec.data``.

    Raises
    ------
    MissingDataError
        If no dataset is available.
    TypeError
        If the dataset is not a DataFrame.
    """
    df = layer.get("data")
    if df is None:
        df = plot_data
    if df is None and spec is not None:
        df = spec.data
    if df is None:
        raise MissingDataError()
    if not isinstance(df, pd.DataFrame):
        raise TypeError(f"Layer data must be a pandas DataFrame, got {type(df).__name__}")
    idx = layer.get("indices")
    if idx is not None and layer.get("data") is None:
        # indices on a layer without its own data select plot-level rows
        df = df.loc[list(idx)]
    return df


def resolve_column(layer: Mapping, column: Any,
                   plot_data: Optional[pd.DataFrame] = None) -> pd.Series:
    """
    Return the Series for ``column``, trying layer data then plot data.

    Plot data is restricted to the layer's ``indices`` when it has them.

    Raises
    ------
    MissingDataError
        If neither the layer nor the plot has data.
    MissingColumnError
        If the column is in neither dataset.
    """
    layer_df = layer.get("data")
    for df in (layer_df, plot_data):
        if isinstance(df, pd.DataFrame) and column in df.columns:
            idx = layer.get("indices")
            if df is not layer_df and idx is not None:
                df = df.loc[list(idx)]
            return df[column]
    frames = [df for df in (layer_df, plot_data) if isinstance(df, pd.DataFrame)]
    if not frames:
        raise MissingDataError(column)
    raise MissingColumnError(column, frames[0].columns)


def referenced_columns(layer: Mapping) -> List[Any]:
    """Columns named by positional provenance and aesthetic roles, deduplicated."""
    cols = list(layer.get("columns") or [])
    cols += [layer[k] for k in COLUMN_KEYS if layer.get(k) is not None]
    return list(dict.fromkeys(cols))


def validate_layer(layer: Mapping, plot_data: Optional[pd.DataFrame] = None) -> Mapping:
    """
    Check that a layer has data and that every referenced column exists.

    Returns the layer unchanged so the call can be chained.
    """
    for col in referenced_columns(layer):
        resolve_column(layer, col, plot_data)
    return layer


def validate_spec(spec: Any) -> Spec:
    """Validate every layer of a spec against its own and the plot data."""
    spec = to_spec(spec)
    for lyr in spec.layers:
        validate_layer(lyr, spec.data)
    return spec


def is_valid(spec: Any) -> bool:
    """Non-raising form of :func:`validate_spec`."""
    try:
        validate_spec(spec)
    except (PlotAlgebraError, TypeError):
        return False
    return True
