# src/plotalgebra/forms/varset.py

"""
Varsets: the index-set view of the cross/blend algebra.

A varset is a function ``V: I -> D`` from row labels (indices) to tuples of
column values. All varsets over the same DataFrame share index semantics:
label 7 in varset A is the same observation as label 7 in varset B, which is
what gives linked views (brushing) their identity.

- ``A * B`` (:func:`cross`) concatenates columns: ``(A*B)(i) = (A(i), B(i))``.
- ``A + B`` (:func:`blend`) collects alternatives over the same rows.
- ``(A + B) * (C + D)`` (:func:`cross_blend`) distributes, giving
  ``A*C + A*D + B*C + B*D``; four alternatives for a 2x2 matrix.

Examples
--------
>>> import pandas as pd
>>> from plotalgebra.forms.varset import varset, expand_blend, grid_positions
>>> df = pd.DataFrame({"a": [1, 2], "b": [3, 4]})
>>> a, b = varset(df, "a"), varset(df, "b")
>>> (a * b).values()
[(1, 3), (2, 4)]
>>> splom = (a + b) * (a + b)
>>> [(f.x_label, f.y_label, f.grid_row, f.grid_col) for f in grid_positions(expand_blend(splom))]
[('a', 'a', 0, 0), ('a', 'b', 1, 0), ('b', 'a', 0, 1), ('b', 'b', 1, 1)]
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Hashable, List, Optional, Sequence, Tuple, Union

import pandas as pd

from .utils import ensure_list, intersect_indices

__all__ = [
    "Varset",
    "VarsetBlend",
    "Alternative",
    "Frame",
    "varset",
    "cross",
    "blend",
    "cross_blend",
    "expand_blend",
    "grid_positions",
    "is_diagonal_frame",
    "nest",
    "nest_blend",
]


# ---------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class Alternative:
    """One alternative of a blend: columns and their labels."""
    columns: Tuple[Any, ...]
    labels: Tuple[str, ...]

    def __mul__(self, other: "Alternative") -> "Alternative":
        return Alternative(self.columns + other.columns, self.labels + other.labels)


@dataclass(frozen=True, eq=False)
class Varset:
    """
    A dataset restricted to some columns and rows.

    Parameters
    ----------
    dataset : pandas.DataFrame
    columns : tuple
        Columns defining the tuple (dimension = ``len(columns)``).
    labels : tuple of str
        Human-readable names, used for axis labels and frame identity.
    indices : tuple
        Active row labels, in order.
    facet_column, facet_value : optional
        Set by :func:`nest`.
    """
    dataset: pd.DataFrame = field(repr=False)
    columns: Tuple[Any, ...]
    labels: Tuple[str, ...]
    indices: Tuple[Hashable, ...] = field(repr=False)
    facet_column: Any = None
    facet_value: Any = None

    @property
    def dim(self) -> int:
        return len(self.columns)

    def alternative(self) -> Alternative:
        return Alternative(self.columns, self.labels)

    def value_at(self, i: Hashable) -> Tuple[Any, ...]:
        """Tuple of column values at row label ``i``."""
        row = self.dataset.loc[i, list(self.columns)]
        return tuple(row.tolist())

    def values(self) -> List[Tuple[Any, ...]]:
        """Tuples for every active index, in index order."""
        sub = self.dataset.loc[list(self.indices), list(self.columns)]
        return [tuple(r) for r in sub.to_numpy(dtype=object).tolist()]

    def domain(self) -> List[Tuple[Any, Any]]:
        """``(min, max)`` per column over the active indices (NaN ignored)."""
        sub = self.dataset.loc[list(self.indices), list(self.columns)]
        return [(sub[c].min(), sub[c].max()) for c in self.columns]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Varset):
            return NotImplemented
        return (
            self.dataset is other.dataset
            and self.columns == other.columns
            and self.labels == other.labels
            and self.indices == other.indices
            and self.facet_value == other.facet_value
        )

    __hash__ = None  # type: ignore[assignment]

    def __mul__(self, other):
        if isinstance(other, VarsetBlend):
            return cross_blend(_as_blend(self), other)
        return cross(self, other)

    def __add__(self, other):
        if isinstance(other, VarsetBlend):
            return VarsetBlend(
                (self.alternative(),) + other.alternatives,
                _check_same_rows(self, other),
                tuple(self.indices),
            )
        return blend(self, other)


@dataclass(frozen=True, eq=False)
class VarsetBlend:
    """
    A union of alternatives over one dataset and one index set.

    Crossing two blends applies the distributive law (see :func:`cross_blend`).
    """
    alternatives: Tuple[Alternative, ...]
    dataset: pd.DataFrame = field(repr=False)
    indices: Tuple[Hashable, ...] = field(repr=False)
    facet_column: Any = None
    facet_value: Any = None

    def __len__(self) -> int:
        return len(self.alternatives)

    def __mul__(self, other):
        if isinstance(other, Varset):
            other = _as_blend(other)
        return cross_blend(self, other)

    def __add__(self, other):
        if isinstance(other, Varset):
            other = _as_blend(other)
        if not isinstance(other, VarsetBlend):
            return NotImplemented
        return VarsetBlend(
            self.alternatives + other.alternatives,
            _check_same_rows(self, other),
            self.indices,
        )


@dataclass(frozen=True, eq=False)
class Frame:
    """A 2D varset placed in a scatterplot-matrix grid."""
    varset: Varset
    x_label: str
    y_label: Optional[str]
    grid_row: int
    grid_col: int


# ---------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------
def _check_same_dataset(a, b) -> pd.DataFrame:
    if a.dataset is not b.dataset:
        raise ValueError("Cross requires varsets from the same dataset")
    return a.dataset


def _check_same_rows(a, b) -> pd.DataFrame:
    if a.dataset is not b.dataset:
        raise ValueError("All blended varsets must share the same dataset")
    if tuple(a.indices) != tuple(b.indices):
        raise ValueError("All blended varsets must share the same indices")
    return a.dataset


def _as_blend(vs: Varset) -> VarsetBlend:
    return VarsetBlend((vs.alternative(),), vs.dataset, vs.indices,
                       vs.facet_column, vs.facet_value)


def _grouped_indices(df: pd.DataFrame, indices: Sequence[Hashable], by: Any):
    col = df.loc[list(indices), by]
    groups: Dict[Any, List[Hashable]] = {}
    for i, v in zip(indices, col.tolist()):
        groups.setdefault(v, []).append(i)
    return sorted(groups.items(), key=lambda kv: kv[0])


# ---------------------------------------------------------------------
# Constructors & operations
# ---------------------------------------------------------------------
def varset(
    df: pd.DataFrame,
    columns: Union[Any, Sequence[Any]],
    labels: Optional[Sequence[str]] = None,
    indices: Optional[Sequence[Hashable]] = None,
) -> Varset:
    """
    Create a varset from a dataset, column(s), and optional labels/indices.

    Columns are stored as a tuple even for 1D varsets, so :func:`cross` is a
    plain concatenation. ``labels`` default to the column names and
    ``indices`` to every row label of ``df``.

    Raises
    ------
    KeyError
        If a column is not in ``df``.
    ValueError
        If ``labels`` and ``columns`` differ in length.
    """
    cols = tuple(ensure_list(columns))
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise KeyError(f"Required column(s) {missing!r} not found in DataFrame.")
    lbls = tuple(labels) if labels is not None else tuple(str(c) for c in cols)
    if len(lbls) != len(cols):
        raise ValueError("labels must match columns one-to-one")
    idxs = tuple(indices) if indices is not None else tuple(df.index)
    return Varset(df, cols, lbls, idxs)


def cross(a: Varset, b: Varset) -> Varset:
    """
    Cross two varsets into a higher-dimensional varset.

    Columns and labels concatenate; indices intersect, preserving the order
    of ``a``. ``dim(a * b) == dim(a) + dim(b)``.

    Raises
    ------
    ValueError
        If either side is a blend, or the datasets are not the same object.
    """
    if not (isinstance(a, Varset) and isinstance(b, Varset)):
        raise ValueError("Cross requires two varsets (not blends); use cross_blend")
    df = _check_same_dataset(a, b)
    return Varset(
        df,
        a.columns + b.columns,
        a.labels + b.labels,
        tuple(intersect_indices(a.indices, b.indices)),
        a.facet_column if a.facet_column is not None else b.facet_column,
        a.facet_value if a.facet_value is not None else b.facet_value,
    )


def blend(*varsets: Varset) -> VarsetBlend:
    """
    Blend (union) varsets into alternatives.

    Raises
    ------
    ValueError
        If no varset is given, or they differ in dataset or indices.
    """
    if not varsets:
        raise ValueError("Blend requires at least one varset")
    first = varsets[0]
    for other in varsets[1:]:
        _check_same_rows(first, other)
    return VarsetBlend(
        tuple(v.alternative() for v in varsets),
        first.dataset,
        tuple(first.indices),
    )


def cross_blend(a: VarsetBlend, b: VarsetBlend) -> VarsetBlend:
    """
    Cross two blends by the distributive law.

    ``n`` alternatives times ``m`` alternatives gives ``n*m`` alternatives in
    left-major order; indices intersect.
    """
    if not (isinstance(a, VarsetBlend) and isinstance(b, VarsetBlend)):
        raise ValueError("cross_blend requires two blends")
    if a.dataset is not b.dataset:
        raise ValueError("Blends must share the same dataset")
    alts = tuple(x * y for x in a.alternatives for y in b.alternatives)
    return VarsetBlend(
        alts, a.dataset, tuple(intersect_indices(a.indices, b.indices)),
        a.facet_column, a.facet_value,
    )


def expand_blend(b: VarsetBlend) -> List[Varset]:
    """One concrete varset ("frame") per alternative."""
    if not isinstance(b, VarsetBlend):
        raise ValueError("expand_blend requires a blend")
    return [
        Varset(b.dataset, alt.columns, alt.labels, b.indices,
               b.facet_column, b.facet_value)
        for alt in b.alternatives
    ]


def grid_positions(frames: Sequence[Varset]) -> List[Frame]:
    """
    Place frames in a grid.

    Columns follow the x label (first label), rows the y label (second
    label), each numbered by first appearance.
    """
    x_labels = list(dict.fromkeys(f.labels[0] for f in frames))
    y_labels = list(dict.fromkeys(f.labels[1] if len(f.labels) > 1 else None for f in frames))
    x_idx = {l: i for i, l in enumerate(x_labels)}
    y_idx = {l: i for i, l in enumerate(y_labels)}
    out = []
    for f in frames:
        xl = f.labels[0]
        yl = f.labels[1] if len(f.labels) > 1 else None
        out.append(Frame(f, xl, yl, y_idx[yl], x_idx[xl]))
    return out


def is_diagonal_frame(frame: Union[Frame, Varset]) -> bool:
    """True when the same variable sits on both axes."""
    vs = frame.varset if isinstance(frame, Frame) else frame
    return len(vs.labels) >= 2 and vs.labels[0] == vs.labels[1]


def nest(vs: Varset, by: Any) -> List[Varset]:
    """
    Partition a varset by a grouping column.

    Returns one varset per group value (sorted), each restricted to the
    indices of that group and tagged with ``facet_column``/``facet_value``.
    """
    return [
        replace(vs, indices=tuple(idx), facet_column=by, facet_value=value)
        for value, idx in _grouped_indices(vs.dataset, vs.indices, by)
    ]


def nest_blend(b: VarsetBlend, by: Any) -> List[VarsetBlend]:
    """Partition a blend by a grouping column; one blend per group."""
    return [
        replace(b, indices=tuple(idx), facet_column=by, facet_value=value)
        for value, idx in _grouped_indices(b.dataset, b.indices, by)
    ]
