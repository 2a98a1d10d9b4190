# src/plotalgebra/forms/utils.py

"""
Merge primitives for layer and plot-property maps.

Every combinator in :mod:`plotalgebra.forms.algebra` reduces to one of the
merges defined here:

- :func:`merge_attrs` : recursive merge of nested property trees
  (mappings merge, sequences concatenate, scalars: right wins).
- :func:`smart_merge` : shallow merge where ``None`` never overwrites.
- :func:`merge_layers` : the layer merge used by ``cross``; positional
  ``columns`` concatenate until a role is assigned, ``indices`` intersect.

Examples
--------
>>> from plotalgebra.forms.utils import merge_attrs, merge_layers
>>> merge_attrs({"x": {"grid": True}}, {"x": {"label": "len"}})
{'x': {'grid': True, 'label': 'len'}}
>>> merge_layers({"columns": ["a"]}, {"columns": ["b"], "plottype": "scatter"})
{'columns': ['a', 'b'], 'plottype': 'scatter'}
"""

from __future__ import annotations
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

__all__ = [
    "ROLE_KEYS",
    "merge_attrs",
    "smart_merge",
    "merge_layers",
    "intersect_indices",
    "ensure_list",
    "values_equal",
]

# Keys whose presence means positional provenance has been resolved.
ROLE_KEYS = ("x", "y")


# ---------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------
def _is_sequence(x: Any) -> bool:
    return isinstance(x, (list, tuple))


def _is_column_collection(x: Any) -> bool:
    if isinstance(x, np.ndarray):
        return x.ndim > 0
    return _is_sequence(x) or isinstance(x, (pd.Index, pd.Series))


def values_equal(a: Any, b: Any) -> bool:
    """
    Equality that is safe for pandas objects.

    DataFrames and Series compare by identity (a layer "refers to" a dataset);
    everything else compares with ``==``.

    Examples
    --------
    >>> import pandas as pd
    >>> df = pd.DataFrame({"a": [1]})
    >>> values_equal(df, df), values_equal(df, df.copy())
    (True, False)
    >>> values_equal([1, 2], [1, 2])
    True
    """
    if isinstance(a, (pd.DataFrame, pd.Series, pd.Index)) or isinstance(
        b, (pd.DataFrame, pd.Series, pd.Index)
    ):
        return a is b
    if isinstance(a, Mapping) and isinstance(b, Mapping):
        if set(a) != set(b):
            return False
        return all(values_equal(a[k], b[k]) for k in a)
    if _is_sequence(a) and _is_sequence(b):
        return len(a) == len(b) and all(values_equal(u, v) for u, v in zip(a, b))
    return bool(a == b)


def ensure_list(x: Any) -> List[Any]:
    """
    Wrap a single item in a list; lists, tuples, pandas Index/Series and
    numpy arrays pass through as lists.

    Strings are treated as single items (a column name, not a sequence).

    Examples
    --------
    >>> ensure_list("a"), ensure_list(["a", "b"]), ensure_list(None)
    (['a'], ['a', 'b'], [])
    """
    if x is None:
        return []
    if _is_column_collection(x):
        return list(x)
    return [x]


def intersect_indices(left: Optional[Iterable[Any]], right: Optional[Iterable[Any]]) -> Optional[List[Any]]:
    """
    Intersect two index lists, preserving the order of ``left``.

    ``None`` means "all rows" and acts as the identity.

    Examples
    --------
    >>> intersect_indices([3, 1, 2], [2, 3])
    [3, 2]
    >>> intersect_indices(None, [1, 2])
    [1, 2]
    """
    if left is None:
        return None if right is None else list(right)
    if right is None:
        return list(left)
    keep = set(right)
    return [i for i in left if i in keep]


# ---------------------------------------------------------------------
# Merges
# ---------------------------------------------------------------------
def merge_attrs(a: Any, b: Any) -> Any:
    """
    Recursively merge two property trees.

    Parameters
    ----------
    a, b : Any
        Left and right values.

    Returns
    -------
    Any
        - both mappings (or ``None``): key-wise recursive merge;
        - both lists/tuples: concatenation, type of ``a`` preserved;
        - otherwise ``b`` (``a`` when ``b`` is ``None``).

    Examples
    --------
    >>> merge_attrs({"geometry": ["line"]}, {"geometry": ["point"]})
    {'geometry': ['line', 'point']}
    >>> merge_attrs({"width": 400}, {"width": 600, "height": 300})
    {'width': 600, 'height': 300}
    """
    if b is None:
        return a
    if a is None:
        return b
    if isinstance(a, Mapping) and isinstance(b, Mapping):
        out: Dict[Any, Any] = dict(a)
        for k, v in b.items():
            out[k] = merge_attrs(out.get(k), v) if k in out else v
        return out
    if _is_sequence(a) and _is_sequence(b):
        return type(a)(list(a) + list(b))
    return b


def smart_merge(a: Mapping, b: Mapping) -> Dict[Any, Any]:
    """
    Shallow merge where ``None`` values in ``b`` never overwrite ``a``.

    Examples
    --------
    >>> smart_merge({"x": "a", "y": "b"}, {"x": None, "color": "s"})
    {'x': 'a', 'y': 'b', 'color': 's'}
    """
    out = dict(a)
    for k, v in b.items():
        if v is not None:
            out[k] = v
    return out


def merge_layers(*layers: Mapping) -> Dict[Any, Any]:
    """
    Merge layer maps left to right (the per-pair step of ``cross``).

    Rules
    -----
    - ``columns`` concatenate, preserving positional provenance, but only
      while no layer carries an ``x``/``y`` role. Once a role is present the
      columns of later layers are dropped.
    - ``indices`` intersect, preserving the left order.
    - ``None`` never overwrites an existing value.
    - Everything else: rightmost wins.

    Examples
    --------
    >>> merge_layers({"columns": ["a"], "data": "d1"}, {"columns": ["b"], "data": "d2"})
    {'columns': ['a', 'b'], 'data': 'd2'}
    >>> merge_layers({"x": "a", "columns": ["a"]}, {"columns": ["b"]})
    {'x': 'a', 'columns': ['a']}
    >>> merge_layers({"indices": [0, 1, 2]}, {"indices": [2, 0]})
    {'indices': [0, 2]}
    """
    has_roles = any(
        any(lyr.get(k) is not None for k in ROLE_KEYS) for lyr in layers
    )
    acc: Dict[Any, Any] = {}
    for lyr in layers:
        for k, v in lyr.items():
            if v is None:
                continue
            if k == "columns":
                if has_roles and "columns" in acc:
                    continue
                if not has_roles and "columns" in acc:
                    acc[k] = list(acc[k]) + ensure_list(v)
                    continue
                acc[k] = ensure_list(v)
            elif k == "indices" and "indices" in acc:
                acc[k] = intersect_indices(acc[k], v)
            else:
                acc[k] = v
    return acc
