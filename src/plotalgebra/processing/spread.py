# src/plotalgebra/processing/spread.py

"""
Grouping spread: expand grouping aesthetics into one layer per group.

A layer with ``color`` (or, failing that, ``facet``) is partitioned by the
distinct values of that column; each part becomes its own layer with the
subset ``data`` and a ``color_value``/``facet_value`` tag. Layers already
tagged are left alone, so ``spread`` is idempotent.
"""

from __future__ import annotations
from typing import Any, List

import pandas as pd

from ..errors import MissingColumnError
from ..forms.layer import Layer, Spec, to_spec
from ..log import get_logger
from .validate import layer_frame

__all__ = [
    "spread",
    "assign_color_indices",
]

logger = get_logger(__name__)


def _split(lyr: Layer, df: pd.DataFrame, col: Any, tag: str) -> List[Layer]:
    if col not in df.columns:
        raise MissingColumnError(col, df.columns)
    return [
        lyr.assoc(**{tag: key, "data": sub, "indices": list(sub.index)})
        for key, sub in df.groupby(col, sort=True, dropna=False)
    ]


def spread(spec: Any) -> Spec:
    """
    Partition layers by their ``color`` or ``facet`` column.

    Examples
    --------
    >>> import pandas as pd
    >>> from plotalgebra.forms.algebra import layer
    >>> df = pd.DataFrame({"x": [1, 2, 3], "y": [1, 2, 3], "g": ["a", "b", "a"]})
    >>> s = spread(layer(df, "x", "y", color="g"))
    >>> [(l["color_value"], len(l["data"])) for l in s]
    [('a', 2), ('b', 1)]
    """
    spec = to_spec(spec)
    out: List[Layer] = []
    for lyr in spec.layers:
        if lyr.get("color_value") is not None or lyr.get("facet_value") is not None:
            out.append(lyr)
            continue
        if lyr.get("color") is not None:
            out.extend(_split(lyr, layer_frame(lyr, spec), lyr["color"], "color_value"))
        elif lyr.get("facet") is not None:
            out.extend(_split(lyr, layer_frame(lyr, spec), lyr["facet"], "facet_value"))
        else:
            out.append(lyr)
    logger.debug("spread: %d -> %d layers", len(spec), len(out))
    return spec.with_layers(out)


def assign_color_indices(spec: Any) -> Spec:
    """
    Number the distinct ``color_value``s in sorted order as ``color_index``.

    Layers without a ``color_value`` are unchanged. A missing-value group
    (NaN, kept by :func:`spread`) is numbered after every other group.

    Examples
    --------
    >>> import pandas as pd
    >>> from plotalgebra.forms.algebra import layer
    >>> df = pd.DataFrame({"x": [1, 2, 3], "y": [1, 2, 3], "g": ["m", float("nan"), "f"]})
    >>> s = assign_color_indices(spread(layer(df, "x", "y", color="g")))
    >>> [(str(l["color_value"]), l["color_index"]) for l in s]
    [('f', 0), ('m', 1), ('nan', 2)]
    """
    spec = to_spec(spec)
    present = [l["color_value"] for l in spec.layers if l.get("color_value") is not None]
    values = sorted({v for v in present if not pd.isna(v)})
    index = {v: i for i, v in enumerate(values)}
    missing = len(values)

    def _index(v: Any) -> int:
        return missing if pd.isna(v) else index[v]

    return spec.map_layers(
        lambda l: l.assoc(color_index=_index(l["color_value"]))
        if l.get("color_value") is not None else l
    )
