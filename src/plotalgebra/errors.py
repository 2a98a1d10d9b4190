# src/plotalgebra/errors.py

"""
Exception types raised by the specification layer.

Only the failures that the algebra itself can detect live here. Everything
else (bad dtypes, malformed frames) propagates unchanged from pandas/numpy.
"""

from __future__ import annotations
from typing import Any, Iterable, Optional, Sequence

__all__ = [
    "PlotAlgebraError",
    "AmbiguousRolesError",
    "MissingColumnError",
    "MissingDataError",
    "MissingRoleError",
]


class PlotAlgebraError(Exception):
    """Base class for errors raised by plotalgebra."""


class AmbiguousRolesError(PlotAlgebraError, ValueError):
    """
    A layer carries three or more positional columns and no explicit roles.

    Attributes
    ----------
    columns : list
        The offending positional columns.
    layer : Mapping
        The layer that could not be resolved.

    Examples
    --------
    >>> err = AmbiguousRolesError(["a", "b", "c"], {"columns": ["a", "b", "c"]})
    >>> err.columns
    ['a', 'b', 'c']
    """

    def __init__(self, columns: Sequence[Any], layer: Any):
        self.columns = list(columns)
        self.layer = layer
        super().__init__(
            f"Ambiguous column count ({len(self.columns)}): {self.columns!r}; "
            "specify x/y explicitly"
        )


class MissingColumnError(PlotAlgebraError, KeyError):
    """A layer references a column that is absent from its dataset."""

    def __init__(self, column: Any, available: Optional[Iterable[Any]] = None):
        self.column = column
        self.available = list(available) if available is not None else []
        super().__init__(column)

    def __str__(self) -> str:
        return f"Column {self.column!r} not found. Available: {self.available!r}"


class MissingDataError(PlotAlgebraError, ValueError):
    """Neither the layer nor the plot carries a dataset."""

    def __init__(self, column: Any = None):
        self.column = column
        msg = "No data available"
        if column is not None:
            msg += f" to resolve column {column!r}"
        super().__init__(msg)


class MissingRoleError(PlotAlgebraError, ValueError):
    """
    A layer reached drawing without the positional role it needs.

    Usually a mark blended onto a base layer that had positional ``columns``
    but no ``x``/``y`` to inherit.

    Examples
    --------
    >>> str(MissingRoleError("x", {"plottype": "line", "transformation": "linear"}))
    "Layer line[linear] has no 'x' role; map a column to 'x' before drawing"
    """

    def __init__(self, role: str, layer: Any):
        self.role = role
        self.layer = layer
        name = layer.get("plottype") or "layer"
        t = layer.get("transformation")
        if t:
            name = f"{name}[{t}]"
        super().__init__(f"Layer {name} has no {role!r} role; map a column to {role!r} before drawing")
