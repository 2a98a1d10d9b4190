# src/plotalgebra/processing/defaults.py

"""
Smart defaults: turn an algebraic spec into a render-ready one.

Two rules drive everything here:

1. **Positional arity.** A layer's ``columns`` assign roles by position:
   one column -> ``x``; two -> ``x`` and ``y``; three or more is ambiguous
   and raises :class:`~plotalgebra.errors.AmbiguousRolesError`.
2. **Diagonal detection.** A layer whose ``x`` equals its ``y`` is a
   distribution of one variable (histogram); otherwise it is a relation
   between two variables (scatter).

When every layer of a multi-layer spec carries exactly two columns the spec
is a scatterplot matrix: each layer also receives ``grid_row``/``grid_col``.

Pipeline
--------
>>> import pandas as pd
>>> from plotalgebra.forms.algebra import d_cross
>>> from plotalgebra.processing.defaults import smart_defaults
>>> df = pd.DataFrame({"a": [1, 2], "b": [3, 4]})
>>> s = smart_defaults(d_cross(df, ["a", "b"], ["a", "b"]))
>>> s.layout
'grid'
>>> [(l["x"], l["y"], l["plottype"], l["grid_row"], l["grid_col"]) for l in s]
[('a', 'a', 'histogram', 0, 0), ('a', 'b', 'scatter', 1, 0), ('b', 'a', 'scatter', 0, 1), ('b', 'b', 'histogram', 1, 1)]
"""

from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional

from ..config import DEFAULT_CONFIG, PlotConfig
from ..errors import AmbiguousRolesError
from ..forms.layer import Layer, Spec, to_spec
from ..log import get_logger

__all__ = [
    "TRANSFORM_PLOTTYPES",
    "is_diagonal",
    "auto_assign_roles",
    "is_grid",
    "assign_grid_positions",
    "resolve_roles",
    "default_props_for",
    "apply_defaults",
    "smart_defaults",
    "when_diagonal",
    "when_off_diagonal",
]

logger = get_logger(__name__)

# Transformation -> mark it implies when no plottype is given.
TRANSFORM_PLOTTYPES: Dict[str, str] = {
    "linear": "line",
    "smooth": "line",
    "bin": "histogram",
}


# ---------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------
def is_diagonal(layer: Mapping) -> bool:
    """True if the layer maps the same column to both x and y."""
    x = layer.get("x")
    return x is not None and x == layer.get("y")


def auto_assign_roles(layer: Mapping) -> Layer:
    """
    Assign ``x``/``y`` from positional ``columns``.

    Idempotent: a layer that already has ``x`` or ``y`` is returned as is.
    A layer without columns passes through.

    Raises
    ------
    AmbiguousRolesError
        If the layer has three or more columns and no explicit roles.

    Examples
    --------
    >>> auto_assign_roles({"columns": ["a"]}).select("x", "y")
    {'x': 'a'}
    >>> auto_assign_roles({"columns": ["a", "b"]}).select("x", "y")
    {'x': 'a', 'y': 'b'}
    """
    lyr = layer if isinstance(layer, Layer) else Layer(layer)
    if lyr.get("x") is not None or lyr.get("y") is not None:
        return lyr
    cols = list(lyr.get("columns") or [])
    if not cols:
        return lyr
    if len(cols) == 1:
        return lyr.assoc(x=cols[0])
    if len(cols) == 2:
        return lyr.assoc(x=cols[0], y=cols[1])
    raise AmbiguousRolesError(cols, lyr)


def is_grid(spec: Spec) -> bool:
    """More than one layer, each with exactly two positional columns."""
    return len(spec.layers) > 1 and all(
        len(l.get("columns") or []) == 2 for l in spec.layers
    )


def assign_grid_positions(layers: List[Layer]) -> List[Layer]:
    """
    Number the first and second positional columns by first appearance.

    ``grid_col`` follows the first column, ``grid_row`` the second.
    """
    x_vars = list(dict.fromkeys(l["columns"][0] for l in layers))
    y_vars = list(dict.fromkeys(l["columns"][1] for l in layers))
    x_index = {v: i for i, v in enumerate(x_vars)}
    y_index = {v: i for i, v in enumerate(y_vars)}
    return [
        l.assoc(grid_row=y_index[l["columns"][1]], grid_col=x_index[l["columns"][0]])
        for l in layers
    ]


def _fill_roles(layer: Layer) -> Layer:
    # a grid panel given only one explicit role takes the other from its columns
    x, y = layer["columns"]
    return layer.assoc(
        x=x if layer.get("x") is None else layer["x"],
        y=y if layer.get("y") is None else layer["y"],
    )


def resolve_roles(spec: Any) -> Spec:
    """
    Resolve roles for every layer and detect diagonals and grids.

    Sets ``x``/``y`` (see :func:`auto_assign_roles`) and ``diagonal`` on each
    layer. Grid specs (see :func:`is_grid`) additionally get both roles on
    every layer, grid positions and ``props["layout"] = "grid"``. Does not
    set ``plottype``.
    """
    spec = to_spec(spec)
    grid = is_grid(spec)
    resolved = [auto_assign_roles(l) for l in spec.layers]
    if grid:
        resolved = [_fill_roles(l) for l in resolved]
    resolved = [l.assoc(diagonal=is_diagonal(l)) for l in resolved]
    if grid:
        resolved = assign_grid_positions(resolved)
        logger.debug("resolve_roles: grid of %d layers", len(resolved))
        return Spec(resolved, spec.props.assoc(layout="grid"))
    return spec.with_layers(resolved)


# ---------------------------------------------------------------------
# Plot types
# ---------------------------------------------------------------------
def default_props_for(layer: Mapping, defaults: Mapping[str, Mapping]) -> Mapping:
    """
    Pick the default properties for a layer's structural case.

    A transformation without a plottype implies its mark (see
    ``TRANSFORM_PLOTTYPES``); otherwise: diagonal, univariate (x without y),
    or off-diagonal.
    """
    t = layer.get("transformation")
    if layer.get("plottype") is None and t in TRANSFORM_PLOTTYPES:
        return {"plottype": TRANSFORM_PLOTTYPES[t]}
    if layer.get("diagonal", is_diagonal(layer)):
        return defaults["diagonal"]
    if layer.get("x") is not None and layer.get("y") is None:
        return defaults["univariate"]
    return defaults["off_diagonal"]


def apply_defaults(
    spec: Any,
    custom: Optional[Mapping[str, Mapping]] = None,
    config: PlotConfig = DEFAULT_CONFIG,
) -> Spec:
    """
    Fill in missing properties from the structural defaults.

    Existing layer values always win, so the pass is idempotent and respects
    user overrides.

    Parameters
    ----------
    spec : Spec
    custom : mapping, optional
        Overrides for the ``"diagonal"``, ``"off_diagonal"`` and
        ``"univariate"`` cases, e.g. ``{"diagonal": {"plottype": "density"}}``.
    config : PlotConfig
        Source of the built-in defaults.
    """
    spec = to_spec(spec)
    config = config or DEFAULT_CONFIG
    defaults = dict(config.defaults_table())
    if custom:
        defaults.update(custom)

    def fill(l: Layer) -> Layer:
        # layers without any role have nothing to infer from
        if l.get("x") is None and l.get("y") is None:
            return l
        base = dict(default_props_for(l, defaults))
        base.update(l)
        return Layer(base)

    return spec.map_layers(fill)


def smart_defaults(spec: Any, config: PlotConfig = DEFAULT_CONFIG) -> Spec:
    """
    Prepare an algebraic spec for rendering.

    Assigns roles, detects diagonals, computes grid positions, and infers
    plot types (diagonal -> histogram, otherwise scatter).
    """
    return apply_defaults(resolve_roles(spec), config=config)


# ---------------------------------------------------------------------
# Conditional overrides
# ---------------------------------------------------------------------
def _diag_flag(l: Layer) -> bool:
    return bool(l.get("diagonal", is_diagonal(l)))


def when_diagonal(spec: Any, props: Mapping) -> Spec:
    """Merge ``props`` into diagonal layers only (props win)."""
    return to_spec(spec).map_layers(lambda l: l.merge(props) if _diag_flag(l) else l)


def when_off_diagonal(spec: Any, props: Mapping) -> Spec:
    """Merge ``props`` into off-diagonal layers only (props win)."""
    return to_spec(spec).map_layers(lambda l: l if _diag_flag(l) else l.merge(props))
