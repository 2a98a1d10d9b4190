# src/plotalgebra/pretty.py

from __future__ import annotations
from typing import Any, List, Mapping, Optional

import pandas as pd
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .forms.layer import to_spec

__all__ = [
    "DESCRIBE_KEYS",
    "describe",
    "format_layer",
    "print_spec",
]

# Columns of the per-layer summary, in display order.
DESCRIBE_KEYS = (
    "x", "y", "plottype", "transformation", "diagonal",
    "grid_row", "grid_col", "color", "color_value", "facet_value",
)


# ────────────────────────────── Internals ────────────────────────────── #

def _data_str(layer: Mapping) -> str:
    df = layer.get("data")
    if isinstance(df, pd.DataFrame):
        return f"{df.shape[0]}x{df.shape[1]}"
    idx = layer.get("indices")
    return f"{len(idx)} rows" if idx is not None else ""


def _cell(v: Any) -> str:
    return "" if v is None else str(v)


# ─────────────────────────── Public printers ─────────────────────────── #

def describe(spec: Any) -> pd.DataFrame:
    """
    One row per layer with the keys in ``DESCRIBE_KEYS`` plus a ``data`` summary.

    Missing keys are ``None``.

    Examples
    --------
    >>> from plotalgebra.forms.algebra import mapping
    >>> describe(mapping("a", "b"))[["x", "y"]].iloc[0].tolist()
    [None, None]
    """
    spec = to_spec(spec)
    rows: List[dict] = []
    for lyr in spec.layers:
        row = {k: lyr.get(k) for k in DESCRIBE_KEYS}
        row["data"] = _data_str(lyr)
        rows.append(row)
    return pd.DataFrame(rows, columns=list(DESCRIBE_KEYS) + ["data"], dtype=object)


def format_layer(layer: Mapping) -> str:
    """
    Compact one-line rendering of a layer, e.g. ``scatter(x=a, y=b) @ [1,0]``.
    """
    head = layer.get("plottype") or "layer"
    t = layer.get("transformation")
    if t and t != "identity":
        head = f"{head}[{t}]"
    roles = [f"{k}={layer[k]}" for k in ("x", "y", "color") if layer.get(k) is not None]
    if not roles and layer.get("columns"):
        roles = [", ".join(map(str, layer["columns"]))]
    s = f"{head}({', '.join(roles)})"
    if layer.get("grid_row") is not None:
        s += f" @ [{layer['grid_row']},{layer.get('grid_col')}]"
    if layer.get("color_value") is not None:
        s += f" | {layer['color']}={layer['color_value']}"
    if layer.get("facet_value") is not None:
        s += f" | facet={layer['facet_value']}"
    return s


def print_spec(spec: Any, console: Optional[Console] = None, title: Optional[str] = None) -> None:
    """Print the per-layer summary of a spec as a rich table."""
    spec = to_spec(spec)
    console = console or Console()
    df = describe(spec)
    # keys no layer sets are left out of the table
    keys = [k for k in DESCRIBE_KEYS if df[k].notna().any()]

    table = Table(title=title or f"Spec • {len(spec)} layer(s)", box=box.SIMPLE_HEAVY)
    table.add_column("#", justify="right", style="dim")
    for k in keys:
        table.add_column(k, style="bold" if k in ("x", "y") else None)
    table.add_column("data", style="dim")
    for i, row in df.iterrows():
        table.add_row(str(i), *(escape(_cell(row[k])) for k in keys), row["data"])
    console.print(table)
    props = {k: v for k, v in spec.props.items() if k not in ("data", "indices")}
    if props:
        console.print(f"[dim]props:[/dim] {escape(str(props))}")
