# src/plotalgebra/cli.py

"""
Command-line entry point.

    plotalgebra splom data.csv --columns a b c --color species --out splom.png

Reads a CSV with pandas, builds a scatterplot matrix with ``d_cross``,
applies smart defaults, prints the layer table, and optionally renders the
figure to a file.
"""

from __future__ import annotations
import argparse
from typing import List, Optional

import pandas as pd
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.theme import Theme

from . import __version__
from .config import PlotConfig
from .errors import PlotAlgebraError
from .forms.algebra import d_cross, mapping
from .log import get_logger, setup_logging
from .pretty import print_spec
from .processing.defaults import smart_defaults

__all__ = ["build_parser", "build_splom", "main"]

logger = get_logger(__name__)


def _console() -> Console:
    theme = Theme({
        "ok": "bold green",
        "err": "bold red",
        "title": "bold cyan",
    })
    return Console(theme=theme)


def build_splom(df: pd.DataFrame, columns: List[str], color: Optional[str] = None):
    """``d_cross(df, columns, columns)``, optionally crossed with a color mapping."""
    spec = d_cross(df, columns, columns)
    if color is not None:
        spec = spec * mapping(color=color)
    return spec


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="plotalgebra", description="Compositional plot specifications")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("splom", help="scatterplot matrix of CSV columns")
    s.add_argument("csv", help="input CSV file")
    s.add_argument("--columns", nargs="+", default=None,
                   help="columns to cross (default: all numeric columns)")
    s.add_argument("--color", default=None, help="grouping column mapped to color")
    s.add_argument("--bins", type=int, default=PlotConfig.bins, help="histogram bins")
    s.add_argument("--out", default=None, help="write the rendered figure here (PNG, SVG, ...)")
    s.add_argument("--log-level", default="WARNING", help="logging level (DEBUG, INFO, ...)")
    return p


def _run_splom(args: argparse.Namespace, console: Console) -> int:
    df = pd.read_csv(args.csv)
    columns = args.columns or list(df.select_dtypes("number").columns)
    logger.info("read %s: %d rows, columns=%s", args.csv, len(df), columns)
    config = PlotConfig(bins=args.bins)

    spec = smart_defaults(build_splom(df, columns, args.color), config)
    console.print(Panel.fit(f"SPLOM of {len(columns)} columns ({len(df)} rows)", style="title"))
    print_spec(spec, console=console)

    if args.out:
        # matplotlib is only needed when a figure is requested
        from .render import save
        save(spec, args.out, config)
        console.print(f"[ok]wrote[/ok] {args.out}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    console = _console()
    try:
        if args.command == "splom":
            return _run_splom(args, console)
    except (PlotAlgebraError, FileNotFoundError) as e:
        console.print(f"[err]error:[/err] {escape(str(e))}")
        return 1
    return 2
