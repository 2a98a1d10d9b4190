"""
plotalgebra: a compositional algebra for statistical plot specifications.

Specs are built with ``*`` (cross) and ``+`` (blend), completed by smart
defaults, and drawn with matplotlib:

>>> import pandas as pd
>>> from plotalgebra import d_cross, smart_defaults
>>> df = pd.DataFrame({"a": [1, 2], "b": [3, 4]})
>>> [l["plottype"] for l in smart_defaults(d_cross(df, ["a", "b"], ["a", "b"]))]
['histogram', 'scatter', 'scatter', 'histogram']
"""

__version__ = "0.1.0"

from .config import DEFAULT_CONFIG, PlotConfig
from .errors import (
    AmbiguousRolesError,
    MissingColumnError,
    MissingDataError,
    MissingRoleError,
    PlotAlgebraError,
)
from .forms import *
from .processing import *
from .pretty import describe, format_layer, print_spec
