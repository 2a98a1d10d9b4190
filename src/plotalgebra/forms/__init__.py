"""
Unified import layer for the specification algebra.

This makes plotalgebra.forms a single access point for:
    - Value types and merges            (Layer, Spec, utils)
    - Combinators                       (algebra: cross, blend, nest, ...)
    - Geometry constructors             (marks)
    - Index-set algebra                 (varset, imported as a module)
"""

from . import utils
from . import algebra
from . import marks
from . import varset

# Re-export everything explicitly; varset keeps its own namespace because
# its cross/blend/nest operate on Varsets rather than Specs.
from .utils import *
from .layer import *
from .algebra import *
from .marks import *
