"""
Unified import layer for the processing passes.

This makes plotalgebra.processing a single access point for:
    - Role inference and smart defaults (defaults)
    - Grouping spread                   (spread)
    - Column checks                     (validate)
    - Statistical transforms            (transforms)
"""

from . import defaults
from . import validate
from . import transforms

from .defaults import *
from .spread import *
from .validate import *
from .transforms import *
