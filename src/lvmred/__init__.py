"""
Reduced Latent Variable Model (lvm-reduce) Package

Accessors for the linear-predictor slot of a reduced latent variable model.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Model estimation
    - Graph construction or validation
    - Parameter fitting
    - Numerical computation

This package reads and reshapes LINEAR PREDICTORS only.

The model object is built elsewhere.
This package only reads or overwrites slices of its linear-predictor map.
"""

from lvmred.options import LavaOptions, lava_options, set_lava_options, reset_lava_options
from lvmred.model import LinearPredictorEntry, ReducedLVM
from lvmred.lp import InvalidArgumentError, LPField, LPFormat, lp, set_lp

__version__ = "0.1.0"

__all__ = [
    "InvalidArgumentError",
    "LPField",
    "LPFormat",
    "LavaOptions",
    "LinearPredictorEntry",
    "ReducedLVM",
    "lava_options",
    "lp",
    "reset_lava_options",
    "set_lava_options",
    "set_lp",
]
