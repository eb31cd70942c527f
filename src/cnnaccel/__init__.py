"""
cnnaccel - A Python-based generator for a CNN inference accelerator datapath.

This package provides configurable hardware generation for the elementwise
ReLU activation stage of a Conv -> ReLU -> Pool FPGA accelerator using
Amaranth HDL, together with a cycle-accurate behavioural model used as the
golden reference.
"""

from .config import AcceleratorConfig, ActivationConfig
from .errors import AcceleratorError, InvalidConfiguration, ShapeMismatch

__version__ = "0.1.0"
__all__ = [
    "ActivationConfig",
    "AcceleratorConfig",
    "AcceleratorError",
    "InvalidConfiguration",
    "ShapeMismatch",
    "__version__",
]
