"""
Exceptions raised by the accelerator generator and its behavioural model.

Every error here is about structure, not data: configurations are checked
once at construction, and bit-vector boundaries are checked where a flat
feature map is split into elements or rebuilt from them.
"""


class AcceleratorError(Exception):
    """Base class for all cnnaccel errors."""


class InvalidConfiguration(AcceleratorError, ValueError):
    """A width, grid dimension or derived pipeline dimension is not usable."""


class ShapeMismatch(AcceleratorError, ValueError):
    """A feature map or stage port does not match the declared shape."""
