"""
cnnaccel Configuration Module

This module defines the configuration dataclasses for the activation layer
and for the Conv -> ReLU -> Pool accelerator pipeline. All hardware
parameters are fixed at construction and propagate through the design.

The accelerator-level sizes follow the discrete convolution output formula
(integer floor division):

    out = (in + 2 * pad - window) // stride + 1

The convolution widens its elements to 2 * in_bits + 2 bits to hold the
multiply-accumulate growth; the activation and pooling stages keep that width.
"""

from dataclasses import dataclass

from .errors import InvalidConfiguration


def _require_int(name: str, value, minimum: int) -> None:
    # bool is an int subclass but never a valid dimension
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        qualifier = "positive" if minimum > 0 else "non-negative"
        raise InvalidConfiguration(f"{name} must be {qualifier}, got {value}")


def window_output_size(size: int, pad: int, window: int, stride: int) -> int:
    """Output extent of a sliding window over one axis."""
    return (size + 2 * pad - window) // stride + 1


@dataclass(frozen=True)
class ActivationConfig:
    """
    Configuration for the elementwise ReLU activation layer.

    Example:
        >>> config = ActivationConfig(elem_bits=8, rows=4, cols=4)
        >>> config.num_lanes
        16
        >>> config.data_bits
        128
    """

    elem_bits: int = 8
    """Width W of every signed element."""

    rows: int = 1
    """Feature map rows R."""

    cols: int = 1
    """Feature map columns C."""

    @property
    def num_lanes(self) -> int:
        """One functional unit per feature map element."""
        return self.rows * self.cols

    @property
    def data_bits(self) -> int:
        """Width of the flattened feature map vector (W * R * C)."""
        return self.elem_bits * self.num_lanes

    @property
    def elem_min(self) -> int:
        return -(1 << (self.elem_bits - 1))

    @property
    def elem_max(self) -> int:
        return (1 << (self.elem_bits - 1)) - 1

    def __post_init__(self):
        """Validate configuration parameters."""
        _require_int("elem_bits", self.elem_bits, 1)
        _require_int("rows", self.rows, 1)
        _require_int("cols", self.cols, 1)


@dataclass(frozen=True)
class AcceleratorConfig:
    """
    Geometry of the Conv -> ReLU -> Pool pipeline.

    Only the interface shapes of the convolution and pooling stages are
    derived here; their internals live outside this package.

    Example:
        >>> config = AcceleratorConfig(in_rows=6, in_cols=6, filter_rows=3, filter_cols=3)
        >>> (config.conv_out_rows, config.conv_out_cols, config.conv_out_bits)
        (4, 4, 18)
        >>> (config.pool_out_rows, config.pool_out_cols)
        (2, 2)
    """

    # =========================================================================
    # Input Feature Map
    # =========================================================================
    in_rows: int = 8
    """Rows of the input feature map."""

    in_cols: int = 8
    """Columns of the input feature map."""

    in_bits: int = 8
    """Width of each input element."""

    # =========================================================================
    # Convolution Geometry
    # =========================================================================
    filter_rows: int = 3
    filter_cols: int = 3

    conv_pad: int = 0
    """Zero padding applied on every edge before convolution."""

    conv_stride: int = 1

    # =========================================================================
    # Pooling Geometry
    # =========================================================================
    pool_rows: int = 2
    pool_cols: int = 2

    pool_pad: int = 0

    pool_stride: int = 2

    # =========================================================================
    # Computed Properties
    # =========================================================================
    @property
    def in_data_bits(self) -> int:
        """Width of the flattened input feature map."""
        return self.in_rows * self.in_cols * self.in_bits

    @property
    def conv_out_rows(self) -> int:
        return window_output_size(self.in_rows, self.conv_pad, self.filter_rows, self.conv_stride)

    @property
    def conv_out_cols(self) -> int:
        return window_output_size(self.in_cols, self.conv_pad, self.filter_cols, self.conv_stride)

    @property
    def conv_out_bits(self) -> int:
        """Element width after multiply-accumulate growth."""
        return 2 * self.in_bits + 2

    @property
    def conv_data_bits(self) -> int:
        """Width of the flattened convolution (and activation) feature map."""
        return self.conv_out_rows * self.conv_out_cols * self.conv_out_bits

    @property
    def pool_out_rows(self) -> int:
        return window_output_size(
            self.conv_out_rows, self.pool_pad, self.pool_rows, self.pool_stride
        )

    @property
    def pool_out_cols(self) -> int:
        return window_output_size(
            self.conv_out_cols, self.pool_pad, self.pool_cols, self.pool_stride
        )

    @property
    def final_out_bits(self) -> int:
        """Width of the flattened pooled output feature map."""
        return self.pool_out_rows * self.pool_out_cols * self.conv_out_bits

    @property
    def activation(self) -> ActivationConfig:
        """Activation layer sized to the convolution output, not the input."""
        return ActivationConfig(
            elem_bits=self.conv_out_bits,
            rows=self.conv_out_rows,
            cols=self.conv_out_cols,
        )

    def __post_init__(self):
        """Validate geometry and every derived dimension."""
        for name in (
            "in_rows",
            "in_cols",
            "in_bits",
            "filter_rows",
            "filter_cols",
            "conv_stride",
            "pool_rows",
            "pool_cols",
            "pool_stride",
        ):
            _require_int(name, getattr(self, name), 1)
        _require_int("conv_pad", self.conv_pad, 0)
        _require_int("pool_pad", self.pool_pad, 0)

        if self.filter_rows > self.in_rows + 2 * self.conv_pad:
            raise InvalidConfiguration("filter_rows exceeds the padded input height")
        if self.filter_cols > self.in_cols + 2 * self.conv_pad:
            raise InvalidConfiguration("filter_cols exceeds the padded input width")
        if self.pool_rows > self.conv_out_rows + 2 * self.pool_pad:
            raise InvalidConfiguration("pool_rows exceeds the padded convolution output height")
        if self.pool_cols > self.conv_out_cols + 2 * self.pool_pad:
            raise InvalidConfiguration("pool_cols exceeds the padded convolution output width")

        for name in ("conv_out_rows", "conv_out_cols", "pool_out_rows", "pool_out_cols"):
            if getattr(self, name) <= 0:
                raise InvalidConfiguration(f"derived {name} must be positive")


# Pre-defined configurations
DEFAULT_CONFIG = AcceleratorConfig()
"""Default configuration: 8x8 INT8 input, 3x3 convolution, 2x2/2 max pooling."""

TINY_CONFIG = AcceleratorConfig(
    in_rows=4,
    in_cols=4,
    in_bits=4,
    filter_rows=1,
    filter_cols=1,
    pool_rows=1,
    pool_cols=1,
    pool_stride=1,
)
"""Pointwise configuration for fast simulation (every stage keeps a 4x4 grid)."""

LENET_CONFIG = AcceleratorConfig(
    in_rows=28,
    in_cols=28,
    filter_rows=5,
    filter_cols=5,
    conv_pad=2,
)
"""LeNet-5 first layer geometry: 28x28 -> 28x28 conv -> 14x14 pool."""
