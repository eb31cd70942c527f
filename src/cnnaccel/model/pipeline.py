"""
Behavioural model of the Conv -> ReLU -> Pool accelerator top.

The convolution and pooling models are supplied by the caller. Any object
with the following members can stand in for a stage:

    in_data_bits: int
    out_data_bits: int
    out_flat: int            # current output register contents
    tick(in_flat, *, clear, compute_en, output_en) -> None

On each tick the model snapshots every stage's ``out_flat`` before advancing
any stage, so a value leaving one stage reaches the next stage's input one
cycle later, matching the registered stage outputs in the RTL.
"""

import logging
from typing import Protocol

from ..config import AcceleratorConfig
from ..errors import ShapeMismatch
from .relu import IDLE, EnablePhase, ReLUArrayModel

logger = logging.getLogger(__name__)


class StageModel(Protocol):
    in_data_bits: int
    out_data_bits: int

    @property
    def out_flat(self) -> int: ...

    def tick(
        self,
        in_flat: int,
        *,
        clear: bool = False,
        compute_en: bool = False,
        output_en: bool = False,
    ) -> None: ...


def _check_stage(name: str, stage: StageModel, in_bits: int, out_bits: int) -> None:
    if stage.in_data_bits != in_bits or stage.out_data_bits != out_bits:
        raise ShapeMismatch(
            f"{name} stage is {stage.in_data_bits} -> {stage.out_data_bits} bits, "
            f"expected {in_bits} -> {out_bits}"
        )


class AcceleratorModel:
    """
    Golden model of :class:`cnnaccel.top.CNNAccelerator`.

    Args:
        config: Pipeline geometry
        conv: Convolution stage model (in_data_bits -> conv_data_bits)
        pool: Pooling stage model (conv_data_bits -> final_out_bits)

    Raises:
        ShapeMismatch: a stage model does not match the derived widths.
    """

    def __init__(self, config: AcceleratorConfig, conv: StageModel, pool: StageModel):
        _check_stage("conv", conv, config.in_data_bits, config.conv_data_bits)
        _check_stage("pool", pool, config.conv_data_bits, config.final_out_bits)

        self.config = config
        self.conv = conv
        self.relu = ReLUArrayModel(config.activation)
        self.pool = pool
        self.cycle = 0

        logger.debug(
            "accelerator: %dx%dx%d -> conv %dx%dx%d -> pool %dx%d",
            config.in_rows,
            config.in_cols,
            config.in_bits,
            config.conv_out_rows,
            config.conv_out_cols,
            config.conv_out_bits,
            config.pool_out_rows,
            config.pool_out_cols,
        )

    @property
    def conv_data(self) -> int:
        return self.conv.out_flat

    @property
    def relu_data(self) -> int:
        return self.relu.out_flat

    @property
    def out_data(self) -> int:
        return self.pool.out_flat

    def tick(
        self,
        in_flat: int,
        *,
        clear: bool = False,
        conv: EnablePhase = IDLE,
        relu: EnablePhase = IDLE,
        pool: EnablePhase = IDLE,
    ) -> None:
        """
        Advance all three stages by one shared clock edge.

        Every stage input is checked before any stage advances, so a
        ShapeMismatch leaves the whole pipeline on the same cycle.
        """
        # Snapshot the inter-stage buffers before any stage updates
        conv_data = self.conv_data
        relu_data = self.relu_data

        cfg = self.config
        for name, flat, bits in (
            ("input", in_flat, cfg.in_data_bits),
            ("conv_data", conv_data, cfg.conv_data_bits),
            ("relu_data", relu_data, cfg.conv_data_bits),
        ):
            if flat < 0 or flat >> bits:
                raise ShapeMismatch(f"{name} feature map does not fit {bits} bits")

        self.conv.tick(in_flat, clear=clear, **conv._asdict())
        self.relu.tick(conv_data, clear=clear, **relu._asdict())
        self.pool.tick(relu_data, clear=clear, **pool._asdict())

        self.cycle += 1
