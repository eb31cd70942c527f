"""
Cycle-accurate behavioural model of the ReLU activation layer.

The model mirrors the RTL register by register and is used as the golden
reference for the Amaranth simulation. Time advances only through explicit
``tick()`` calls from a driver; each tick computes every lane's next state
from the pre-tick snapshot and then commits all lanes together, which is the
same read-all-then-write-all ordering a clock edge gives the hardware.
"""

import logging
from dataclasses import dataclass, field
from typing import NamedTuple

import numpy as np

from ..config import ActivationConfig
from ..featuremap import grid_dtype, pack, unpack, wrap_signed

logger = logging.getLogger(__name__)


class EnablePhase(NamedTuple):
    """Two-signal enable broadcast to every lane of a stage."""

    compute_en: bool = False
    output_en: bool = False


IDLE = EnablePhase(False, False)
COMPUTE = EnablePhase(True, False)
OUTPUT = EnablePhase(False, True)
COMPUTE_OUTPUT = EnablePhase(True, True)


def relu_next(
    x: int,
    y: int,
    value: int,
    bits: int,
    *,
    clear: bool = False,
    compute_en: bool = False,
    output_en: bool = False,
) -> tuple[int, int]:
    """
    Next (X, Y) of one lane.

    ``value`` is truncated to ``bits`` first. Y takes the X passed in, never
    the X being computed in the same call.
    """
    if clear:
        return 0, 0

    next_x = x
    next_y = y
    if compute_en:
        value = wrap_signed(value, bits)
        next_x = 0 if value < 0 else value
    if output_en:
        next_y = x
    return next_x, next_y


@dataclass
class ReLUUnitModel:
    """
    One ReLU lane.

    Attributes:
        bits: Element width W
        x: Held (computed) register
        y: Output register
    """

    bits: int
    x: int = 0
    y: int = 0

    def next_state(
        self,
        value: int,
        *,
        clear: bool = False,
        compute_en: bool = False,
        output_en: bool = False,
    ) -> tuple[int, int]:
        """Compute the post-edge (X, Y) without changing the lane."""
        return relu_next(
            self.x,
            self.y,
            value,
            self.bits,
            clear=clear,
            compute_en=compute_en,
            output_en=output_en,
        )

    def commit(self, state: tuple[int, int]) -> None:
        self.x, self.y = state

    def tick(
        self,
        value: int,
        *,
        clear: bool = False,
        compute_en: bool = False,
        output_en: bool = False,
    ) -> None:
        self.commit(
            self.next_state(value, clear=clear, compute_en=compute_en, output_en=output_en)
        )

    def reset(self) -> None:
        self.x = 0
        self.y = 0


@dataclass
class ReLUArrayModel:
    """
    Behavioural model of :class:`cnnaccel.core.relu_array.ReLUArray`.

    Example:
        >>> model = ReLUArrayModel(ActivationConfig(elem_bits=8, rows=1, cols=2))
        >>> model.tick(pack([-3, 5], 8), compute_en=True)
        >>> model.tick(0, output_en=True)
        >>> model.out_grid.tolist()
        [[0, 5]]
    """

    config: ActivationConfig
    lanes: list[ReLUUnitModel] = field(init=False)
    cycle: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        self.lanes = [ReLUUnitModel(self.config.elem_bits) for _ in range(self.config.num_lanes)]

    @property
    def in_data_bits(self) -> int:
        return self.config.data_bits

    @property
    def out_data_bits(self) -> int:
        return self.config.data_bits

    def tick(
        self,
        in_flat: int,
        *,
        clear: bool = False,
        compute_en: bool = False,
        output_en: bool = False,
    ) -> None:
        """
        Advance every lane by one clock edge.

        Raises:
            ShapeMismatch: ``in_flat`` does not fit the configured feature map.
        """
        cfg = self.config
        values = unpack(in_flat, cfg.elem_bits, cfg.rows, cfg.cols)

        if clear:
            logger.debug("cycle %d: clear %d lanes", self.cycle, len(self.lanes))

        # Read phase: every lane sees only pre-edge state
        next_states = [
            lane.next_state(value, clear=clear, compute_en=compute_en, output_en=output_en)
            for lane, value in zip(self.lanes, values)
        ]
        # Write phase
        for lane, state in zip(self.lanes, next_states):
            lane.commit(state)

        self.cycle += 1

    def reset(self) -> None:
        for lane in self.lanes:
            lane.reset()
        self.cycle = 0

    @property
    def out_flat(self) -> int:
        """Packed Y registers, as seen on ``out_data``."""
        return pack((lane.y for lane in self.lanes), self.config.elem_bits)

    @property
    def out_grid(self) -> np.ndarray:
        cfg = self.config
        values = [lane.y for lane in self.lanes]
        return np.array(values, dtype=grid_dtype(cfg.elem_bits)).reshape(cfg.rows, cfg.cols)

    @property
    def held_grid(self) -> np.ndarray:
        cfg = self.config
        values = [lane.x for lane in self.lanes]
        return np.array(values, dtype=grid_dtype(cfg.elem_bits)).reshape(cfg.rows, cfg.cols)
