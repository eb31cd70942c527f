"""
ReLUArray - The activation layer: one ReLUUnit per feature map element.

The flat input feature map is sliced into W-bit signed lanes in row-major
order, every lane receives the same clear/compute_en/output_en, and the
lanes' output registers are concatenated back into a flat feature map with
lane 0 in the low bits.

Example 2x2 ReLUArray (W bits per element):

    in_data[W-1:0]    --> [relu_0_0] --> out_data[W-1:0]
    in_data[2W-1:W]   --> [relu_0_1] --> out_data[2W-1:W]
    in_data[3W-1:2W]  --> [relu_1_0] --> out_data[3W-1:2W]
    in_data[4W-1:3W]  --> [relu_1_1] --> out_data[4W-1:3W]
                             ^
            clear, compute_en, output_en (broadcast)

Lanes share no state, so each output element depends only on its own input
element and the broadcast controls.
"""

from amaranth import Cat, Module, unsigned
from amaranth.lib.wiring import Component, In, Out

from ..config import ActivationConfig
from .relu_unit import ReLUUnit


class ReLUArray(Component):
    """
    Lock-step array of ReLU lanes over a flattened feature map.

    Ports:
        clear: Synchronous clear (broadcast)
        compute_en: Compute enable (broadcast)
        output_en: Output enable (broadcast)
        in_data: Flattened input feature map (W * R * C bits)
        out_data: Flattened output feature map (W * R * C bits)

    Parameters:
        config: ActivationConfig with element width and grid dimensions
    """

    def __init__(self, config: ActivationConfig):
        self.config = config

        super().__init__(
            {
                "clear": In(1),
                "compute_en": In(1),
                "output_en": In(1),
                "in_data": In(unsigned(config.data_bits)),
                "out_data": Out(unsigned(config.data_bits)),
            }
        )

    def elaborate(self, _platform):
        m = Module()
        cfg = self.config
        w = cfg.elem_bits

        # Create lane grid
        lanes = [[ReLUUnit(w) for _ in range(cfg.cols)] for _ in range(cfg.rows)]

        for r in range(cfg.rows):
            for c in range(cfg.cols):
                m.submodules[f"relu_{r}_{c}"] = lanes[r][c]

        # =================================================================
        # Input Unpacking - row-major W-bit slices
        # =================================================================
        for r in range(cfg.rows):
            for c in range(cfg.cols):
                i = r * cfg.cols + c
                m.d.comb += lanes[r][c].in_data.eq(self.in_data[i * w : (i + 1) * w].as_signed())

        # =================================================================
        # Control Signal Broadcast - same signal to all lanes
        # =================================================================
        for r in range(cfg.rows):
            for c in range(cfg.cols):
                m.d.comb += [
                    lanes[r][c].clear.eq(self.clear),
                    lanes[r][c].compute_en.eq(self.compute_en),
                    lanes[r][c].output_en.eq(self.output_en),
                ]

        # =================================================================
        # Output Packing - Cat places its first argument in the low bits
        # =================================================================
        m.d.comb += self.out_data.eq(Cat(*(lane.out_data for row in lanes for lane in row)))

        return m
