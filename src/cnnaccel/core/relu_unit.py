"""
ReLU Unit - The single-element lane of the activation layer.

Each unit holds two signed registers:
    held (X):     last rectified input, written when compute_en is high
    out_data (Y): externally visible value, copied from X when output_en is high

Both registers update on the same clock edge, so when compute_en and
output_en are asserted together, out_data receives the value held *before*
the edge and held receives the newly rectified input:

    clear compute_en output_en | held'              out_data'
    -----------------------------------------------------------
      1       x          x     | 0                  0
      0       0          0     | held               out_data
      0       0          1     | held               held
      0       1          0     | max(in_data, 0)    out_data
      0       1          1     | max(in_data, 0)    held

clear is synchronous and overrides both enables.
"""

from amaranth import Module, Signal, signed
from amaranth.lib.wiring import Component, In, Out


class ReLUUnit(Component):
    """
    Synchronous compute-and-hold ReLU cell.

    Ports:
        clear: Synchronous zero of both registers (highest priority)
        compute_en: Rectify in_data into held
        output_en: Copy held into out_data
        in_data: Signed input element
        out_data: Signed output register (Y)

    Parameters:
        bits: Element width W
    """

    def __init__(self, bits: int):
        self.bits = bits

        super().__init__(
            {
                # Control
                "clear": In(1),
                "compute_en": In(1),
                "output_en": In(1),
                # Data
                "in_data": In(signed(bits)),
                "out_data": Out(signed(bits)),
            }
        )

        # Internal X register, exposed for simulation
        self.held = Signal(signed(bits), name="held")

    def elaborate(self, _platform):
        m = Module()

        rectified = Signal(signed(self.bits), name="rectified")
        with m.If(self.in_data < 0):
            m.d.comb += rectified.eq(0)
        with m.Else():
            m.d.comb += rectified.eq(self.in_data)

        with m.If(self.clear):
            m.d.sync += [
                self.held.eq(0),
                self.out_data.eq(0),
            ]
        with m.Else():
            with m.If(self.compute_en):
                m.d.sync += self.held.eq(rectified)
            # Reads held before this edge's update
            with m.If(self.output_en):
                m.d.sync += self.out_data.eq(self.held)

        return m
