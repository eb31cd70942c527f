"""
Pipeline stage port contract.

Every stage of the accelerator (convolution, activation, pooling) exposes the
same five ports and is clocked from the shared ``sync`` domain:

    clear       In(1)                 synchronous clear, shared by all stages
    compute_en  In(1)                 stage-local compute enable
    output_en   In(1)                 stage-local output enable
    in_data     In(unsigned(in_bits)) flattened input feature map
    out_data    Out(unsigned(out_bits)) flattened output feature map

The convolution and pooling stages are supplied from outside this package;
only their port widths are checked here.
"""

from amaranth import ClockSignal, Module, ResetSignal, Shape, unsigned
from amaranth.hdl import Instance
from amaranth.lib.wiring import Component, In, Out

from ..errors import ShapeMismatch


def stage_ports(in_bits: int, out_bits: int) -> dict:
    """Port dictionary for a stage with the given flat feature map widths."""
    return {
        "clear": In(1),
        "compute_en": In(1),
        "output_en": In(1),
        "in_data": In(unsigned(in_bits)),
        "out_data": Out(unsigned(out_bits)),
    }


def check_stage(name: str, stage: Component, in_bits: int, out_bits: int) -> None:
    """
    Verify that ``stage`` implements the stage port contract.

    Raises:
        ShapeMismatch: a port is missing, has the wrong direction, or has the
            wrong width.
    """
    members = stage.signature.members
    for port, member in stage_ports(in_bits, out_bits).items():
        if port not in members:
            raise ShapeMismatch(f"{name} stage has no '{port}' port")
        actual = members[port]
        if not actual.is_port or actual.flow != member.flow:
            raise ShapeMismatch(f"{name} stage port '{port}' must be {member.flow.name}")
        actual_width = Shape.cast(actual.shape).width
        expected_width = Shape.cast(member.shape).width
        if actual_width != expected_width:
            raise ShapeMismatch(
                f"{name} stage port '{port}' is {actual_width} bits, expected {expected_width}"
            )


class ExternalStage(Component):
    """
    Black-box stage implemented by an RTL module outside this package.

    Elaborates to an ``Instance`` of ``module_name`` whose ports carry the
    stage contract names plus ``clk`` and ``rst`` from the ``sync`` domain.
    Useful for generating the full accelerator top around hand-written
    convolution or pooling RTL; it cannot be simulated with Amaranth.

    Parameters:
        module_name: Verilog module name to instantiate
        in_bits: Width of the flattened input feature map
        out_bits: Width of the flattened output feature map
    """

    def __init__(self, module_name: str, in_bits: int, out_bits: int):
        self.module_name = module_name
        self.in_bits = in_bits
        self.out_bits = out_bits

        super().__init__(stage_ports(in_bits, out_bits))

    def elaborate(self, _platform):
        m = Module()

        m.submodules.stage = Instance(
            self.module_name,
            i_clk=ClockSignal(),
            i_rst=ResetSignal(),
            i_clear=self.clear,
            i_compute_en=self.compute_en,
            i_output_en=self.output_en,
            i_in_data=self.in_data,
            o_out_data=self.out_data,
        )

        return m
