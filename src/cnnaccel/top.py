r"""
CNNAccelerator - Top-level Conv -> ReLU -> Pool datapath.

This module wires the three compute stages in series through two flattened
feature map buffers:

    in_data --> [Convolution] --conv_data--> [ReLUArray] --relu_data--> [Pooling] --> out_data
                    ^                             ^                         ^
               conv_*_en                     relu_*_en                 pool_*_en
                    \_____________________ clear _______________________/

All stages share the ``sync`` clock domain and the ``clear`` line; each stage
has its own compute_en/output_en pair driven by an external controller. The
activation layer is sized from the convolution output (conv_out_rows x
conv_out_cols elements of conv_out_bits), not from the input feature map.

Every stage output is a register, so a value entering a stage on one edge is
visible to the next stage's input on the following cycle.
"""

from amaranth import Module, unsigned
from amaranth.lib.wiring import Component, In, Out

from .config import AcceleratorConfig
from .core.relu_array import ReLUArray
from .core.stage import check_stage


class CNNAccelerator(Component):
    """
    Conv -> ReLU -> Pool accelerator top.

    Ports:
        clear: Synchronous clear shared by every stage
        conv_compute_en, conv_output_en: Convolution stage enables
        relu_compute_en, relu_output_en: Activation stage enables
        pool_compute_en, pool_output_en: Pooling stage enables
        in_data: Flattened input feature map (in_data_bits)
        out_data: Flattened pooled feature map (final_out_bits)
        conv_data: Convolution -> activation buffer (conv_data_bits)
        relu_data: Activation -> pooling buffer (conv_data_bits)

    Parameters:
        config: AcceleratorConfig with the pipeline geometry
        conv: Convolution stage component (stage port contract,
            in_data_bits -> conv_data_bits)
        pool: Pooling stage component (stage port contract,
            conv_data_bits -> final_out_bits)

    Raises:
        ShapeMismatch: conv or pool ports do not match the derived widths.
    """

    def __init__(self, config: AcceleratorConfig, conv: Component, pool: Component):
        self.config = config

        check_stage("conv", conv, config.in_data_bits, config.conv_data_bits)
        check_stage("pool", pool, config.conv_data_bits, config.final_out_bits)

        self.conv = conv
        self.pool = pool
        self.relu = ReLUArray(config.activation)

        ports = {"clear": In(1)}
        for stage in ("conv", "relu", "pool"):
            ports[f"{stage}_compute_en"] = In(1)
            ports[f"{stage}_output_en"] = In(1)
        ports["in_data"] = In(unsigned(config.in_data_bits))
        ports["out_data"] = Out(unsigned(config.final_out_bits))
        ports["conv_data"] = Out(unsigned(config.conv_data_bits))
        ports["relu_data"] = Out(unsigned(config.conv_data_bits))

        super().__init__(ports)

    def elaborate(self, _platform):
        m = Module()

        m.submodules.conv = conv = self.conv
        m.submodules.relu = relu = self.relu
        m.submodules.pool = pool = self.pool

        # =================================================================
        # Shared clear and per-stage enables
        # =================================================================
        for name, stage in (("conv", conv), ("relu", relu), ("pool", pool)):
            m.d.comb += [
                stage.clear.eq(self.clear),
                stage.compute_en.eq(getattr(self, f"{name}_compute_en")),
                stage.output_en.eq(getattr(self, f"{name}_output_en")),
            ]

        # =================================================================
        # Datapath - stage outputs chained through the feature map buffers
        # =================================================================
        m.d.comb += [
            conv.in_data.eq(self.in_data),
            self.conv_data.eq(conv.out_data),
            relu.in_data.eq(self.conv_data),
            self.relu_data.eq(relu.out_data),
            pool.in_data.eq(self.relu_data),
            self.out_data.eq(pool.out_data),
        ]

        return m
