"""
Cycle-accurate behavioural models of the accelerator datapath.

Components:
    EnablePhase: (compute_en, output_en) control pair
    relu_next: Pure per-lane transition function
    ReLUUnitModel: One ReLU lane
    ReLUArrayModel: The activation layer
    AcceleratorModel: Conv -> ReLU -> Pool composition
"""

from .pipeline import AcceleratorModel, StageModel
from .relu import (
    COMPUTE,
    COMPUTE_OUTPUT,
    IDLE,
    OUTPUT,
    EnablePhase,
    ReLUArrayModel,
    ReLUUnitModel,
    relu_next,
)

__all__ = [
    "EnablePhase",
    "IDLE",
    "COMPUTE",
    "OUTPUT",
    "COMPUTE_OUTPUT",
    "relu_next",
    "ReLUUnitModel",
    "ReLUArrayModel",
    "AcceleratorModel",
    "StageModel",
]
