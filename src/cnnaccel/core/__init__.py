"""
Core activation layer components.

This module contains the building blocks of the activation stage:
- ReLUUnit: single-element compute-and-hold ReLU lane
- ReLUArray: lock-step array of lanes over a flattened feature map
- stage_ports / check_stage / ExternalStage: the port contract shared by
  every pipeline stage
"""

from .relu_array import ReLUArray
from .relu_unit import ReLUUnit
from .stage import ExternalStage, check_stage, stage_ports

__all__ = ["ReLUUnit", "ReLUArray", "ExternalStage", "check_stage", "stage_ports"]
