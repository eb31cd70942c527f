#!/usr/bin/env python3
"""Generate ReLUArray Verilog from cnnaccel."""

import sys
from pathlib import Path

# Add src to path if running from scripts/
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from amaranth.back import verilog  # noqa: E402

from cnnaccel.config import ActivationConfig  # noqa: E402
from cnnaccel.core.relu_array import ReLUArray  # noqa: E402


def main():
    gen_dir = project_root / "gen"
    gen_dir.mkdir(exist_ok=True)

    # 2x2 array of 4-bit lanes, the shape used by the cocotb tests
    config_2x2 = ActivationConfig(elem_bits=4, rows=2, cols=2)
    relu_array_2x2 = ReLUArray(config_2x2)

    output_path = gen_dir / "relu_array.v"
    with open(output_path, "w") as f:
        f.write(verilog.convert(relu_array_2x2, name="ReLUArray"))

    print(f"Generated {output_path}")

    # Also generate an 8x8 array of 18-bit lanes (INT8 conv output)
    config_8x8 = ActivationConfig(elem_bits=18, rows=8, cols=8)
    relu_array_8x8 = ReLUArray(config_8x8)

    output_path_8x8 = gen_dir / "relu_array_8x8.v"
    with open(output_path_8x8, "w") as f:
        f.write(verilog.convert(relu_array_8x8, name="ReLUArray_8x8"))

    print(f"Generated {output_path_8x8}")


if __name__ == "__main__":
    main()
