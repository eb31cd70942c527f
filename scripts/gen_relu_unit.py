#!/usr/bin/env python3
"""Generate ReLUUnit Verilog from cnnaccel."""

import sys
from pathlib import Path

# Add src to path if running from scripts/
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from amaranth.back import verilog  # noqa: E402

from cnnaccel.core.relu_unit import ReLUUnit  # noqa: E402


def main():
    gen_dir = project_root / "gen"
    gen_dir.mkdir(exist_ok=True)

    unit = ReLUUnit(8)

    output_path = gen_dir / "relu_unit.v"
    with open(output_path, "w") as f:
        f.write(verilog.convert(unit, name="ReLUUnit"))

    print(f"Generated {output_path}")


if __name__ == "__main__":
    main()
