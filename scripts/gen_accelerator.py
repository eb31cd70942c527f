#!/usr/bin/env python3
"""
Generate the CNNAccelerator top Verilog from cnnaccel.

The convolution and pooling stages are emitted as black-box instances of the
modules named by --conv-module and --pool-module; their RTL is supplied
separately at synthesis time.
"""

import argparse
import sys
from pathlib import Path

# Add src to path if running from scripts/
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from amaranth.back import verilog  # noqa: E402

from cnnaccel.config import AcceleratorConfig  # noqa: E402
from cnnaccel.core.stage import ExternalStage  # noqa: E402
from cnnaccel.errors import AcceleratorError  # noqa: E402
from cnnaccel.top import CNNAccelerator  # noqa: E402


def parse_args():
    parser = argparse.ArgumentParser(description="Generate CNNAccelerator Verilog")
    parser.add_argument("--in-rows", type=int, default=8)
    parser.add_argument("--in-cols", type=int, default=8)
    parser.add_argument("--in-bits", type=int, default=8)
    parser.add_argument("--filter-rows", type=int, default=3)
    parser.add_argument("--filter-cols", type=int, default=3)
    parser.add_argument("--conv-pad", type=int, default=0)
    parser.add_argument("--conv-stride", type=int, default=1)
    parser.add_argument("--pool-rows", type=int, default=2)
    parser.add_argument("--pool-cols", type=int, default=2)
    parser.add_argument("--pool-pad", type=int, default=0)
    parser.add_argument("--pool-stride", type=int, default=2)
    parser.add_argument("--conv-module", default="conv_stage")
    parser.add_argument("--pool-module", default="maxpool_stage")
    parser.add_argument("--output", type=Path, default=project_root / "gen" / "cnn_accelerator.v")
    return parser.parse_args()


def main():
    args = parse_args()

    try:
        config = AcceleratorConfig(
            in_rows=args.in_rows,
            in_cols=args.in_cols,
            in_bits=args.in_bits,
            filter_rows=args.filter_rows,
            filter_cols=args.filter_cols,
            conv_pad=args.conv_pad,
            conv_stride=args.conv_stride,
            pool_rows=args.pool_rows,
            pool_cols=args.pool_cols,
            pool_pad=args.pool_pad,
            pool_stride=args.pool_stride,
        )
    except AcceleratorError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    conv = ExternalStage(args.conv_module, config.in_data_bits, config.conv_data_bits)
    pool = ExternalStage(args.pool_module, config.conv_data_bits, config.final_out_bits)
    top = CNNAccelerator(config, conv, pool)

    print(
        f"conv {config.conv_out_rows}x{config.conv_out_cols} @ {config.conv_out_bits} bits, "
        f"pool {config.pool_out_rows}x{config.pool_out_cols}, "
        f"out_data {config.final_out_bits} bits"
    )

    args.output.parent.mkdir(parents=True, exist_ok=True)
    with open(args.output, "w") as f:
        f.write(verilog.convert(top, name="CNNAccelerator"))

    print(f"Generated {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
