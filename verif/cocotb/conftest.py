"""
cnnaccel Verification - Global pytest configuration and fixtures.

The cocotb test modules under tests/ run inside the simulator, so pytest only
collects the runners in this directory. Each runner generates the RTL into
gen/, builds it with the simulator named by SIM and runs one cocotb module.
"""

import os
import shutil
import sys
from pathlib import Path

import pytest

# Add project paths to Python path
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))
sys.path.insert(0, str(PROJECT_ROOT / "verif" / "cocotb"))

# Loaded by the simulator, not by pytest
collect_ignore_glob = ["tests/*"]

SIMULATOR_BINARIES = {
    "verilator": "verilator",
    "icarus": "iverilog",
}


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "slow: marks tests as slow")


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture(scope="session")
def gen_dir(project_root) -> Path:
    """Return the generated RTL directory, creating it if needed."""
    path = project_root / "gen"
    path.mkdir(exist_ok=True)
    return path


@pytest.fixture(scope="session")
def sim_name() -> str:
    """Return the current simulator name, skipping if it is not installed."""
    sim = os.environ.get("SIM", "verilator").lower()
    binary = SIMULATOR_BINARIES.get(sim)
    if binary is None:
        pytest.skip(f"Unsupported simulator: {sim}")
    if shutil.which(binary) is None:
        pytest.skip(f"Simulator not found: {binary}")
    return sim
