import os
import sys

import pytest

# Get the path to the project root (one level up from 'tests')
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
src_path = os.path.join(project_root, 'src')

# Add 'src' to sys.path
sys.path.insert(0, src_path)

from fallsim.core.scheduling import ManualFrameScheduler  # noqa: E402
from fallsim.core.simulation import SimulationController  # noqa: E402
from fallsim.dynamics.state import Parameters  # noqa: E402


@pytest.fixture
def skydiver():
    """Spread-eagle skydiver released from 1000 m on Earth."""
    return Parameters(
        mass=75.0,
        initial_height=1000.0,
        drag_coefficient=1.0,
        cross_sectional_area=0.7,
        gravity=9.81,
    )


@pytest.fixture
def short_drop():
    """Bowling ball from 10 m: reaches the ground in well under 2 s."""
    return Parameters(
        mass=7.2,
        initial_height=10.0,
        drag_coefficient=0.4,
        cross_sectional_area=0.036,
        gravity=9.81,
    )


@pytest.fixture
def scheduler():
    """Virtual-clock frame scheduler."""
    return ManualFrameScheduler()


@pytest.fixture
def controller(skydiver, scheduler):
    """Quiet controller driven by the manual scheduler."""
    return SimulationController(skydiver, scheduler=scheduler, verbose=False)
