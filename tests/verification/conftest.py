"""
Verification Test Suite for FallSim.

These tests compare simulation results against analytical solutions and an
adaptive reference integration to validate the frame integrator.

Test Categories:
- Kinematic: drag-free fall, exact discrete solution of semi-implicit Euler
- Aerodynamic: terminal velocity, agreement with solve_ivp reference
- Energy: dissipation per step
"""

import pytest

from fallsim.dynamics.state import Parameters


# -----------------------------------------------------------------------------
# Common Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def vacuum_drop():
    """Drag-free drop from 100 m on Earth."""
    return Parameters(
        mass=1.0,
        initial_height=100.0,
        drag_coefficient=0.0,
        cross_sectional_area=0.1,
        gravity=9.81,
    )


@pytest.fixture
def skydiver_high():
    """Skydiver from 10 km: long enough to reach terminal velocity."""
    return Parameters(
        mass=75.0,
        initial_height=10000.0,
        drag_coefficient=1.0,
        cross_sectional_area=0.7,
        gravity=9.81,
    )
