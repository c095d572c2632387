"""
FallSim - Real-time free-fall simulation with quadratic air drag.

Core Components
---------------
step : Semi-implicit Euler integrator (pure function)
SimulationController : Run/pause/resume/reset lifecycle and sample series
simulate : Offline fixed-frame run to touchdown

Data Model
----------
Parameters : Mass, release height, drag coefficient, area, gravity
KinematicState : Time, height, velocity, acceleration
Sample : Chart point (time, velocity, height)
RunStatus : IDLE, RUNNING, PAUSED, FINISHED

Examples
--------
>>> from fallsim import Parameters, simulate
>>> controller = simulate(Parameters.from_presets("Skydiver", "Earth"))
>>> controller.series[-1].height
0.0
"""

__version__ = "0.1.0"

# Data model
from fallsim.dynamics.state import KinematicState, Parameters, RunStatus, Sample

# Core
from fallsim.core.integrator import initial_state, step
from fallsim.core.scheduling import (
    AsyncioFrameScheduler,
    FrameScheduler,
    ManualFrameScheduler,
)
from fallsim.core.simulation import SimulationController, simulate

# Models
from fallsim.models.aerodynamics import terminal_velocity
from fallsim.models.presets import (
    AIR_DENSITY,
    GRAVITY_PRESETS,
    INITIAL_PARAMS,
    OBJECT_PRESETS,
)

# Errors
from fallsim.utils.validation import InvalidParameterError

# Logging
from fallsim.logger import CSVLogger

__all__ = [
    # Version
    "__version__",
    # Data model
    "Parameters",
    "KinematicState",
    "Sample",
    "RunStatus",
    # Core
    "step",
    "initial_state",
    "SimulationController",
    "simulate",
    "FrameScheduler",
    "AsyncioFrameScheduler",
    "ManualFrameScheduler",
    # Models
    "terminal_velocity",
    "AIR_DENSITY",
    "GRAVITY_PRESETS",
    "OBJECT_PRESETS",
    "INITIAL_PARAMS",
    # Errors
    "InvalidParameterError",
    # Logging
    "CSVLogger",
]
