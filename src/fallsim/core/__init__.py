from .integrator import acceleration, initial_state, step
from .scheduling import AsyncioFrameScheduler, FrameScheduler, ManualFrameScheduler
from .simulation import SimulationController, simulate
