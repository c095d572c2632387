from .state import KinematicState, Parameters, RunStatus, Sample
from .forces import Drag, Gravity, drag_force, gravity_force
