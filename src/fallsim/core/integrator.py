"""
Semi-implicit Euler integrator for vertical free fall with quadratic drag.

Equations of motion (downward positive):
    dv/dt = g - ρ Cd A v² / (2m)
    dh/dt = -v

Update order (semi-implicit / symplectic Euler):
    a  = (m g - ½ ρ v² Cd A) / m
    v' = v + a dt
    h' = h - v' dt          (uses the NEW velocity)

Updating velocity first and then position with the new velocity is more
stable than explicit Euler for resistive systems at the frame-rate step
sizes an interactive display produces.
"""
from __future__ import annotations

from fallsim.dynamics.state import KinematicState, Parameters
from fallsim.models.presets import AIR_DENSITY
from fallsim.utils.validation import InvalidParameterError


def initial_state(params: Parameters) -> KinematicState:
    """State at release: at rest at the initial height, accelerating at g."""
    return KinematicState(
        time=0.0,
        height=float(params.initial_height),
        velocity=0.0,
        acceleration=float(params.gravity),
    )


def acceleration(
    velocity: float,
    params: Parameters,
    air_density: float = AIR_DENSITY,
) -> float:
    """
    Net downward acceleration at the given velocity [m/s²].

    Raises
    ------
    InvalidParameterError
        If params.mass <= 0
    """
    if not params.mass > 0:
        raise InvalidParameterError(f"mass must be positive, got {params.mass}")

    # Force laws of dynamics.forces.Gravity and Drag
    f_gravity = params.mass * params.gravity
    f_drag = (
        0.5 * air_density * velocity**2
        * params.drag_coefficient * params.cross_sectional_area
    )
    return (f_gravity - f_drag) / params.mass


def step(
    state: KinematicState,
    params: Parameters,
    dt: float,
    air_density: float = AIR_DENSITY,
) -> KinematicState:
    """
    Advance the state by dt.

    Parameters
    ----------
    state : KinematicState
        Current state
    params : Parameters
        Drop parameters
    dt : float
        Time step [s], >= 0
    air_density : float
        Air density [kg/m³]

    Returns
    -------
    KinematicState
        New state. Its acceleration is the one used for this step, not a
        value recomputed at the new velocity. Height is NOT clamped; the
        caller decides what to do when it crosses zero.

    Raises
    ------
    InvalidParameterError
        If params.mass <= 0
    ValueError
        If dt < 0
    """
    if dt < 0:
        raise ValueError(f"Timestep must be non-negative, got {dt}")

    a = acceleration(state.velocity, params, air_density)
    v_new = state.velocity + a * dt
    h_new = state.height - v_new * dt

    return KinematicState(
        time=state.time + dt,
        height=h_new,
        velocity=v_new,
        acceleration=a,
    )
