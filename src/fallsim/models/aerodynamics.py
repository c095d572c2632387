"""
Derived aerodynamic quantities.

These are computed on demand by consumers from Parameters; the controller
never stores them.
"""
from __future__ import annotations

import numpy as np

from fallsim.dynamics.forces import drag_force, gravity_force
from fallsim.dynamics.state import KinematicState, Parameters
from fallsim.models.presets import AIR_DENSITY


def terminal_velocity(params: Parameters, air_density: float = AIR_DENSITY) -> float:
    """
    Speed at which drag balances weight.

    v_t = √(2mg / (ρ A Cd))

    Parameters
    ----------
    params : Parameters
        Drop parameters
    air_density : float
        Air density [kg/m³]

    Returns
    -------
    float
        Terminal velocity [m/s]. Non-finite (inf or nan) when the drag
        coefficient or area is zero; callers treat that as "not applicable".
        Never raises for zero denominators.
    """
    num = np.float64(2.0 * params.mass * params.gravity)
    den = np.float64(air_density * params.cross_sectional_area * params.drag_coefficient)
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.sqrt(num / den))


def is_applicable(value: float) -> bool:
    """True if a derived quantity is finite and can be displayed."""
    return bool(np.isfinite(value))


def force_breakdown(
    state: KinematicState,
    params: Parameters,
    air_density: float = AIR_DENSITY,
) -> dict[str, float]:
    """
    Forces acting on the body in the given state.

    Returns
    -------
    dict[str, float]
        Keys 'gravity', 'drag' and 'net' [N], downward positive
    """
    fg = gravity_force(params.mass, params.gravity)
    fd = drag_force(
        state.velocity, params.drag_coefficient, params.cross_sectional_area, air_density
    )
    return {"gravity": fg, "drag": fd, "net": fg - fd}
