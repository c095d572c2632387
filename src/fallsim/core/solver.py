"""
Adaptive reference solution of the free-fall ODE.

Solves the same equations as the frame integrator with
scipy.integrate.solve_ivp and a terminal ground-impact event. Used to check
how far the frame-rate semi-implicit Euler result drifts from a tightly
controlled solution.

State vector: y = [h, v] (height up, velocity down)
    dh/dt = -v
    dv/dt = g - ρ Cd A v² / (2m)
"""
from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from scipy.integrate import solve_ivp

from fallsim.dynamics.state import Parameters
from fallsim.models.presets import AIR_DENSITY

from .integrator import acceleration

SOLVER_PRESETS = {
    "default": {"method": "RK45", "rtol": 1e-8, "atol": 1e-10},
    "fast": {"method": "RK45", "rtol": 1e-4, "atol": 1e-6},
    "accurate": {"method": "DOP853", "rtol": 1e-11, "atol": 1e-12},
}


def _rhs(params: Parameters, air_density: float):
    def f(t: float, y: NDArray[np.float64]) -> NDArray[np.float64]:
        _, v = y
        return np.array([-v, acceleration(v, params, air_density)])
    return f


def _ground_event(t: float, y: NDArray[np.float64]) -> float:
    return y[0]


_ground_event.terminal = True  # type: ignore[attr-defined]
_ground_event.direction = -1  # type: ignore[attr-defined]


def reference_trajectory(
    params: Parameters,
    t_end: float,
    air_density: float = AIR_DENSITY,
    preset: str = "default",
    max_step: float = np.inf,
    **overrides,
):
    """
    Integrate from release until ground impact or t_end.

    Parameters
    ----------
    params : Parameters
        Drop parameters
    t_end : float
        Final time [s]
    air_density : float
        Air density [kg/m³]
    preset : str
        Key of SOLVER_PRESETS
    max_step : float
        Maximum solver step [s]
    **overrides
        method, rtol, atol overriding the preset

    Returns
    -------
    OdeResult
        scipy result; sol.t_events[0] holds the impact time if reached

    Raises
    ------
    KeyError
        If preset is unknown
    InvalidParameterError
        If params.mass <= 0
    """
    if preset not in SOLVER_PRESETS:
        raise KeyError(f"Unknown solver preset '{preset}'. Options: {list(SOLVER_PRESETS)}")
    if t_end <= 0:
        raise ValueError(f"t_end must be positive, got {t_end}")

    options = {**SOLVER_PRESETS[preset], **overrides}
    # Fail fast on a bad mass before handing control to scipy
    acceleration(0.0, params, air_density)

    y0 = np.array([float(params.initial_height), 0.0])
    return solve_ivp(
        _rhs(params, air_density),
        (0.0, float(t_end)),
        y0,
        events=_ground_event,
        dense_output=True,
        max_step=max_step,
        **options,
    )


def ground_impact(
    params: Parameters,
    t_end: float = 3600.0,
    air_density: float = AIR_DENSITY,
    preset: str = "default",
) -> tuple[float, float] | None:
    """
    Time and velocity at which the body reaches the ground.

    Returns
    -------
    tuple[float, float] | None
        (t_impact [s], v_impact [m/s]) or None if the ground is not reached
        before t_end (e.g. zero gravity)
    """
    sol = reference_trajectory(params, t_end, air_density, preset)
    if len(sol.t_events[0]) == 0:
        return None
    t_hit = float(sol.t_events[0][0])
    v_hit = float(sol.y_events[0][0][1])
    return t_hit, v_hit
