"""
Display helpers for live readouts and the falling-object visual.

Pure formatting; nothing here touches the controller.
"""
from __future__ import annotations

from fallsim.dynamics.state import KinematicState, Parameters
from fallsim.models.aerodynamics import force_breakdown, is_applicable, terminal_velocity
from fallsim.models.presets import AIR_DENSITY

NOT_APPLICABLE = "N/A"


def format_terminal_velocity(value: float, digits: int = 2) -> str:
    """Format a terminal velocity, or "N/A" if it is not finite."""
    if not is_applicable(value):
        return NOT_APPLICABLE
    return f"{value:.{digits}f}"


def fall_fraction(height: float, initial_height: float) -> float:
    """
    Fraction of the drop already covered, clamped to [0, 1].

    0 at the release point, 1 on the ground. A visual maps this to the
    vertical position of the ball.
    """
    if initial_height <= 0:
        return 1.0
    return max(0.0, min(1.0, 1.0 - height / initial_height))


def height_scale(initial_height: float, n_markers: int = 10) -> list[float]:
    """Evenly spaced height markers from ground to release height [m]."""
    return [initial_height * i / n_markers for i in range(n_markers + 1)]


def readouts(
    state: KinematicState,
    params: Parameters,
    air_density: float = AIR_DENSITY,
) -> dict[str, str]:
    """
    Formatted real-time data panel.

    Returns
    -------
    dict[str, str]
        Label -> "value unit", two decimals
    """
    forces = force_breakdown(state, params, air_density)
    vt = terminal_velocity(params, air_density)
    return {
        "Time": f"{state.time:.2f} s",
        "Height": f"{state.height:.2f} m",
        "Velocity": f"{state.velocity:.2f} m/s",
        "Acceleration": f"{state.acceleration:.2f} m/s²",
        "Force of Gravity": f"{forces['gravity']:.2f} N",
        "Force of Drag": f"{forces['drag']:.2f} N",
        "Terminal Velocity": f"{format_terminal_velocity(vt)} m/s",
    }
