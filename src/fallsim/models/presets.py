"""
Preset tables and physical constants.

Object presets only define the body-specific fields (mass, drag coefficient,
reference area). Release height and gravity are chosen independently.
"""
from __future__ import annotations

from fallsim.dynamics.state import Parameters

# Sea-level air density [kg/m³]
AIR_DENSITY = 1.225

GRAVITY_PRESETS: dict[str, float] = {
    "Earth": 9.81,
    "Moon": 1.62,
    "Mars": 3.72,
    "Jupiter": 24.79,
    "No Gravity": 0.0,
}

OBJECT_PRESETS: dict[str, dict[str, float]] = {
    "Custom": {},
    "Soccer Ball": {
        "mass": 0.43,
        "drag_coefficient": 0.25,
        "cross_sectional_area": 0.038,  # d = 22 cm
    },
    "Bowling Ball": {
        "mass": 7.2,
        "drag_coefficient": 0.4,
        "cross_sectional_area": 0.036,  # d = 21.6 cm
    },
    "Ping Pong Ball": {
        "mass": 0.0027,
        "drag_coefficient": 0.5,
        "cross_sectional_area": 0.00125,  # d = 4 cm
    },
    "Skydiver": {
        "mass": 75.0,
        "drag_coefficient": 1.0,  # spread-eagle
        "cross_sectional_area": 0.7,
    },
}

INITIAL_PARAMS = Parameters(
    mass=75.0,
    initial_height=1000.0,
    drag_coefficient=1.0,
    cross_sectional_area=0.7,
    gravity=GRAVITY_PRESETS["Earth"],
)

# Input-boundary ranges (min, max) used by validate_parameters(strict_ranges=True)
PARAMETER_RANGES: dict[str, tuple[float, float]] = {
    "initial_height": (10.0, 10000.0),
    "mass": (0.001, 100.0),
    "drag_coefficient": (0.0, 2.0),
    "cross_sectional_area": (0.001, 1.0),
}


def apply_object_preset(params: Parameters, name: str) -> Parameters:
    """
    Merge an object preset into existing parameters.

    Parameters
    ----------
    params : Parameters
        Base parameters (height and gravity are kept)
    name : str
        Key of OBJECT_PRESETS. "Custom" returns params unchanged.

    Raises
    ------
    KeyError
        If the preset name is unknown
    """
    if name not in OBJECT_PRESETS:
        raise KeyError(
            f"Unknown object preset '{name}'. Options: {list(OBJECT_PRESETS)}"
        )
    return params.with_changes(**OBJECT_PRESETS[name])


def gravity_for(name: str) -> float:
    """Look up a gravity preset [m/s²]."""
    if name not in GRAVITY_PRESETS:
        raise KeyError(
            f"Unknown gravity preset '{name}'. Options: {list(GRAVITY_PRESETS)}"
        )
    return GRAVITY_PRESETS[name]
