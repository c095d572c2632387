"""
State containers for one-dimensional free fall.

All containers are immutable. The integrator produces a new KinematicState
each step and the controller appends new Sample instances to its series;
nothing is modified in place.

Sign convention: height is measured upward from the ground [m], while
velocity and acceleration are positive DOWNWARD [m/s], [m/s²].
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto


class RunStatus(Enum):
    """
    Lifecycle of a simulation run.

    State Machine:
        IDLE → RUNNING → PAUSED
                  ↓        ↓
               FINISHED  RUNNING (resume)

    Any state returns to IDLE via reset().
    """

    IDLE = auto()  # Initial state, nothing integrated
    RUNNING = auto()  # Ticks are being scheduled
    PAUSED = auto()  # Ticks cancelled, state preserved
    FINISHED = auto()  # Ground reached, final sample clamped to 0


@dataclass(frozen=True)
class Parameters:
    """
    Physical parameters of a single drop.

    Parameters
    ----------
    mass : float
        Body mass [kg]. Must be > 0.
    initial_height : float
        Release height above ground [m]. Must be > 0.
    drag_coefficient : float
        Drag coefficient Cd [-]. Must be >= 0.
    cross_sectional_area : float
        Reference area A [m²]. Must be > 0.
    gravity : float
        Gravitational acceleration magnitude [m/s²]. Must be >= 0.

    Notes
    -----
    Instances are not validated on construction so that the integrator can
    demonstrate its own guard against a non-positive mass. Validation happens
    at the input boundary (see fallsim.utils.validation.validate_parameters).

    Examples
    --------
    >>> p = Parameters(mass=75.0, initial_height=1000.0, drag_coefficient=1.0,
    ...                cross_sectional_area=0.7, gravity=9.81)
    >>> p.with_changes(gravity=1.62).gravity
    1.62
    """

    mass: float
    initial_height: float
    drag_coefficient: float
    cross_sectional_area: float
    gravity: float

    def with_changes(self, **changes: float) -> Parameters:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    @classmethod
    def from_presets(
        cls,
        object_preset: str = "Skydiver",
        gravity_preset: str = "Earth",
        initial_height: float | None = None,
    ) -> Parameters:
        """
        Build parameters from named object and gravity presets.

        Fields an object preset does not define (the "Custom" preset defines
        none) fall back to INITIAL_PARAMS.

        Raises
        ------
        KeyError
            If a preset name is unknown
        """
        from fallsim.models.presets import apply_object_preset, gravity_for, INITIAL_PARAMS

        params = apply_object_preset(INITIAL_PARAMS, object_preset)
        params = params.with_changes(gravity=gravity_for(gravity_preset))
        if initial_height is not None:
            params = params.with_changes(initial_height=float(initial_height))
        return params


@dataclass(frozen=True)
class KinematicState:
    """
    Instantaneous kinematic state of the falling body.

    Attributes
    ----------
    time : float
        Simulated time since release [s]
    height : float
        Height above ground [m]
    velocity : float
        Downward velocity [m/s]
    acceleration : float
        Downward acceleration used for the most recent step [m/s²]
    """

    time: float
    height: float
    velocity: float
    acceleration: float

    def to_sample(self) -> Sample:
        """Project onto the (time, velocity, height) chart sample."""
        return Sample(time=self.time, velocity=self.velocity, height=self.height)


@dataclass(frozen=True)
class Sample:
    """One point of the time series fed to the charts."""

    time: float
    velocity: float
    height: float
