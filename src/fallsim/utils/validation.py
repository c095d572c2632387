"""
Validation utilities for physical parameters and time steps.

Provides the checks applied at the input boundary before parameters reach
the integrator, and the time-step sanity checks used by the tick loop.
"""
from __future__ import annotations

import math
import warnings

from fallsim.dynamics.state import Parameters


class InvalidParameterError(ValueError):
    """Raised when a physical parameter is outside its admissible domain."""


def validate_positive(value: float, name: str, strict: bool = True) -> None:
    """
    Validate that a scalar value is positive.

    Parameters
    ----------
    value : float
        Value to validate
    name : str
        Parameter name for error messages
    strict : bool
        If True, raise InvalidParameterError. If False, issue warning.

    Raises
    ------
    InvalidParameterError
        If strict=True and value <= 0
    """
    if not value > 0:
        msg = f"{name} must be positive, got {value}"
        if strict:
            raise InvalidParameterError(msg)
        else:
            warnings.warn(msg, RuntimeWarning, stacklevel=2)


def validate_non_negative(value: float, name: str) -> None:
    """Validate that a value is non-negative."""
    if not value >= 0:
        raise InvalidParameterError(f"{name} must be non-negative, got {value}")


def validate_in_range(value: float, name: str, low: float, high: float) -> None:
    """Validate that low <= value <= high."""
    if not low <= value <= high:
        raise InvalidParameterError(
            f"{name} must be within [{low}, {high}], got {value}"
        )


def validate_parameters(params: Parameters, strict_ranges: bool = False) -> None:
    """
    Validate a full parameter set.

    Parameters
    ----------
    params : Parameters
        Parameters to check
    strict_ranges : bool
        If True, also enforce the input ranges from
        fallsim.models.presets.PARAMETER_RANGES (the limits an interactive
        front end offers). Gravity is only checked for sign and finiteness
        since it comes from a preset table.

    Raises
    ------
    InvalidParameterError
        If any field is non-finite or outside its domain
    """
    for name in (
        "mass",
        "initial_height",
        "drag_coefficient",
        "cross_sectional_area",
        "gravity",
    ):
        value = getattr(params, name)
        if not math.isfinite(value):
            raise InvalidParameterError(f"{name} must be finite, got {value}")

    validate_positive(params.mass, "mass")
    validate_positive(params.initial_height, "initial_height")
    validate_non_negative(params.drag_coefficient, "drag_coefficient")
    validate_positive(params.cross_sectional_area, "cross_sectional_area")
    validate_non_negative(params.gravity, "gravity")

    if strict_ranges:
        from fallsim.models.presets import PARAMETER_RANGES

        for name, (low, high) in PARAMETER_RANGES.items():
            validate_in_range(getattr(params, name), name, low, high)


def validate_timestep(dt: float, max_dt: float = 1.0) -> None:
    """
    Validate timestep is non-negative and reasonable.

    Parameters
    ----------
    dt : float
        Time step [s]
    max_dt : float
        Maximum reasonable timestep [s]

    Raises
    ------
    ValueError
        If timestep is negative
    """
    if dt < 0:
        raise ValueError(f"Timestep must be non-negative, got {dt}")
    if dt > max_dt:
        warnings.warn(
            f"Large timestep {dt:.3f}s may cause instability. "
            f"Consider using dt < {max_dt}s.",
            RuntimeWarning,
            stacklevel=2
        )
