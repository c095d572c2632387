"""Utility functions for FallSim simulations."""

from .io import save_series, series_to_frame
from .validation import (
    InvalidParameterError,
    validate_in_range,
    validate_non_negative,
    validate_parameters,
    validate_positive,
    validate_timestep,
)

__all__ = [
    "save_series",
    "series_to_frame",
    "InvalidParameterError",
    "validate_positive",
    "validate_non_negative",
    "validate_in_range",
    "validate_parameters",
    "validate_timestep",
]
