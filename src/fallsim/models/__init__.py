"""
FallSim Physics Models.

This package contains the models consumed by the integrator and by display
code:
- presets.py: air density, gravity and object preset tables, input ranges
- aerodynamics.py: terminal velocity and force breakdown derived from Parameters

Submodules are imported explicitly (fallsim.models.presets,
fallsim.models.aerodynamics); dynamics.forces depends on presets, and
aerodynamics depends on dynamics.forces.
"""

__all__: list[str] = ["presets", "aerodynamics"]
