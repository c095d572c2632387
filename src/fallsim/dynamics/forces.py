"""
Force models for one-dimensional free fall.

The body moves along the vertical axis only, so forces are scalars with
DOWNWARD taken as positive.

Physical units:
- Forces: Newtons [N]
- Velocities: meters per second [m/s]
- Areas: square meters [m²]
- Densities: kilograms per cubic meter [kg/m³]
"""
from __future__ import annotations

from fallsim.models.presets import AIR_DENSITY
from fallsim.utils.validation import InvalidParameterError


class Gravity:
    """
    Uniform gravitational force.

    Force: F = m * g, pointing down (positive).

    Parameters
    ----------
    g : float
        Gravitational acceleration magnitude [m/s²]. Earth: 9.81

    Examples
    --------
    >>> Gravity(9.81).force(2.0)
    19.62
    """
    def __init__(self, g: float) -> None:
        if g < 0:
            raise InvalidParameterError(f"Gravity must be non-negative, got {g}")
        self.g = float(g)

    def force(self, mass: float) -> float:
        """Return the weight m * g [N]."""
        return mass * self.g


class Drag:
    """
    Quadratic aerodynamic drag.

    Magnitude: F = 0.5 * ρ * v² * Cd * A, applied upward (subtracted from the
    weight).

    Parameters
    ----------
    rho : float
        Air density [kg/m³]. Standard sea level: 1.225 kg/m³
    Cd : float
        Drag coefficient [-]. Typical values: sphere ≈ 0.47, skydiver ≈ 1.0
    area : float
        Reference area [m²]

    Notes
    -----
    The force uses v² rather than |v| * v, so it always points up. This is
    only correct while the body moves downward; an upward-moving body would
    be pushed down by drag instead of slowed. Free fall from rest never
    produces upward velocity, so the model stays valid for this package.

    Examples
    --------
    >>> drag = Drag(rho=1.225, Cd=1.0, area=0.7)
    >>> round(drag.force(10.0), 4)
    42.875
    """
    def __init__(
        self,
        rho: float = AIR_DENSITY,
        Cd: float = 1.0,
        area: float = 1.0,
    ) -> None:
        if rho < 0:
            raise InvalidParameterError(f"Density must be non-negative, got {rho}")
        self.rho = float(rho)
        self.Cd = float(Cd)
        self.area = float(area)

    def force(self, velocity: float) -> float:
        """Return the drag magnitude at the given velocity [N]."""
        return 0.5 * self.rho * velocity**2 * self.Cd * self.area


def gravity_force(mass: float, g: float) -> float:
    """Weight m * g [N]."""
    return Gravity(g).force(mass)


def drag_force(
    velocity: float,
    drag_coefficient: float,
    area: float,
    rho: float = AIR_DENSITY,
) -> float:
    """Quadratic drag magnitude 0.5 * ρ * v² * Cd * A [N]."""
    return Drag(rho=rho, Cd=drag_coefficient, area=area).force(velocity)
