# Import necessary modules
# ------------------------------------------------------------------------------------------------ #
import math
import numpy as np

from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Tuple
# ------------------------------------------------------------------------------------------------ #

DEFAULT_RESOLUTION = 0.05

_ELEMENT_NAMES = (
    'eccentricity',
    'semi_major_axis',
    'argument_of_periapsis',
    'inclination',
    'longitude_of_ascending_node',
)


@dataclass(frozen=True)
class OrbitalElements:
    """
    The five classical elements fixing the shape and orientation of an elliptical orbit.

    Attributes
    ----------
    eccentricity : float
        Eccentricity, e. Elliptical orbits only: 0 ≤ e < 1.
    semi_major_axis : float
        Semi-major axis, a > 0.
    argument_of_periapsis : float
        Argument of periapsis, ω (radians).
    inclination : float
        Inclination, i (radians), 0 ≤ i ≤ π.
    longitude_of_ascending_node : float
        Longitude of the ascending node, Ω (radians).
    """
    eccentricity: float
    semi_major_axis: float
    argument_of_periapsis: float = 0.0
    inclination: float = 0.0
    longitude_of_ascending_node: float = 0.0

    @classmethod
    def from_degrees(
            cls,
            eccentricity: float,
            semi_major_axis: float,
            argument_of_periapsis: float = 0.0,
            inclination: float = 0.0,
            longitude_of_ascending_node: float = 0.0,
        ) -> "OrbitalElements":
        """
        Build elements from angles given in degrees (as read from a slider).
        """
        return cls(
            eccentricity=float(eccentricity),
            semi_major_axis=float(semi_major_axis),
            argument_of_periapsis=math.radians(argument_of_periapsis),
            inclination=math.radians(inclination),
            longitude_of_ascending_node=math.radians(longitude_of_ascending_node),
        )

    def replace(self, **changes) -> "OrbitalElements":
        """Return a copy with the given fields changed."""
        return replace(self, **changes)

    def as_tuple(self) -> Tuple[float, float, float, float, float]:
        return (
            self.eccentricity,
            self.semi_major_axis,
            self.argument_of_periapsis,
            self.inclination,
            self.longitude_of_ascending_node,
        )


DEFAULT_ELEMENTS = OrbitalElements(
    eccentricity=0.5,
    semi_major_axis=10.0,
    argument_of_periapsis=0.0,
    inclination=np.pi / 4,
    longitude_of_ascending_node=0.0,
)


def check_elements(elements: OrbitalElements) -> OrbitalElements:
    """
    Validate orbital elements at the input boundary.

    The geometry functions accept any finite input; this check is for callers
    (command line, widgets) that want to reject orbits outside the elliptical domain.

    Parameters
    ----------
    elements : OrbitalElements
        Elements to validate.

    Returns
    -------
    OrbitalElements
        The same elements, if valid.

    Raises
    ------
    TypeError: If any element is not numeric.
    ValueError: If any element is non-finite or outside its domain.
    """
    for name, value in zip(_ELEMENT_NAMES, elements.as_tuple()):
        if not isinstance(value, (int, float, np.floating, np.integer)):
            raise TypeError(f"{name} must be a numeric value")
        if not np.isfinite(value):
            raise ValueError(f"{name} must be finite")

    if not 0 <= elements.eccentricity < 1:
        raise ValueError("Eccentricity must satisfy 0 ≤ e < 1 (elliptical orbits only).")
    if elements.semi_major_axis <= 0:
        raise ValueError("Semi-major axis must be positive.")
    if not 0 <= elements.inclination <= np.pi:
        raise ValueError("Inclination must lie in [0, π].")
    return elements


def undefined_elements(elements: OrbitalElements) -> List[str]:
    """
    Names of the elements that carry no geometric meaning for this orbit.

    A circular orbit has no periapsis, so ω is undefined when e == 0. An
    equatorial orbit has no line of nodes, so Ω is undefined when i ≡ 0 (mod π).
    The values are still used by the geometry; only the display should flag them.
    """
    undefined = []
    if elements.eccentricity == 0:
        undefined.append('argument_of_periapsis')
    if is_equatorial(elements.inclination):
        undefined.append('longitude_of_ascending_node')
    return undefined


def is_equatorial(inclination: float) -> bool:
    """True when the inclination is a multiple of π (to within float rounding of the degree conversion)."""
    return bool(np.isclose(np.sin(inclination), 0.0, atol=1e-12))


def orbit_grade(inclination: float) -> str:
    """
    Classify the orbit direction from its inclination (radians).

    Returns
    -------
    str: 'prograde' for i < 90°, 'polar' for i == 90°, 'retrograde' for i > 90°.
    """
    degrees = round(math.degrees(inclination), 9)
    if degrees == 90:
        return 'polar'
    if degrees < 90:
        return 'prograde'
    return 'retrograde'


class AnomalyKind(Enum):
    TRUE = 'true'
    ECCENTRIC = 'eccentric'
    MEAN = 'mean'


@dataclass(frozen=True)
class AnomalyAngle:
    """
    An angle locating a body along its orbit, tagged with the kind of anomaly it is.

    Attributes
    ----------
    value : float
        The angle in radians. May lie outside [-π, π].
    kind : AnomalyKind
        Whether the angle is a true, eccentric or mean anomaly.
    """
    value: float
    kind: AnomalyKind = AnomalyKind.TRUE

    @property
    def degrees(self) -> float:
        return math.degrees(self.value)

    def convert(self, kind: AnomalyKind, eccentricity: float) -> "AnomalyAngle":
        """
        Convert to another kind of anomaly on an orbit of the given eccentricity.

        Conversions go through the true anomaly, so the branch correction for
        angles beyond ±π is applied the same way as in the geometry module.

        Parameters
        ----------
        kind : AnomalyKind
            Target kind.
        eccentricity : float
            Orbit eccentricity, 0 ≤ e < 1.

        Returns
        -------
        AnomalyAngle
            The converted angle.
        """
        # Imported here: geometry depends on this module for OrbitalElements
        from . import geometry

        if kind is self.kind:
            return self

        if self.kind is AnomalyKind.TRUE:
            nu = self.value
        elif self.kind is AnomalyKind.ECCENTRIC:
            nu = geometry.eccentric_to_true_anomaly(eccentricity, self.value)
        else:
            nu = geometry.mean_to_true_anomaly(eccentricity, self.value)

        if kind is AnomalyKind.TRUE:
            value = nu
        elif kind is AnomalyKind.ECCENTRIC:
            value = geometry.true_to_eccentric_anomaly(eccentricity, nu)
        else:
            value = geometry.true_to_mean_anomaly(eccentricity, nu)
        return AnomalyAngle(float(value), kind)
