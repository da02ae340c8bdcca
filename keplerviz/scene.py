# Import necessary modules
# ------------------------------------------------------------------------------------------------ #
import math
import numpy as np

from dataclasses import dataclass
from typing import Dict, Optional

from . import geometry
from .elements import OrbitalElements, DEFAULT_ELEMENTS, DEFAULT_RESOLUTION
# ------------------------------------------------------------------------------------------------ #


@dataclass(frozen=True)
class ParameterSnapshot:
    """
    Every input the scene geometry depends on, as captured at one animation tick.

    Two snapshots are equal only if every field is exactly equal; there is no
    tolerance, so any change of input, however small, triggers a redraw.
    """
    true_anomaly: float
    eccentricity: float
    semi_major_axis: float
    argument_of_periapsis: float
    inclination: float
    longitude_of_ascending_node: float
    resolution: float

    @classmethod
    def capture(cls, elements: OrbitalElements, true_anomaly: float, resolution: float) -> "ParameterSnapshot":
        return cls(true_anomaly, *elements.as_tuple(), resolution)


@dataclass(frozen=True, eq=False)
class SceneGeometry:
    """
    Renderable output of one recompute. Always derivable from the elements,
    the true anomaly and the resolution; never edited after it is built. The
    arrays are read-only, so a renderer that needs to modify one must copy it.

    Attributes
    ----------
    orbit : np.ndarray
        Closed orbit polyline, shape (N + 1, 3); the last point repeats the first.
    apsides : np.ndarray
        Periapsis and apoapsis, shape (2, 3).
    arrow_direction : np.ndarray
        Unit vector along the direction of motion, shape (3,).
    arrow_origin : np.ndarray
        Tail of the direction arrow, shape (3,).
    satellite : np.ndarray
        Satellite position, shape (3,).
    true_anomaly_segment : np.ndarray
        Focus to satellite, shape (2, 3).
    eccentric_anomaly_segment : np.ndarray
        Ellipse centre to the auxiliary circle at E, shape (2, 3).
    mean_anomaly_segment : np.ndarray
        Ellipse centre to the auxiliary circle at M, shape (2, 3).
    eccentric_anomaly : float
        Eccentric anomaly (radians).
    mean_anomaly : float
        Mean anomaly (radians).
    """
    orbit: np.ndarray
    apsides: np.ndarray
    arrow_direction: np.ndarray
    arrow_origin: np.ndarray
    satellite: np.ndarray
    true_anomaly_segment: np.ndarray
    eccentric_anomaly_segment: np.ndarray
    mean_anomaly_segment: np.ndarray
    eccentric_anomaly: float
    mean_anomaly: float


def build_geometry(
        elements: OrbitalElements,
        true_anomaly: float,
        resolution: float = DEFAULT_RESOLUTION
    ) -> SceneGeometry:
    """
    Compute every renderable primitive of the scene.

    Parameters
    ----------
    elements : OrbitalElements
        The orbit.
    true_anomaly : float
        Satellite position along the orbit (radians, unbounded).
    resolution : float, optional
        True anomaly step between orbit samples.

    Returns
    -------
    SceneGeometry
        Freshly built geometry.
    """
    e = elements.eccentricity

    orbit = geometry.close_loop(geometry.plot_orbit(elements, resolution))
    direction, origin = geometry.arrow_vectors(elements)
    satellite = geometry.plot_point(elements, true_anomaly)
    center = geometry.orbit_center(elements)

    eccentric_anomaly = geometry.true_to_eccentric_anomaly(e, true_anomaly)
    mean_anomaly = geometry.true_to_mean_anomaly(e, true_anomaly)

    arrays = {
        'orbit': orbit,
        'apsides': geometry.apsides(elements),
        'arrow_direction': direction,
        'arrow_origin': origin,
        'satellite': satellite,
        'true_anomaly_segment': np.vstack([np.zeros(3), satellite]),
        'eccentric_anomaly_segment': np.vstack([center, geometry.auxiliary_circle_point(elements, eccentric_anomaly)]),
        'mean_anomaly_segment': np.vstack([center, geometry.auxiliary_circle_point(elements, mean_anomaly)]),
    }
    # The adapter hands the same instance back until the inputs change
    for arr in arrays.values():
        arr.setflags(write=False)

    return SceneGeometry(
        **arrays,
        eccentric_anomaly=float(eccentric_anomaly),
        mean_anomaly=float(mean_anomaly),
    )


class SceneAdapter:
    """
    Owner of the orbital state of the scene.

    Input handlers change the state through the setters; once per animation tick
    `update` compares the state with what was last drawn and, if anything changed,
    rebuilds the geometry and passes it to the renderer.

    Attributes
    ----------
    elements : OrbitalElements
        Current orbit.
    true_anomaly : float
        Current satellite true anomaly (radians).
    resolution : float
        True anomaly step between orbit samples.
    renderer : object or None
        Anything with a ``draw(geometry)`` method.
    verbose : bool
        Whether to print a message on every recompute.
    """
    def __init__(
            self,
            elements: OrbitalElements = DEFAULT_ELEMENTS,
            true_anomaly: float = 0.0,
            resolution: float = DEFAULT_RESOLUTION,
            renderer=None,
            verbose: bool = False,
        ) -> None:
        self.elements = elements
        self.true_anomaly = float(true_anomaly)
        self.set_resolution(resolution)
        self.renderer = renderer
        self.verbose = verbose

        self._previous: Optional[ParameterSnapshot] = None
        self._geometry: Optional[SceneGeometry] = None
        self.n_updates = 0

    # Setters. These only record the new value; the redraw happens on the next update().

    def set_elements(self, elements: OrbitalElements) -> None:
        self.elements = elements

    def set_eccentricity(self, value: float) -> None:
        self.elements = self.elements.replace(eccentricity=float(value))

    def set_semi_major_axis(self, value: float) -> None:
        self.elements = self.elements.replace(semi_major_axis=float(value))

    def set_argument_of_periapsis(self, value: float) -> None:
        self.elements = self.elements.replace(argument_of_periapsis=float(value))

    def set_inclination(self, value: float) -> None:
        self.elements = self.elements.replace(inclination=float(value))

    def set_longitude_of_ascending_node(self, value: float) -> None:
        self.elements = self.elements.replace(longitude_of_ascending_node=float(value))

    def set_true_anomaly(self, value: float) -> None:
        self.true_anomaly = float(value)

    def set_resolution(self, value: float) -> None:
        """
        Raises
        ------
        ValueError: If the resolution is not strictly positive.
        """
        if not value > 0:
            raise ValueError("Resolution must be strictly positive.")
        self.resolution = float(value)

    def snapshot(self) -> ParameterSnapshot:
        return ParameterSnapshot.capture(self.elements, self.true_anomaly, self.resolution)

    @property
    def needs_update(self) -> bool:
        return self.snapshot() != self._previous

    def update(self) -> bool:
        """
        Recompute the scene if any parameter changed since the last update.

        NaN never compares equal to itself, so a NaN parameter makes every call
        recompute and redraw.

        Returns
        -------
        bool
            True if the geometry was rebuilt and handed to the renderer, False if
            nothing changed (in which case nothing is done).
        """
        current = self.snapshot()
        if current == self._previous:
            return False

        self._previous = current
        self._geometry = build_geometry(self.elements, self.true_anomaly, self.resolution)
        self.n_updates += 1

        if self.verbose:
            print(f"Recomputed scene ({len(self._geometry.orbit)} orbit points): {current}")

        if self.renderer is not None:
            self.renderer.draw(self._geometry)
        return True

    @property
    def geometry(self) -> SceneGeometry:
        """The geometry for the current parameters, rebuilding it first if they changed."""
        self.update()
        return self._geometry

    def anomaly_readout(self) -> Dict[str, float]:
        """
        Eccentric and mean anomaly in degrees, rounded to one decimal, for display.
        """
        geometry = self.geometry
        return {
            'eccentric': round(math.degrees(geometry.eccentric_anomaly), 1),
            'mean': round(math.degrees(geometry.mean_anomaly), 1),
        }

    def __str__(self) -> str:
        e, a, omega, inc, raan = self.elements.as_tuple()
        return (
            f"SceneAdapter(e={e}, a={a}, omega={omega}, i={inc}, raan={raan}, "
            f"true_anomaly={self.true_anomaly}, resolution={self.resolution})"
        )
